"""Route Modules — one file per resource (users, settings, entries, health).

Invariants:
    - Each module defines its own APIRouter under /api/v1
    - Routes translate HTTP to service calls and back; no journal rules live here
"""
