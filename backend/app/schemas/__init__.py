"""Pydantic Schemas — request bodies and response shapes of the journal API.

Invariants:
    - Request schemas reject malformed ids and non-boolean flags before a service runs
    - Catalog and link rules are NOT checked here; services raise the named errors
"""
