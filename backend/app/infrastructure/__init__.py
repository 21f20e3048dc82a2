"""Infrastructure Layer — persistence stores, external service clients, cross-cutting concerns.

Invariants:
    - Stores implement the Protocols in core/repository_protocols.py
    - External calls (analytics) never propagate failures to callers

Design Decisions:
    - Thin stores with no business rules: validation lives in core/, orchestration in services/
"""
