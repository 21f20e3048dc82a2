"""Database Declarations — the SQLAlchemy Base shared by models and Alembic.

Invariants:
    - Engine and sessions live in infrastructure/database.py, not here
"""
