"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the identity anchor; Settings and Entry rows are scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (standard SQLAlchemy pattern)
"""

from app.models.user import User  # noqa: F401
from app.models.user_settings import UserSettings  # noqa: F401
from app.models.entry import Entry  # noqa: F401
from app.models.entry_catalog_ref import EntryCatalogRef  # noqa: F401
