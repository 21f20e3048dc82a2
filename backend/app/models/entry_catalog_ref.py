"""EntryCatalogRef ORM — one row per tag/activity reference held by an entry.

Invariants:
    - Rows mirror Entry.tags / Entry.activities ids exactly (rewritten on every entry write)
    - kind is a CatalogKind value ("tag" | "activity")

Design Decisions:
    - Composite index (kind, item_id): the in-use check counts across ALL users' entries
"""

import uuid

from sqlalchemy import String, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class EntryCatalogRef(Base):
    """Reference from an entry to a catalog item."""
    __tablename__ = "entry_catalog_refs"
    __table_args__ = (
        Index("ix_entry_catalog_refs_kind_item", "kind", "item_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    entry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("entries.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Relationships
    entry: Mapped["Entry"] = relationship("Entry", back_populates="catalog_refs")
