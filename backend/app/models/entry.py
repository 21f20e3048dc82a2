"""Entry ORM — persists one journal entry.

Invariants:
    - Always belongs to a User (user_id FK)
    - mood / emotion / text hold FieldCipher output (plaintext with the default cipher)
    - tags / activities are ordered JSON arrays of {id, name?, type?} snapshots
    - linked_entry_id points at another entry of the same user, or is NULL

Design Decisions:
    - Catalog references duplicated into entry_catalog_refs: the in-use check becomes an
      indexed count instead of a JSON containment query (portable across SQLite/PostgreSQL)
    - mood stored as Text, not an Enum column: ciphertext must fit
    - catalog_refs cascade delete-orphan: deleting an entry removes its references
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Entry(Base):
    """Journal entry entity."""
    __tablename__ = "entries"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False, index=True,
    )
    mood: Mapped[str] = mapped_column(Text, nullable=False)
    emotion: Mapped[str] = mapped_column(Text, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    activities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    linked_entry_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("entries.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    date_updated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    # Relationships
    catalog_refs: Mapped[list["EntryCatalogRef"]] = relationship(
        "EntryCatalogRef", back_populates="entry",
        cascade="all, delete-orphan", lazy="selectin",
    )
