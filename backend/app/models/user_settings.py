"""Settings ORM — the per-user aggregate holding tag and activity catalogs.

Invariants:
    - Exactly zero or one row per user (unique constraint on user_id)
    - tags / activities are ordered JSON arrays of {id, name, type}
    - version increments on every catalog write (optimistic concurrency)

Design Decisions:
    - Embedded arrays over child tables: the catalog is always read and validated as a
      whole, and a single-row conditional UPDATE makes each write atomic
    - Catalog writes always assign a fresh list: JSON columns do not track in-place mutation
    - Class named UserSettings to avoid clashing with app.config.Settings
"""

import uuid
from datetime import datetime, time, timezone

from sqlalchemy import String, Boolean, Integer, DateTime, Time, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class UserSettings(Base):
    """Settings aggregate root — owns the user's catalogs and preferences."""
    __tablename__ = "settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False, unique=True,
    )
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    activities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    setup_complete: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    reflection_alert_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    reflection_alert_time: Mapped[time] = mapped_column(
        Time, nullable=False, default=lambda: time(21, 0),
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    date_updated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    def to_dict(self) -> dict:
        return {
            "user": self.user_id,
            "tags": list(self.tags or []),
            "activities": list(self.activities or []),
            "setup_complete": self.setup_complete,
            "reflection_alert_enabled": self.reflection_alert_enabled,
            "reflection_alert_time": self.reflection_alert_time.strftime("%H:%M"),
        }
