"""User ORM — local identity anchor keyed by the identity provider subject.

Invariants:
    - id is the identity provider subject string (e.g. "auth0|abc123"), never generated here
    - A user owns zero or one UserSettings row and any number of Entry rows

Design Decisions:
    - String primary key over surrogate UUID: every request already carries the subject,
      so ownership checks need no lookup join
    - No ORM cascade to entries: user deletion issues bulk deletes (UserService) instead of
      loading every entry into the session
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """Identity anchor — referenced by id only."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
