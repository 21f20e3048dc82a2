"""User Store — local user rows, doubling as the IdentityProvider.

Invariants:
    - verify_user is a pure existence check (count == 1), no side effects
    - delete_cascade removes entries, settings and the user in ONE commit

Design Decisions:
    - UserStore satisfies the IdentityProvider protocol structurally: the identity service
      has already authenticated the subject, locally we only need "is this a known user"
"""

import logging

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.infrastructure.catalog_store import CatalogStore
from app.infrastructure.entry_store import EntryStore
from app.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """User persistence + IdentityProvider over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def verify_user(self, user_id: UserId) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(User).where(User.id == user_id),
        )
        return result.scalar_one() == 1

    async def get(self, user_id: UserId) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create(self, user_id: UserId) -> User:
        user = User(id=user_id)
        self.db.add(user)
        await self.db.flush()
        return user

    async def delete_cascade(self, user_id: UserId) -> int:
        """Delete the user with every entry and the settings aggregate. Returns entries deleted."""
        deleted_entries = await EntryStore(self.db).delete_all_for_user(user_id, commit=False)
        await CatalogStore(self.db).delete(user_id, commit=False)
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        return deleted_entries
