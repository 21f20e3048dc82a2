"""User Service — registration, profile and cascading deletion of journal users.

Invariants:
    - register is not idempotent: an existing user is a ResourceAlreadyExistsError (409)
    - A registered user always has a Settings aggregate (created in the same transaction)
    - delete removes entries, settings and the user row together or not at all
"""

import logging
from datetime import time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AnalyticsEvent, SetupStatus, UserId
from app.core.errors import InvalidInputError, ResourceAlreadyExistsError, ResourceNotFoundError
from app.core.repository_protocols import AnalyticsSink
from app.infrastructure.analytics import safe_track
from app.infrastructure.catalog_store import CatalogStore
from app.infrastructure.user_store import UserStore
from app.services.catalog_locks import CatalogLocks, catalog_locks

logger = logging.getLogger(__name__)


class UserService:
    """Owns the lifecycle of the local user row and its dependants."""

    def __init__(
        self,
        db: AsyncSession,
        analytics: AnalyticsSink,
        locks: CatalogLocks = catalog_locks,
        default_alert_time: time = time(21, 0),
    ):
        self.db = db
        self.users = UserStore(db)
        self.catalog = CatalogStore(db)
        self.analytics = analytics
        self.locks = locks
        self.default_alert_time = default_alert_time

    async def register(self, user_id: UserId) -> dict:
        if not user_id:
            raise InvalidInputError("user_id parameter empty. Must be supplied", "user_id")
        if await self.users.verify_user(user_id):
            raise ResourceAlreadyExistsError("User", user_id)

        try:
            user = await self.users.create(user_id)
        except IntegrityError:
            # A concurrent registration won the insert
            await self.db.rollback()
            raise ResourceAlreadyExistsError("User", user_id)
        settings = await self.catalog.create(
            user_id, reflection_alert_time=self.default_alert_time,
        )
        logger.info("User registered", extra={"user_id": user_id})
        await safe_track(self.analytics, AnalyticsEvent.USER_REGISTERED.value, user_id)
        return {
            "user": user.id,
            "date_created": user.date_created,
            "setup_status": SetupStatus.from_flag(settings.setup_complete).value,
        }

    async def profile(self, user_id: UserId) -> dict:
        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        settings = await self.catalog.get(user_id)
        complete = bool(settings and settings.setup_complete)
        return {
            "user": user.id,
            "date_created": user.date_created,
            "setup_status": SetupStatus.from_flag(complete).value,
        }

    async def delete(self, user_id: UserId) -> dict:
        async with self.locks.for_user(user_id):
            if not await self.users.verify_user(user_id):
                raise ResourceNotFoundError("User", user_id)
            deleted_entries = await self.users.delete_cascade(user_id)

        logger.info(
            "User deleted",
            extra={"user_id": user_id, "item_count": deleted_entries},
        )
        await safe_track(self.analytics, AnalyticsEvent.USER_DELETED.value, user_id)
        return {"user": user_id, "deleted_entries": deleted_entries}
