"""Catalog Store — persistence for the per-user Settings aggregate.

Invariants:
    - No business rules: validation happens in core/catalog_rules.py before any call here
    - Every catalog write is conditional on the version the caller validated against;
      a mismatch raises ConcurrencyError and writes nothing
    - Reads use populate_existing so bulk UPDATEs are visible within the same session
    - create_if_missing never surfaces the unique user_id violation of a lost create race

Design Decisions:
    - replace_catalog writes the whole array: push / edit / pull all reduce to "new list"
      once validated, and one conditional UPDATE keeps the row atomic
    - Setup flag and reflection alert writes are unconditional: they never race with the
      catalog invariants
"""

import logging
from datetime import datetime, time, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import CatalogKind, UserId
from app.core.errors import ConcurrencyError, ErrorContext
from app.models.user_settings import UserSettings

logger = logging.getLogger(__name__)


class CatalogStore:
    """SettingsRepository implementation over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> UserSettings | None:
        result = await self.db.execute(
            select(UserSettings)
            .where(UserSettings.user_id == user_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: UserId, **fields: object) -> UserSettings:
        """Insert an empty aggregate for the user."""
        values = {"tags": [], "activities": [], "version": 1, **fields}
        settings = UserSettings(user_id=user_id, **values)
        self.db.add(settings)
        await self.db.commit()
        logger.info("Settings created", extra={"user_id": user_id})
        return settings

    async def create_if_missing(self, user_id: UserId, **fields: object) -> UserSettings:
        """Create the aggregate, or return the row a concurrent writer inserted first."""
        try:
            return await self.create(user_id, **fields)
        except IntegrityError:
            await self.db.rollback()
            logger.info("Settings already created concurrently", extra={"user_id": user_id})
            settings = await self.get(user_id)
            if settings is None:
                raise
            return settings

    async def replace_catalog(
        self,
        user_id: UserId,
        kind: CatalogKind,
        items: list[dict],
        expected_version: int,
    ) -> int:
        """Conditionally replace one catalog. Returns the new version."""
        result = await self.db.execute(
            update(UserSettings)
            .where(
                UserSettings.user_id == user_id,
                UserSettings.version == expected_version,
            )
            .values({
                kind.field_name: [dict(item) for item in items],
                "version": UserSettings.version + 1,
                "date_updated": datetime.now(timezone.utc),
            })
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            await self.db.rollback()
            raise ConcurrencyError(
                f"Settings for user '{user_id}' changed during the update. Retry the request",
                ErrorContext(user_id=user_id, resource="Settings"),
            )
        await self.db.commit()
        return expected_version + 1

    async def set_setup_complete(self, user_id: UserId, status: bool) -> None:
        await self.db.execute(
            update(UserSettings)
            .where(UserSettings.user_id == user_id)
            .values(setup_complete=status, date_updated=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()

    async def set_reflection_alert(
        self, user_id: UserId, enabled: bool, alert_time: time,
    ) -> None:
        await self.db.execute(
            update(UserSettings)
            .where(UserSettings.user_id == user_id)
            .values(
                reflection_alert_enabled=enabled,
                reflection_alert_time=alert_time,
                date_updated=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()

    async def delete(self, user_id: UserId, commit: bool = True) -> None:
        await self.db.execute(
            delete(UserSettings).where(UserSettings.user_id == user_id),
        )
        if commit:
            await self.db.commit()
