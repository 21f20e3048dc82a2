"""Settings Catalog Service — tag and activity catalogs of the per-user Settings aggregate.

Invariants:
    - Every catalog mutation validates the whole request before the single write
    - Every catalog mutation runs under the user's CatalogLock and writes conditionally
      on the version it validated against (ConcurrencyError when it lost a race)
    - Missing Settings is a hard ResourceNotFoundError, except on the writes that create
      the aggregate lazily (add_items, create_default_items, set_reflection_alert)
    - Lazy creation runs under the user lock and tolerates a row created by another process
    - Item ids are generated here; clients never choose them

Design Decisions:
    - Pure rules in core/catalog_rules.py, this module only orchestrates IO around them
    - check_in_use counts references across ALL users: a catalog item id is globally unique
      (uuid4) so a foreign match cannot happen by accident
    - Analytics after the write and never awaited for correctness (sink is non-raising)
"""

import logging
import uuid
from collections.abc import Iterable, Mapping, Sequence
from datetime import time

from app.core.catalog_rules import (
    find_by_id, validate_item_edit, validate_item_ids_exist, validate_new_items,
)
from app.core.domain_types import AnalyticsEvent, CatalogKind, SetupStatus, UserId
from app.core.errors import InvalidInputError, ResourceNotFoundError
from app.core.repository_protocols import (
    AnalyticsSink, IdentityProvider, SettingsRepository,
)
from app.infrastructure.analytics import safe_track
from app.models.user_settings import UserSettings
from app.services.catalog_locks import CatalogLocks, catalog_locks
from app.services.usage_guard import UsageGuard

logger = logging.getLogger(__name__)


class SettingsCatalogService:
    """Orchestrates CatalogStore + catalog rules + UsageGuard."""

    def __init__(
        self,
        store: SettingsRepository,
        usage: UsageGuard,
        identity: IdentityProvider,
        analytics: AnalyticsSink,
        tag_types: Iterable[str],
        activity_types: Iterable[str],
        default_tags: Sequence[str] = (),
        default_tag_type: str = "General Activity",
        default_alert_time: time = time(21, 0),
        locks: CatalogLocks = catalog_locks,
    ):
        self.store = store
        self.usage = usage
        self.identity = identity
        self.analytics = analytics
        self.whitelists = {
            CatalogKind.TAG: frozenset(tag_types),
            CatalogKind.ACTIVITY: frozenset(activity_types),
        }
        self.default_tags = list(default_tags)
        self.default_tag_type = default_tag_type
        self.default_alert_time = default_alert_time
        self.locks = locks

    # ─── Aggregate access ────────────────────────────────────────

    async def _require(self, user_id: UserId) -> UserSettings:
        settings = await self.store.get(user_id)
        if settings is None:
            raise ResourceNotFoundError("Settings", user_id)
        return settings

    async def _get_or_create(self, user_id: UserId) -> UserSettings:
        settings = await self.store.get(user_id)
        if settings is not None:
            return settings
        if not await self.identity.verify_user(user_id):
            raise ResourceNotFoundError("User", user_id)
        return await self.store.create_if_missing(
            user_id, reflection_alert_time=self.default_alert_time,
        )

    async def get_settings(self, user_id: UserId) -> dict:
        settings = await self._require(user_id)
        return settings.to_dict()

    async def get_setup_status(self, user_id: UserId) -> bool:
        settings = await self._require(user_id)
        return settings.setup_complete

    async def set_setup_status(self, user_id: UserId, status: object) -> bool:
        if not isinstance(status, bool):
            raise InvalidInputError(
                "status parameter must be a boolean", "status",
            )
        await self._require(user_id)
        await self.store.set_setup_complete(user_id, status)
        logger.info(
            f"Setup status set to {SetupStatus.from_flag(status).value}",
            extra={"user_id": user_id},
        )
        await safe_track(
            self.analytics, AnalyticsEvent.SETUP_STATUS_CHANGED.value, user_id,
            {"setup_complete": status},
        )
        return status

    # ─── Catalog operations ──────────────────────────────────────

    async def list_items(self, user_id: UserId, kind: CatalogKind) -> list[dict]:
        settings = await self._require(user_id)
        return list(getattr(settings, kind.field_name) or [])

    async def add_items(
        self, user_id: UserId, kind: CatalogKind, items: Sequence[Mapping],
    ) -> list[dict]:
        """Append a validated batch. Returns the stored items with their ids."""
        async with self.locks.for_user(user_id):
            settings = await self._get_or_create(user_id)
            existing = list(getattr(settings, kind.field_name) or [])
            validate_new_items(kind, items, existing, self.whitelists[kind])

            added = [
                {"id": str(uuid.uuid4()), "name": item["name"], "type": item["type"]}
                for item in items
            ]
            await self.store.replace_catalog(
                user_id, kind, existing + added, settings.version,
            )

        logger.info(
            f"Added {len(added)} {kind.field_name}",
            extra={"user_id": user_id, "kind": kind.value, "item_count": len(added)},
        )
        await safe_track(
            self.analytics, AnalyticsEvent.CATALOG_ITEMS_ADDED.value, user_id,
            {"kind": kind.value, "count": len(added)},
        )
        return added

    async def create_default_items(
        self, user_id: UserId, kind: CatalogKind,
    ) -> list[dict]:
        """Seed the default catalog through the normal add validation."""
        if kind is not CatalogKind.TAG or not self.default_tags:
            raise InvalidInputError(
                f"No default {kind.field_name} are defined", "kind",
            )
        defaults = [
            {"name": name, "type": self.default_tag_type} for name in self.default_tags
        ]
        return await self.add_items(user_id, kind, defaults)

    async def edit_item(
        self,
        user_id: UserId,
        kind: CatalogKind,
        item_id: str,
        new_name: str | None = None,
        new_type: str | None = None,
    ) -> dict:
        """Partial edit of one item. Returns the full replacement item."""
        async with self.locks.for_user(user_id):
            settings = await self._require(user_id)
            existing = list(getattr(settings, kind.field_name) or [])
            replacement = validate_item_edit(
                kind, existing, item_id, new_name, new_type, self.whitelists[kind],
            )
            updated = [
                replacement if item["id"] == item_id else item for item in existing
            ]
            await self.store.replace_catalog(user_id, kind, updated, settings.version)

        logger.info(
            f"Edited {kind.value} '{item_id}'",
            extra={"user_id": user_id, "kind": kind.value},
        )
        await safe_track(
            self.analytics, AnalyticsEvent.CATALOG_ITEM_EDITED.value, user_id,
            {"kind": kind.value},
        )
        return replacement

    async def delete_items(
        self, user_id: UserId, kind: CatalogKind, item_ids: Iterable[str],
    ) -> list[str]:
        """Remove every listed item in one write. Returns the removed ids."""
        async with self.locks.for_user(user_id):
            settings = await self._require(user_id)
            existing = list(getattr(settings, kind.field_name) or [])
            ids = validate_item_ids_exist(kind, existing, item_ids)
            doomed = set(ids)
            remaining = [item for item in existing if item["id"] not in doomed]
            await self.store.replace_catalog(
                user_id, kind, remaining, settings.version,
            )

        logger.info(
            f"Deleted {len(ids)} {kind.field_name}",
            extra={"user_id": user_id, "kind": kind.value, "item_count": len(ids)},
        )
        await safe_track(
            self.analytics, AnalyticsEvent.CATALOG_ITEMS_DELETED.value, user_id,
            {"kind": kind.value, "count": len(ids)},
        )
        return ids

    async def delete_all_items(self, user_id: UserId, kind: CatalogKind) -> int:
        """Empty one catalog. Returns the number of items removed."""
        async with self.locks.for_user(user_id):
            settings = await self._require(user_id)
            removed = len(getattr(settings, kind.field_name) or [])
            await self.store.replace_catalog(user_id, kind, [], settings.version)

        logger.info(
            f"Cleared {kind.field_name}",
            extra={"user_id": user_id, "kind": kind.value, "item_count": removed},
        )
        await safe_track(
            self.analytics, AnalyticsEvent.CATALOG_ITEMS_DELETED.value, user_id,
            {"kind": kind.value, "count": removed},
        )
        return removed

    async def check_in_use(
        self, user_id: UserId, kind: CatalogKind, item_id: str,
    ) -> bool:
        """True iff any entry references the item. Point-in-time."""
        settings = await self._require(user_id)
        if find_by_id(getattr(settings, kind.field_name) or [], item_id) is None:
            raise ResourceNotFoundError(kind.value.capitalize(), item_id)
        return await self.usage.is_in_use(kind, item_id)

    # ─── Preferences ─────────────────────────────────────────────

    async def set_reflection_alert(
        self, user_id: UserId, enabled: object, alert_time: time | None = None,
    ) -> dict:
        if not isinstance(enabled, bool):
            raise InvalidInputError("enabled parameter must be a boolean", "enabled")
        async with self.locks.for_user(user_id):
            settings = await self._get_or_create(user_id)
            new_time = alert_time or settings.reflection_alert_time
            await self.store.set_reflection_alert(user_id, enabled, new_time)
        return {
            "reflection_alert_enabled": enabled,
            "reflection_alert_time": new_time.strftime("%H:%M"),
        }

    async def delete_settings(self, user_id: UserId) -> None:
        async with self.locks.for_user(user_id):
            await self._require(user_id)
            await self.store.delete(user_id)
        logger.info("Settings deleted", extra={"user_id": user_id})
