"""API Dependencies — caller identity and per-request service wiring.

Invariants:
    - The caller is identified by the X-User-Id header set by the authenticating gateway;
      a missing or blank header is a 401 before any service runs
    - One AsyncSession per request, shared by every store a service uses
    - FieldCipher and AnalyticsSink are process singletons (lru_cache), closed on shutdown

Design Decisions:
    - Factories as plain FastAPI dependencies so tests swap them via dependency_overrides
"""

from enum import Enum
from functools import lru_cache

from fastapi import Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import CatalogKind, UserId
from app.core.errors import MissingIdentityError
from app.infrastructure.analytics import build_analytics_sink
from app.infrastructure.catalog_store import CatalogStore
from app.infrastructure.database import get_db
from app.infrastructure.entry_store import EntryStore
from app.infrastructure.field_cipher import build_field_cipher
from app.infrastructure.user_store import UserStore
from app.services.journal_entries import JournalEntryService
from app.services.settings_catalog import SettingsCatalogService
from app.services.usage_guard import UsageGuard
from app.services.users import UserService


class CatalogPath(str, Enum):
    """URL segment naming a catalog."""
    TAGS = "tags"
    ACTIVITIES = "activities"

    @property
    def kind(self) -> CatalogKind:
        return CatalogKind.TAG if self is CatalogPath.TAGS else CatalogKind.ACTIVITY


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UserId:
    if not x_user_id or not x_user_id.strip():
        raise MissingIdentityError()
    return UserId(x_user_id.strip())


@lru_cache
def get_field_cipher():
    return build_field_cipher(get_settings())


@lru_cache
def get_analytics_sink():
    return build_analytics_sink(get_settings())


def get_settings_service(
    db: AsyncSession = Depends(get_db),
    analytics=Depends(get_analytics_sink),
) -> SettingsCatalogService:
    settings = get_settings()
    return SettingsCatalogService(
        store=CatalogStore(db),
        usage=UsageGuard(EntryStore(db)),
        identity=UserStore(db),
        analytics=analytics,
        tag_types=settings.tag_types,
        activity_types=settings.activity_types,
        default_tags=settings.default_tags,
        default_tag_type=settings.default_tag_type,
        default_alert_time=settings.reflection_alert_default_time,
    )


def get_entry_service(
    db: AsyncSession = Depends(get_db),
    cipher=Depends(get_field_cipher),
    analytics=Depends(get_analytics_sink),
) -> JournalEntryService:
    return JournalEntryService(
        entries=EntryStore(db),
        identity=UserStore(db),
        cipher=cipher,
        analytics=analytics,
        catalog=CatalogStore(db),
    )


def get_user_service(
    db: AsyncSession = Depends(get_db),
    analytics=Depends(get_analytics_sink),
) -> UserService:
    return UserService(
        db, analytics,
        default_alert_time=get_settings().reflection_alert_default_time,
    )


def soft_response(result: dict) -> dict | JSONResponse:
    """Map a soft service result onto HTTP: authorise=false becomes a bare 401."""
    if result.get("authorise") is False:
        return JSONResponse(
            status_code=401,
            content={"success": False, "msg": "Authorisation denied"},
        )
    return {key: value for key, value in result.items() if key != "authorise"}
