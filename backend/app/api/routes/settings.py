"""Settings Routes — per-user settings aggregate and tag/activity catalogs.

Invariants:
    - Every route acts on the caller's own Settings (X-User-Id), never on a path user id
    - Missing Settings is a hard 404 here (JournalError handler), unlike the entry routes
    - Success bodies are {success: true, user, data?}

Design Decisions:
    - One parameterised router for both catalogs (/settings/{kind}): tags and activities
      share every rule except their whitelist
    - Fixed paths (/status, /reflection-alert) declared before /{kind} so they match first
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.deps import CatalogPath, get_current_user_id, get_settings_service
from app.core.domain_types import UserId
from app.schemas.settings import (
    CatalogItemEdit, CatalogItemsCreate, CatalogItemsDelete,
    ReflectionAlertUpdate, SettingsResponse, SetupStatusUpdate,
)
from app.services.settings_catalog import SettingsCatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("")
async def get_settings(
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    """Whole Settings aggregate."""
    data = await service.get_settings(user_id)
    return {"success": True, "user": user_id, "data": SettingsResponse(**data)}


@router.delete("")
async def delete_settings(
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    await service.delete_settings(user_id)
    return {"success": True, "user": user_id}


# ─── Setup status & reflection alert ─────────────────────────────

@router.get("/status")
async def get_setup_status(
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    complete = await service.get_setup_status(user_id)
    return {"success": True, "user": user_id, "data": {"setup_complete": complete}}


@router.put("/status")
async def set_setup_status(
    body: SetupStatusUpdate,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    complete = await service.set_setup_status(user_id, body.status)
    return {"success": True, "user": user_id, "data": {"setup_complete": complete}}


@router.put("/reflection-alert")
async def set_reflection_alert(
    body: ReflectionAlertUpdate,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    data = await service.set_reflection_alert(user_id, body.enabled, body.alert_time)
    return {"success": True, "user": user_id, "data": data}


# ─── Catalogs ────────────────────────────────────────────────────

@router.get("/{kind}")
async def list_items(
    kind: CatalogPath,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    items = await service.list_items(user_id, kind.kind)
    return {"success": True, "user": user_id, "data": items}


@router.post("/{kind}", status_code=status.HTTP_201_CREATED)
async def add_items(
    kind: CatalogPath,
    body: CatalogItemsCreate,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    added = await service.add_items(
        user_id, kind.kind, [item.model_dump() for item in body.items],
    )
    return {"success": True, "user": user_id, "data": added}


@router.post("/{kind}/default", status_code=status.HTTP_201_CREATED)
async def create_default_items(
    kind: CatalogPath,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    added = await service.create_default_items(user_id, kind.kind)
    return {"success": True, "user": user_id, "data": added}


@router.patch("/{kind}")
async def edit_item(
    kind: CatalogPath,
    body: CatalogItemEdit,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    item = await service.edit_item(user_id, kind.kind, body.id, body.name, body.type)
    return {"success": True, "user": user_id, "data": item}


@router.delete("/{kind}")
async def delete_items(
    kind: CatalogPath,
    body: CatalogItemsDelete,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    removed = await service.delete_items(user_id, kind.kind, body.ids)
    return {"success": True, "user": user_id, "data": removed}


@router.delete("/{kind}/all")
async def delete_all_items(
    kind: CatalogPath,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    removed = await service.delete_all_items(user_id, kind.kind)
    return {"success": True, "user": user_id, "data": {"deleted": removed}}


@router.get("/{kind}/{item_id}/in-use")
async def check_in_use(
    kind: CatalogPath,
    item_id: str,
    user_id: UserId = Depends(get_current_user_id),
    service: SettingsCatalogService = Depends(get_settings_service),
):
    in_use = await service.check_in_use(user_id, kind.kind, item_id)
    return {"success": True, "user": user_id, "data": {"in_use": in_use}}
