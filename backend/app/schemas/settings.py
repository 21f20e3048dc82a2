"""Settings Schemas — request/response bodies for the settings and catalog routes.

Invariants:
    - Catalog item name/type are optional at the boundary: the catalog rules produce the
      precise "missing 'name'" / "missing 'type'" errors naming the offending item
    - Boolean flags are StrictBool: "true" strings are rejected, not coerced

Design Decisions:
    - Length caps at the boundary only; whitelists live in config, not in Literal types
"""

from datetime import time

from pydantic import BaseModel, Field, StrictBool


class CatalogItemIn(BaseModel):
    """One new tag/activity — {name, type}."""
    name: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=100)


class CatalogItemsCreate(BaseModel):
    items: list[CatalogItemIn]


class CatalogItemEdit(BaseModel):
    """Partial edit — at least one of name/type (checked by the service)."""
    id: str = Field(min_length=1, max_length=64)
    name: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=100)


class CatalogItemsDelete(BaseModel):
    ids: list[str]


class CatalogItem(BaseModel):
    id: str
    name: str
    type: str


class SetupStatusUpdate(BaseModel):
    status: StrictBool


class ReflectionAlertUpdate(BaseModel):
    enabled: StrictBool
    alert_time: time | None = None


class SettingsResponse(BaseModel):
    """Whole Settings aggregate as returned to clients."""
    user: str
    tags: list[CatalogItem]
    activities: list[CatalogItem]
    setup_complete: bool
    reflection_alert_enabled: bool
    reflection_alert_time: str
