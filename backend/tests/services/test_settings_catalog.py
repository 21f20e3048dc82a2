"""Settings Catalog Service — verifies catalog orchestration against a real session.

Invariants:
    - Duplicate names are a 409 naming the item; nothing is written
    - delete_items is all-or-nothing
    - check_in_use follows the entries that reference an item
    - Settings is created lazily only for known users

Design Decisions:
    - Services built over one AsyncSession (conftest) so every assertion reads through the
      same stores the service writes with
"""

from datetime import time

import pytest

from app.core.domain_types import AnalyticsEvent, CatalogKind
from app.core.errors import (
    DuplicateNameError, InvalidInputError, InvalidTypeError, ResourceNotFoundError,
)

GENERAL = "General Activity"


async def _add_tags(service, user_id, *names):
    return await service.add_items(
        user_id, CatalogKind.TAG, [{"name": n, "type": GENERAL} for n in names],
    )


# --- get / status -----------------------------------------------------------

async def test_get_settings_missing_is_not_found(settings_service, alice):
    with pytest.raises(ResourceNotFoundError):
        await settings_service.get_settings(alice)


async def test_get_settings_returns_aggregate(settings_service, alice_settings):
    data = await settings_service.get_settings(alice_settings)
    assert data["user"] == alice_settings
    assert data["tags"] == []
    assert data["setup_complete"] is False
    assert data["reflection_alert_time"] == "21:00"


async def test_setup_status_round_trip(settings_service, alice_settings, analytics):
    assert await settings_service.get_setup_status(alice_settings) is False
    await settings_service.set_setup_status(alice_settings, True)
    assert await settings_service.get_setup_status(alice_settings) is True
    assert AnalyticsEvent.SETUP_STATUS_CHANGED.value in analytics.names()


async def test_setup_status_must_be_bool(settings_service, alice_settings):
    with pytest.raises(InvalidInputError):
        await settings_service.set_setup_status(alice_settings, "true")


async def test_setup_status_without_settings_is_not_found(settings_service, alice):
    with pytest.raises(ResourceNotFoundError):
        await settings_service.set_setup_status(alice, True)


# --- add --------------------------------------------------------------------

async def test_add_items_assigns_ids(settings_service, alice_settings):
    added = await _add_tags(settings_service, alice_settings, "Home", "Work")
    assert [t["name"] for t in added] == ["Home", "Work"]
    assert all(t["id"] for t in added)
    assert len({t["id"] for t in added}) == 2

    stored = await settings_service.list_items(alice_settings, CatalogKind.TAG)
    assert stored == added


async def test_add_duplicate_home_conflicts(settings_service, alice_settings):
    await _add_tags(settings_service, alice_settings, "Home")
    with pytest.raises(DuplicateNameError) as exc:
        await _add_tags(settings_service, alice_settings, "Home")
    assert "Home" in exc.value.message

    stored = await settings_service.list_items(alice_settings, CatalogKind.TAG)
    assert [t["name"] for t in stored] == ["Home"]


async def test_add_batch_is_all_or_nothing(settings_service, alice_settings):
    with pytest.raises(InvalidTypeError):
        await settings_service.add_items(
            alice_settings, CatalogKind.ACTIVITY,
            [{"name": "Walking", "type": "Soothing"},
             {"name": "Boxing", "type": "Exercise"}],
        )
    assert await settings_service.list_items(alice_settings, CatalogKind.ACTIVITY) == []


async def test_add_creates_settings_lazily(settings_service, alice):
    await _add_tags(settings_service, alice, "Home")
    data = await settings_service.get_settings(alice)
    assert [t["name"] for t in data["tags"]] == ["Home"]


async def test_add_for_unknown_user_is_not_found(settings_service, test_db):
    with pytest.raises(ResourceNotFoundError):
        await _add_tags(settings_service, "auth0|nobody", "Home")


async def test_create_default_tags(settings_service, alice_settings):
    added = await settings_service.create_default_items(alice_settings, CatalogKind.TAG)
    assert [t["name"] for t in added] == ["Home 🏠", "Work 💻", "Hobbies 💃", "Self-Care 🥰"]
    assert {t["type"] for t in added} == {GENERAL}


async def test_create_default_tags_twice_conflicts(settings_service, alice_settings):
    await settings_service.create_default_items(alice_settings, CatalogKind.TAG)
    with pytest.raises(DuplicateNameError):
        await settings_service.create_default_items(alice_settings, CatalogKind.TAG)


async def test_no_default_activities(settings_service, alice_settings):
    with pytest.raises(InvalidInputError):
        await settings_service.create_default_items(alice_settings, CatalogKind.ACTIVITY)


# --- edit -------------------------------------------------------------------

async def test_rename_to_other_activity_name_conflicts(settings_service, alice_settings):
    a1, a2 = await settings_service.add_items(
        alice_settings, CatalogKind.ACTIVITY,
        [{"name": "Walking", "type": "Soothing"}, {"name": "Running", "type": "Soothing"}],
    )
    with pytest.raises(DuplicateNameError):
        await settings_service.edit_item(
            alice_settings, CatalogKind.ACTIVITY, a1["id"], new_name="Running",
        )
    result = await settings_service.edit_item(
        alice_settings, CatalogKind.ACTIVITY, a2["id"], new_name="Running",
    )
    assert result == a2


async def test_edit_type_only_keeps_name(settings_service, alice_settings):
    (home,) = await _add_tags(settings_service, alice_settings, "Home")
    result = await settings_service.edit_item(
        alice_settings, CatalogKind.TAG, home["id"], new_type="Soothing Activity",
    )
    assert result == {"id": home["id"], "name": "Home", "type": "Soothing Activity"}
    stored = await settings_service.list_items(alice_settings, CatalogKind.TAG)
    assert stored == [result]


async def test_edit_unknown_item_is_not_found(settings_service, alice_settings):
    with pytest.raises(ResourceNotFoundError):
        await settings_service.edit_item(
            alice_settings, CatalogKind.TAG, "missing", new_name="X",
        )


# --- delete -----------------------------------------------------------------

async def test_delete_items_is_atomic(settings_service, alice_settings):
    home, work = await _add_tags(settings_service, alice_settings, "Home", "Work")
    with pytest.raises(InvalidInputError) as exc:
        await settings_service.delete_items(
            alice_settings, CatalogKind.TAG, [home["id"], "missing"],
        )
    assert "missing" in exc.value.message
    stored = await settings_service.list_items(alice_settings, CatalogKind.TAG)
    assert [t["id"] for t in stored] == [home["id"], work["id"]]


async def test_delete_items_removes_listed(settings_service, alice_settings, analytics):
    home, work = await _add_tags(settings_service, alice_settings, "Home", "Work")
    removed = await settings_service.delete_items(
        alice_settings, CatalogKind.TAG, [home["id"]],
    )
    assert removed == [home["id"]]
    stored = await settings_service.list_items(alice_settings, CatalogKind.TAG)
    assert stored == [work]
    assert AnalyticsEvent.CATALOG_ITEMS_DELETED.value in analytics.names()


async def test_delete_all_items(settings_service, alice_settings):
    await _add_tags(settings_service, alice_settings, "Home", "Work")
    assert await settings_service.delete_all_items(alice_settings, CatalogKind.TAG) == 2
    assert await settings_service.list_items(alice_settings, CatalogKind.TAG) == []


async def test_delete_settings(settings_service, alice_settings):
    await settings_service.delete_settings(alice_settings)
    with pytest.raises(ResourceNotFoundError):
        await settings_service.get_settings(alice_settings)


# --- in use -----------------------------------------------------------------

async def test_check_in_use_follows_entries(
    settings_service, entry_service, alice_settings,
):
    (home,) = await _add_tags(settings_service, alice_settings, "Home")
    assert await settings_service.check_in_use(alice_settings, CatalogKind.TAG, home["id"]) is False

    created = await entry_service.create(
        alice_settings, "Low Energy, Pleasant", "Calm", "Quiet evening",
        tags=[{"id": home["id"], "name": "Home"}],
    )
    assert await settings_service.check_in_use(alice_settings, CatalogKind.TAG, home["id"]) is True

    await entry_service.delete(alice_settings, created["data"]["id"])
    assert await settings_service.check_in_use(alice_settings, CatalogKind.TAG, home["id"]) is False


async def test_check_in_use_unknown_item_is_not_found(settings_service, alice_settings):
    with pytest.raises(ResourceNotFoundError):
        await settings_service.check_in_use(alice_settings, CatalogKind.TAG, "missing")


# --- reflection alert -------------------------------------------------------

async def test_set_reflection_alert(settings_service, alice):
    result = await settings_service.set_reflection_alert(alice, False, time(20, 30))
    assert result == {"reflection_alert_enabled": False, "reflection_alert_time": "20:30"}
    data = await settings_service.get_settings(alice)
    assert data["reflection_alert_enabled"] is False
    assert data["reflection_alert_time"] == "20:30"


async def test_reflection_alert_keeps_time_when_omitted(settings_service, alice_settings):
    result = await settings_service.set_reflection_alert(alice_settings, True)
    assert result["reflection_alert_time"] == "21:00"


async def test_lazy_settings_use_configured_alert_time(settings_service, alice):
    settings_service.default_alert_time = time(7, 30)
    await _add_tags(settings_service, alice, "Home")
    data = await settings_service.get_settings(alice)
    assert data["reflection_alert_time"] == "07:30"
