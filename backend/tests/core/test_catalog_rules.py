"""Catalog Rules — verifies pure validation of tag/activity catalogs.

Tests:
    - Predicates: name uniqueness is case-sensitive, type whitelist membership, id lookup
    - validate_new_items: required fields, whitelist, duplicates in batch and in catalog
    - validate_item_edit: partial edits keep the other field, own name is a no-op
    - validate_item_ids_exist: every id must exist, nothing is partially accepted
"""

import pytest

from app.core.catalog_rules import (
    find_by_id, is_name_unique, is_type_allowed, name_index,
    validate_item_edit, validate_item_ids_exist, validate_new_items,
)
from app.core.domain_types import CatalogKind
from app.core.errors import (
    DuplicateNameError, InvalidInputError, InvalidTypeError, ResourceNotFoundError,
)

TAG_TYPES = ["General Activity", "Soothing Activity"]
ACTIVITY_TYPES = ["Soothing"]

TAGS = [
    {"id": "t1", "name": "Home", "type": "General Activity"},
    {"id": "t2", "name": "Work", "type": "General Activity"},
]
ACTIVITIES = [
    {"id": "a1", "name": "Walking", "type": "Soothing"},
    {"id": "a2", "name": "Running", "type": "Soothing"},
]


# --- Predicates -------------------------------------------------------------

def test_is_name_unique_is_case_sensitive():
    assert is_name_unique("home", ["Home", "Work"])
    assert not is_name_unique("Home", ["Home", "Work"])


def test_is_type_allowed():
    assert is_type_allowed("Soothing", ACTIVITY_TYPES)
    assert not is_type_allowed("Exercise", ACTIVITY_TYPES)


def test_find_by_id_returns_item_or_none():
    assert find_by_id(TAGS, "t2")["name"] == "Work"
    assert find_by_id(TAGS, "missing") is None


def test_name_index_maps_name_to_id():
    assert name_index(TAGS) == {"Home": "t1", "Work": "t2"}


# --- validate_new_items -----------------------------------------------------

def test_new_items_accepts_valid_batch():
    validate_new_items(
        CatalogKind.TAG,
        [{"name": "Hobbies", "type": "General Activity"},
         {"name": "Self-Care", "type": "Soothing Activity"}],
        TAGS, TAG_TYPES,
    )


def test_new_items_rejects_empty_batch():
    with pytest.raises(InvalidInputError):
        validate_new_items(CatalogKind.TAG, [], TAGS, TAG_TYPES)


def test_new_items_rejects_missing_name():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_items(
            CatalogKind.TAG, [{"type": "General Activity"}], TAGS, TAG_TYPES,
        )
    assert exc.value.field == "name"


def test_new_items_rejects_missing_type_naming_item():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_items(CatalogKind.TAG, [{"name": "Gym"}], TAGS, TAG_TYPES)
    assert "Gym" in exc.value.message
    assert exc.value.field == "type"


def test_new_items_rejects_type_outside_whitelist():
    with pytest.raises(InvalidTypeError) as exc:
        validate_new_items(
            CatalogKind.ACTIVITY, [{"name": "Boxing", "type": "Exercise"}],
            ACTIVITIES, ACTIVITY_TYPES,
        )
    assert "Exercise" in exc.value.message
    assert "Boxing" in exc.value.message
    assert exc.value.http_status == 400


def test_new_items_rejects_duplicate_of_existing_name():
    with pytest.raises(DuplicateNameError) as exc:
        validate_new_items(
            CatalogKind.TAG, [{"name": "Home", "type": "General Activity"}],
            TAGS, TAG_TYPES,
        )
    assert "Home" in exc.value.message
    assert exc.value.http_status == 409


def test_new_items_rejects_duplicate_within_batch():
    with pytest.raises(DuplicateNameError):
        validate_new_items(
            CatalogKind.TAG,
            [{"name": "Gym", "type": "General Activity"},
             {"name": "Gym", "type": "Soothing Activity"}],
            TAGS, TAG_TYPES,
        )


def test_new_items_reports_missing_field_before_duplicate():
    """Required-field checks cover the whole batch before duplicate checks run."""
    with pytest.raises(InvalidInputError):
        validate_new_items(
            CatalogKind.TAG,
            [{"name": "Home", "type": "General Activity"}, {"name": "Gym"}],
            TAGS, TAG_TYPES,
        )


# --- validate_item_edit -----------------------------------------------------

def test_edit_requires_name_or_type():
    with pytest.raises(InvalidInputError):
        validate_item_edit(CatalogKind.ACTIVITY, ACTIVITIES, "a1", None, None, ACTIVITY_TYPES)


def test_edit_unknown_id_is_not_found():
    with pytest.raises(ResourceNotFoundError):
        validate_item_edit(
            CatalogKind.ACTIVITY, ACTIVITIES, "a9", "Swimming", None, ACTIVITY_TYPES,
        )


def test_edit_to_other_items_name_conflicts():
    with pytest.raises(DuplicateNameError) as exc:
        validate_item_edit(
            CatalogKind.ACTIVITY, ACTIVITIES, "a1", "Running", None, ACTIVITY_TYPES,
        )
    assert "Running" in exc.value.message


def test_edit_to_own_name_is_allowed():
    result = validate_item_edit(
        CatalogKind.ACTIVITY, ACTIVITIES, "a2", "Running", None, ACTIVITY_TYPES,
    )
    assert result == {"id": "a2", "name": "Running", "type": "Soothing"}


def test_edit_type_only_keeps_name():
    result = validate_item_edit(
        CatalogKind.TAG, TAGS, "t1", None, "Soothing Activity", TAG_TYPES,
    )
    assert result == {"id": "t1", "name": "Home", "type": "Soothing Activity"}


def test_edit_name_only_keeps_type():
    result = validate_item_edit(CatalogKind.TAG, TAGS, "t2", "Office", None, TAG_TYPES)
    assert result == {"id": "t2", "name": "Office", "type": "General Activity"}


def test_edit_rejects_bad_type():
    with pytest.raises(InvalidTypeError):
        validate_item_edit(CatalogKind.TAG, TAGS, "t1", None, "Soothing", TAG_TYPES)


# --- validate_item_ids_exist ------------------------------------------------

def test_ids_exist_returns_deduplicated_ids_in_order():
    assert validate_item_ids_exist(CatalogKind.TAG, TAGS, ["t2", "t1", "t2"]) == ["t2", "t1"]


def test_ids_exist_rejects_empty_list():
    with pytest.raises(InvalidInputError):
        validate_item_ids_exist(CatalogKind.TAG, TAGS, [])


def test_ids_exist_names_the_missing_id():
    with pytest.raises(InvalidInputError) as exc:
        validate_item_ids_exist(CatalogKind.TAG, TAGS, ["t1", "t9"])
    assert "t9" in exc.value.message
