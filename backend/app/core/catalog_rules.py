"""Catalog Validation — pure rules for per-user tag and activity catalogs.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Names are unique within one catalog, compared case-sensitively
    - An item's type is always a member of the whitelist for its kind
    - Batch validation runs over the whole batch before the caller writes anything

Design Decisions:
    - Predicates (is_name_unique, is_type_allowed, find_by_id) return plain values so
      they compose in tests; validate_* functions raise typed errors from core/errors.py
    - Name index (dict name -> id) instead of pairwise comparison: O(1) lookups per item
    - Required-field checks run for the whole batch before the duplicate checks, so the
      first reported error is always the most basic one
"""

from collections.abc import Iterable, Mapping, Sequence

from app.core.domain_types import CatalogKind
from app.core.errors import (
    DuplicateNameError, InvalidInputError, InvalidTypeError, ResourceNotFoundError,
)


def is_name_unique(name: str, existing_names: Iterable[str]) -> bool:
    """True when no existing name equals `name` (case-sensitive)."""
    return name not in set(existing_names)


def is_type_allowed(item_type: str, whitelist: Iterable[str]) -> bool:
    return item_type in frozenset(whitelist)


def find_by_id(collection: Sequence[Mapping], item_id: str) -> Mapping | None:
    """Return the item whose id matches, None when absent."""
    for item in collection:
        if item.get("id") == item_id:
            return item
    return None


def name_index(collection: Sequence[Mapping]) -> dict[str, str]:
    """Map item name -> item id for O(1) collision checks."""
    return {item["name"]: item["id"] for item in collection}


# --- Batch add --------------------------------------------------------------

def validate_new_items(
    kind: CatalogKind,
    new_items: Sequence[Mapping],
    existing: Sequence[Mapping],
    whitelist: Iterable[str],
) -> None:
    """Validate a batch of {name, type} items before any write. All-or-nothing."""
    if not new_items:
        raise InvalidInputError(
            f"{kind.field_name} parameter empty. Must be supplied", kind.field_name,
        )
    allowed = frozenset(whitelist)
    for item in new_items:
        name = item.get("name")
        item_type = item.get("type")
        if not name:
            raise InvalidInputError(
                f"A {kind.value} is missing 'name'. Must be supplied", "name",
            )
        if not item_type:
            raise InvalidInputError(
                f"{kind.value.capitalize()} '{name}' is missing 'type'. Must be supplied",
                "type",
            )
        if not is_type_allowed(item_type, allowed):
            raise InvalidTypeError(item_type, kind.value, name)

    taken = name_index(existing)
    seen: set[str] = set()
    for item in new_items:
        name = item["name"]
        if name in taken or name in seen:
            raise DuplicateNameError(name, kind.value)
        seen.add(name)


# --- Single edit ------------------------------------------------------------

def validate_item_edit(
    kind: CatalogKind,
    existing: Sequence[Mapping],
    item_id: str,
    new_name: str | None,
    new_type: str | None,
    whitelist: Iterable[str],
) -> dict:
    """Validate a partial edit and return the full replacement item {id, name, type}."""
    if not new_name and not new_type:
        raise InvalidInputError(
            "name & type empty. At least one must be supplied", "name",
        )
    original = find_by_id(existing, item_id)
    if original is None:
        raise ResourceNotFoundError(kind.value.capitalize(), item_id)

    if new_name:
        owner = name_index(existing).get(new_name)
        if owner is not None and owner != item_id:
            raise DuplicateNameError(new_name, kind.value)
    if new_type and not is_type_allowed(new_type, whitelist):
        raise InvalidTypeError(new_type, kind.value, original["name"])

    return {
        "id": original["id"],
        "name": new_name or original["name"],
        "type": new_type or original["type"],
    }


# --- Batch delete -----------------------------------------------------------

def validate_item_ids_exist(
    kind: CatalogKind, existing: Sequence[Mapping], item_ids: Iterable[str],
) -> list[str]:
    """Every id must reference an existing item. Returns ids in request order, de-duplicated."""
    ids = list(dict.fromkeys(item_ids))
    if not ids:
        raise InvalidInputError(
            f"{kind.field_name} parameter empty. Must be supplied", kind.field_name,
        )
    known = {item["id"] for item in existing}
    for item_id in ids:
        if not item_id:
            raise InvalidInputError(
                f"A {kind.value} is missing required key 'id'", "id",
            )
        if item_id not in known:
            raise InvalidInputError(
                f"{kind.value.capitalize()} with ID '{item_id}' does not exist", "id",
            )
    return ids
