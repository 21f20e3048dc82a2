"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the identity provider subject string, EntryId wraps UUID
    - Mood has exactly 4 values: {High, Low} Energy x {Pleasant, Unpleasant}
    - All valid states encoded as Enums — no raw string matching outside this module

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders, compare equal to stored strings
    - Pleasantness derived from the mood suffix, not from substring search
      ("Unpleasant" contains "pleasant" case-insensitively)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
EntryId = NewType("EntryId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Mood(str, Enum):
    """Mood quadrant of a journal entry — stored as its literal value."""
    HIGH_ENERGY_UNPLEASANT = "High Energy, Unpleasant"
    LOW_ENERGY_UNPLEASANT = "Low Energy, Unpleasant"
    HIGH_ENERGY_PLEASANT = "High Energy, Pleasant"
    LOW_ENERGY_PLEASANT = "Low Energy, Pleasant"

    @property
    def is_pleasant(self) -> bool:
        return self.value.endswith(", Pleasant")

    @classmethod
    def parse(cls, value: str) -> "Mood | None":
        """Return the Mood for a literal value, None when unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


class CatalogKind(str, Enum):
    """Which per-user catalog an item belongs to."""
    TAG = "tag"
    ACTIVITY = "activity"

    @property
    def field_name(self) -> str:
        """Attribute name of the catalog on Settings and Entry."""
        return "tags" if self is CatalogKind.TAG else "activities"


class SetupStatus(str, Enum):
    """Two-state settings setup flag, exposed for readability in logs."""
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    @classmethod
    def from_flag(cls, complete: bool) -> "SetupStatus":
        return cls.COMPLETE if complete else cls.INCOMPLETE


class AnalyticsEvent(str, Enum):
    """Event names emitted to the AnalyticsSink."""
    USER_REGISTERED = "User Registered"
    USER_DELETED = "User Deleted"
    ENTRY_CREATED = "Journal Entry Created"
    ENTRY_UPDATED = "Journal Entry Updated"
    ENTRY_DELETED = "Journal Entry Deleted"
    ENTRY_FETCHED = "Journal Entry Fetched"
    ENTRIES_FETCHED = "Journal Entries Fetched"
    CATALOG_ITEMS_ADDED = "Catalog Items Added"
    CATALOG_ITEM_EDITED = "Catalog Item Edited"
    CATALOG_ITEMS_DELETED = "Catalog Items Deleted"
    SETUP_STATUS_CHANGED = "Settings Setup Status Changed"


# Ranking weights for closest-entry matching
CLOSEST_MOOD_WEIGHT: int = 4
CLOSEST_EMOTION_WEIGHT: int = 3
CLOSEST_TAG_WEIGHT: int = 2
CLOSEST_ACTIVITY_WEIGHT: int = 1
