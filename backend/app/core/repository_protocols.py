"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves —
      the services orchestrate the async calls around the pure logic
    - AnalyticsSink.track is async but contractually non-raising
"""

from datetime import datetime, time
from typing import Any, Protocol

from app.core.domain_types import CatalogKind, EntryId, UserId


class SettingsLike(Protocol):
    """Structural contract for the per-user Settings aggregate."""
    user_id: str
    tags: list
    activities: list
    setup_complete: bool
    reflection_alert_enabled: bool
    reflection_alert_time: time
    version: int


class SettingsRepository(Protocol):
    """Contract for the Settings aggregate store (CatalogStore)."""
    async def get(self, user_id: UserId) -> SettingsLike | None: ...
    async def create(self, user_id: UserId, **fields: object) -> SettingsLike: ...
    async def create_if_missing(
        self, user_id: UserId, **fields: object,
    ) -> SettingsLike: ...
    async def replace_catalog(
        self, user_id: UserId, kind: CatalogKind, items: list[dict],
        expected_version: int,
    ) -> int: ...
    async def set_setup_complete(self, user_id: UserId, status: bool) -> None: ...
    async def set_reflection_alert(
        self, user_id: UserId, enabled: bool, alert_time: time,
    ) -> None: ...
    async def delete(self, user_id: UserId, commit: bool = True) -> None: ...


class EntryRepository(Protocol):
    """Contract for journal entry persistence (EntryStore)."""
    async def get_owned(self, user_id: UserId, entry_id: EntryId) -> Any | None: ...
    async def list_for_user(
        self, user_id: UserId,
        start: datetime | None = None, end: datetime | None = None,
        tag_id: str | None = None, newest_first: bool = True,
        before: datetime | None = None, limit: int | None = None,
    ) -> list: ...
    async def add(self, user_id: UserId, fields: dict) -> Any: ...
    async def update(self, entry: Any, fields: dict) -> Any: ...
    async def delete(self, entry: Any) -> None: ...
    async def delete_all_for_user(self, user_id: UserId, commit: bool = True) -> int: ...
    async def count_referencing(self, kind: CatalogKind, item_id: str) -> int: ...
    async def count_linking_to(self, entry_id: EntryId) -> int: ...


class IdentityProvider(Protocol):
    """Answers whether a user id is known — stands in for the identity service lookup."""
    async def verify_user(self, user_id: UserId) -> bool: ...


class FieldCipher(Protocol):
    """Reversible encryption applied to sensitive entry fields before persistence."""
    def encrypt(self, plaintext: str) -> str: ...
    def decrypt(self, ciphertext: str) -> str: ...


class AnalyticsSink(Protocol):
    """Fire-and-forget product analytics. Must never raise."""
    async def track(
        self, event_name: str, user_id: str, properties: dict | None = None,
    ) -> None: ...
