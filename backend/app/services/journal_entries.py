"""Journal Entry Service — create, edit, read and delete mood-tagged journal entries.

Invariants:
    - Input validation and linking rules run before any write (typed errors, 400)
    - Missing or foreign entries produce the SOFT result {success: false, authorise: false}
      instead of raising: callers cannot tell "absent" from "not yours"
    - mood / emotion / text are encrypted with the FieldCipher before persistence and
      decrypted on every read; results always carry plaintext
    - No stored entry ever violates the link rule (Unpleasant -> Pleasant)

Design Decisions:
    - Soft results as plain dicts {success, authorise, msg, data}: the HTTP layer serializes
      them unchanged, matching the response envelope mobile clients already parse
    - Link target must exist and belong to the same user: a dangling or foreign link is a
      validation error, not a silent reference
    - Changing a link target's mood to unpleasant is rejected while links point at it
      (the alternative, cascading unlinks, silently edits other entries)
    - Insights (stats, closest entry) computed in core/entry_insights.py over decrypted dicts
"""

import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from app.core.domain_types import AnalyticsEvent, EntryId, Mood, UserId
from app.core.entry_insights import compute_entry_stats, find_closest_entry
from app.core.errors import InvalidInputError, ResourceNotFoundError
from app.core.iso_dates import format_zulu, parse_time_window
from app.core.linking_rules import (
    check_can_link_from, check_can_link_to,
    check_link_target_mood_change, check_mood_keeps_link_valid, parse_mood,
)
from app.core.repository_protocols import (
    AnalyticsSink, EntryRepository, FieldCipher, IdentityProvider, SettingsRepository,
)
from app.infrastructure.analytics import safe_track
from app.models.entry import Entry

logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND_MSG = "Journal entry not found"
USER_NOT_FOUND_MSG = "User not found"


def _result(success: bool, authorise: bool, msg: str, data: object = None) -> dict:
    return {"success": success, "authorise": authorise, "msg": msg, "data": data}


def _require_text(value: str | None, field: str) -> str:
    if not value:
        raise InvalidInputError(f"{field} parameter empty. Must be supplied", field)
    return value


def _parse_entry_id(value: object, field: str) -> EntryId:
    if isinstance(value, uuid.UUID):
        return EntryId(value)
    if not value:
        raise InvalidInputError(f"{field} parameter empty. Must be supplied", field)
    try:
        return EntryId(uuid.UUID(str(value)))
    except ValueError:
        raise InvalidInputError(f"{field} '{value}' is not a valid entry id", field)


def _normalize_refs(refs: Sequence[Mapping] | None, field: str) -> list[dict]:
    """Keep {id, name?, type?} of each reference. Every reference needs an id."""
    normalized = []
    for ref in refs or []:
        if not isinstance(ref, Mapping) or not ref.get("id"):
            raise InvalidInputError(
                f"Every item in {field} must carry an 'id'", field,
            )
        item = {"id": str(ref["id"])}
        for key in ("name", "type"):
            if ref.get(key) is not None:
                item[key] = ref[key]
        normalized.append(item)
    return normalized


class JournalEntryService:
    """Orchestrates linking rules + EntryStore + IdentityProvider."""

    def __init__(
        self,
        entries: EntryRepository,
        identity: IdentityProvider,
        cipher: FieldCipher,
        analytics: AnalyticsSink,
        catalog: SettingsRepository,
    ):
        self.entries = entries
        self.identity = identity
        self.cipher = cipher
        self.analytics = analytics
        self.catalog = catalog

    # ─── Serialization ───────────────────────────────────────────

    def _decrypt(self, entry: Entry) -> dict:
        return {
            "id": str(entry.id),
            "user": entry.user_id,
            "mood": self.cipher.decrypt(entry.mood),
            "emotion": self.cipher.decrypt(entry.emotion),
            "text": self.cipher.decrypt(entry.text),
            "tags": list(entry.tags or []),
            "activities": list(entry.activities or []),
            "linked_entry": str(entry.linked_entry_id) if entry.linked_entry_id else None,
            "date_created": format_zulu(entry.date_created),
            "date_updated": (
                format_zulu(entry.date_updated) if entry.date_updated else None
            ),
        }

    async def _load_link_target(self, user_id: UserId, linked_id: EntryId) -> Mood:
        """Mood of the linked entry. The entry must exist and belong to the user."""
        target = await self.entries.get_owned(user_id, linked_id)
        if target is None:
            raise InvalidInputError(
                f"linked_entry '{linked_id}' does not exist", "linked_entry",
            )
        return parse_mood(self.cipher.decrypt(target.mood))

    # ─── Writes ──────────────────────────────────────────────────

    async def create(
        self,
        user_id: UserId,
        mood: str | None,
        emotion: str | None,
        text: str | None,
        activities: Sequence[Mapping] | None = None,
        tags: Sequence[Mapping] | None = None,
        linked_entry: object = None,
    ) -> dict:
        _require_text(user_id, "user_id")
        entry_mood = parse_mood(mood)
        _require_text(emotion, "emotion")
        _require_text(text, "text")
        tag_refs = _normalize_refs(tags, "tags")
        activity_refs = _normalize_refs(activities, "activities")

        linked_id = None
        if linked_entry:
            check_can_link_from(entry_mood)
            linked_id = _parse_entry_id(linked_entry, "linked_entry")
            check_can_link_to(await self._load_link_target(user_id, linked_id))

        if not await self.identity.verify_user(user_id):
            logger.warning("Entry create for unknown user", extra={"user_id": user_id})
            return _result(False, False, USER_NOT_FOUND_MSG)

        entry = await self.entries.add(user_id, {
            "mood": self.cipher.encrypt(entry_mood.value),
            "emotion": self.cipher.encrypt(emotion),
            "text": self.cipher.encrypt(text),
            "tags": tag_refs,
            "activities": activity_refs,
            "linked_entry_id": linked_id,
        })
        logger.info(
            "Journal entry created",
            extra={"user_id": user_id, "entry_id": str(entry.id)},
        )
        await safe_track(self.analytics, AnalyticsEvent.ENTRY_CREATED.value, user_id)
        return _result(
            True, True, "New journal entry created successfully", self._decrypt(entry),
        )

    async def edit(
        self,
        user_id: UserId,
        entry_id: object,
        mood: str | None = None,
        emotion: str | None = None,
        activities: Sequence[Mapping] | None = None,
        tags: Sequence[Mapping] | None = None,
        text: str | None = None,
        linked_entry: object = None,
    ) -> dict:
        """Patch supplied fields only. Link checks run against the stored mood."""
        _require_text(user_id, "user_id")
        entry_key = _parse_entry_id(entry_id, "entry_id")

        entry = await self.entries.get_owned(user_id, entry_key)
        if entry is None:
            return _result(False, False, ENTRY_NOT_FOUND_MSG)

        original_mood = parse_mood(self.cipher.decrypt(entry.mood))
        new_mood = parse_mood(mood) if mood else None
        patch: dict = {}

        if linked_entry:
            check_can_link_from(original_mood)
            linked_id = _parse_entry_id(linked_entry, "linked_entry")
            if linked_id == entry.id:
                raise InvalidInputError(
                    "An entry cannot link to itself", "linked_entry",
                )
            check_can_link_to(await self._load_link_target(user_id, linked_id))
            patch["linked_entry_id"] = linked_id

        if new_mood is not None:
            has_link = bool(linked_entry) or entry.linked_entry_id is not None
            check_mood_keeps_link_valid(new_mood, has_link)
            if new_mood != original_mood:
                check_link_target_mood_change(
                    new_mood, await self.entries.count_linking_to(entry.id),
                )
            patch["mood"] = self.cipher.encrypt(new_mood.value)

        if emotion:
            patch["emotion"] = self.cipher.encrypt(emotion)
        if text:
            patch["text"] = self.cipher.encrypt(text)
        if tags is not None:
            patch["tags"] = _normalize_refs(tags, "tags")
        if activities is not None:
            patch["activities"] = _normalize_refs(activities, "activities")
        patch["date_updated"] = datetime.now(timezone.utc)

        await self.entries.update(entry, patch)
        logger.info(
            "Journal entry updated",
            extra={"user_id": user_id, "entry_id": str(entry_key)},
        )
        await safe_track(self.analytics, AnalyticsEvent.ENTRY_UPDATED.value, user_id)

        echoed = {"user": user_id}
        if new_mood is not None:
            echoed["mood"] = new_mood.value
        if emotion:
            echoed["emotion"] = emotion
        if text:
            echoed["text"] = text
        if "tags" in patch:
            echoed["tags"] = patch["tags"]
        if "activities" in patch:
            echoed["activities"] = patch["activities"]
        if "linked_entry_id" in patch:
            echoed["linked_entry"] = str(patch["linked_entry_id"])
        echoed["date_updated"] = format_zulu(patch["date_updated"])
        return _result(
            True, True,
            f"Journal entry successfully updated with ID {entry_key}",
            echoed,
        )

    async def delete(self, user_id: UserId, entry_id: object) -> dict:
        _require_text(user_id, "user_id")
        entry_key = _parse_entry_id(entry_id, "entry_id")

        entry = await self.entries.get_owned(user_id, entry_key)
        if entry is None:
            return _result(False, False, ENTRY_NOT_FOUND_MSG)

        await self.entries.delete(entry)
        logger.info(
            "Journal entry deleted",
            extra={"user_id": user_id, "entry_id": str(entry_key)},
        )
        await safe_track(self.analytics, AnalyticsEvent.ENTRY_DELETED.value, user_id)
        return _result(
            True, True,
            f"Journal entry successfully deleted with ID {entry_key}",
            {"id": str(entry_key)},
        )

    async def delete_all(self, user_id: UserId) -> dict:
        _require_text(user_id, "user_id")
        if not await self.identity.verify_user(user_id):
            return _result(False, False, USER_NOT_FOUND_MSG)
        deleted = await self.entries.delete_all_for_user(user_id)
        logger.info(
            f"Deleted {deleted} journal entries",
            extra={"user_id": user_id, "item_count": deleted},
        )
        return _result(
            True, True, "All journal entries deleted successfully", {"deleted": deleted},
        )

    # ─── Reads ───────────────────────────────────────────────────

    async def get_one(self, user_id: UserId, entry_id: object) -> dict:
        _require_text(user_id, "user_id")
        entry_key = _parse_entry_id(entry_id, "entry_id")

        entry = await self.entries.get_owned(user_id, entry_key)
        if entry is None:
            return _result(False, False, ENTRY_NOT_FOUND_MSG)

        await safe_track(self.analytics, AnalyticsEvent.ENTRY_FETCHED.value, user_id)
        return _result(True, True, "Journal entry found", self._decrypt(entry))

    async def get_all(
        self,
        user_id: UserId,
        start: str | None = None,
        end: str | None = None,
        tag_id: str | None = None,
    ) -> dict:
        """All entries of the user, newest first, optionally windowed and tag-filtered."""
        _require_text(user_id, "user_id")
        window = parse_time_window(start, end)

        if not await self.identity.verify_user(user_id):
            return _result(False, False, USER_NOT_FOUND_MSG)

        start_dt, end_dt = window if window else (None, None)
        entries = await self.entries.list_for_user(
            user_id, start=start_dt, end=end_dt, tag_id=tag_id, newest_first=True,
        )
        logger.info(
            f"Fetched {len(entries)} journal entries",
            extra={"user_id": user_id, "item_count": len(entries)},
        )
        await safe_track(self.analytics, AnalyticsEvent.ENTRIES_FETCHED.value, user_id)
        return _result(
            True, True, "Journal entries for requested user",
            [self._decrypt(e) for e in entries],
        )

    async def get_most_recent(self, user_id: UserId) -> dict:
        _require_text(user_id, "user_id")
        latest = await self.entries.list_for_user(user_id, newest_first=True, limit=1)
        if not latest:
            return _result(True, True, "No journal entries for requested user", None)
        return _result(
            True, True, "Most recent journal entry", self._decrypt(latest[0]),
        )

    async def get_closest(self, user_id: UserId, entry_id: object) -> dict:
        """Most similar earlier entry with the same mood."""
        _require_text(user_id, "user_id")
        entry_key = _parse_entry_id(entry_id, "entry_id")

        entry = await self.entries.get_owned(user_id, entry_key)
        if entry is None:
            return _result(False, False, ENTRY_NOT_FOUND_MSG)

        target = self._decrypt(entry)
        earlier = await self.entries.list_for_user(
            user_id, newest_first=False, before=entry.date_created,
        )
        closest = find_closest_entry(target, [self._decrypt(e) for e in earlier])
        if closest is None:
            raise ResourceNotFoundError("Closest journal entry", str(entry_key))
        return _result(True, True, "Closest journal entry found", closest)

    async def get_stats(
        self,
        user_id: UserId,
        start: str | None,
        end: str | None,
        tag_id: str | None = None,
    ) -> dict:
        """Mood distribution and activity usage over [start, end)."""
        _require_text(user_id, "user_id")
        start_dt, end_dt = parse_time_window(start, end, required=True)

        if not await self.identity.verify_user(user_id):
            return _result(False, False, USER_NOT_FOUND_MSG)

        entries = await self.entries.list_for_user(
            user_id, start=start_dt, end=end_dt, tag_id=tag_id,
        )
        settings = await self.catalog.get(user_id)
        activities = list(settings.activities or []) if settings else []
        stats = compute_entry_stats([self._decrypt(e) for e in entries], activities)
        return _result(True, True, "Journal entry stats for requested user", stats)
