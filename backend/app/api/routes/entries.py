"""Entry Routes — journal entries of the calling user.

Invariants:
    - Soft service failures (authorise=false) become a bare 401 "Authorisation denied",
      so an entry id never reveals whether it exists for another user
    - Query windows use strict ISO-8601 Zulu strings (validated by the service)

Design Decisions:
    - /latest and /stats declared before /{entry_id}; entry_id typed UUID so malformed
      ids fail request validation instead of reaching the store
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user_id, get_entry_service, soft_response
from app.core.domain_types import UserId
from app.schemas.entry import EntryCreate, EntryUpdate
from app.services.journal_entries import JournalEntryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/entries", tags=["entries"])


def _refs(refs) -> list[dict] | None:
    if refs is None:
        return None
    return [ref.model_dump(exclude_none=True) for ref in refs]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: EntryCreate,
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    result = await service.create(
        user_id,
        mood=body.mood,
        emotion=body.emotion,
        text=body.text,
        activities=_refs(body.activities),
        tags=_refs(body.tags),
        linked_entry=body.linked_entry,
    )
    return soft_response(result)


@router.get("")
async def list_entries(
    start: str | None = Query(None),
    end: str | None = Query(None),
    tag_id: str | None = Query(None, max_length=64),
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    """All entries, newest first."""
    return soft_response(await service.get_all(user_id, start, end, tag_id))


@router.delete("")
async def delete_all_entries(
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    return soft_response(await service.delete_all(user_id))


@router.get("/latest")
async def get_latest_entry(
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    return soft_response(await service.get_most_recent(user_id))


@router.get("/stats")
async def get_entry_stats(
    start: str | None = Query(None),
    end: str | None = Query(None),
    tag_id: str | None = Query(None, max_length=64),
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    """Mood distribution and activity usage for [start, end)."""
    return soft_response(await service.get_stats(user_id, start, end, tag_id))


@router.get("/{entry_id}")
async def get_entry(
    entry_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    return soft_response(await service.get_one(user_id, entry_id))


@router.patch("/{entry_id}")
async def edit_entry(
    entry_id: UUID,
    body: EntryUpdate,
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    result = await service.edit(
        user_id,
        entry_id,
        mood=body.mood,
        emotion=body.emotion,
        activities=_refs(body.activities),
        tags=_refs(body.tags),
        text=body.text,
        linked_entry=body.linked_entry,
    )
    return soft_response(result)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    return soft_response(await service.delete(user_id, entry_id))


@router.get("/{entry_id}/closest")
async def get_closest_entry(
    entry_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    service: JournalEntryService = Depends(get_entry_service),
):
    """Most similar earlier entry with the same mood."""
    return soft_response(await service.get_closest(user_id, entry_id))
