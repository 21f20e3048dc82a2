"""Entry Store — persistence for journal entries and their catalog references.

Invariants:
    - entry_catalog_refs rows always mirror the entry's tags/activities ids
    - Ownership is part of every lookup the service uses for mutations (get_owned)
    - Deleting an entry clears linked_entry_id on entries that pointed at it
    - Stores receive and return ciphertext; the service owns encryption

Design Decisions:
    - Refs rebuilt wholesale on every tag/activity change (delete-orphan cascade):
      entries hold a handful of references, diffing is not worth the code
    - count_referencing is NOT scoped to a user: an item counts as in use if any entry
      anywhere references its id
    - id and date_created assigned in Python before flush so no refresh round-trip is needed
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import CatalogKind, EntryId, UserId
from app.models.entry import Entry
from app.models.entry_catalog_ref import EntryCatalogRef

logger = logging.getLogger(__name__)


def _build_refs(tags: list[dict], activities: list[dict]) -> list[EntryCatalogRef]:
    refs = [
        EntryCatalogRef(kind=CatalogKind.TAG.value, item_id=str(t["id"]))
        for t in tags
    ]
    refs.extend(
        EntryCatalogRef(kind=CatalogKind.ACTIVITY.value, item_id=str(a["id"]))
        for a in activities
    )
    return refs


class EntryStore:
    """EntryRepository implementation over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_owned(self, user_id: UserId, entry_id: EntryId) -> Entry | None:
        """Combined existence + ownership lookup."""
        result = await self.db.execute(
            select(Entry)
            .where(Entry.id == entry_id, Entry.user_id == user_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UserId,
        start: datetime | None = None,
        end: datetime | None = None,
        tag_id: str | None = None,
        newest_first: bool = True,
        before: datetime | None = None,
        limit: int | None = None,
    ) -> list[Entry]:
        query = select(Entry).where(Entry.user_id == user_id)
        if start is not None and end is not None:
            query = query.where(Entry.date_created >= start, Entry.date_created < end)
        if before is not None:
            query = query.where(Entry.date_created < before)
        if tag_id:
            query = query.where(
                Entry.id.in_(
                    select(EntryCatalogRef.entry_id).where(
                        EntryCatalogRef.kind == CatalogKind.TAG.value,
                        EntryCatalogRef.item_id == tag_id,
                    ),
                ),
            )
        order = Entry.date_created.desc() if newest_first else Entry.date_created.asc()
        query = query.order_by(order).execution_options(populate_existing=True)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add(self, user_id: UserId, fields: dict) -> Entry:
        tags = fields.get("tags") or []
        activities = fields.get("activities") or []
        entry = Entry(
            id=uuid.uuid4(),
            user_id=user_id,
            mood=fields["mood"],
            emotion=fields["emotion"],
            text=fields["text"],
            tags=tags,
            activities=activities,
            linked_entry_id=fields.get("linked_entry_id"),
            date_created=fields.get("date_created") or datetime.now(timezone.utc),
        )
        entry.catalog_refs = _build_refs(tags, activities)
        self.db.add(entry)
        await self.db.commit()
        return entry

    async def update(self, entry: Entry, fields: dict) -> Entry:
        """Apply supplied fields only. tags/activities changes rebuild the refs."""
        for name, value in fields.items():
            setattr(entry, name, value)
        if "tags" in fields or "activities" in fields:
            entry.catalog_refs = _build_refs(entry.tags or [], entry.activities or [])
        await self.db.commit()
        return entry

    async def delete(self, entry: Entry) -> None:
        await self.db.execute(
            update(Entry)
            .where(Entry.linked_entry_id == entry.id)
            .values(linked_entry_id=None)
            .execution_options(synchronize_session=False),
        )
        await self.db.delete(entry)
        await self.db.commit()

    async def delete_all_for_user(self, user_id: UserId, commit: bool = True) -> int:
        """Bulk delete a user's entries and their refs. Returns the number deleted."""
        owned = select(Entry.id).where(Entry.user_id == user_id)
        await self.db.execute(
            delete(EntryCatalogRef)
            .where(EntryCatalogRef.entry_id.in_(owned))
            .execution_options(synchronize_session=False),
        )
        await self.db.execute(
            update(Entry)
            .where(Entry.user_id == user_id)
            .values(linked_entry_id=None)
            .execution_options(synchronize_session=False),
        )
        result = await self.db.execute(
            delete(Entry)
            .where(Entry.user_id == user_id)
            .execution_options(synchronize_session=False),
        )
        if commit:
            await self.db.commit()
        return result.rowcount or 0

    async def count_referencing(self, kind: CatalogKind, item_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(EntryCatalogRef)
            .where(
                EntryCatalogRef.kind == kind.value,
                EntryCatalogRef.item_id == item_id,
            ),
        )
        return result.scalar_one()

    async def count_linking_to(self, entry_id: EntryId) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Entry)
            .where(Entry.linked_entry_id == entry_id),
        )
        return result.scalar_one()
