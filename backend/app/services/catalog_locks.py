"""Catalog Locks — per-user in-process serialization of catalog mutations.

Invariants:
    - At most one catalog read-modify-write per user runs at a time in this process
    - Locks for idle users are garbage collected (WeakValueDictionary)

Design Decisions:
    - Complements the version-conditioned UPDATE in CatalogStore: the lock removes
      in-process races, the version check catches races across processes
"""

import asyncio
import weakref


class CatalogLocks:
    """Registry of asyncio.Lock objects keyed by user id."""

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_user(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


catalog_locks = CatalogLocks()
