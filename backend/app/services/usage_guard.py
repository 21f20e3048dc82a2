"""Usage Guard — is a catalog item referenced by any journal entry."""

import logging

from app.core.domain_types import CatalogKind
from app.core.repository_protocols import EntryRepository

logger = logging.getLogger(__name__)


class UsageGuard:
    """Point-in-time usage check against the entry references."""

    def __init__(self, entries: EntryRepository):
        self.entries = entries

    async def is_in_use(self, kind: CatalogKind, item_id: str) -> bool:
        count = await self.entries.count_referencing(kind, item_id)
        logger.debug(
            f"{kind.value} '{item_id}' referenced by {count} entries",
            extra={"kind": kind.value},
        )
        return count > 0
