"""Manage History Use Case - Application Layer"""

import logging
from typing import List

from ...domain.entity.history import HistoryEntry
from ...domain.repository.history_store import HistoryStore

logger = logging.getLogger(__name__)


class HistoryFeed:
    """Paginated, optimistically updated view over the history store

    ``entries`` is what a gallery renders: a growing window of the most
    recent results. The store remains the source of truth.
    """

    def __init__(self, store: HistoryStore, page_size: int = 10):
        if page_size <= 0:
            raise ValueError("Page size must be positive")
        self._store = store
        self._page_size = page_size
        self._entries: List[HistoryEntry] = []
        # Number of store rows already covered by the window
        self._offset = 0
        self._total = None

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def has_more(self) -> bool:
        if self._total is None:
            return True
        return self._offset < self._total

    async def refresh(self) -> List[HistoryEntry]:
        """Drop the window and load the first page again"""
        self._entries = []
        self._offset = 0
        self._total = None
        return await self.load_more()

    async def load_more(self) -> List[HistoryEntry]:
        """Load the next page and append it to the window

        Returns:
            Entries added by this call
        """
        page = await self._store.list(self._offset, self._page_size)
        self._total = await self._store.count()
        known = {entry.id for entry in self._entries}
        added = [entry for entry in page if entry.id not in known]
        self._entries.extend(added)
        self._offset += len(page)
        return added

    async def record(self, entry: HistoryEntry) -> None:
        """Show a new entry immediately and persist it

        Persistence failures are logged; the entry stays in the window.
        """
        self._entries.insert(0, entry)
        try:
            await self._store.append(entry)
        except Exception as e:
            logger.warning(f"Failed to persist history entry {entry.id}: {e}")
            return
        self._offset += 1
        if self._total is not None:
            self._total += 1

    async def remove(self, entry_id: str) -> None:
        """Delete an entry from the store and the window"""
        stored = await self._store.get(entry_id)
        await self._store.delete(entry_id)
        visible = any(entry.id == entry_id for entry in self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        if stored is not None:
            if visible:
                self._offset = max(0, self._offset - 1)
            if self._total is not None:
                self._total = max(0, self._total - 1)
