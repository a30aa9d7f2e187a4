"""In-Memory History Store - Infrastructure Layer"""

from typing import Dict, List, Optional

from ...domain.entity.history import HistoryEntry
from ...domain.repository.history_store import HistoryStore, HistoryStoreError


class InMemoryHistoryStore(HistoryStore):
    """History store that lives only as long as the process"""

    def __init__(self):
        self._entries: Dict[str, HistoryEntry] = {}

    async def append(self, entry: HistoryEntry) -> None:
        if entry.id in self._entries:
            raise HistoryStoreError(f"History entry {entry.id} already exists")
        self._entries[entry.id] = entry

    async def list(self, offset: int = 0, limit: int = 10) -> List[HistoryEntry]:
        if offset < 0 or limit < 0:
            raise ValueError("Offset and limit must be non-negative")
        ordered = sorted(
            self._entries.values(),
            key=lambda e: (e.created_at, e.id),
            reverse=True,
        )
        return ordered[offset:offset + limit]

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return self._entries.get(entry_id)

    async def delete(self, entry_id: str) -> None:
        self._entries.pop(entry_id, None)

    async def count(self) -> int:
        return len(self._entries)
