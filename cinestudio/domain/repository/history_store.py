"""History Store Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entity.history import HistoryEntry


class HistoryStoreError(Exception):
    """Persistence medium failure"""
    pass


class HistoryStore(ABC):
    """Durable log of generated results

    The store is the source of truth; any list held by a UI is a cache.
    """

    @abstractmethod
    async def append(self, entry: HistoryEntry) -> None:
        """Persist a new entry

        Raises:
            HistoryStoreError: The entry could not be written
        """
        pass

    @abstractmethod
    async def list(self, offset: int = 0, limit: int = 10) -> List[HistoryEntry]:
        """Return a page of entries, most recent first

        Args:
            offset: Number of entries to skip
            limit: Maximum page size

        Returns:
            Entries ordered by descending creation time
        """
        pass

    @abstractmethod
    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        """Fetch one entry or None"""
        pass

    @abstractmethod
    async def delete(self, entry_id: str) -> None:
        """Remove an entry; unknown ids are ignored"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored entries"""
        pass
