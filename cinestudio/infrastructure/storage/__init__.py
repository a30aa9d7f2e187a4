"""History Storage Infrastructure"""

from .memory_history_store import InMemoryHistoryStore
from .sqlalchemy_history_store import SqlAlchemyHistoryStore

__all__ = ["InMemoryHistoryStore", "SqlAlchemyHistoryStore"]
