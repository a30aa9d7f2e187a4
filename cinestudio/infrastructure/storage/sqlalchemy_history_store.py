"""SQLAlchemy History Store - Infrastructure Layer"""

import logging
from pathlib import Path
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime, LargeBinary, String, Text, delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ...domain.entity.generation import GenerationMode
from ...domain.entity.history import HistoryEntry
from ...domain.entity.image import AspectRatio, GeneratedImage
from ...domain.entity.style import StyleParameters
from ...domain.repository.history_store import HistoryStore, HistoryStoreError

logger = logging.getLogger(__name__)

Base = declarative_base()


class HistoryRecord(Base):
    __tablename__ = "history_entries"

    id = Column(String(64), primary_key=True)
    image_data = Column(LargeBinary, nullable=False)
    mime_type = Column(String(64), nullable=False, default="image/png")
    prompt = Column(Text, nullable=False)
    aspect_ratio = Column(String(8), nullable=False)
    mode = Column(String(16), nullable=False, default=GenerationMode.SINGLE.value)
    style = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, index=True)


def _to_record(entry: HistoryEntry) -> HistoryRecord:
    return HistoryRecord(
        id=entry.id,
        image_data=entry.image.data,
        mime_type=entry.image.mime_type,
        prompt=entry.prompt,
        aspect_ratio=entry.aspect_ratio.value,
        mode=entry.mode.value,
        style=entry.style.to_dict() if entry.style else None,
        created_at=entry.created_at,
    )


def _to_entry(record: HistoryRecord) -> HistoryEntry:
    return HistoryEntry(
        id=record.id,
        image=GeneratedImage(data=record.image_data, mime_type=record.mime_type),
        prompt=record.prompt,
        aspect_ratio=AspectRatio(record.aspect_ratio),
        mode=GenerationMode(record.mode),
        style=StyleParameters.from_dict(record.style) if record.style else None,
        created_at=record.created_at,
    )


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database"""
    prefix = "sqlite+aiosqlite:///"
    if not database_url.startswith(prefix):
        return
    path = database_url[len(prefix):]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


class SqlAlchemyHistoryStore(HistoryStore):
    """History store backed by SQLAlchemy's asyncio engine"""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlAlchemyHistoryStore":
        ensure_sqlite_directory(database_url)
        return cls(create_async_engine(database_url))

    async def initialize(self) -> None:
        """Create the table if needed"""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    async def append(self, entry: HistoryEntry) -> None:
        try:
            async with self._sessions() as session:
                session.add(_to_record(entry))
                await session.commit()
        except SQLAlchemyError as e:
            raise HistoryStoreError(f"Failed to save history entry {entry.id}: {e}") from e
        logger.info(f"Saved history entry {entry.id} ({entry.mode.value})")

    async def list(self, offset: int = 0, limit: int = 10) -> List[HistoryEntry]:
        if offset < 0 or limit < 0:
            raise ValueError("Offset and limit must be non-negative")
        stmt = (
            select(HistoryRecord)
            .order_by(desc(HistoryRecord.created_at), desc(HistoryRecord.id))
            .offset(offset)
            .limit(limit)
        )
        try:
            async with self._sessions() as session:
                result = await session.execute(stmt)
                return [_to_entry(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise HistoryStoreError(f"Failed to read history: {e}") from e

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        try:
            async with self._sessions() as session:
                record = await session.get(HistoryRecord, entry_id)
                return _to_entry(record) if record else None
        except SQLAlchemyError as e:
            raise HistoryStoreError(f"Failed to read history entry {entry_id}: {e}") from e

    async def delete(self, entry_id: str) -> None:
        try:
            async with self._sessions() as session:
                await session.execute(delete(HistoryRecord).where(HistoryRecord.id == entry_id))
                await session.commit()
        except SQLAlchemyError as e:
            raise HistoryStoreError(f"Failed to delete history entry {entry_id}: {e}") from e

    async def count(self) -> int:
        try:
            async with self._sessions() as session:
                result = await session.execute(select(func.count()).select_from(HistoryRecord))
                return result.scalar_one()
        except SQLAlchemyError as e:
            raise HistoryStoreError(f"Failed to count history: {e}") from e
