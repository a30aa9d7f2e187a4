from unittest.mock import AsyncMock

import pytest

from cinestudio.application.usecase.manage_history import HistoryFeed
from cinestudio.infrastructure.storage.memory_history_store import InMemoryHistoryStore


async def seeded_store(entry_factory, count):
    store = InMemoryHistoryStore()
    for i in range(count):
        await store.append(entry_factory(i))
    return store


@pytest.mark.asyncio
async def test_load_more_grows_window(entry_factory):
    store = await seeded_store(entry_factory, 25)
    feed = HistoryFeed(store, page_size=10)

    assert len(await feed.load_more()) == 10
    assert feed.has_more
    assert len(await feed.load_more()) == 10
    assert len(await feed.load_more()) == 5

    assert not feed.has_more
    assert [e.id for e in feed.entries][:2] == ["entry-24", "entry-23"]
    assert len(feed.entries) == 25


@pytest.mark.asyncio
async def test_record_shows_entry_first_and_persists(entry_factory):
    store = await seeded_store(entry_factory, 3)
    feed = HistoryFeed(store, page_size=10)
    await feed.load_more()

    newest = entry_factory(99)
    await feed.record(newest)

    assert feed.entries[0].id == newest.id
    assert await store.get(newest.id) == newest
    assert await feed.load_more() == []
    assert not feed.has_more


@pytest.mark.asyncio
async def test_record_keeps_entry_when_persistence_fails(entry_factory):
    store = InMemoryHistoryStore()
    store.append = AsyncMock(side_effect=RuntimeError("quota exceeded"))
    feed = HistoryFeed(store)

    await feed.record(entry_factory(1))

    assert [e.id for e in feed.entries] == ["entry-1"]
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_remove_reconciles_window_and_paging(entry_factory):
    store = await seeded_store(entry_factory, 12)
    feed = HistoryFeed(store, page_size=5)
    await feed.load_more()

    await feed.remove("entry-11")
    await feed.remove("entry-11")
    added = await feed.load_more()

    assert "entry-11" not in [e.id for e in feed.entries]
    assert [e.id for e in added] == ["entry-6", "entry-5", "entry-4", "entry-3", "entry-2"]
    assert await store.count() == 11


@pytest.mark.asyncio
async def test_refresh_reloads_first_page(entry_factory):
    store = await seeded_store(entry_factory, 15)
    feed = HistoryFeed(store, page_size=10)
    await feed.load_more()
    await feed.load_more()

    await feed.refresh()

    assert len(feed.entries) == 10
    assert feed.has_more


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        HistoryFeed(InMemoryHistoryStore(), page_size=0)
