"""
Shared fixtures.

Time is pinned to 2025-03-15 12:00 local so month windows and day counts
are deterministic.
"""

import asyncio
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio

from pocketplan.services.storage import InMemoryPersistenceAdapter, StorageError
from pocketplan.store import EntityStore
from pocketplan.utils.clock import FixedClock


PREFIX = "@pocketplan"
NOW = datetime(2025, 3, 15, 12, 0, 0)


def key(slot: str) -> str:
    return f"{PREFIX}_{slot}"


class FailingAdapter(InMemoryPersistenceAdapter):
    """In-memory adapter whose reads and/or writes fail for chosen keys."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        fail_get: tuple[str, ...] = (),
        fail_set: bool = False,
    ):
        super().__init__(initial)
        self.fail_get = set(fail_get)
        self.fail_set = fail_set

    async def get(self, key: str):
        if key in self.fail_get:
            raise StorageError(f"read failed for {key}")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise StorageError("disk full")
        await super().set(key, value)


class SlowFirstWriteAdapter(InMemoryPersistenceAdapter):
    """The first write takes longer than every later one."""

    def __init__(self):
        super().__init__()
        self.writes = 0
        self.completed: list[str] = []

    async def set(self, key: str, value: str) -> None:
        self.writes += 1
        await asyncio.sleep(0.05 if self.writes == 1 else 0)
        await super().set(key, value)
        self.completed.append(value)


class CountingAdapter(InMemoryPersistenceAdapter):
    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.get_calls = 0

    async def get(self, key: str):
        self.get_calls += 1
        await asyncio.sleep(0)
        return await super().get(key)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def adapter() -> InMemoryPersistenceAdapter:
    return InMemoryPersistenceAdapter()


@pytest_asyncio.fixture
async def store(adapter, clock) -> EntityStore:
    store = await EntityStore.open(adapter, clock=clock, key_prefix=PREFIX)
    yield store
    await store.flush()
