"""
In-Memory Storage Implementation

Holds values in a dict for the lifetime of the process. Used by tests and
by hosts that want a ledger without durability.
"""

from typing import Optional

from pocketplan.services.storage.interface import PersistenceAdapter


class InMemoryPersistenceAdapter(PersistenceAdapter):
    """Dict-backed persistence adapter."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    @property
    def data(self) -> dict[str, str]:
        """A copy of everything currently stored."""
        return dict(self._data)

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
