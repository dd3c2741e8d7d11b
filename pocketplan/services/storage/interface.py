"""
Abstract Persistence Interface

DESIGN DECISION: The ledger only ever needs a scoped key-value store.
Keeping the interface this small allows us to:
1. Back it with files on-device, or with anything a host app already has
2. Use in-memory storage for testing
3. Keep the Entity Store decoupled from where bytes actually live

Values are opaque strings (the store JSON-encodes before calling set).
An absent key is a normal, expected state - get() returns None for it.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PersistenceAdapter(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods. Implementations
    raise StorageError subclasses on failure; they never return sentinel
    error values.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Full storage key, e.g. '@pocketplan_transactions'

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous value for the key.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a key. Deleting an absent key is not an error.

        Raises:
            StorageError: If the backend cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be reached or opened."""
    pass


class CorruptPayloadError(StorageError):
    """A stored value exists but cannot be decoded."""
    pass
