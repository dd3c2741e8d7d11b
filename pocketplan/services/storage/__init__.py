"""
Storage Services Package

Provides the persistence interface and concrete implementations.
The ledger ships a JSON-file backend for on-device durability and an
in-memory backend for tests; hosts may supply their own.
"""

from pocketplan.services.storage.interface import (
    CorruptPayloadError,
    PersistenceAdapter,
    StorageError,
    StorageUnavailableError,
)
from pocketplan.services.storage.json_file import JsonFilePersistenceAdapter, key_to_filename
from pocketplan.services.storage.memory import InMemoryPersistenceAdapter

__all__ = [
    # Interface
    "PersistenceAdapter",
    # Exceptions
    "CorruptPayloadError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryPersistenceAdapter",
    "JsonFilePersistenceAdapter",
    "key_to_filename",
]
