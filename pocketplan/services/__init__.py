"""Services package."""

from pocketplan.services.storage import (
    CorruptPayloadError,
    InMemoryPersistenceAdapter,
    JsonFilePersistenceAdapter,
    PersistenceAdapter,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Storage services
    "CorruptPayloadError",
    "InMemoryPersistenceAdapter",
    "JsonFilePersistenceAdapter",
    "PersistenceAdapter",
    "StorageError",
    "StorageUnavailableError",
]
