"""Entity store package."""

from pocketplan.store.entity_store import (
    EntityStore,
    LedgerNotReadyError,
    LoadState,
    StorageKeys,
)
from pocketplan.store.persist_queue import PersistQueue

__all__ = [
    "EntityStore",
    "LedgerNotReadyError",
    "LoadState",
    "PersistQueue",
    "StorageKeys",
]
