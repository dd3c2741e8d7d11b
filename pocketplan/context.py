"""
Finance Context

This module ties the ledger components together. A host application
creates ONE FinanceContext per process and passes it to whatever needs
ledger state, instead of reaching for a global.

Components:
- store:       EntityStore (mutations, current snapshot)
- queries:     LedgerQueries (monthly totals, budgets, goals, insurance)
- projections: ProjectionEngine (mortgage, retirement, wealth)
- validator:   LedgerValidator (checks to run before mutating)
- change_log:  ChangeLogger (structured log of every change)
"""

from pathlib import Path
from typing import Optional

from pocketplan.audit import ChangeLogger, configure_logging
from pocketplan.config import get_settings
from pocketplan.projections import ProjectionEngine
from pocketplan.queries import LedgerQueries
from pocketplan.services.storage import JsonFilePersistenceAdapter, PersistenceAdapter
from pocketplan.store import EntityStore
from pocketplan.utils.clock import Clock, SystemClock
from pocketplan.validation import LedgerValidator


class FinanceContext:
    """Everything a screen needs, wired to one store."""

    def __init__(
        self,
        store: EntityStore,
        change_log: Optional[ChangeLogger] = None,
    ):
        self.store = store
        self.queries = LedgerQueries(store)
        self.projections = ProjectionEngine(store)
        self.validator = LedgerValidator(store)
        self.change_log = change_log

    @property
    def is_ready(self) -> bool:
        return self.store.is_ready

    async def close(self) -> None:
        """Wait for pending writes and stop logging changes."""
        await self.store.flush()
        if self.change_log is not None:
            self.change_log.detach()


async def open_finance_context(
    adapter: Optional[PersistenceAdapter] = None,
    clock: Optional[Clock] = None,
    data_dir: Optional[Path] = None,
    log_changes: bool = True,
) -> FinanceContext:
    """
    Factory function to create and load all ledger components.

    Args:
        adapter: Persistence backend. Defaults to JSON files in
                 StorageSettings.data_dir (or `data_dir` if given).
        clock: Source of "now". Defaults to the system clock.
        log_changes: Attach a ChangeLogger before loading so the load
                     itself is logged.

    Returns:
        A FinanceContext whose store is READY.
    """
    configure_logging()

    settings = get_settings()
    adapter = adapter or JsonFilePersistenceAdapter(directory=data_dir)
    store = EntityStore(
        adapter,
        clock=clock or SystemClock(),
        key_prefix=settings.storage.key_prefix,
    )

    change_log = None
    if log_changes:
        change_log = ChangeLogger()
        change_log.attach(store)

    await store.load()
    return FinanceContext(store, change_log=change_log)
