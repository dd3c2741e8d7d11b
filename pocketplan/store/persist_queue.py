"""
Per-key persistence queue.

Mutations are synchronous and durability is fire-and-forget, so several
writes for the same key can be in flight at once. Each write waits for the
previous write to the same key before it starts; writes to different keys
run concurrently. A later snapshot is therefore never overwritten by an
earlier one that happened to finish last.

Failures are logged and swallowed. Durability is best-effort, not
transactional: the in-memory state stays authoritative for the session.
"""

import asyncio
from functools import partial
from typing import Optional

import structlog

from pocketplan.services.storage import PersistenceAdapter


class PersistQueue:
    """Serializes writes per storage key."""

    def __init__(self, adapter: PersistenceAdapter):
        self._adapter = adapter
        self._tails: dict[str, asyncio.Task] = {}
        self._logger = structlog.get_logger(__name__)
        self.failures = 0

    @property
    def pending_keys(self) -> list[str]:
        return [key for key, task in self._tails.items() if not task.done()]

    def submit_set(self, key: str, value: str) -> Optional[asyncio.Task]:
        return self._submit(key, value)

    def submit_delete(self, key: str) -> Optional[asyncio.Task]:
        return self._submit(key, None)

    def _submit(self, key: str, value: Optional[str]) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Mutating outside an event loop: nothing can be scheduled.
            self.failures += 1
            self._logger.error(
                "persist_failed",
                key=key,
                operation="delete" if value is None else "set",
                error="no running event loop",
            )
            return None

        previous = self._tails.get(key)
        task = loop.create_task(self._write(key, value, previous))
        self._tails[key] = task
        task.add_done_callback(partial(self._release, key))
        return task

    async def _write(
        self,
        key: str,
        value: Optional[str],
        previous: Optional[asyncio.Task],
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})

        operation = "delete" if value is None else "set"
        try:
            if value is None:
                await self._adapter.delete(key)
            else:
                await self._adapter.set(key, value)
        except Exception as e:
            self.failures += 1
            self._logger.error(
                "persist_failed",
                key=key,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            self._logger.debug("persisted", key=key, operation=operation)

    def _release(self, key: str, task: asyncio.Task) -> None:
        if self._tails.get(key) is task:
            del self._tails[key]

    async def drain(self) -> None:
        """Wait until every write submitted so far has finished."""
        while True:
            pending = [task for task in self._tails.values() if not task.done()]
            if not pending:
                return
            await asyncio.wait(pending)
