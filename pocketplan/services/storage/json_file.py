"""
JSON File Storage Implementation

DESIGN DECISION: Local files are the on-device durable store because:
1. The ledger is local-first - there is no server to write to
2. One file per key means a write only ever touches the slot that changed
3. Users can inspect or back up their data with ordinary tools

TRADEOFFS:
- No multi-key transactions (the store never needs them)
- Blocking file I/O is pushed to a worker thread so the event loop stays free

Writes go to a temporary file that is then renamed over the target, so a
crash mid-write leaves the previous value intact.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from pocketplan.config import get_settings
from pocketplan.services.storage.interface import (
    PersistenceAdapter,
    StorageError,
    StorageUnavailableError,
)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def key_to_filename(key: str) -> str:
    """
    Map a storage key to a safe file name.

    '@pocketplan_transactions' -> 'pocketplan_transactions.json'
    """
    name = _UNSAFE_CHARS.sub("", key)
    if not name:
        raise StorageError(f"Storage key has no usable characters: {key!r}")
    return f"{name}.json"


class JsonFilePersistenceAdapter(PersistenceAdapter):
    """
    File-backed persistence adapter.

    Each key is stored as its own file inside `directory`.
    """

    def __init__(
        self,
        directory: Optional[Path] = None,
        retry_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._directory = Path(directory) if directory is not None else settings.data_dir
        self._retry_attempts = retry_attempts or settings.write_retry_attempts

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / key_to_filename(key)

    def _ensure_directory(self) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create data directory {self._directory}: {e}"
            )

    def _read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}")

    def _write(self, key: str, value: str) -> None:
        self._ensure_directory()
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[str]:
        """Read a key's file; a missing file is an absent key."""
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        """Atomically replace a key's file, retrying transient OS errors."""
        try:
            await self._retrying(self._write, key, value)
        except StorageError:
            raise
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}")

    async def delete(self, key: str) -> None:
        """Remove a key's file."""
        try:
            await self._retrying(self._remove, key)
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}")

    async def _retrying(self, func, *args) -> None:
        @retry(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        async def attempt() -> None:
            await asyncio.to_thread(func, *args)

        await attempt()
