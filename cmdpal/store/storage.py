"""
Key-value storage backends for persisted palette data.

The store only needs an async get/set pair; anything implementing
KeyValueStorage can back it (browser storage bridge, database, file).
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..exceptions import StorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Async key-value service the persistence adapter talks to."""

    async def get(self, key: str) -> Any:
        """Value stored under `key`, or None when absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...


class MemoryStorage:
    """In-process storage, used for tests and ephemeral palettes."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.data: dict[str, Any] = dict(initial or {})
        self.fail_reads: Exception | None = None
        self.fail_writes: Exception | None = None

    async def get(self, key: str) -> Any:
        if self.fail_reads is not None:
            raise self.fail_reads
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        self.data[key] = value


class JsonFileStorage:
    """
    Storage backed by a single JSON object on disk.

    File I/O runs in a worker thread so the event loop driving the palette
    never blocks on the filesystem. Calls are serialised in arrival order,
    so overlapping writes resolve as last-call-wins, and each write replaces
    the file atomically.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StorageError("Storage file is not valid JSON", path=str(self.path)) from e
        except OSError as e:
            raise StorageError("Failed to read storage file", path=str(self.path)) from e
        if not isinstance(data, dict):
            raise StorageError("Storage file does not hold a JSON object", path=str(self.path))
        return data

    def _write_key(self, key: str, value: Any) -> None:
        try:
            data = self._read_all()
        except StorageError:
            logger.warning(f"Replacing unreadable storage file {self.path}")
            data = {}
        data[key] = value

        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(json.dumps(data, indent=2) + "\n")
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise StorageError("Failed to write storage file", path=str(self.path)) from e

    async def get(self, key: str) -> Any:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_key, key, value)
