"""Shared command helpers.

This module provides:
- open_store(): A store backed by the on-disk JSON storage
- run_async(): Drive a store coroutine from a synchronous Typer command
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, Optional, TypeVar

from cmdpal.config import get_storage_path, load_store_settings
from cmdpal.store import CommandStore, JsonFileStorage, Snapshot, create_store

T = TypeVar("T")


def open_store(initial: Optional[Snapshot] = None) -> CommandStore:
    """Create a store over the JSON storage file, configured from the environment.

    Raises:
        ConfigurationError: If a CMDPAL_* variable holds an invalid value.
    """
    return create_store(
        initial=initial,
        storage=JsonFileStorage(get_storage_path()),
        settings=load_store_settings(),
    )


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run `coro` to completion on a fresh event loop."""
    return asyncio.run(coro)
