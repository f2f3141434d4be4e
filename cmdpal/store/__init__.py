"""
Palette state store.

Provides:
- CommandStore / create_store: the facade UI components talk to
- Snapshot, View, ViewType, StatePatch: the state model
- StoreContext / require_store: explicit store hand-off
- KeyValueStorage, MemoryStorage, JsonFileStorage: persistence backends
"""

from .context import StoreContext, require_store
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .store import CommandStore, create_store
from .types import Snapshot, StatePatch, View, ViewType, merge_patch

__all__ = [
    "CommandStore",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Snapshot",
    "StatePatch",
    "StoreContext",
    "View",
    "ViewType",
    "create_store",
    "merge_patch",
    "require_store",
]
