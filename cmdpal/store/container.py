"""Holder of the current snapshot."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .types import Snapshot, merge_patch

logger = logging.getLogger(__name__)


class StateContainer:
    """
    Owns the live Snapshot and replaces it on every write.

    There is no diffing: every set() triggers `on_change` exactly once, even
    when the patch leaves every field as it was.
    """

    def __init__(self, initial: Snapshot, on_change: Callable[[], None]):
        self._state = initial
        self._on_change = on_change
        self._writes = 0

    def get(self) -> Snapshot:
        """Current snapshot, by reference. Callers must treat it as read-only."""
        return self._state

    def set(self, patch: Mapping[str, Any]) -> Snapshot:
        """Merge `patch` into a new snapshot, make it current, then notify."""
        self._state = merge_patch(self._state, patch)
        self._writes += 1
        logger.debug(f"State changed: {sorted(patch)}")
        self._on_change()
        return self._state

    @property
    def write_count(self) -> int:
        """Number of writes applied since construction."""
        return self._writes
