"""
Subscriber registry for the palette store.

Tracks listeners by handle, delivers change notifications, evicts listeners
that raise, and logs leak diagnostics when the subscriber count climbs to
the configured thresholds.
"""

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from ..config.constants import (
    SUBSCRIBER_ERROR_THRESHOLD,
    SUBSCRIBER_SHRINK_LOG_SIZES,
    SUBSCRIBER_WARNING_THRESHOLD,
)
from .types import Listener, SupportsNotify

logger = logging.getLogger(__name__)


@dataclass
class SubscriberRecord:
    """Bookkeeping for one registered listener."""

    handle: int
    callback: Listener
    mounted_at: float
    last_active: float


def _as_listener(subscriber: Union[Listener, SupportsNotify]) -> Listener:
    if callable(subscriber):
        return subscriber
    if isinstance(subscriber, SupportsNotify):
        return subscriber.notify
    raise TypeError(
        f"Subscriber must be callable or expose notify(), got {type(subscriber).__name__}"
    )


class SubscriptionRegistry:
    """Registry of store listeners keyed by a never-reused handle."""

    def __init__(
        self,
        warning_threshold: int = SUBSCRIBER_WARNING_THRESHOLD,
        critical_threshold: int = SUBSCRIBER_ERROR_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ):
        self._records: dict[int, SubscriberRecord] = {}
        self._handles = itertools.count()
        self._warning_threshold = warning_threshold
        self._critical_threshold = critical_threshold
        self._clock = clock

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, handle: object) -> bool:
        return handle in self._records

    def get(self, handle: int) -> SubscriberRecord | None:
        """Record for `handle`, or None once it has been removed."""
        return self._records.get(handle)

    @property
    def handles(self) -> list[int]:
        """Handles currently registered, in delivery order."""
        return list(self._records)

    def subscribe(self, subscriber: Union[Listener, SupportsNotify]) -> Callable[[], None]:
        """
        Register a listener and return a function that removes it.

        The returned function is idempotent: calling it again after the
        listener is gone (including after eviction) does nothing.
        """
        callback = _as_listener(subscriber)
        handle = next(self._handles)
        now = self._clock()
        self._records[handle] = SubscriberRecord(
            handle=handle, callback=callback, mounted_at=now, last_active=now
        )

        count = len(self._records)
        if count == self._critical_threshold:
            logger.error(
                f"{count} listeners subscribed to the store; "
                "a component is almost certainly not unsubscribing on unmount"
            )
        elif count == self._warning_threshold:
            logger.warning(
                f"{count} listeners subscribed to the store; check for missing unsubscribe calls"
            )

        def unsubscribe() -> None:
            self.unsubscribe(handle)

        return unsubscribe

    def unsubscribe(self, handle: int) -> bool:
        """Remove a listener. Returns True if it was still registered."""
        previous_size = len(self._records)
        if self._records.pop(handle, None) is None:
            logger.debug(f"Listener {handle} already removed")
            return False

        if previous_size in SUBSCRIBER_SHRINK_LOG_SIZES:
            logger.info(f"Now {previous_size - 1} listeners subscribed to the store")
        return True

    def notify(self) -> int:
        """
        Deliver one change notification to every listener.

        Listeners are visited from a copy of the registry taken at the start
        of the pass, so callbacks may subscribe, unsubscribe or write state
        without disturbing it. A listener removed earlier in the same pass is
        skipped. Listeners that raise are evicted only after the pass ends.

        Returns:
            Number of listeners that were invoked.
        """
        now = self._clock()
        failed: list[int] = []
        delivered = 0

        for handle, record in list(self._records.items()):
            if handle not in self._records:
                continue
            record.last_active = now
            delivered += 1
            try:
                record.callback()
            except Exception:
                logger.exception(f"Store listener {handle} raised during notify")
                failed.append(handle)

        for handle in failed:
            if self._records.pop(handle, None) is not None:
                logger.warning(f"Removed broken listener {handle}")

        return delivered

    def clear(self) -> int:
        """Drop every listener at once. Returns how many were removed."""
        count = len(self._records)
        self._records.clear()
        return count
