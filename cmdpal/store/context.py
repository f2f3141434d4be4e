"""
Explicit store hand-off for palette components.

Components never look a store up globally. The host creates one store per
palette and passes it down, either directly or wrapped in a StoreContext;
a component that receives nothing fails immediately with a message naming
the component.
"""

from typing import TYPE_CHECKING, Optional

from ..exceptions import StoreNotProvidedError

if TYPE_CHECKING:
    from .store import CommandStore


def require_store(store: Optional["CommandStore"], consumer: str = "component") -> "CommandStore":
    """Return `store`, or raise StoreNotProvidedError naming `consumer`."""
    if store is None:
        raise StoreNotProvidedError(consumer)
    return store


class StoreContext:
    """Carries one palette's store through the component tree."""

    def __init__(self, store: Optional["CommandStore"] = None):
        self._store = store

    @property
    def provided(self) -> bool:
        return self._store is not None

    def provide(self, store: "CommandStore") -> None:
        """Attach the palette's store. A context serves exactly one store."""
        if self._store is not None and self._store is not store:
            raise RuntimeError("StoreContext already holds a different store")
        self._store = store

    def require(self, consumer: str = "component") -> "CommandStore":
        """The provided store; raises StoreNotProvidedError if there is none."""
        return require_store(self._store, consumer)
