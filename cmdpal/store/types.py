"""
Snapshot, view and patch types for the palette store.

A Snapshot is never mutated: every write goes through merge_patch(), which
returns a new instance even when the patch changes nothing.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, TypedDict, Union, runtime_checkable

from ..exceptions import InvalidPatchError


class ViewType(str, Enum):
    """Screens the palette can show."""

    ROOT = "root"
    CATEGORY = "category"
    PORTAL = "portal"


@dataclass(frozen=True)
class View:
    """A navigable screen plus its selectors and the current query text."""

    type: ViewType = ViewType.ROOT
    portal_id: Optional[str] = None  # Set when type is PORTAL
    category_id: Optional[str] = None  # Set when type is CATEGORY
    query: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, ViewType):
            object.__setattr__(self, "type", ViewType(self.type))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "View":
        """Build a view from a plain mapping, e.g. {"type": "category", "category_id": "nav"}.

        Raises:
            InvalidPatchError: If the mapping has keys View does not have.
        """
        unknown = sorted(set(data) - VIEW_FIELDS)
        if unknown:
            raise InvalidPatchError(unknown, target="view")
        return cls(
            type=ViewType(data.get("type", ViewType.ROOT)),
            portal_id=data.get("portal_id"),
            category_id=data.get("category_id"),
            query=data.get("query"),
        )

    def with_query(self, query: str) -> "View":
        """Same view with different query text."""
        return dataclasses.replace(self, query=query)


VIEW_FIELDS = frozenset(f.name for f in dataclasses.fields(View))


@dataclass(frozen=True)
class Snapshot:
    """The complete store state at one instant."""

    open: bool = False
    active_id: Optional[str] = None
    loop: bool = False
    view: View = field(default_factory=lambda: View(ViewType.ROOT, query=""))
    history: tuple[View, ...] = ()  # Oldest first
    recent_commands: tuple[str, ...] = ()  # Most recent first
    last_navigation_was_back: Optional[bool] = None


class StatePatch(TypedDict, total=False):
    """Fields that may be set through set_state()."""

    open: bool
    active_id: Optional[str]
    loop: bool
    view: Union[View, Mapping[str, Any]]
    history: Union[tuple[View, ...], list[View]]
    recent_commands: Union[tuple[str, ...], list[str]]
    last_navigation_was_back: Optional[bool]


PATCHABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Snapshot))

Listener = Callable[[], None]


@runtime_checkable
class SupportsNotify(Protocol):
    """Objects that can be subscribed directly instead of a bare callback."""

    def notify(self) -> None:
        ...


def _coerce_view(value: Any) -> View:
    if isinstance(value, View):
        return value
    if isinstance(value, Mapping):
        return View.from_dict(value)
    raise TypeError(f"Expected a View or mapping, got {type(value).__name__}")


def merge_patch(snapshot: Snapshot, patch: Mapping[str, Any]) -> Snapshot:
    """Shallow-merge `patch` onto `snapshot`, returning a new Snapshot.

    Sequences are frozen to tuples so the result shares no mutable state
    with the caller's patch.

    Raises:
        InvalidPatchError: If the patch names a field Snapshot does not have.
    """
    unknown = sorted(set(patch) - PATCHABLE_FIELDS)
    if unknown:
        raise InvalidPatchError(unknown)

    changes = dict(patch)
    if "view" in changes:
        changes["view"] = _coerce_view(changes["view"])
    if "history" in changes:
        changes["history"] = tuple(_coerce_view(v) for v in changes["history"])
    if "recent_commands" in changes:
        changes["recent_commands"] = tuple(changes["recent_commands"])

    return dataclasses.replace(snapshot, **changes)
