"""Back-navigation history for the palette."""

from typing import Optional

from .types import Snapshot, StatePatch, View


class NavigationStack:
    """
    Push/pop discipline for the view history held in the snapshot.

    The stack keeps no state of its own: it turns the current snapshot into
    the single patch that performs a navigation, so each navigation costs
    exactly one notify pass.
    """

    def push(self, state: Snapshot, view: View) -> StatePatch:
        """Patch that shows `view` and remembers the current one for Back."""
        return {
            "view": view,
            "history": state.history + (state.view,),
            "last_navigation_was_back": False,
        }

    def pop(self, state: Snapshot) -> Optional[StatePatch]:
        """Patch that restores the previous view, or None if there is none."""
        if not state.history:
            return None
        return {
            "view": state.history[-1],
            "history": state.history[:-1],
            "last_navigation_was_back": True,
        }

    def can_go_back(self, state: Snapshot) -> bool:
        return bool(state.history)

    def depth(self, state: Snapshot) -> int:
        return len(state.history)
