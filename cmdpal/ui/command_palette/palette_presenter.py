"""
Presenter for the command palette.

Translates user intent (typing, arrow keys, selecting a command) into store
writes, and derives what the palette should list from the current snapshot.
The presenter keeps no state of its own: everything lives in the store.
"""

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Optional

from ...config.constants import MAX_FILTER_RESULTS, MIN_SCORE_THRESHOLD
from ...store import CommandStore, View, ViewType, require_store
from .palette_commands import CommandKind, CommandRegistry, PaletteCommand

logger = logging.getLogger(__name__)

# scorer(query, text) -> relevance in [0, 1]
Scorer = Callable[[str, str], float]


class PalettePresenter:
    """
    Handles command palette business logic.

    Views:
    - root → every registered command, filtered by the query
    - category → the commands of one category
    - portal → nothing; the portal's owner renders its own contents
    """

    def __init__(
        self,
        store: Optional[CommandStore],
        registry: CommandRegistry,
        scorer: Optional[Scorer] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.store = require_store(store, "PalettePresenter")
        self.registry = registry
        self.scorer = scorer
        self.on_close = on_close

    # --- Visibility ---

    def open(self) -> None:
        self.store.set_state({"open": True})

    def close(self) -> None:
        """Hide the palette and forget the highlighted item."""
        self.store.set_state({"open": False, "active_id": None})
        if self.on_close:
            self.on_close()

    def toggle(self) -> None:
        if self.store.get_state().open:
            self.close()
        else:
            self.open()

    # --- Query ---

    def set_query(self, text: str) -> None:
        """Replace the current view's query text."""
        state = self.store.get_state()
        self.store.set_state(
            {"view": state.view.with_query(text), "last_navigation_was_back": False}
        )

    def escape(self) -> None:
        """Clear a non-empty query; close the palette when it is already empty."""
        if self.store.get_state().view.query:
            self.set_query("")
        else:
            self.close()

    # --- Derived lists ---

    def visible_commands(self) -> list[PaletteCommand]:
        """Commands the current view lists, best match first."""
        view = self.store.get_state().view

        if view.type == ViewType.CATEGORY:
            commands = self.registry.commands_in_category(view.category_id or "")
        elif view.type == ViewType.PORTAL:
            return []
        else:
            commands = self.registry.get_all()

        return self._filter(commands, (view.query or "").strip())

    def _filter(self, commands: list[PaletteCommand], query: str) -> list[PaletteCommand]:
        if not query or self.scorer is None:
            return commands

        scored = []
        for cmd in commands:
            score = max(self.scorer(query, text) for text in [cmd.name, *cmd.keywords])
            if score >= MIN_SCORE_THRESHOLD:
                scored.append((score, cmd))

        # sort is stable, so ties keep registration order
        scored.sort(key=lambda x: -x[0])
        return [cmd for _, cmd in scored[:MAX_FILTER_RESULTS]]

    def recent_commands(self) -> list[PaletteCommand]:
        """Registered commands for the recent ids; ids no longer registered are skipped."""
        commands = []
        for command_id in self.store.get_state().recent_commands:
            cmd = self.registry.get(command_id)
            if cmd is not None:
                commands.append(cmd)
        return commands

    # --- Keyboard selection ---

    def move_active(self, delta: int, item_ids: Sequence[str]) -> Optional[str]:
        """
        Move the highlight by `delta` within `item_ids`.

        Wraps around when the snapshot's `loop` flag is set, otherwise stops
        at either end. Nothing is highlighted yet → down selects the first
        item, up selects the last.

        Returns:
            The newly active id, or None when there is nothing to select.
        """
        if not item_ids:
            return None

        state = self.store.get_state()
        count = len(item_ids)
        if state.active_id in item_ids:
            index = list(item_ids).index(state.active_id) + delta
        else:
            index = 0 if delta > 0 else count - 1

        if state.loop:
            index %= count
        else:
            index = max(0, min(index, count - 1))

        return self._activate(item_ids[index])

    def first(self, item_ids: Sequence[str]) -> Optional[str]:
        return self._activate(item_ids[0]) if item_ids else None

    def last(self, item_ids: Sequence[str]) -> Optional[str]:
        return self._activate(item_ids[-1]) if item_ids else None

    def _activate(self, command_id: str) -> str:
        if self.store.get_state().active_id != command_id:
            self.store.set_state({"active_id": command_id})
        return command_id

    # --- Dispatch ---

    async def execute(self, command_id: str) -> PaletteCommand:
        """
        Run the command behind `command_id`.

        Raises:
            CommandNotFoundError: If no command is registered under that id.
        """
        cmd = self.registry.require(command_id)
        logger.info(f"Executing command: {cmd.id}")

        if cmd.kind == CommandKind.ACTION:
            if cmd.on_execute is not None:
                result = cmd.on_execute()
                if inspect.isawaitable(result):
                    await result
            await self.store.add_recent_command(cmd.id)
            self.close()
        elif cmd.kind == CommandKind.PORTAL:
            self.store.navigate(View(ViewType.PORTAL, portal_id=cmd.id, query=""))
            await self.store.add_recent_command(cmd.id)
        else:
            # a category command's id names the category it opens
            self.store.navigate(View(ViewType.CATEGORY, category_id=cmd.id, query=""))

        return cmd

    def back(self) -> bool:
        return self.store.go_back()
