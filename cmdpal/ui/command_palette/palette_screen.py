"""
Command Palette Screen - keyboard-driven modal overlay.

The screen is a thin consumer of the palette store: it subscribes when
mounted, re-renders from the snapshot on every change, and unsubscribes
when unmounted. All writes go through the PalettePresenter.
"""

import logging
from typing import Optional

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static

from ...config.constants import DEFAULT_PLACEHOLDER
from ...store import StoreContext, ViewType
from .palette_commands import CommandKind, CommandRegistry, PaletteCommand
from .palette_presenter import PalettePresenter, Scorer

logger = logging.getLogger(__name__)

KIND_HINTS = {
    CommandKind.ACTION: "",
    CommandKind.PORTAL: "→",
    CommandKind.CATEGORY: "▸",
}


class CommandPaletteScreen(ModalScreen):
    """Command palette modal overlay."""

    CSS = """
    CommandPaletteScreen {
        align: center top;
        padding-top: 5;
    }

    #palette-container {
        width: 80;
        height: auto;
        max-height: 30;
        background: $surface;
        border: solid $primary;
    }

    #palette-title {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    #palette-input {
        width: 100%;
        height: 3;
        border: none;
        border-bottom: solid $primary-darken-1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    #palette-results {
        height: auto;
        max-height: 20;
        min-height: 5;
        padding: 0 1;
    }

    #palette-hints {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "escape", "Cancel", show=False, priority=True),
        Binding("enter", "select", "Select", show=False, priority=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("ctrl+p", "cursor_up", "Up", show=False),
        Binding("ctrl+n", "cursor_down", "Down", show=False),
        Binding("home", "cursor_first", "First", show=False, priority=True),
        Binding("end", "cursor_last", "Last", show=False, priority=True),
        Binding("alt+left", "back", "Back", show=False),
    ]

    def __init__(
        self,
        context: StoreContext,
        registry: CommandRegistry,
        scorer: Optional[Scorer] = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.store = context.require("CommandPaletteScreen")
        self.presenter = PalettePresenter(
            self.store, registry, scorer=scorer, on_close=self._on_palette_closed
        )
        self.placeholder = placeholder
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        with Vertical(id="palette-container"):
            yield Static("", id="palette-title")
            yield Input(placeholder=self.placeholder, id="palette-input")
            yield Static("", id="palette-results")
            yield Static(
                "↑↓ Navigate │ Enter Select │ Esc Clear/Close │ Alt+← Back",
                id="palette-hints",
            )

    def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_store_change)
        self.presenter.open()
        self.query_one("#palette-input", Input).focus()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # --- Rendering ---

    def _on_store_change(self) -> None:
        if self.is_attached:
            self._render_snapshot()

    def _listed_commands(self) -> list[PaletteCommand]:
        """What the results area shows: recent commands lead an empty root view."""
        view = self.store.get_state().view
        commands = self.presenter.visible_commands()
        if not view.query and view.type == ViewType.ROOT:
            recent = self.presenter.recent_commands()
            recent_ids = {cmd.id for cmd in recent}
            commands = recent + [cmd for cmd in commands if cmd.id not in recent_ids]
        return commands

    def _visible_ids(self) -> list[str]:
        return [cmd.id for cmd in self._listed_commands()]

    def _render_snapshot(self) -> None:
        state = self.store.get_state()
        view = state.view

        input_widget = self.query_one("#palette-input", Input)
        query = view.query or ""
        if input_widget.value != query:
            input_widget.value = query

        title = self.query_one("#palette-title", Static)
        if view.type == ViewType.ROOT:
            title.update("")
            input_widget.placeholder = self.placeholder
        else:
            target = self.presenter.registry.get(view.portal_id or view.category_id or "")
            name = target.name if target else (view.portal_id or view.category_id or "")
            title.update(f"← {escape(name)}")
            if target and target.search_placeholder:
                input_widget.placeholder = target.search_placeholder

        self.query_one("#palette-results", Static).update(
            self._format_results(self._listed_commands(), state.active_id, view.type)
        )

    def _format_results(
        self, commands: list[PaletteCommand], active_id: Optional[str], view_type: ViewType
    ) -> str:
        if not commands:
            if view_type == ViewType.PORTAL:
                return "[dim]Nothing to show here yet[/dim]"
            return "[dim]No results found[/dim]"

        lines = []
        for cmd in commands:
            marker = "›" if cmd.id == active_id else " "
            hint = KIND_HINTS[cmd.kind]
            line = f"{marker} {cmd.icon} {escape(cmd.name)} {hint}  [dim]{escape(cmd.description)}[/dim]"
            if cmd.id == active_id:
                line = f"[reverse]{line}[/reverse]"
            lines.append(line)
        return "\n".join(lines)

    # --- Input ---

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "palette-input":
            return
        # Value changes pushed by _render_snapshot are already in the store
        if event.value == (self.store.get_state().view.query or ""):
            return
        self.presenter.set_query(event.value)

    def action_cursor_up(self) -> None:
        self.presenter.move_active(-1, self._visible_ids())

    def action_cursor_down(self) -> None:
        self.presenter.move_active(1, self._visible_ids())

    def action_cursor_first(self) -> None:
        self.presenter.first(self._visible_ids())

    def action_cursor_last(self) -> None:
        self.presenter.last(self._visible_ids())

    def action_escape(self) -> None:
        self.presenter.escape()

    def action_back(self) -> None:
        self.presenter.back()

    async def action_select(self) -> None:
        """Execute the highlighted command, or the first one if none is."""
        ids = self._visible_ids()
        if not ids:
            return
        active_id = self.store.get_state().active_id
        command_id = active_id if active_id in ids else ids[0]
        try:
            await self.presenter.execute(command_id)
        except Exception as e:
            # Palette stays open so the user can pick something else
            logger.exception(f"Command {command_id} failed")
            self.notify(f"Command failed: {e}", severity="error")

    def _on_palette_closed(self) -> None:
        if self.is_attached and self.app.screen is self:
            self.dismiss()


class PaletteApp(App):
    """Minimal host application for the command palette."""

    TITLE = "cmdpal"

    BINDINGS = [
        Binding("ctrl+k", "toggle_palette", "Palette", priority=True),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        context: StoreContext,
        registry: CommandRegistry,
        scorer: Optional[Scorer] = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
        open_on_start: bool = True,
    ):
        super().__init__()
        self.context = context
        self.store = context.require("PaletteApp")
        self.registry = registry
        self.scorer = scorer
        self.placeholder = placeholder
        self.open_on_start = open_on_start

    def compose(self) -> ComposeResult:
        yield Static("Press Ctrl+K to open the command palette, Ctrl+Q to quit.", id="home")

    def on_mount(self) -> None:
        self.store.start_init()
        if self.open_on_start:
            self.action_toggle_palette()

    async def on_unmount(self) -> None:
        await self.store.flush()

    def action_toggle_palette(self) -> None:
        if isinstance(self.screen, CommandPaletteScreen):
            self.screen.presenter.close()
            return
        self.push_screen(
            CommandPaletteScreen(
                self.context, self.registry, scorer=self.scorer, placeholder=self.placeholder
            )
        )
