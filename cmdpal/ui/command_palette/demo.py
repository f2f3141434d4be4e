"""Sample commands and a difflib scorer for `cmdpal palette`."""

import logging
from difflib import SequenceMatcher

from .palette_commands import Category, CommandKind, CommandRegistry, PaletteCommand

logger = logging.getLogger(__name__)


def similarity(query: str, text: str) -> float:
    """Fuzzy relevance of `text` for `query`, boosted for substring hits."""
    query_lower = query.lower()
    text_lower = text.lower()
    score = SequenceMatcher(None, query_lower, text_lower).ratio()
    if query_lower in text_lower:
        score += 0.5
    return min(score, 1.0)


def build_demo_registry() -> CommandRegistry:
    """A handful of commands covering every command kind."""
    registry = CommandRegistry()

    def log_action(name: str):
        def run() -> None:
            logger.info(f"Demo action ran: {name}")

        return run

    registry.register_category(
        Category(
            id="navigation",
            name="Navigation",
            icon="🧭",
            description="Move between places",
            command_ids=["go-home", "go-settings"],
        )
    )

    for cmd in [
        PaletteCommand(
            id="navigation",
            name="Navigation",
            description="Browse navigation commands",
            icon="🧭",
            kind=CommandKind.CATEGORY,
        ),
        PaletteCommand(
            id="go-home",
            name="Go Home",
            description="Return to the start page",
            icon="🏠",
            keywords=["start", "main"],
            category="navigation",
            on_execute=log_action("go-home"),
        ),
        PaletteCommand(
            id="go-settings",
            name="Open Settings",
            description="Edit preferences",
            icon="⚙",
            keywords=["preferences", "config"],
            category="navigation",
            on_execute=log_action("go-settings"),
        ),
        PaletteCommand(
            id="search-bookmarks",
            name="Search Bookmarks",
            description="Find a saved bookmark",
            icon="🔖",
            keywords=["favorites"],
            kind=CommandKind.PORTAL,
            search_placeholder="Search bookmarks...",
        ),
        PaletteCommand(
            id="toggle-theme",
            name="Toggle Theme",
            description="Switch between light and dark",
            icon="🌓",
            keywords=["dark", "light"],
            on_execute=log_action("toggle-theme"),
        ),
    ]:
        registry.register(cmd)

    return registry
