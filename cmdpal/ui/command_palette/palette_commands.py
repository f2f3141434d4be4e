"""
Command registry for the command palette.

Holds the commands and categories a host application registers. The palette
itself ships none: what exists is the host's decision.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ...exceptions import CommandNotFoundError

logger = logging.getLogger(__name__)

CommandAction = Callable[[], Union[None, Awaitable[None]]]


class CommandKind(Enum):
    """What selecting a command does."""

    ACTION = "action"  # Runs on_execute, then closes the palette
    PORTAL = "portal"  # Opens a searchable sub-interface
    CATEGORY = "category"  # Lists the commands of one category


@dataclass
class PaletteCommand:
    """A command that can be selected from the palette."""

    id: str  # Unique identifier, e.g., "open-settings"
    name: str  # Display name: "Open Settings"
    description: str
    icon: str = ""
    keywords: list[str] = field(default_factory=list)  # Extra search terms
    category: str = "general"
    kind: CommandKind = CommandKind.ACTION
    source: str = "Built-in"  # "Built-in" or the extension that added it
    on_execute: Optional[CommandAction] = None  # ACTION only, sync or async
    search_placeholder: Optional[str] = None  # PORTAL only


@dataclass
class Category:
    """A named group of commands, shown as a browsable view."""

    id: str
    name: str
    icon: str = ""
    description: str = ""
    command_ids: list[str] = field(default_factory=list)


class CommandRegistry:
    """Registry of available commands and categories."""

    def __init__(self):
        self._commands: dict[str, PaletteCommand] = {}
        self._categories: dict[str, Category] = {}

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def register(self, command: PaletteCommand) -> None:
        """Register a command, replacing any previous one with the same id."""
        if command.id in self._commands:
            logger.debug(f"Replacing command: {command.id}")
        self._commands[command.id] = command
        logger.debug(f"Registered command: {command.id}")

    def unregister(self, command_id: str) -> bool:
        """Unregister a command. Returns True if found."""
        if command_id in self._commands:
            del self._commands[command_id]
            return True
        return False

    def get(self, command_id: str) -> PaletteCommand | None:
        """Get a command by ID."""
        return self._commands.get(command_id)

    def require(self, command_id: str) -> PaletteCommand:
        """Get a command by ID, raising CommandNotFoundError if unknown."""
        command = self._commands.get(command_id)
        if command is None:
            raise CommandNotFoundError(command_id)
        return command

    def get_all(self) -> list[PaletteCommand]:
        """All commands in registration order."""
        return list(self._commands.values())

    def register_category(self, category: Category) -> None:
        self._categories[category.id] = category

    def get_category(self, category_id: str) -> Category | None:
        return self._categories.get(category_id)

    def categories(self) -> list[Category]:
        return list(self._categories.values())

    def commands_in_category(self, category_id: str) -> list[PaletteCommand]:
        """
        Commands belonging to a category.

        A category's explicit command_ids come first, in their listed order,
        followed by any other command whose `category` field names it.
        """
        listed: list[PaletteCommand] = []
        category = self._categories.get(category_id)
        if category:
            listed = [self._commands[cid] for cid in category.command_ids if cid in self._commands]

        seen = {cmd.id for cmd in listed}
        tagged = [
            cmd
            for cmd in self._commands.values()
            if cmd.category == category_id and cmd.id not in seen
        ]
        return listed + tagged
