"""
Command Palette - keyboard-driven quick access overlay.

Provides:
- CommandRegistry: Registry of commands the host application registers
- PalettePresenter: Store-backed palette logic
- CommandPaletteScreen / PaletteApp: Textual consumer of the store
"""

from .palette_commands import Category, CommandKind, CommandRegistry, PaletteCommand
from .palette_presenter import PalettePresenter
from .palette_screen import CommandPaletteScreen, PaletteApp

__all__ = [
    "Category",
    "CommandKind",
    "CommandPaletteScreen",
    "CommandRegistry",
    "PaletteApp",
    "PaletteCommand",
    "PalettePresenter",
]
