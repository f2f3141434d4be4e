"""Tests for the palette command registry."""

import pytest

from cmdpal.exceptions import CommandNotFoundError
from cmdpal.ui.command_palette.palette_commands import (
    Category,
    CommandKind,
    CommandRegistry,
    PaletteCommand,
)


class TestPaletteCommand:
    """Test PaletteCommand defaults."""

    def test_defaults(self):
        cmd = PaletteCommand(id="x", name="X", description="Does x")
        assert cmd.kind == CommandKind.ACTION
        assert cmd.category == "general"
        assert cmd.source == "Built-in"
        assert cmd.keywords == []
        assert cmd.on_execute is None

    def test_keywords_not_shared(self):
        a = PaletteCommand(id="a", name="A", description="")
        b = PaletteCommand(id="b", name="B", description="")
        a.keywords.append("alpha")
        assert b.keywords == []


class TestCommandRegistry:
    """Test CommandRegistry."""

    def test_starts_empty(self):
        registry = CommandRegistry()
        assert len(registry) == 0
        assert registry.get_all() == []
        assert registry.categories() == []

    def test_register_and_get(self, registry):
        assert "go-home" in registry
        assert registry.get("go-home").name == "Go Home"
        assert registry.get("missing") is None

    def test_get_all_in_registration_order(self, registry):
        ids = [cmd.id for cmd in registry.get_all()]
        assert ids == ["navigation", "go-home", "go-settings", "search-bookmarks"]

    def test_register_replaces_same_id(self, registry):
        registry.register(PaletteCommand(id="go-home", name="Home", description="New"))
        assert registry.get("go-home").name == "Home"
        assert len(registry) == 4

    def test_unregister(self, registry):
        assert registry.unregister("go-home") is True
        assert registry.unregister("go-home") is False
        assert "go-home" not in registry

    def test_require_unknown_raises(self, registry):
        with pytest.raises(CommandNotFoundError) as exc_info:
            registry.require("nope")
        assert exc_info.value.command_id == "nope"
        assert "Command not found: nope" in str(exc_info.value)

    def test_categories(self, registry):
        assert registry.get_category("navigation").name == "Navigation"
        assert registry.get_category("missing") is None
        assert [c.id for c in registry.categories()] == ["navigation"]

    def test_commands_in_category_listed_then_tagged(self, registry):
        registry.register(
            PaletteCommand(id="go-back", name="Go Back", description="", category="navigation")
        )
        ids = [cmd.id for cmd in registry.commands_in_category("navigation")]
        assert ids == ["go-home", "go-settings", "go-back"]

    def test_commands_in_category_skips_unregistered_ids(self):
        registry = CommandRegistry()
        registry.register_category(Category(id="tools", name="Tools", command_ids=["gone"]))
        assert registry.commands_in_category("tools") == []

    def test_commands_in_unknown_category_uses_tags(self):
        registry = CommandRegistry()
        registry.register(PaletteCommand(id="a", name="A", description="", category="misc"))
        assert [c.id for c in registry.commands_in_category("misc")] == ["a"]
