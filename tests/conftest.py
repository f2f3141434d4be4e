"""Shared pytest fixtures for cmdpal tests."""

import logging

import pytest

from cmdpal.store import MemoryStorage, create_store
from cmdpal.ui.command_palette.palette_commands import (
    Category,
    CommandKind,
    CommandRegistry,
    PaletteCommand,
)

CMDPAL_ENV_VARS = (
    "CMDPAL_STORAGE_PATH",
    "CMDPAL_MAX_RECENT",
    "CMDPAL_SUBSCRIBER_WARN",
    "CMDPAL_SUBSCRIBER_CRITICAL",
    "CMDPAL_DIAGNOSTICS",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.config/cmdpal."""
    for name in CMDPAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CMDPAL_STORAGE_PATH", str(tmp_path / "storage.json"))
    monkeypatch.setattr(
        "cmdpal.config.ui_config.get_ui_config_path",
        lambda: tmp_path / "ui_config.json",
    )
    monkeypatch.setattr("cmdpal.error_handling.CMDPAL_CONFIG_DIR", tmp_path / "logs")
    yield tmp_path

    # The CLI callback attaches handlers bound to CliRunner's streams
    cmdpal_logger = logging.getLogger("cmdpal")
    for handler in list(cmdpal_logger.handlers):
        cmdpal_logger.removeHandler(handler)
        handler.close()
    cmdpal_logger.setLevel(logging.NOTSET)


@pytest.fixture
def storage_path(isolated_config):
    return isolated_config / "storage.json"


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    """A store over in-memory storage with default settings."""
    return create_store(storage=memory_storage)


@pytest.fixture
def executed():
    """Ids of action commands run through `registry`, in order."""
    return []


@pytest.fixture
def registry(executed):
    """A small registry covering every command kind."""
    reg = CommandRegistry()

    def action(command_id):
        return lambda: executed.append(command_id)

    reg.register_category(
        Category(id="navigation", name="Navigation", command_ids=["go-home", "go-settings"])
    )
    reg.register(
        PaletteCommand(
            id="navigation",
            name="Navigation",
            description="Browse navigation commands",
            kind=CommandKind.CATEGORY,
        )
    )
    reg.register(
        PaletteCommand(
            id="go-home",
            name="Go Home",
            description="Return to the start page",
            keywords=["start"],
            category="navigation",
            on_execute=action("go-home"),
        )
    )
    reg.register(
        PaletteCommand(
            id="go-settings",
            name="Open Settings",
            description="Edit preferences",
            keywords=["preferences"],
            category="navigation",
            on_execute=action("go-settings"),
        )
    )
    reg.register(
        PaletteCommand(
            id="search-bookmarks",
            name="Search Bookmarks",
            description="Find a saved bookmark",
            kind=CommandKind.PORTAL,
            search_placeholder="Search bookmarks...",
        )
    )
    return reg
