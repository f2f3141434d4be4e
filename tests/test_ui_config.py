"""Tests for palette UI preferences (ui_config.py)."""

import json

from cmdpal.config.ui_config import (
    DEFAULT_CONFIG,
    get_loop,
    get_placeholder,
    load_ui_config,
    save_ui_config,
    set_loop,
)


def test_defaults_when_missing(isolated_config):
    assert load_ui_config() == DEFAULT_CONFIG
    assert get_loop() is False
    assert get_placeholder() == "Type a command or search..."


def test_set_loop_persists(isolated_config):
    set_loop(True)
    assert get_loop() is True

    saved = json.loads((isolated_config / "ui_config.json").read_text())
    assert saved["loop"] is True


def test_partial_config_is_merged(isolated_config):
    (isolated_config / "ui_config.json").write_text(json.dumps({"placeholder": "Go..."}))
    config = load_ui_config()
    assert config["placeholder"] == "Go..."
    assert config["loop"] is False


def test_corrupt_file_falls_back_to_defaults(isolated_config):
    (isolated_config / "ui_config.json").write_text("{broken")
    assert load_ui_config() == DEFAULT_CONFIG


def test_non_object_file_falls_back_to_defaults(isolated_config):
    (isolated_config / "ui_config.json").write_text("[]")
    assert load_ui_config() == DEFAULT_CONFIG


def test_defaults_are_not_shared(isolated_config):
    config = load_ui_config()
    config["loop"] = True
    assert DEFAULT_CONFIG["loop"] is False


def test_save_round_trip(isolated_config):
    save_ui_config({"loop": True, "placeholder": "Jump to..."})
    assert load_ui_config() == {"loop": True, "placeholder": "Jump to..."}
