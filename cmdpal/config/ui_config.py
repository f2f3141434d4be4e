"""
cmdpal UI Configuration.

Handles persistence of palette preferences such as list wrap-around.
Config is stored in ~/.config/cmdpal/ui_config.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .constants import CMDPAL_CONFIG_DIR, DEFAULT_PLACEHOLDER, UI_CONFIG_FILENAME

DEFAULT_CONFIG: dict[str, Any] = {
    "loop": False,
    "placeholder": DEFAULT_PLACEHOLDER,
}


def get_ui_config_path() -> Path:
    """
    Get path to UI config file.

    Returns:
        Path to ~/.config/cmdpal/ui_config.json
    """
    CMDPAL_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CMDPAL_CONFIG_DIR / UI_CONFIG_FILENAME


def load_ui_config() -> dict[str, Any]:
    """
    Load UI configuration from file.

    Returns:
        Config dict, or defaults if file doesn't exist or is invalid
    """
    path = get_ui_config_path()
    if path.exists():
        try:
            config = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError):
            return DEFAULT_CONFIG.copy()
        if not isinstance(config, dict):
            return DEFAULT_CONFIG.copy()
        # Merge with defaults to handle missing keys
        return {**DEFAULT_CONFIG, **config}
    return DEFAULT_CONFIG.copy()


def save_ui_config(config: dict[str, Any]) -> None:
    """
    Save UI configuration to file.

    Args:
        config: Configuration dict to save
    """
    path = get_ui_config_path()
    try:
        path.write_text(json.dumps(config, indent=2) + "\n")
    except OSError:
        # Preferences are non-critical
        pass


def get_loop() -> bool:
    """Whether keyboard navigation wraps at the ends of the list."""
    return bool(load_ui_config().get("loop", False))


def set_loop(loop: bool) -> None:
    """Set and persist the wrap-around preference."""
    config = load_ui_config()
    config["loop"] = loop
    save_ui_config(config)


def get_placeholder() -> str:
    """Placeholder text shown in the empty search input."""
    return str(load_ui_config().get("placeholder", DEFAULT_PLACEHOLDER))
