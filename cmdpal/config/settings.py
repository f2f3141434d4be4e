"""Configuration utilities for cmdpal."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError
from .constants import (
    CMDPAL_CONFIG_DIR,
    ENV_VAR_DEFINITIONS,
    MAX_RECENT_COMMANDS,
    RECENT_COMMANDS_KEY,
    STORAGE_FILENAME,
    SUBSCRIBER_ERROR_THRESHOLD,
    SUBSCRIBER_WARNING_THRESHOLD,
)

_TRUTHY = ("true", "1", "yes")


def get_storage_path() -> Path:
    """Get the JSON storage path, respecting CMDPAL_STORAGE_PATH.

    When running tests, set CMDPAL_STORAGE_PATH to a temp file path to keep
    tests away from the real recent-command history.
    """
    override = os.environ.get("CMDPAL_STORAGE_PATH")
    if override:
        return Path(override)

    CMDPAL_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CMDPAL_CONFIG_DIR / STORAGE_FILENAME


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    if value is None:
        return True, None

    definition = ENV_VAR_DEFINITIONS[name]

    if definition.get("type") is int:
        try:
            number = int(value)
        except ValueError:
            return False, f"Invalid value '{value}' for {name}. Expected an integer"
        if number < 1:
            return False, f"Invalid value '{value}' for {name}. Expected a positive integer"
        return True, None

    valid_values = definition.get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all cmdpal environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Returns the documented default when the variable is unset.

    Raises:
        ConfigurationError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error, setting=name)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value


def get_env_info() -> Dict[str, Dict]:
    """Get description, current value, validity and default of each variable."""
    info = {}
    for name, definition in ENV_VAR_DEFINITIONS.items():
        value = os.environ.get(name)
        is_valid, _ = validate_env_var(name, value)
        info[name] = {
            "description": definition.get("description", ""),
            "value": value,
            "is_set": value is not None,
            "valid": is_valid,
            "default": definition.get("default"),
        }
    return info


@dataclass(frozen=True)
class StoreSettings:
    """Tunables for one palette store instance."""

    storage_key: str = RECENT_COMMANDS_KEY
    max_recent_commands: int = MAX_RECENT_COMMANDS
    subscriber_warning_threshold: int = SUBSCRIBER_WARNING_THRESHOLD
    subscriber_critical_threshold: int = SUBSCRIBER_ERROR_THRESHOLD
    diagnostics: bool = False

    def validate(self) -> "StoreSettings":
        """Check cross-field constraints, returning self for chaining."""
        if not self.storage_key:
            raise ConfigurationError("Storage key must not be empty", setting="storage_key")
        if self.max_recent_commands < 1:
            raise ConfigurationError(
                "Recent command limit must be at least 1",
                setting="max_recent_commands",
                value=self.max_recent_commands,
            )
        if self.subscriber_warning_threshold >= self.subscriber_critical_threshold:
            raise ConfigurationError(
                "Subscriber warning threshold must be below the critical threshold",
                setting="subscriber_warning_threshold",
                warning=self.subscriber_warning_threshold,
                critical=self.subscriber_critical_threshold,
            )
        return self


def load_store_settings() -> StoreSettings:
    """Build StoreSettings from the environment, falling back to defaults."""
    return StoreSettings(
        max_recent_commands=int(get_env_var("CMDPAL_MAX_RECENT")),
        subscriber_warning_threshold=int(get_env_var("CMDPAL_SUBSCRIBER_WARN")),
        subscriber_critical_threshold=int(get_env_var("CMDPAL_SUBSCRIBER_CRITICAL")),
        diagnostics=get_env_var("CMDPAL_DIAGNOSTICS").lower() in _TRUTHY,
    ).validate()
