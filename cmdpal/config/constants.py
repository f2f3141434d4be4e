"""
Centralized constants for cmdpal.

All limits, thresholds and storage names used by the store and the palette
UI live here so they can be tuned in one place.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

CMDPAL_CONFIG_DIR = Path.home() / ".config" / "cmdpal"
STORAGE_FILENAME = "storage.json"
UI_CONFIG_FILENAME = "ui_config.json"

# =============================================================================
# RECENT COMMANDS
# =============================================================================

RECENT_COMMANDS_KEY = "commandPalette_recent"  # Key in the host key-value store
MAX_RECENT_COMMANDS = 10

# =============================================================================
# SUBSCRIBER LEAK DIAGNOSTICS
# =============================================================================

SUBSCRIBER_WARNING_THRESHOLD = 20  # Likely a missing unsubscribe
SUBSCRIBER_ERROR_THRESHOLD = 100  # Almost certainly a leak

# Subscriber counts at which a shrinking registry is logged on unsubscribe
SUBSCRIBER_SHRINK_LOG_SIZES = (30, 20, 10)

# =============================================================================
# FILTERING & UI
# =============================================================================

MIN_SCORE_THRESHOLD = 0.1  # 0.0 = any match, 1.0 = exact only
MAX_FILTER_RESULTS = 50
DEFAULT_PLACEHOLDER = "Type a command or search..."

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "CMDPAL_STORAGE_PATH": {
        "description": "Path of the JSON file backing persisted palette data",
        "valid_values": None,
        "default": None,
    },
    "CMDPAL_MAX_RECENT": {
        "description": "Maximum number of recent commands to remember",
        "valid_values": None,
        "default": str(MAX_RECENT_COMMANDS),
        "type": int,
    },
    "CMDPAL_SUBSCRIBER_WARN": {
        "description": "Subscriber count that triggers a leak warning",
        "valid_values": None,
        "default": str(SUBSCRIBER_WARNING_THRESHOLD),
        "type": int,
    },
    "CMDPAL_SUBSCRIBER_CRITICAL": {
        "description": "Subscriber count that triggers a critical leak diagnostic",
        "valid_values": None,
        "default": str(SUBSCRIBER_ERROR_THRESHOLD),
        "type": int,
    },
    "CMDPAL_DIAGNOSTICS": {
        "description": "Enable diagnostics helpers such as store cleanup()",
        "valid_values": ["true", "false", "1", "0", "yes", "no"],
        "default": "false",
    },
}
