"""Simple logging utilities for cmdpal.

Standard Logger Initialization Pattern
--------------------------------------
For most modules, use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

Call `setup_tui_logging()` before starting the Textual palette, which owns
the terminal and must not receive console log output.

Note: paths are built inline instead of importing CMDPAL_CONFIG_DIR so that
logging can be configured before the config package is imported.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_dir() -> Path:
    log_dir = Path.home() / ".config" / "cmdpal"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def setup_tui_logging(module_name: str, debug: bool = False) -> logging.Logger:
    """
    Route logging to a rotating file while the palette UI is running.

    The root logger stays at WARNING to keep third-party libraries quiet;
    cmdpal.* loggers run at INFO, or DEBUG when `debug` is set so store
    diagnostics (subscriber counts, evictions) are captured.

    Returns:
        The logger for `module_name`.
    """
    try:
        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                _log_dir() / "tui_debug.log",
                maxBytes=_MAX_LOG_BYTES,
                backupCount=_BACKUP_COUNT,
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        cmdpal_logger = logging.getLogger("cmdpal")
        # Console handlers from the CLI would draw over the TUI
        cmdpal_logger.handlers = [
            h
            for h in cmdpal_logger.handlers
            if isinstance(h, logging.FileHandler) or not isinstance(h, logging.StreamHandler)
        ]
        cmdpal_logger.setLevel(logging.DEBUG if debug else logging.INFO)
        return logging.getLogger(module_name)

    except OSError as e:
        # Logging itself is what failed, so report on stderr
        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)
        return logging.getLogger(module_name)
