"""
Centralized error handling for the cmdpal CLI

This module provides:
- Rich Console panels for user-facing error messages
- Structured logging for developer diagnostics
- Consistent exit codes via typer.Exit
"""

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config.constants import CMDPAL_CONFIG_DIR
from .exceptions import (
    CmdpalError,
    CommandNotFoundError,
    ConfigurationError,
    StorageError,
    StoreError,
)

# Global console instance for error display
console = Console(stderr=True, highlight=False)

logger = logging.getLogger("cmdpal")

# (error type, panel title, suggestion), most specific first
ERROR_PRESENTATION = [
    (ConfigurationError, "Configuration", "Run 'cmdpal env' to check your CMDPAL_* variables."),
    (StorageError, "Storage", "Check that the storage file is valid JSON and writable."),
    (CommandNotFoundError, "Command", "Run 'cmdpal recent list' to see known command ids."),
    (StoreError, "Store", None),
]


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None
) -> None:
    """
    Set up logging for the cmdpal CLI

    Args:
        verbose: Enable verbose (DEBUG) logging on the console
        quiet: Only show errors on the console
        log_file: Optional log file path (defaults to ~/.config/cmdpal/cmdpal.log)
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING

    detailed_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s'
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = CMDPAL_CONFIG_DIR / "cmdpal.log"

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # Continue without a log file
        if verbose:
            console.print(f"[yellow]Warning: Could not create log file {log_file}: {e}[/yellow]")


def _presentation(error: CmdpalError) -> tuple[str, Optional[str]]:
    for error_type, title, suggestion in ERROR_PRESENTATION:
        if isinstance(error, error_type):
            return title, suggestion
    return "Internal", None


def handle_error(
    error: Exception,
    operation: str = "unknown",
    show_details: bool = False
) -> None:
    """
    Log and display an error, then exit with code 1

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        show_details: Whether to show the error context to the user

    Raises:
        typer.Exit: Always
    """
    if isinstance(error, CmdpalError):
        logger.error(f"{operation} failed: {error}")
        display_error(error, show_details)
    else:
        logger.error(f"Unexpected error during {operation}: {error}", exc_info=True)
        wrapped = CmdpalError(
            f"An unexpected error occurred during {operation}",
            error_type=type(error).__name__,
            original_error=str(error),
        )
        display_error(wrapped, show_details)

    raise typer.Exit(1)


def display_error(error: CmdpalError, show_details: bool = False) -> None:
    """Display an error to the user in a Rich panel"""
    title, suggestion = _presentation(error)

    message = Text()
    message.append("✗ ", style="bold")
    message.append(error.message, style="bold red")

    if show_details and error.context:
        details_text = "\n".join(f"• {k}: {v}" for k, v in error.context.items())
        message.append(f"\n\nDetails:\n{details_text}", style="dim red")

    if suggestion:
        message.append(f"\n\nSuggestion: {suggestion}", style="cyan")

    panel = Panel(
        message,
        title=f"[bold]{title} Error[/bold]",
        title_align="left",
        border_style="red",
        padding=(0, 1)
    )
    console.print(panel)


def warn_user(message: str) -> None:
    """Display a warning message to the user"""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def safe_operation(operation_name: str, show_details: bool = False):
    """
    Decorator for CLI commands: route any exception through handle_error

    Args:
        operation_name: Name of the operation for logging
        show_details: Whether to show error context on failure
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            try:
                return func(*args, **kwargs)
            except (typer.Exit, typer.Abort):
                raise
            except Exception as e:
                handle_error(e, operation_name, show_details=show_details)
        return wrapper
    return decorator

