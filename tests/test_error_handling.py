"""
Tests for the exception hierarchy and CLI error handling
"""

import logging

import pytest
import typer

from cmdpal.error_handling import (
    display_error,
    handle_error,
    safe_operation,
    setup_logging,
)
from cmdpal.exceptions import (
    CmdpalError,
    CommandNotFoundError,
    ConfigurationError,
    InvalidPatchError,
    StorageError,
    StoreError,
    StoreNotProvidedError,
)


class TestExceptions:
    """Test custom error classes"""

    def test_message_without_context(self):
        error = CmdpalError("Something broke")
        assert str(error) == "Something broke"
        assert error.context == {}
        assert error.retryable is False

    def test_message_with_context(self):
        error = StorageError("Failed to read storage file", path="/tmp/s.json")
        assert str(error) == "Failed to read storage file (path='/tmp/s.json')"
        assert error.message == "Failed to read storage file"

    def test_retryable_flag(self):
        assert CmdpalError("flaky", retryable=True).retryable is True

    def test_configuration_error_setting(self):
        error = ConfigurationError("Bad value", setting="CMDPAL_MAX_RECENT")
        assert error.context == {"setting": "CMDPAL_MAX_RECENT"}

    def test_hierarchy(self):
        assert issubclass(StoreNotProvidedError, StoreError)
        assert issubclass(InvalidPatchError, StoreError)
        for error_type in (StoreError, StorageError, ConfigurationError, CommandNotFoundError):
            assert issubclass(error_type, CmdpalError)


class TestHandleError:
    """Test handle_error and display_error"""

    def test_cmdpal_error_exits_with_panel(self, capsys):
        with pytest.raises(typer.Exit) as exc_info:
            handle_error(ConfigurationError("Bad value", setting="CMDPAL_MAX_RECENT"), "load")

        assert exc_info.value.exit_code == 1
        err = capsys.readouterr().err
        assert "Configuration Error" in err
        assert "Bad value" in err
        assert "cmdpal env" in err

    def test_generic_error_is_wrapped(self, capsys):
        with pytest.raises(typer.Exit):
            handle_error(ValueError("kaboom"), "parse input", show_details=True)

        err = capsys.readouterr().err
        assert "An unexpected error occurred during parse input" in err
        assert "ValueError" in err
        assert "kaboom" in err

    def test_details_hidden_by_default(self, capsys):
        display_error(StorageError("Write failed", path="/secret/path.json"))
        err = capsys.readouterr().err
        assert "Storage Error" in err
        assert "/secret/path.json" not in err


class TestSafeOperation:
    """Test the safe_operation decorator"""

    def test_passes_through_result(self):
        @safe_operation("add")
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_converts_errors_to_exit(self):
        @safe_operation("explode")
        def explode():
            raise StorageError("disk full")

        with pytest.raises(typer.Exit) as exc_info:
            explode()
        assert exc_info.value.exit_code == 1

    def test_exit_is_not_rewrapped(self):
        @safe_operation("leave")
        def leave():
            raise typer.Exit(0)

        with pytest.raises(typer.Exit) as exc_info:
            leave()
        assert exc_info.value.exit_code == 0


class TestSetupLogging:
    """Test setup_logging"""

    def test_writes_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cmdpal.log"
        setup_logging(log_file=log_file)

        logging.getLogger("cmdpal.store").warning("hello from the store")
        for handler in logging.getLogger("cmdpal").handlers:
            handler.flush()

        assert "hello from the store" in log_file.read_text()

    def test_console_level(self, tmp_path):
        setup_logging(verbose=True, log_file=tmp_path / "a.log")
        levels = {type(h).__name__: h.level for h in logging.getLogger("cmdpal").handlers}
        assert levels["StreamHandler"] == logging.DEBUG

        setup_logging(quiet=True, log_file=tmp_path / "b.log")
        levels = {type(h).__name__: h.level for h in logging.getLogger("cmdpal").handlers}
        assert levels["StreamHandler"] == logging.ERROR
        assert len(logging.getLogger("cmdpal").handlers) == 2
