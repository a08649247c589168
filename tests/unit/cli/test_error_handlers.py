"""Unit tests for CLI error handling."""

import click
import pytest
from pydantic import ValidationError

from analytics_engine.cli.error_handlers import (
    ConfigurationError,
    DataValidationError,
    ProcessingError,
    handle_cli_error,
    with_error_handling,
)
from analytics_engine.errors import (
    EntityNotFoundError,
    InvalidDateRangeError,
    InvalidGranularityError,
)
from analytics_engine.models import Project
from analytics_engine.readers import SnapshotError


def _validation_error() -> ValidationError:
    try:
        Project.model_validate({})
    except ValidationError as e:
        return e
    raise AssertionError("expected a validation error")


class TestHandleCliError:
    """Test exit codes and messages."""

    @pytest.mark.parametrize(
        "error,code,text",
        [
            (ConfigurationError("No snapshot file given", "Pass --snapshot"), 1, "Configuration Error"),
            (EntityNotFoundError("Project not found: p9", field="project_id"), 2, "Not Found"),
            (InvalidGranularityError("Invalid granularity", field="granularity"), 2, "Invalid Request"),
            (InvalidDateRangeError("start after end", field="date_range"), 2, "Invalid Request"),
            (DataValidationError("Validation failed with 2 error(s)"), 3, "Data Validation Error"),
            (SnapshotError("Snapshot file not found: x.json"), 3, "Snapshot Error"),
            (ProcessingError("Could not write CSV files"), 4, "Processing Error"),
            (click.Abort(), 130, "cancelled"),
            (RuntimeError("boom"), 255, "Unexpected Error: RuntimeError"),
        ],
    )
    def test_exit_codes(self, capsys, error, code, text):
        """Test that each error family maps to its exit code."""
        assert handle_cli_error(error) == code
        assert text in capsys.readouterr().out

    def test_settings_validation_error(self, capsys):
        """Test that invalid settings are configuration errors."""
        assert handle_cli_error(_validation_error()) == 1
        assert "invalid settings" in capsys.readouterr().out

    def test_recovery_hint_shown(self, capsys):
        """Test that recovery hints are printed."""
        handle_cli_error(ConfigurationError("No snapshot", recovery_hint="Set SNAPSHOT_PATH"))
        assert "Hint: Set SNAPSHOT_PATH" in capsys.readouterr().out

    def test_field_hint(self, capsys):
        """Test that rejected requests name the offending option."""
        handle_cli_error(InvalidGranularityError("bad", field="granularity"))
        assert "Check the granularity option" in capsys.readouterr().out

    def test_debug_prints_traceback(self, capsys):
        """Test full stack traces in debug mode."""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        output = capsys.readouterr().out
        assert "Full stack trace" in output
        assert "Traceback" in output

    def test_no_traceback_without_debug(self, capsys):
        """Test the --debug hint otherwise."""
        handle_cli_error(RuntimeError("boom"))
        assert "--debug" in capsys.readouterr().out


class TestWithErrorHandling:
    """Test the error handling context manager."""

    def test_exits_with_code(self, capsys):
        """Test that errors become SystemExit with the mapped code."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise ProcessingError("failed")

        assert exc_info.value.code == 4

    def test_system_exit_passes_through(self):
        """Test that SystemExit is not re-handled."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise SystemExit(7)

        assert exc_info.value.code == 7

    def test_no_error(self):
        """Test that a clean block does nothing."""
        with with_error_handling():
            value = 1
        assert value == 1
