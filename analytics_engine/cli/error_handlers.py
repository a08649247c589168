"""Enhanced error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from analytics_engine.cli.utils.formatters import format_error, format_warning
from analytics_engine.errors import AnalyticsInputError, EntityNotFoundError
from analytics_engine.readers.snapshot_reader import SnapshotError


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


class DataValidationError(CLIError):
    """Error related to snapshot data quality."""

    pass


class ProcessingError(CLIError):
    """Error raised while building or writing a report."""

    pass


def _echo_cli_error(label: str, error: CLIError) -> None:
    click.echo(format_error(f"{label}: {error.message}"))
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Exit codes:
        1: configuration error (including invalid settings)
        2: rejected report request (bad dates, granularity, report type, ids)
        3: snapshot could not be read or failed validation
        4: processing error
        130: cancelled by the user
        255: unexpected error

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code
    """
    if isinstance(error, ConfigurationError):
        _echo_cli_error("Configuration Error", error)
        return 1

    elif isinstance(error, ValidationError):
        click.echo(format_error("Configuration Error: invalid settings"))
        click.echo(str(error))
        click.echo(format_warning("Hint: Check the values in your .env file"))
        return 1

    elif isinstance(error, EntityNotFoundError):
        click.echo(format_error(f"Not Found: {error.message}"))
        click.echo(
            format_warning("Hint: Run without an id to list the available entities")
        )
        return 2

    elif isinstance(error, AnalyticsInputError):
        click.echo(format_error(f"Invalid Request: {error.message}"))
        if error.field:
            click.echo(format_warning(f"Hint: Check the {error.field} option"))
        return 2

    elif isinstance(error, DataValidationError):
        _echo_cli_error("Data Validation Error", error)
        return 3

    elif isinstance(error, SnapshotError):
        click.echo(format_error(f"Snapshot Error: {error}"))
        click.echo(
            format_warning("Hint: Run 'analytics-cli validate-data' on the snapshot")
        )
        return 3

    elif isinstance(error, ProcessingError):
        _echo_cli_error("Processing Error", error)
        return 4

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    # Handle generic exceptions
    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                )
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Wrap a command body with standardized error handling.

    Any exception leaving the block is reported through handle_cli_error
    and the process exits with the matching code.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False  # Don't suppress exceptions

    return ErrorHandler(debug)
