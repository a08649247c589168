"""Analytics Engine CLI.

This module provides a command-line interface for the analytics engine.
It includes commands for building reports from a snapshot and validating
snapshot data.
"""

import click

from analytics_engine import __version__
from analytics_engine.cli.commands.report import build_report
from analytics_engine.cli.commands.validate import validate_data
from analytics_engine.cli.error_handlers import with_error_handling
from analytics_engine.config.logging_config import LoggingConfig, configure_logging
from analytics_engine.config.settings import get_config


@click.group(
    help="Analytics Engine CLI - Build utilization, profitability and forecast reports"
)
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Log progress at the configured level")
@click.option(
    "--log-format",
    type=click.Choice(["standard", "json"]),
    default="standard",
    help="Log record format",
)
def cli(verbose: bool, log_format: str):
    """Analytics Engine CLI main entry point."""
    if verbose:
        with with_error_handling():
            settings = get_config()
        configure_logging(LoggingConfig.from_settings(settings, log_format))
    else:
        configure_logging(LoggingConfig(log_level="WARNING", log_format=log_format))


# Register commands
cli.add_command(build_report)
cli.add_command(validate_data)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
