"""Validate snapshot data command."""

from typing import Optional

import click

from analytics_engine.cli.commands._snapshot import resolve_snapshot_path
from analytics_engine.cli.error_handlers import DataValidationError, with_error_handling
from analytics_engine.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from analytics_engine.config.settings import get_config
from analytics_engine.readers.snapshot_reader import SnapshotReader
from analytics_engine.validators.validation_report import ValidationSeverity
from analytics_engine.validators.validator import SnapshotValidator

MAX_ISSUES_PER_SEVERITY = 20

_SEVERITY_FORMATTERS = {
    ValidationSeverity.ERROR: format_error,
    ValidationSeverity.WARNING: format_warning,
    ValidationSeverity.INFO: format_info,
}


@click.command(name="validate-data")
@click.option(
    "--snapshot",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON snapshot file (optional, uses SNAPSHOT_PATH from config)",
)
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="warning",
    help="Minimum severity level to display (default: warning)",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def validate_data(snapshot: Optional[str], severity: str, debug: bool):
    """Validate snapshot data quality.

    Checks for:
    - Rows rejected by model validation
    - Duplicate identifiers
    - References to unknown members or projects
    - Implausible hours and missing rates

    Returns exit code 3 if errors are found.

    Example:
        analytics-cli validate-data --snapshot exports/2024-q1.json
        analytics-cli validate-data --severity info
    """
    with with_error_handling(debug):
        settings = get_config()
        path = resolve_snapshot_path(snapshot, settings)
        severity_level = ValidationSeverity[severity.upper()]

        click.echo(format_info(f"Validating snapshot {path}..."))
        data = SnapshotReader(strict=False).read(path)
        report = SnapshotValidator().validate(data)

        click.echo()
        click.echo("=" * 60)
        click.echo("Validation Summary")
        click.echo("=" * 60)
        click.echo(f"Members:          {len(data.members)}")
        click.echo(f"Projects:         {len(data.projects)}")
        click.echo(f"Time entries:     {len(data.entries)}")
        click.echo(f"Errors:           {report.error_count}")
        click.echo(f"Warnings:         {report.warning_count}")
        click.echo(f"Info:             {report.info_count}")

        shown = [i for i in report.issues if i.severity >= severity_level]
        if shown:
            click.echo()
            click.echo(f"Issues (showing {severity.upper()} and above):")
            click.echo("-" * 60)
            for sev in sorted(_SEVERITY_FORMATTERS, reverse=True):
                issues = [i for i in shown if i.severity == sev]
                if not issues:
                    continue
                click.echo()
                click.echo(f"{sev.name}S ({len(issues)}):")
                for issue in issues[:MAX_ISSUES_PER_SEVERITY]:
                    click.echo(_SEVERITY_FORMATTERS[sev](f"  {issue}"))
                if len(issues) > MAX_ISSUES_PER_SEVERITY:
                    click.echo(
                        f"  ... and {len(issues) - MAX_ISSUES_PER_SEVERITY} more"
                    )

        click.echo()
        click.echo("=" * 60)
        click.echo()

        if report.error_count > 0:
            raise DataValidationError(
                f"Validation failed with {report.error_count} error(s)",
                recovery_hint="Fix the rejected rows at the source and export again",
            )
        elif report.warning_count > 0:
            click.echo(
                format_warning(
                    f"Validation completed with {report.warning_count} warning(s)"
                )
            )
        else:
            click.echo(format_success("Validation passed! No issues found."))
