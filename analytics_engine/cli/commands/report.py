"""Build report command."""

import datetime as dt
import json
from typing import Optional

import click

from analytics_engine.cli.commands._snapshot import resolve_snapshot_path
from analytics_engine.cli.error_handlers import ProcessingError, with_error_handling
from analytics_engine.cli.utils.formatters import (
    format_dataframe,
    format_info,
    format_success,
    format_warning,
)
from analytics_engine.config.settings import get_config
from analytics_engine.models.enums import ApprovalFilter, Granularity
from analytics_engine.query import ReportQuery
from analytics_engine.readers.snapshot_reader import SnapshotReader
from analytics_engine.services.report_service import ReportService, ReportType
from analytics_engine.writers.report_table_writer import ReportTableWriter


@click.command(name="report")
@click.option(
    "--snapshot",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON snapshot file (optional, uses SNAPSHOT_PATH from config)",
)
@click.option(
    "--type",
    "report_type",
    type=click.Choice([t.value for t in ReportType], case_sensitive=False),
    required=True,
    help="Report to build",
)
@click.option("--start-date", required=True, help="First day of the window (YYYY-MM-DD)")
@click.option("--end-date", required=True, help="Last day of the window (YYYY-MM-DD)")
@click.option(
    "--granularity",
    type=click.Choice([g.value for g in Granularity], case_sensitive=False),
    default=Granularity.MONTHLY.value,
    show_default=True,
    help="Period bucketing",
)
@click.option(
    "--approval-filter",
    type=click.Choice([f.value for f in ApprovalFilter], case_sensitive=False),
    default=ApprovalFilter.APPROVED_ONLY.value,
    show_default=True,
    help="Which entries and expenses to include",
)
@click.option("--employee-id", default=None, help="Member for the employee report")
@click.option("--project-id", default=None, help="Project for the project report")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date for ages, pacing and forecasts (default: today)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Also write every report section as CSV into this directory",
)
@click.option("--strict", is_flag=True, help="Fail on the first invalid snapshot row")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def build_report(
    snapshot: Optional[str],
    report_type: str,
    start_date: str,
    end_date: str,
    granularity: str,
    approval_filter: str,
    employee_id: Optional[str],
    project_id: Optional[str],
    today: Optional[dt.datetime],
    output_format: str,
    output_dir: Optional[str],
    strict: bool,
    debug: bool,
):
    """Build an analytics report from a snapshot.

    Report types: employee, team, project, company, forecast, risk.
    Employee and project reports list the available members or projects
    when no id is given.

    Example:
        analytics-cli report --type company --start-date 2024-01-01 --end-date 2024-03-31
        analytics-cli report --type employee --employee-id u1 \\
            --start-date 2024-01-01 --end-date 2024-01-31 --format json
        analytics-cli report --type risk --start-date 2024-01-01 \\
            --end-date 2024-06-30 --today 2024-06-15 --output-dir out/
    """
    with with_error_handling(debug):
        settings = get_config()
        path = resolve_snapshot_path(snapshot, settings)
        query = ReportQuery.from_params(
            {
                "start_date": start_date,
                "end_date": end_date,
                "granularity": granularity,
                "approval_filter": approval_filter,
                "employee_id": employee_id,
                "project_id": project_id,
            }
        )
        report_day = today.date() if today else dt.date.today()
        as_json = output_format.lower() == "json"

        if not as_json:
            click.echo(format_info(f"Loading snapshot {path}..."))
        data = SnapshotReader(strict=strict).read(path)
        if data.rejected_rows and not as_json:
            click.echo(
                format_warning(
                    f"Skipped {len(data.rejected_rows)} invalid row(s); "
                    "run validate-data for details"
                )
            )

        payload = ReportService(data, settings).build(report_type, query, report_day)

        writer = ReportTableWriter()
        tables = writer.generate(report_type, payload)

        if as_json:
            click.echo(json.dumps(payload, indent=2))
        else:
            click.echo(
                format_info(
                    f"{report_type.capitalize()} report: "
                    f"{query.start_date} to {query.end_date} "
                    f"({query.granularity.value}, {query.approval_filter.value})"
                )
            )
            for name, df in tables.sections.items():
                click.echo()
                click.echo(click.style(name.replace("_", " ").title(), bold=True))
                click.echo(format_dataframe(df))

        if output_dir:
            try:
                written = writer.write_csv(tables, output_dir)
            except OSError as e:
                raise ProcessingError(
                    f"Could not write CSV files to {output_dir}: {e}",
                    recovery_hint="Check that the directory is writable",
                )
            if not as_json:
                click.echo()
                click.echo(format_success(f"Wrote {len(written)} CSV file(s) to {output_dir}"))
