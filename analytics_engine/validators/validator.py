"""Snapshot validator checking data the aggregators would skip or misread.

The engine never rejects referential gaps: entries of unknown projects or
members are skipped from the reports. This validator surfaces those gaps
(and other suspicious data) ahead of a report run so they can be fixed at
the source.
"""

import logging
from collections import Counter
from decimal import Decimal
from typing import Iterable, Set

from analytics_engine.readers.snapshot_reader import Snapshot
from analytics_engine.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

MAX_HOURS_PER_DAY = Decimal("24")


class SnapshotValidator:
    """Validates a loaded snapshot.

    Severity policy:
    - ERROR: rows rejected by model validation, duplicate identifiers
    - WARNING: references to unknown members or projects, implausible hours,
      billable hours without a bill rate
    - INFO: data handled by a documented default (no schedule, recurring
      expense without frequency)

    Example:
        >>> validator = SnapshotValidator()
        >>> report = validator.validate(snapshot)
        >>> report.is_valid()
        True
    """

    def validate(self, snapshot: Snapshot) -> ValidationReport:
        """Run every check on a snapshot.

        Args:
            snapshot: Loaded snapshot

        Returns:
            ValidationReport with all issues found
        """
        report = ValidationReport()

        for rejected in snapshot.rejected_rows:
            report.add_error(
                rejected.collection,
                f"Row failed validation: {rejected.error}",
                rejected.index,
                {"row": rejected.index},
            )

        self._check_duplicates(report, "members", (m.id for m in snapshot.members))
        self._check_duplicates(report, "projects", (p.id for p in snapshot.projects))
        self._check_duplicates(report, "entries", (e.id for e in snapshot.entries))
        self._check_duplicates(report, "invoices", (i.id for i in snapshot.invoices))

        report.merge(self.validate_references(snapshot))
        report.merge(self.validate_entries(snapshot))
        report.merge(self.validate_projects(snapshot))

        logger.info(f"Snapshot validation finished: {report.summary()}")
        return report

    def validate_references(self, snapshot: Snapshot) -> ValidationReport:
        """Check that entries, expenses and allocations reference known entities.

        Args:
            snapshot: Loaded snapshot

        Returns:
            ValidationReport with a warning per dangling reference
        """
        report = ValidationReport()
        member_ids: Set[str] = {member.id for member in snapshot.members}
        project_ids: Set[str] = {project.id for project in snapshot.projects}

        for entry in snapshot.entries:
            if entry.user_id not in member_ids:
                report.add_warning(
                    "user_id",
                    "Entry references an unknown member and is skipped by team reports",
                    entry.user_id,
                    {"entry": entry.id},
                )
            if entry.project_id not in project_ids and entry.project is None:
                report.add_warning(
                    "project_id",
                    "Entry references an unknown project and is skipped by project reports",
                    entry.project_id,
                    {"entry": entry.id},
                )

        for expense in snapshot.project_expenses:
            if expense.project_id is not None and expense.project_id not in project_ids:
                report.add_warning(
                    "project_id",
                    "Project expense references an unknown project",
                    expense.project_id,
                    {"date": expense.date.isoformat()},
                )

        for allocation in snapshot.allocations:
            if allocation.user_id not in member_ids:
                report.add_warning(
                    "user_id",
                    "Allocation references an unknown member; bill rate resolves to 0",
                    allocation.user_id,
                    {"project": allocation.project_id},
                )
            if allocation.project_id not in project_ids:
                report.add_warning(
                    "project_id",
                    "Allocation references an unknown project",
                    allocation.project_id,
                    {"member": allocation.user_id},
                )

        return report

    def validate_entries(self, snapshot: Snapshot) -> ValidationReport:
        """Check time entries for implausible values.

        Args:
            snapshot: Loaded snapshot

        Returns:
            ValidationReport with warnings for suspicious entries
        """
        report = ValidationReport()
        for entry in snapshot.entries:
            if entry.hours > MAX_HOURS_PER_DAY:
                report.add_warning(
                    "hours",
                    f"Entry exceeds {MAX_HOURS_PER_DAY} hours in one day",
                    str(entry.hours),
                    {"entry": entry.id, "date": entry.date.isoformat()},
                )
            if entry.is_billable and entry.user.hourly_rate == 0 and entry.hours > 0:
                report.add_warning(
                    "hourly_rate",
                    "Billable entry has no bill rate and earns no revenue",
                    str(entry.user.hourly_rate),
                    {"entry": entry.id},
                )
        return report

    def validate_projects(self, snapshot: Snapshot) -> ValidationReport:
        """Check projects and company expenses for handled defaults.

        Args:
            snapshot: Loaded snapshot

        Returns:
            ValidationReport with info messages
        """
        report = ValidationReport()
        for project in snapshot.projects:
            if project.has_budget and not (project.start_date and project.end_date):
                report.add_info(
                    "schedule",
                    "Budgeted project without start and end date is left out of "
                    "budget velocity",
                    None,
                    {"project": project.id},
                )

        for expense in snapshot.company_expenses:
            if expense.recurring and expense.frequency is None:
                report.add_info(
                    "frequency",
                    "Recurring expense without frequency is treated as monthly",
                    expense.description,
                    {"date": expense.date.isoformat()},
                )
        return report

    @staticmethod
    def _check_duplicates(
        report: ValidationReport, collection: str, ids: Iterable[str]
    ) -> None:
        for identifier, count in Counter(ids).items():
            if count > 1:
                report.add_error(
                    collection,
                    f"Identifier appears {count} times",
                    identifier,
                )
