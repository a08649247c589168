"""Report query resolution.

A report query turns raw request parameters (``startDate``, ``endDate``,
``granularity``, ``approvalFilter``) into a validated date window and the
row filter applied before aggregation:

- ``approved_only`` keeps entries and expenses that are approved or locked
- ``all`` keeps every approval status
"""

import datetime as dt
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import model_validator

from analytics_engine.calculators.expense_expansion import expand_recurring_expenses
from analytics_engine.errors import AnalyticsInputError, InvalidDateRangeError
from analytics_engine.models.base import BaseDataModel
from analytics_engine.models.enums import (
    APPROVAL_FILTER_STATUSES,
    ApprovalFilter,
    Granularity,
)
from analytics_engine.models.expense import (
    CompanyExpense,
    MaterializedExpense,
    ProjectExpense,
)
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.period_calendar import PeriodCalendar, validate_date_range

logger = logging.getLogger(__name__)


def _parse_date(value: Union[str, dt.date, None], name: str) -> Optional[dt.date]:
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidDateRangeError(
            f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}", field=name
        )


class ReportQuery(BaseDataModel):
    """Validated report window and row filter.

    Attributes:
        start_date: First day of the window (inclusive)
        end_date: Last day of the window (inclusive)
        granularity: Period bucketing resolution
        approval_filter: Which approval statuses to keep
        employee_id: Member to report on (employee reports)
        project_id: Project to report on (project reports)

    Example:
        >>> query = ReportQuery.from_params(
        ...     {"startDate": "2024-01-01", "endDate": "2024-03-31"}
        ... )
        >>> query.granularity, query.approval_filter
        (<Granularity.MONTHLY: 'monthly'>, <ApprovalFilter.APPROVED_ONLY: 'approved_only'>)
    """

    start_date: dt.date
    end_date: dt.date
    granularity: Granularity = Granularity.MONTHLY
    approval_filter: ApprovalFilter = ApprovalFilter.APPROVED_ONLY
    employee_id: Optional[str] = None
    project_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_window(self) -> "ReportQuery":
        """Reject a reversed window."""
        validate_date_range(self.start_date, self.end_date)
        return self

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ReportQuery":
        """Resolve raw request parameters into a query.

        Parameters may use camelCase (``startDate``) or snake_case
        (``start_date``). Granularity defaults to monthly and the approval
        filter to approved_only; both are rejected when unknown rather than
        silently defaulted.

        Args:
            params: Raw request parameters

        Returns:
            Validated query

        Raises:
            InvalidDateRangeError: If a date is missing, malformed or reversed
            InvalidGranularityError: If the granularity is not supported
            AnalyticsInputError: If the approval filter is not supported
        """

        def param(snake: str, camel: str) -> Any:
            value = params.get(camel)
            return params.get(snake) if value is None else value

        start = _parse_date(param("start_date", "startDate"), "start_date")
        end = _parse_date(param("end_date", "endDate"), "end_date")
        validate_date_range(start, end)

        granularity = Granularity.parse(param("granularity", "granularity") or "monthly")

        raw_filter = param("approval_filter", "approvalFilter") or "approved_only"
        try:
            approval_filter = ApprovalFilter(str(raw_filter).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in ApprovalFilter)
            raise AnalyticsInputError(
                f"Invalid approval filter: {raw_filter!r}. Must be one of: {valid}",
                field="approval_filter",
            )

        return cls(
            start_date=start,
            end_date=end,
            granularity=granularity,
            approval_filter=approval_filter,
            employee_id=param("employee_id", "employeeId") or None,
            project_id=param("project_id", "projectId") or None,
        )

    def calendar(self) -> PeriodCalendar:
        """Build the period calendar of the query window."""
        return PeriodCalendar(self.start_date, self.end_date, self.granularity)

    def in_window(self, date: dt.date) -> bool:
        """Check whether a date lies inside the query window."""
        return self.start_date <= date <= self.end_date

    def filter_entries(self, entries: Iterable[TimeEntry]) -> List[TimeEntry]:
        """Keep entries inside the window that pass the approval filter."""
        statuses = APPROVAL_FILTER_STATUSES[self.approval_filter]
        kept = [
            entry
            for entry in entries
            if self.in_window(entry.date) and entry.approval_status in statuses
        ]
        logger.debug(f"Kept {len(kept)} entries for {self.start_date}..{self.end_date}")
        return kept

    def filter_expenses(self, expenses: Iterable[ProjectExpense]) -> List[ProjectExpense]:
        """Keep project expenses inside the window that pass the approval filter."""
        statuses = APPROVAL_FILTER_STATUSES[self.approval_filter]
        return [
            expense
            for expense in expenses
            if self.in_window(expense.date) and expense.approval_status in statuses
        ]

    def materialize_company_expenses(
        self, expenses: Iterable[CompanyExpense]
    ) -> List[MaterializedExpense]:
        """Expand company expenses into occurrences inside the window."""
        return expand_recurring_expenses(expenses, self.start_date, self.end_date)
