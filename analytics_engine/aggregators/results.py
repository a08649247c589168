"""Result containers returned by the aggregators, risk detectors and forecasts.

Every period-bucketed row carries both ``period`` (display label) and
``period_key`` (stable bucket key). Values are already rounded by the
producing aggregator: hours and percentages to 1 decimal, currency to
2 decimals.

Rows are plain dataclasses; ``to_json_ready`` turns them into dictionaries
of JSON types for chart and KPI consumers.
"""

import datetime as dt
from dataclasses import asdict, dataclass, field, is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from analytics_engine.models.enums import BillingStatus

# --- Employee ---


@dataclass
class StatusHours:
    """Hours logged under one billing status.

    Attributes:
        status: Billing status
        hours: Total hours for the status

    Example:
        >>> StatusHours(status=BillingStatus.BILLABLE, hours=Decimal("7.0"))
        StatusHours(status=<BillingStatus.BILLABLE: 'billable'>, hours=Decimal('7.0'))
    """

    status: BillingStatus
    hours: Decimal


@dataclass
class UtilizationPoint:
    """Utilization of one member for one period.

    Attributes:
        period: Period label
        period_key: Period key
        billable_util: Billable hours as a percentage of expected hours
        total_util: All hours as a percentage of expected hours
        target: Expected hours for the period
        billable_hours: Billable hours logged in the period
        total_hours: All hours logged in the period
    """

    period: str
    period_key: str
    billable_util: Decimal
    total_util: Decimal
    target: Decimal
    billable_hours: Decimal
    total_hours: Decimal


@dataclass
class ProfitabilityPoint:
    """Revenue, cost and profit for one period."""

    period: str
    period_key: str
    revenue: Decimal
    cost: Decimal
    profit: Decimal


# --- Team ---


@dataclass
class MemberUtilization:
    """Utilization of one member across the whole report window.

    Attributes:
        member_id: Member identifier
        name: Member display name
        billable_util: Billable utilization percentage
        total_util: Total utilization percentage
        billable_hours: Billable hours in the window
        total_hours: All hours in the window
        expected_hours: Expected hours in the window
    """

    member_id: str
    name: str
    billable_util: Decimal
    total_util: Decimal
    billable_hours: Decimal
    total_hours: Decimal
    expected_hours: Decimal


@dataclass
class MemberProfitability:
    """Revenue, cost and margin percentage of one member."""

    member_id: str
    name: str
    revenue: Decimal
    cost: Decimal
    margin: Decimal


@dataclass
class MemberTimeMix:
    """Hours of one member split by billing status."""

    member_id: str
    name: str
    billable: Decimal
    included: Decimal
    non_billable: Decimal
    internal: Decimal
    presales: Decimal

    @property
    def total(self) -> Decimal:
        """Sum of all status columns."""
        return (
            self.billable
            + self.included
            + self.non_billable
            + self.internal
            + self.presales
        )


# --- Project ---


@dataclass
class BurndownPoint:
    """Cumulative budget consumption at the end of one period.

    Attributes:
        period: Period label
        period_key: Period key
        hours_used: Cumulative billable and included hours so far
        hours_remaining: Budget minus hours used (negative when overrun)
        ideal_burn: Remaining budget under an even burn across the window
    """

    period: str
    period_key: str
    hours_used: Decimal
    hours_remaining: Decimal
    ideal_burn: Decimal


@dataclass
class ProjectBillableMix:
    """Hours of one project split by billing status.

    ``non_billable`` includes the estimated non-billable overhead derived
    from the project's billable hours when an estimate is configured.
    """

    project_id: str
    name: str
    color: str
    billable: Decimal
    included: Decimal
    non_billable: Decimal
    internal: Decimal
    presales: Decimal

    @property
    def total(self) -> Decimal:
        """Sum of all status columns."""
        return (
            self.billable
            + self.included
            + self.non_billable
            + self.internal
            + self.presales
        )


@dataclass
class PhaseSummary:
    """Hours, money and margin percentage of one project phase."""

    phase_name: str
    hours: Decimal
    revenue: Decimal
    cost: Decimal
    margin: Decimal


@dataclass
class PhaseVelocityPoint:
    """Hours per phase for one period.

    Attributes:
        period: Period label
        period_key: Period key
        hours_by_phase: Hours keyed by phase name; every phase seen in the
            input appears in every period
    """

    period: str
    period_key: str
    hours_by_phase: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class TimelineBurndownPoint:
    """Planned versus actual cumulative hours for one project week."""

    period: str
    period_key: str
    planned: Decimal
    actual: Decimal


# --- Company ---


@dataclass
class CompanyPeriodPoint:
    """Company revenue and cost structure for one period.

    Attributes:
        period: Period label
        period_key: Period key
        revenue: Billable revenue
        overhead: Non-billable labor, estimated overhead and expenses
        total_cost: All labor, estimated overhead and expenses
        contribution_margin: Revenue minus total cost
        project_expenses: Project expenses in the period
        company_expenses: Company expense occurrences in the period
    """

    period: str
    period_key: str
    revenue: Decimal
    overhead: Decimal
    total_cost: Decimal
    contribution_margin: Decimal
    project_expenses: Decimal
    company_expenses: Decimal


@dataclass
class ExpenseBreakdownPoint:
    """Expense amounts per category for one period."""

    period: str
    period_key: str
    amounts: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class NonBillableTrendPoint:
    """Share of non-billable hours for one period, in percent of all hours."""

    period: str
    period_key: str
    total_percent: Decimal
    internal: Decimal
    presales: Decimal
    non_billable: Decimal


@dataclass
class UnbilledWorkRow:
    """Approved billable hours of one project that are not yet invoiced.

    Attributes:
        project_id: Project identifier
        project_name: Project name
        hours: Unbilled hours
        estimated_revenue: Unbilled hours at the members' bill rates
        oldest_entry_date: Date of the oldest unbilled entry
        age_in_days: Days between the oldest entry and the reference date
        entry_count: Number of unbilled entries
    """

    project_id: str
    project_name: str
    hours: Decimal
    estimated_revenue: Decimal
    oldest_entry_date: dt.date
    age_in_days: int
    entry_count: int


@dataclass
class BillingVelocityPoint:
    """Invoiced and collected amounts for one period."""

    period: str
    period_key: str
    invoiced: Decimal
    paid: Decimal
    outstanding: Decimal
    collection_rate: Decimal


@dataclass
class CollectionSummary:
    """Collection totals over a set of invoices."""

    invoiced: Decimal
    paid: Decimal
    outstanding: Decimal
    overdue_count: int
    collection_rate: Decimal


# --- Risk ---


@dataclass
class BudgetVelocityPoint:
    """Budget consumption versus schedule progress of one project.

    Attributes:
        project_id: Project identifier
        name: Project name
        client: Client name
        time_elapsed_percent: Share of the schedule elapsed (0-100)
        budget_consumed_percent: Share of the hour budget used (0-100)
        over_pace: Budget consumed strictly faster than time elapsed
        hours_used: Budget-consuming hours logged
        budget_hours: Hour budget
    """

    project_id: str
    name: str
    client: Optional[str]
    time_elapsed_percent: Decimal
    budget_consumed_percent: Decimal
    over_pace: bool
    hours_used: Decimal
    budget_hours: Decimal


@dataclass
class RedListRow:
    """A project whose budget consumption crossed the risk threshold.

    Attributes:
        project_id: Project identifier
        name: Project name
        client: Client name
        budget_hours: Hour budget
        hours_used: Budget-consuming hours logged
        consumed_percent: Hours used as a percentage of the budget (unclamped)
        overrun: Hours beyond the budget, 0 when within budget
        margin_percent: Current profit margin of the project's entries
    """

    project_id: str
    name: str
    client: Optional[str]
    budget_hours: Decimal
    hours_used: Decimal
    consumed_percent: Decimal
    overrun: Decimal
    margin_percent: Decimal


# --- Forecast ---


@dataclass
class ForecastPoint:
    """A projected period continuing a company revenue series."""

    period: str
    period_key: str
    revenue: Decimal
    total_cost: Decimal
    contribution_margin: Decimal
    is_forecast: bool = True


@dataclass
class MonthlyRevenue:
    """Actual billable revenue booked in one calendar month."""

    period_key: str
    revenue: Decimal


@dataclass
class RevenueBridgePoint:
    """One month of the revenue bridge.

    Past months carry only ``actual``, future months only ``forecast`` and
    the current month both. ``breakeven`` is the same for every month.
    """

    period: str
    period_key: str
    actual: Optional[Decimal]
    forecast: Optional[Decimal]
    breakeven: Decimal


def _json_value(value: Any) -> Any:
    """Convert a single value to a JSON-compatible type."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(_json_value(k)): _json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return value


def to_json_ready(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Convert result rows to plain dictionaries of JSON types.

    Decimals become floats, dates become ISO strings and enums their values.
    Mapping-valued fields (hours per phase, amounts per expense category)
    stay nested under their field name, so a phase or category name never
    replaces a column of the row, e.g.
    ``{"period": "Jan 2024", "hours_by_phase": {"Design": 12.5}}``.

    Args:
        rows: Dataclass rows or dictionaries

    Returns:
        One dictionary per row

    Example:
        >>> to_json_ready([MonthlyRevenue(period_key="2024-01", revenue=Decimal("1000.00"))])
        [{'period_key': '2024-01', 'revenue': 1000.0}]
    """
    result: List[Dict[str, Any]] = []
    for row in rows:
        data = asdict(row) if is_dataclass(row) else dict(row)
        result.append({key: _json_value(value) for key, value in data.items()})
    return result
