"""Employee-level aggregations.

This module provides the reports shown for a single member:
- Time distribution across billing statuses (single snapshot)
- Utilization trend per period against expected hours
- Profitability per period at the member's own rates

Callers pass the member's entries already narrowed to the report window
and approval filter.
"""

import datetime as dt
import logging
from typing import List, Optional, Sequence, Union

from analytics_engine.aggregators.results import (
    ProfitabilityPoint,
    StatusHours,
    UtilizationPoint,
)
from analytics_engine.calculators.metric_formulas import (
    billable_hours,
    cost,
    hours_by_status,
    profit,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    total_hours,
    utilization_percent,
)
from analytics_engine.models.enums import Granularity
from analytics_engine.models.member import Member
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.capacity import CapacityModel
from analytics_engine.periods.period_calendar import PeriodCalendar

logger = logging.getLogger(__name__)


def aggregate_employee_time_distribution(
    entries: Sequence[TimeEntry],
) -> List[StatusHours]:
    """Sum a member's hours per billing status.

    Only statuses that occur in the input are returned, in first-seen order.
    No entries yields an empty list rather than zero-filled rows.

    Args:
        entries: The member's time entries

    Returns:
        One row per billing status present

    Example:
        >>> rows = aggregate_employee_time_distribution(entries)
        >>> [(r.status.value, r.hours) for r in rows]
        [('billable', Decimal('7.0')), ('internal', Decimal('3.0'))]
    """
    totals = hours_by_status(entries, include_empty=False)
    return [
        StatusHours(status=status, hours=round_hours(hours))
        for status, hours in totals.items()
    ]


def aggregate_employee_utilization_trend(
    entries: Sequence[TimeEntry],
    member: Member,
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
    capacity: Optional[CapacityModel] = None,
) -> List[UtilizationPoint]:
    """Calculate a member's utilization for every period of a window.

    Expected hours come from the capacity model for each (clipped) bucket.
    A member with a weekly target of 0 has 0 expected hours, so both
    utilizations are 0 for every period.

    Args:
        entries: The member's time entries
        member: The member whose capacity is used
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly
        capacity: Capacity model; defaults to a standard week with no holidays

    Returns:
        One point per period, chronological, with empty periods at 0

    Raises:
        InvalidGranularityError: If the granularity is not supported
        InvalidDateRangeError: If the window is missing or reversed
    """
    calendar = PeriodCalendar(start, end, granularity)
    capacity = capacity or CapacityModel()
    grouped = calendar.group(entries)

    points: List[UtilizationPoint] = []
    for bucket in calendar:
        period_entries = grouped[bucket.key]
        actual = total_hours(period_entries)
        billable = billable_hours(period_entries)
        expected = capacity.expected_hours_for_bucket(member, bucket)

        points.append(
            UtilizationPoint(
                period=bucket.label,
                period_key=bucket.key,
                billable_util=round_percent(utilization_percent(billable, expected)),
                total_util=round_percent(utilization_percent(actual, expected)),
                target=round_hours(expected),
                billable_hours=round_hours(billable),
                total_hours=round_hours(actual),
            )
        )

    logger.debug(
        f"Built utilization trend for member {member.id} with {len(points)} period(s)"
    )
    return points


def aggregate_employee_profitability(
    entries: Sequence[TimeEntry],
    member: Member,
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[ProfitabilityPoint]:
    """Calculate a member's revenue, cost and profit per period.

    Revenue uses billable entries at the member's hourly rate; cost uses
    all entries at the member's cost rate.

    Args:
        entries: The member's time entries
        member: Member providing the rates
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period, chronological, with empty periods at 0

    Example:
        >>> member = Member(id="u1", hourly_rate=100, cost_rate=50)
        >>> points = aggregate_employee_profitability(
        ...     entries, member, dt.date(2024, 1, 1), dt.date(2024, 1, 31), "monthly"
        ... )
        >>> points[0].revenue, points[0].cost, points[0].profit
        (Decimal('1000.00'), Decimal('750.00'), Decimal('250.00'))
    """
    calendar = PeriodCalendar(start, end, granularity)
    grouped = calendar.group(entries)

    points: List[ProfitabilityPoint] = []
    for bucket in calendar:
        period_entries = grouped[bucket.key]
        period_revenue = round_currency(revenue(period_entries, member.hourly_rate))
        period_cost = round_currency(cost(period_entries, member.cost_rate))
        points.append(
            ProfitabilityPoint(
                period=bucket.label,
                period_key=bucket.key,
                revenue=period_revenue,
                cost=period_cost,
                profit=profit(period_revenue, period_cost),
            )
        )

    return points
