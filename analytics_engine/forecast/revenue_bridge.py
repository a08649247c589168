"""Revenue bridge: actual, planned and breakeven revenue per month.

The bridge spans ``months_back`` past months, the current month and
``months_forward`` future months around ``today``. Past months show actual
revenue only, future months the staffing forecast only and the current
month both. The breakeven line is flat.
"""

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from dateutil.relativedelta import relativedelta

from analytics_engine.aggregators.results import (
    CompanyPeriodPoint,
    MonthlyRevenue,
    RevenueBridgePoint,
)
from analytics_engine.calculators.metric_formulas import (
    ZERO,
    mean,
    revenue,
    round_currency,
)
from analytics_engine.forecast.staffing import (
    DEFAULT_TENTATIVE_WEIGHT,
    allocation_revenue,
)
from analytics_engine.models.allocation import ResourceAllocation
from analytics_engine.models.base import NumericInput, convert_to_decimal
from analytics_engine.models.enums import Granularity
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.period_calendar import period_key_of, period_label

logger = logging.getLogger(__name__)

DEFAULT_MONTHS_BACK = 5
DEFAULT_MONTHS_FORWARD = 3


def monthly_actual_revenue(entries: Sequence[TimeEntry]) -> List[MonthlyRevenue]:
    """Sum billable revenue per calendar month.

    Args:
        entries: Time entries (non-billable ones contribute nothing)

    Returns:
        One row per month with billable entries, chronological
    """
    by_month: Dict[str, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        if entry.is_billable:
            by_month[period_key_of(entry.date, Granularity.MONTHLY)].append(entry)

    return [
        MonthlyRevenue(period_key=key, revenue=round_currency(revenue(by_month[key])))
        for key in sorted(by_month)
    ]


def historical_monthly_costs(
    monthly_points: Sequence[CompanyPeriodPoint], today: dt.date
) -> List[Decimal]:
    """Total cost of each month up to today's month that carries any cost.

    Months without labor or expenses and months after ``today`` are left
    out, so the breakeven averages only the months with data.

    Args:
        monthly_points: Monthly company revenue/overhead series
        today: Reference date; later months are ignored

    Returns:
        Total cost per remaining month, chronological
    """
    current_key = period_key_of(today, Granularity.MONTHLY)
    return [
        point.total_cost
        for point in monthly_points
        if point.period_key <= current_key and point.total_cost > ZERO
    ]


def compute_monthly_breakeven(monthly_costs: Sequence[NumericInput]) -> Decimal:
    """Average monthly cost across however many months exist (0 for none).

    Example:
        >>> compute_monthly_breakeven([Decimal("900"), Decimal("1100")])
        Decimal('1000.00')
        >>> compute_monthly_breakeven([])
        Decimal('0.00')
    """
    return round_currency(mean([convert_to_decimal(value) for value in monthly_costs]))


def compute_revenue_bridge(
    allocations: Sequence[ResourceAllocation],
    monthly_actuals: Sequence[MonthlyRevenue],
    monthly_breakeven: NumericInput,
    today: dt.date,
    months_back: int = DEFAULT_MONTHS_BACK,
    months_forward: int = DEFAULT_MONTHS_FORWARD,
    tentative_weight: NumericInput = DEFAULT_TENTATIVE_WEIGHT,
) -> List[RevenueBridgePoint]:
    """Build the revenue bridge around the month containing ``today``.

    Args:
        allocations: Allocations with resolved bill rates
        monthly_actuals: Actual revenue per month; missing months count as 0
        monthly_breakeven: Flat breakeven amount per month
        today: Reference date selecting the current month
        months_back: Number of past months
        months_forward: Number of future months
        tentative_weight: Weight of tentative allocations

    Returns:
        ``months_back + 1 + months_forward`` points, chronological
    """
    actuals = {row.period_key: row.revenue for row in monthly_actuals}
    breakeven = round_currency(convert_to_decimal(monthly_breakeven))
    current = today.replace(day=1)

    points: List[RevenueBridgePoint] = []
    for offset in range(-months_back, months_forward + 1):
        month_start = current + relativedelta(months=offset)
        month_end = month_start + relativedelta(months=1) - dt.timedelta(days=1)
        key = period_key_of(month_start, Granularity.MONTHLY)

        actual = actuals.get(key, ZERO) if offset <= 0 else None
        forecast = (
            round_currency(
                allocation_revenue(allocations, month_start, month_end, tentative_weight)
            )
            if offset >= 0
            else None
        )
        points.append(
            RevenueBridgePoint(
                period=period_label(key, Granularity.MONTHLY),
                period_key=key,
                actual=round_currency(actual) if actual is not None else None,
                forecast=forecast,
                breakeven=breakeven,
            )
        )

    logger.debug(f"Built revenue bridge with {len(points)} month(s) around {current}")
    return points
