"""Moving-average continuation of a company revenue series."""

import logging
from typing import List, Sequence, Union

from analytics_engine.aggregators.results import CompanyPeriodPoint, ForecastPoint
from analytics_engine.calculators.metric_formulas import mean, round_currency
from analytics_engine.models.enums import Granularity
from analytics_engine.periods.period_calendar import period_label, shift_period_key

logger = logging.getLogger(__name__)

# Number of trailing periods averaged into every forecast period
MOVING_AVERAGE_WINDOW = 3
DEFAULT_MIN_POINTS = 3


def calculate_forecast(
    points: Sequence[Union[CompanyPeriodPoint, ForecastPoint]],
    periods_forward: int,
    granularity: Union[str, Granularity] = Granularity.MONTHLY,
    min_points: int = DEFAULT_MIN_POINTS,
) -> List[ForecastPoint]:
    """Project a revenue series forward as a flat moving average.

    Every forecast period carries the mean revenue and total cost of the
    last three historical points; the contribution margin is their
    difference. No forecast is made from fewer than ``min_points`` points.

    Args:
        points: Chronological historical points with ``period_key``,
            ``revenue`` and ``total_cost``
        periods_forward: Number of periods to project
        granularity: Granularity of the series' period keys
        min_points: Minimum number of historical points required

    Returns:
        Forecast points continuing the series, or an empty list when there
        is too little history

    Example:
        >>> forecast = calculate_forecast(history, 1)
        >>> forecast[0].revenue, forecast[0].is_forecast
        (Decimal('1100.00'), True)
    """
    granularity = Granularity.parse(granularity)
    if len(points) < max(min_points, 1) or periods_forward <= 0:
        logger.debug(
            f"Not forecasting from {len(points)} point(s), at least {min_points} required"
        )
        return []

    window = list(points)[-MOVING_AVERAGE_WINDOW:]
    average_revenue = round_currency(mean([point.revenue for point in window]))
    average_cost = round_currency(mean([point.total_cost for point in window]))
    last_key = window[-1].period_key

    forecast: List[ForecastPoint] = []
    for step in range(1, periods_forward + 1):
        key = shift_period_key(last_key, granularity, step)
        forecast.append(
            ForecastPoint(
                period=period_label(key, granularity),
                period_key=key,
                revenue=average_revenue,
                total_cost=average_cost,
                contribution_margin=average_revenue - average_cost,
            )
        )
    return forecast
