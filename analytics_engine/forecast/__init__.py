"""Forecasts: moving average, staffing forecast and revenue bridge."""

from analytics_engine.forecast.moving_average import calculate_forecast
from analytics_engine.forecast.revenue_bridge import (
    compute_monthly_breakeven,
    compute_revenue_bridge,
    historical_monthly_costs,
    monthly_actual_revenue,
)
from analytics_engine.forecast.staffing import (
    allocation_revenue,
    compute_staffing_forecast,
    resolve_allocations,
    resolve_bill_rate,
)

__all__ = [
    "calculate_forecast",
    "compute_staffing_forecast",
    "resolve_bill_rate",
    "resolve_allocations",
    "allocation_revenue",
    "monthly_actual_revenue",
    "compute_monthly_breakeven",
    "compute_revenue_bridge",
    "historical_monthly_costs",
]
