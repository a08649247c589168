"""Calculator modules for the analytics engine."""

from analytics_engine.calculators.expense_expansion import expand_recurring_expenses
from analytics_engine.calculators.metric_formulas import (
    average_cost_rate,
    billable_hours,
    cost,
    hours_by_status,
    margin_percent,
    mean,
    percent_of,
    profit,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    safe_ratio,
    total_hours,
    utilization_percent,
)

__all__ = [
    # expense_expansion
    "expand_recurring_expenses",
    # metric_formulas
    "average_cost_rate",
    "billable_hours",
    "cost",
    "hours_by_status",
    "margin_percent",
    "mean",
    "percent_of",
    "profit",
    "revenue",
    "round_currency",
    "round_hours",
    "round_percent",
    "safe_ratio",
    "total_hours",
    "utilization_percent",
]
