"""Risk detectors over project budgets."""

from analytics_engine.risk.budget_velocity import (
    build_budget_velocity,
    time_elapsed_percent,
)
from analytics_engine.risk.red_list import DEFAULT_RED_LIST_THRESHOLD, build_red_list

__all__ = [
    "build_budget_velocity",
    "time_elapsed_percent",
    "build_red_list",
    "DEFAULT_RED_LIST_THRESHOLD",
]
