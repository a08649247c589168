"""Aggregators turning raw records into period-bucketed report rows.

- employee: time distribution, utilization trend, profitability
- team: utilization, profitability, time mix per member
- project: burndown, profitability, billable mix, phases, timeline burndown
- company: revenue/overhead, expenses, non-billable trend, unbilled work,
  billing velocity
"""

from analytics_engine.aggregators.company import (
    aggregate_billing_velocity,
    aggregate_company_revenue_overhead,
    aggregate_expense_breakdown,
    aggregate_non_billable_trend,
    aggregate_unbilled_work,
    summarize_collections,
)
from analytics_engine.aggregators.employee import (
    aggregate_employee_profitability,
    aggregate_employee_time_distribution,
    aggregate_employee_utilization_trend,
)
from analytics_engine.aggregators.project import (
    aggregate_phase_distribution,
    aggregate_phase_velocity,
    aggregate_project_billable_mix,
    aggregate_project_burndown,
    aggregate_project_profitability,
    aggregate_project_timeline_burndown,
    estimated_non_billable_map,
)
from analytics_engine.aggregators.results import to_json_ready
from analytics_engine.aggregators.team import (
    aggregate_team_profitability,
    aggregate_team_time_mix,
    aggregate_team_utilization,
)

__all__ = [
    "aggregate_employee_time_distribution",
    "aggregate_employee_utilization_trend",
    "aggregate_employee_profitability",
    "aggregate_team_utilization",
    "aggregate_team_profitability",
    "aggregate_team_time_mix",
    "aggregate_project_burndown",
    "aggregate_project_profitability",
    "aggregate_project_billable_mix",
    "aggregate_phase_distribution",
    "aggregate_phase_velocity",
    "aggregate_project_timeline_burndown",
    "estimated_non_billable_map",
    "aggregate_company_revenue_overhead",
    "aggregate_expense_breakdown",
    "aggregate_non_billable_trend",
    "aggregate_unbilled_work",
    "aggregate_billing_velocity",
    "summarize_collections",
    "to_json_ready",
]
