"""Report service building the analytics report payloads.

The service is the seam between loaded data and the pure engine: it narrows
the snapshot by a ``ReportQuery``, calls the aggregators, risk detectors and
forecasts, and returns JSON-ready payloads. One payload per report type:

- employee: time distribution, utilization trend, profitability
- team: utilization, profitability, time mix
- project: burndown, profitability, billable mix, phases, timeline
- company: revenue/overhead, expenses, non-billable trend, unbilled work,
  billing velocity, collections
- forecast: moving-average forecast, staffing forecast, revenue bridge
- risk: budget velocity, red list
"""

import datetime as dt
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

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
from analytics_engine.aggregators.results import CompanyPeriodPoint, to_json_ready
from analytics_engine.aggregators.team import (
    aggregate_team_profitability,
    aggregate_team_time_mix,
    aggregate_team_utilization,
)
from analytics_engine.config.settings import AnalyticsConfig
from analytics_engine.errors import EntityNotFoundError, UnknownReportTypeError
from analytics_engine.forecast.moving_average import calculate_forecast
from analytics_engine.forecast.revenue_bridge import (
    compute_monthly_breakeven,
    compute_revenue_bridge,
    historical_monthly_costs,
    monthly_actual_revenue,
)
from analytics_engine.forecast.staffing import (
    compute_staffing_forecast,
    resolve_allocations,
)
from analytics_engine.models.enums import APPROVAL_FILTER_STATUSES, Granularity
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.capacity import CapacityModel
from analytics_engine.query import ReportQuery
from analytics_engine.readers.snapshot_reader import Snapshot
from analytics_engine.risk.budget_velocity import build_budget_velocity
from analytics_engine.risk.red_list import build_red_list
from analytics_engine.utils.logging_utils import (
    LogContext,
    generate_correlation_id,
    log_function_call,
)

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]


class ReportType(str, Enum):
    """Report families served by the report service."""

    EMPLOYEE = "employee"
    TEAM = "team"
    PROJECT = "project"
    COMPANY = "company"
    FORECAST = "forecast"
    RISK = "risk"

    @classmethod
    def parse(cls, value: Union[str, "ReportType"]) -> "ReportType":
        """Parse a report type token.

        Raises:
            UnknownReportTypeError: If the token names no report
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise UnknownReportTypeError(
                f"Unknown report type: {value!r}. Must be one of: {valid}",
                field="type",
            )


class ReportService:
    """Builds report payloads from a snapshot.

    Every call works on its own query; the service keeps no per-request
    state, so one instance can serve many reports.

    Attributes:
        snapshot: Loaded entity collections
        config: Settings providing thresholds and forecast horizons
        capacity: Capacity model with the snapshot's holidays

    Example:
        >>> service = ReportService(snapshot, config)
        >>> query = ReportQuery.from_params(
        ...     {"startDate": "2024-01-01", "endDate": "2024-03-31"}
        ... )
        >>> payload = service.build("company", query, today=dt.date(2024, 4, 2))
        >>> sorted(payload)[:2]
        ['billing_velocity', 'collections']
    """

    def __init__(self, snapshot: Snapshot, config: Optional[AnalyticsConfig] = None):
        """Initialize the report service.

        Args:
            snapshot: Loaded entity collections
            config: Settings; defaults to built-in defaults
        """
        self.snapshot = snapshot
        self.config = config or AnalyticsConfig()
        self.capacity = CapacityModel(
            standard_weekly_hours=self.config.standard_weekly_hours,
            holidays=snapshot.holidays,
        )
        self._builders: Dict[ReportType, Callable[[ReportQuery, dt.date], Payload]] = {
            ReportType.EMPLOYEE: self.employee_report,
            ReportType.TEAM: self.team_report,
            ReportType.PROJECT: self.project_report,
            ReportType.COMPANY: self.company_report,
            ReportType.FORECAST: self.forecast_report,
            ReportType.RISK: self.risk_report,
        }

    @log_function_call(level="INFO")
    def build(
        self,
        report_type: Union[str, ReportType],
        query: ReportQuery,
        today: dt.date,
    ) -> Payload:
        """Build the payload of one report.

        Args:
            report_type: Report family token
            query: Validated window and filter
            today: Reference date for ages, pacing and forecasts

        Returns:
            JSON-ready payload

        Raises:
            UnknownReportTypeError: If the report type is unknown
            EntityNotFoundError: If the requested member or project is unknown
        """
        report = ReportType.parse(report_type)
        with LogContext(
            correlation_id=generate_correlation_id(),
            report_type=report.value,
            granularity=query.granularity.value,
        ):
            logger.info(
                f"Building {report.value} report for "
                f"{query.start_date}..{query.end_date} ({query.approval_filter.value})"
            )
            return self._builders[report](query, today)

    def _approved(self, entries: List[TimeEntry], query: ReportQuery) -> List[TimeEntry]:
        """Apply only the approval filter, for lifetime figures."""
        statuses = APPROVAL_FILTER_STATUSES[query.approval_filter]
        return [entry for entry in entries if entry.approval_status in statuses]

    def employee_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Employee report; lists members when no employee is selected."""
        if not query.employee_id:
            return {
                "members": [
                    {"id": member.id, "name": member.display_name}
                    for member in self.snapshot.members
                ]
            }

        member = self.snapshot.find_member(query.employee_id)
        if member is None:
            raise EntityNotFoundError(
                f"Employee not found: {query.employee_id}", field="employee_id"
            )

        entries = [
            entry
            for entry in query.filter_entries(self.snapshot.entries)
            if entry.user_id == member.id
        ]
        window = (query.start_date, query.end_date, query.granularity)
        return {
            "time_distribution": to_json_ready(
                aggregate_employee_time_distribution(entries)
            ),
            "utilization_trend": to_json_ready(
                aggregate_employee_utilization_trend(
                    entries, member, *window, capacity=self.capacity
                )
            ),
            "profitability": to_json_ready(
                aggregate_employee_profitability(entries, member, *window)
            ),
        }

    def team_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Team report with one row per member."""
        entries = query.filter_entries(self.snapshot.entries)
        members = self.snapshot.members
        return {
            "utilization": to_json_ready(
                aggregate_team_utilization(
                    entries,
                    members,
                    query.start_date,
                    query.end_date,
                    query.granularity,
                    capacity=self.capacity,
                )
            ),
            "profitability": to_json_ready(aggregate_team_profitability(entries, members)),
            "time_mix": to_json_ready(aggregate_team_time_mix(entries, members)),
        }

    def project_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Project report; lists projects when no project is selected."""
        entries = query.filter_entries(self.snapshot.entries)
        projects = self.snapshot.projects
        estimates = estimated_non_billable_map(projects)
        billable_mix = to_json_ready(
            aggregate_project_billable_mix(entries, projects, estimates)
        )

        if not query.project_id:
            return {
                "projects": [
                    {
                        "id": project.id,
                        "name": project.name,
                        "client": project.client,
                        "budget_hours": (
                            float(project.budget_hours)
                            if project.budget_hours is not None
                            else None
                        ),
                        "active": project.active,
                    }
                    for project in projects
                ],
                "billable_mix": billable_mix,
            }

        project = self.snapshot.find_project(query.project_id)
        if project is None:
            raise EntityNotFoundError(
                f"Project not found: {query.project_id}", field="project_id"
            )

        project_entries = [entry for entry in entries if entry.project_id == project.id]
        window = (query.start_date, query.end_date, query.granularity)
        return {
            "burndown": to_json_ready(
                aggregate_project_burndown(project_entries, project, *window)
            ),
            "profitability": to_json_ready(
                aggregate_project_profitability(
                    project_entries, project.id, *window, estimated_non_billable=estimates
                )
            ),
            "billable_mix": billable_mix,
            "phase_distribution": to_json_ready(
                aggregate_phase_distribution(project_entries)
            ),
            "phase_velocity": to_json_ready(
                aggregate_phase_velocity(project_entries, *window)
            ),
            "timeline_burndown": to_json_ready(
                aggregate_project_timeline_burndown(
                    self._approved(self.snapshot.entries, query), project
                )
            ),
        }

    def company_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Company report over the query window."""
        entries = query.filter_entries(self.snapshot.entries)
        project_expenses = query.filter_expenses(self.snapshot.project_expenses)
        company_expenses = query.materialize_company_expenses(
            self.snapshot.company_expenses
        )
        window = (query.start_date, query.end_date, query.granularity)
        return {
            "revenue_overhead": to_json_ready(
                aggregate_company_revenue_overhead(
                    entries,
                    *window,
                    project_expenses=project_expenses,
                    company_expenses=company_expenses,
                    estimated_non_billable=estimated_non_billable_map(
                        self.snapshot.projects
                    ),
                )
            ),
            "expense_breakdown": to_json_ready(
                aggregate_expense_breakdown(project_expenses, company_expenses, *window)
            ),
            "non_billable_trend": to_json_ready(
                aggregate_non_billable_trend(entries, *window)
            ),
            "unbilled_work": to_json_ready(
                aggregate_unbilled_work(entries, today, self.snapshot.projects)
            ),
            "billing_velocity": to_json_ready(
                aggregate_billing_velocity(self.snapshot.invoices, *window)
            ),
            "collections": to_json_ready(
                [summarize_collections(self.snapshot.invoices, today)]
            )[0],
        }

    def _company_series(
        self,
        query: ReportQuery,
        entries: List[TimeEntry],
        granularity: Granularity,
    ) -> List[CompanyPeriodPoint]:
        """Company revenue/overhead series of the query window."""
        return aggregate_company_revenue_overhead(
            entries,
            query.start_date,
            query.end_date,
            granularity,
            project_expenses=query.filter_expenses(self.snapshot.project_expenses),
            company_expenses=query.materialize_company_expenses(
                self.snapshot.company_expenses
            ),
            estimated_non_billable=estimated_non_billable_map(self.snapshot.projects),
        )

    def forecast_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Forecast report: moving average, staffing forecast, revenue bridge.

        The moving-average history and the breakeven line both come from the
        company revenue/overhead series of the query window. The breakeven
        averages the calendar months up to today that carry any cost.
        """
        entries = query.filter_entries(self.snapshot.entries)
        history = self._company_series(query, entries, query.granularity)
        forecast = calculate_forecast(
            history,
            self.config.forecast_periods,
            granularity=query.granularity,
            min_points=self.config.forecast_min_points,
        )

        allocations = resolve_allocations(
            self.snapshot.allocations, self.snapshot.projects, self.snapshot.members
        )
        staffing = compute_staffing_forecast(
            allocations,
            today,
            window_days=self.config.staffing_window_days,
            tentative_weight=self.config.tentative_allocation_weight,
        )

        monthly_history = (
            history
            if query.granularity == Granularity.MONTHLY
            else self._company_series(query, entries, Granularity.MONTHLY)
        )
        bridge = compute_revenue_bridge(
            allocations,
            monthly_actual_revenue(self._approved(self.snapshot.entries, query)),
            compute_monthly_breakeven(
                historical_monthly_costs(monthly_history, today)
            ),
            today,
            months_back=self.config.bridge_months_back,
            months_forward=self.config.bridge_months_forward,
            tentative_weight=self.config.tentative_allocation_weight,
        )

        return {
            "history": to_json_ready(history),
            "forecast": to_json_ready(forecast),
            "staffing_forecast": float(staffing),
            "revenue_bridge": to_json_ready(bridge),
        }

    def risk_report(self, query: ReportQuery, today: dt.date) -> Payload:
        """Risk report over each project's lifetime hours.

        Budgets are consumed over a project's whole life, so only the
        approval filter applies here, not the date window.
        """
        entries = self._approved(self.snapshot.entries, query)
        projects = self.snapshot.projects
        return {
            "budget_velocity": to_json_ready(
                build_budget_velocity(projects, entries, today)
            ),
            "red_list": to_json_ready(
                build_red_list(projects, entries, self.config.red_list_threshold)
            ),
        }
