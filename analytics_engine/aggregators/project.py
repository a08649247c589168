"""Project-level aggregations.

This module provides the project reports:
- Budget burndown per period over the report window
- Profitability per period, including estimated non-billable overhead
- Billable mix per project across the whole window
- Phase distribution and phase velocity
- Timeline burndown (planned vs. actual) across the project's own schedule

Estimated non-billable overhead is configured per project as a percentage of
billable hours. It is passed as a mapping of project id to percentage; see
``estimated_non_billable_map``.
"""

import datetime as dt
import logging
import math
from collections import OrderedDict, defaultdict
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from analytics_engine.aggregators.results import (
    BurndownPoint,
    PhaseSummary,
    PhaseVelocityPoint,
    ProfitabilityPoint,
    ProjectBillableMix,
    TimelineBurndownPoint,
)
from analytics_engine.calculators.metric_formulas import (
    HUNDRED,
    ZERO,
    average_cost_rate,
    billable_hours,
    cost,
    hours_by_status,
    margin_percent,
    profit,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    safe_ratio,
    total_hours,
)
from analytics_engine.models.base import NumericInput, convert_to_decimal
from analytics_engine.models.enums import BUDGET_CONSUMING, BillingStatus, Granularity
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.period_calendar import PeriodCalendar, period_start_of

logger = logging.getLogger(__name__)

UNASSIGNED_PHASE = "Unassigned"

EstimateMap = Mapping[str, NumericInput]


def estimated_non_billable_map(projects: Sequence[Project]) -> Dict[str, Decimal]:
    """Collect the configured non-billable estimates of projects.

    Args:
        projects: Projects to read the estimate from

    Returns:
        Project id to percentage, only for projects with a positive estimate
    """
    return {
        project.id: project.estimated_non_billable_percent
        for project in projects
        if project.estimated_non_billable_percent
    }


def estimated_percent_for(
    estimated_non_billable: Optional[EstimateMap], project_id: str
) -> Decimal:
    """Look up a project's non-billable estimate, 0 when not configured."""
    if not estimated_non_billable:
        return ZERO
    return convert_to_decimal(estimated_non_billable.get(project_id)) or ZERO


def budget_hours_used(entries: Sequence[TimeEntry]) -> Decimal:
    """Sum the hours that count against a project's budget."""
    return sum(
        (entry.hours for entry in entries if BUDGET_CONSUMING[entry.billing_status]),
        ZERO,
    )


def aggregate_project_burndown(
    entries: Sequence[TimeEntry],
    project: Project,
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[BurndownPoint]:
    """Calculate cumulative budget consumption per period.

    Hours used are the running total of billable and included hours of the
    project up to and including each period. The ideal burn spreads the
    budget evenly over the window's periods.

    Args:
        entries: Time entries (entries of other projects are ignored)
        project: Project with the hour budget
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period; an empty list when the project has no positive
        budget, which distinguishes "no budget" from "no hours used"

    Example:
        >>> points = aggregate_project_burndown(
        ...     entries, project, dt.date(2024, 1, 1), dt.date(2024, 3, 31), "monthly"
        ... )
        >>> [p.hours_used for p in points]
        [Decimal('20.0'), Decimal('50.0'), Decimal('50.0')]
    """
    calendar = PeriodCalendar(start, end, granularity)
    if not project.has_budget:
        logger.debug(f"Project {project.id} has no budget, burndown is undefined")
        return []

    budget = project.budget_hours
    project_entries = [entry for entry in entries if entry.project_id == project.id]
    grouped = calendar.group(project_entries)
    ideal_step = budget / max(len(calendar), 1)

    points: List[BurndownPoint] = []
    cumulative = ZERO
    for index, bucket in enumerate(calendar):
        cumulative += budget_hours_used(grouped[bucket.key])
        points.append(
            BurndownPoint(
                period=bucket.label,
                period_key=bucket.key,
                hours_used=round_hours(cumulative),
                hours_remaining=round_hours(budget - cumulative),
                ideal_burn=round_hours(budget - ideal_step * (index + 1)),
            )
        )
    return points


def aggregate_project_profitability(
    entries: Sequence[TimeEntry],
    project_id: str,
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
    estimated_non_billable: Optional[EstimateMap] = None,
) -> List[ProfitabilityPoint]:
    """Calculate a project's revenue, cost and profit per period.

    Revenue and cost use each entry's own rate snapshot. When the project
    has a non-billable estimate, every period's cost also carries
    ``billable hours * pct / 100 * average cost rate`` of that period.

    Args:
        entries: Time entries (entries of other projects are ignored)
        project_id: Project to report on
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly
        estimated_non_billable: Project id to estimated non-billable percent

    Returns:
        One point per period, chronological
    """
    calendar = PeriodCalendar(start, end, granularity)
    percent = estimated_percent_for(estimated_non_billable, project_id)
    grouped = calendar.group(entry for entry in entries if entry.project_id == project_id)

    points: List[ProfitabilityPoint] = []
    for bucket in calendar:
        period_entries = grouped[bucket.key]
        period_cost = cost(period_entries)
        if percent > ZERO:
            period_cost += (
                billable_hours(period_entries)
                * percent
                / HUNDRED
                * average_cost_rate(period_entries)
            )

        period_revenue = round_currency(revenue(period_entries))
        period_cost = round_currency(period_cost)
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


def aggregate_project_billable_mix(
    entries: Sequence[TimeEntry],
    projects: Sequence[Project],
    estimated_non_billable: Optional[EstimateMap] = None,
) -> List[ProjectBillableMix]:
    """Split each project's hours across billing statuses.

    Estimated non-billable hours (billable hours times the project's
    estimate) are added to the ``non_billable`` column. Projects with no
    hours at all are left out.

    Args:
        entries: Time entries narrowed to the window
        projects: Projects to report on, in display order
        estimated_non_billable: Project id to estimated non-billable percent

    Returns:
        One row per project with hours, in input order
    """
    by_project: Dict[str, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        by_project[entry.project_id].append(entry)

    rows: List[ProjectBillableMix] = []
    for project in projects:
        mix = hours_by_status(by_project.get(project.id, []))
        percent = estimated_percent_for(estimated_non_billable, project.id)
        if percent > ZERO:
            mix[BillingStatus.NON_BILLABLE] += (
                mix[BillingStatus.BILLABLE] * percent / HUNDRED
            )

        row = ProjectBillableMix(
            project_id=project.id,
            name=project.name,
            color=project.color,
            billable=round_hours(mix[BillingStatus.BILLABLE]),
            included=round_hours(mix[BillingStatus.INCLUDED]),
            non_billable=round_hours(mix[BillingStatus.NON_BILLABLE]),
            internal=round_hours(mix[BillingStatus.INTERNAL]),
            presales=round_hours(mix[BillingStatus.PRESALES]),
        )
        if sum(mix.values(), ZERO) > ZERO:
            rows.append(row)

    logger.debug(
        f"Billable mix kept {len(rows)} of {len(projects)} project(s) with hours"
    )
    return rows


def aggregate_phase_distribution(entries: Sequence[TimeEntry]) -> List[PhaseSummary]:
    """Sum hours, revenue and cost per project phase.

    Entries without a phase are grouped under ``"Unassigned"``. Phases
    appear in the order they are first seen.

    Args:
        entries: Time entries of a project

    Returns:
        One row per phase with its margin percentage
    """
    groups: Dict[str, List[TimeEntry]] = OrderedDict()
    for entry in entries:
        groups.setdefault(entry.phase_name or UNASSIGNED_PHASE, []).append(entry)

    rows: List[PhaseSummary] = []
    for phase_name, phase_entries in groups.items():
        phase_revenue = revenue(phase_entries)
        phase_cost = cost(phase_entries)
        rows.append(
            PhaseSummary(
                phase_name=phase_name,
                hours=round_hours(total_hours(phase_entries)),
                revenue=round_currency(phase_revenue),
                cost=round_currency(phase_cost),
                margin=round_percent(
                    margin_percent(profit(phase_revenue, phase_cost), phase_revenue)
                ),
            )
        )
    return rows


def aggregate_phase_velocity(
    entries: Sequence[TimeEntry],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[PhaseVelocityPoint]:
    """Sum hours per phase for every period of a window.

    Every phase that has hours anywhere in the window appears in every
    period, with 0 where it had none.

    Args:
        entries: Time entries of a project
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period, chronological
    """
    calendar = PeriodCalendar(start, end, granularity)
    grouped = calendar.group(entries)

    phase_names: List[str] = []
    hours: Dict[Tuple[str, str], Decimal] = defaultdict(lambda: ZERO)
    for period_key, period_entries in grouped.items():
        for entry in period_entries:
            phase_name = entry.phase_name or UNASSIGNED_PHASE
            if phase_name not in phase_names:
                phase_names.append(phase_name)
            hours[(period_key, phase_name)] += entry.hours

    return [
        PhaseVelocityPoint(
            period=bucket.label,
            period_key=bucket.key,
            hours_by_phase={
                name: round_hours(hours[(bucket.key, name)]) for name in phase_names
            },
        )
        for bucket in calendar
    ]


def aggregate_project_timeline_burndown(
    entries: Sequence[TimeEntry], project: Project
) -> List[TimelineBurndownPoint]:
    """Compare planned and actual cumulative hours week by week.

    The budget is planned evenly over the project's schedule:
    ``budget / max(1, ceil(days / 7))`` per week, capped at the budget.
    Actual hours are the running total of all the project's hours per ISO
    week, counted from the week containing the start date.

    Args:
        entries: Time entries (entries of other projects are ignored)
        project: Project with budget, start date and end date

    Returns:
        One point per week of the schedule; an empty list when the project
        has no positive budget or no complete schedule
    """
    if not (project.has_budget and project.start_date and project.end_date):
        return []

    budget = project.budget_hours
    schedule_days = (project.end_date - project.start_date).days
    planned_per_week = budget / max(1, math.ceil(schedule_days / 7))

    calendar = PeriodCalendar(
        period_start_of(project.start_date, Granularity.WEEKLY),
        project.end_date,
        Granularity.WEEKLY,
    )
    grouped = calendar.group(entry for entry in entries if entry.project_id == project.id)

    points: List[TimelineBurndownPoint] = []
    actual = ZERO
    for index, bucket in enumerate(calendar):
        actual += total_hours(grouped[bucket.key])
        points.append(
            TimelineBurndownPoint(
                period=bucket.label,
                period_key=bucket.key,
                planned=round_hours(min(planned_per_week * (index + 1), budget)),
                actual=round_hours(actual),
            )
        )
    return points


def project_margin_percent(entries: Sequence[TimeEntry]) -> Decimal:
    """Current margin percentage of a project's entries (unrounded)."""
    project_revenue = revenue(entries)
    return margin_percent(profit(project_revenue, cost(entries)), project_revenue)


def budget_consumed_ratio(used: Decimal, budget: Optional[Decimal]) -> Decimal:
    """Hours used divided by the budget, 0 when there is no budget."""
    return safe_ratio(used, budget or ZERO)
