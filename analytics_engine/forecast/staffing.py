"""Staffing-based revenue forecasts from resource allocations.

Planned revenue of an allocation over a window is::

    working days in the overlap * hours per day * bill rate * weight

where working days are Monday to Friday, confirmed allocations weigh 1.0,
tentative ones a configurable weight (0.5 by default) and completed ones
are left out. There is no partial-day proration.
"""

import datetime as dt
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from analytics_engine.calculators.metric_formulas import ZERO, round_currency
from analytics_engine.models.allocation import ResourceAllocation
from analytics_engine.models.base import NumericInput, convert_to_decimal
from analytics_engine.models.enums import (
    ALLOCATION_COUNTS_FORWARD,
    AllocationStatus,
    RateMode,
)
from analytics_engine.models.member import Member
from analytics_engine.models.project import Project
from analytics_engine.periods.capacity import count_business_days

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_TENTATIVE_WEIGHT = Decimal("0.5")


def allocation_weight(
    status: AllocationStatus, tentative_weight: NumericInput = DEFAULT_TENTATIVE_WEIGHT
) -> Decimal:
    """Weight of an allocation status in forward-looking forecasts."""
    weights = {
        AllocationStatus.CONFIRMED: Decimal("1"),
        AllocationStatus.TENTATIVE: convert_to_decimal(tentative_weight),
        AllocationStatus.COMPLETED: ZERO,
    }
    return weights[status]


def resolve_bill_rate(
    allocation: ResourceAllocation,
    project: Optional[Project],
    member: Optional[Member],
) -> Decimal:
    """Resolve the hourly bill rate of an allocation.

    An explicit rate on the allocation wins. Otherwise a project in
    project-rate mode bills its flat rate and any other project bills the
    member's hourly rate. Missing data resolves to 0.

    Example:
        >>> project = Project(id="p1", name="Fixed", rate_mode="project_rate", project_rate=120)
        >>> resolve_bill_rate(allocation, project, member)
        Decimal('120')
    """
    if allocation.bill_rate is not None:
        return allocation.bill_rate

    member_rate = member.hourly_rate if member else ZERO
    if project is None:
        return member_rate

    rates = {
        RateMode.PROJECT_RATE: (
            project.project_rate if project.project_rate is not None else member_rate
        ),
        RateMode.EMPLOYEE_RATES: member_rate,
    }
    return rates[project.rate_mode]


def resolve_allocations(
    allocations: Iterable[ResourceAllocation],
    projects: Sequence[Project],
    members: Sequence[Member],
) -> List[ResourceAllocation]:
    """Return copies of allocations with their bill rate resolved.

    Args:
        allocations: Allocations, possibly without bill rates
        projects: Projects referenced by the allocations
        members: Members referenced by the allocations

    Returns:
        Allocations whose ``bill_rate`` is always set
    """
    projects_by_id: Dict[str, Project] = {project.id: project for project in projects}
    members_by_id: Dict[str, Member] = {member.id: member for member in members}

    resolved: List[ResourceAllocation] = []
    for allocation in allocations:
        project = projects_by_id.get(allocation.project_id)
        member = members_by_id.get(allocation.user_id)
        if project is None or member is None:
            logger.debug(
                f"Allocation of {allocation.user_id} on {allocation.project_id} "
                f"references unknown project or member"
            )
        rate = resolve_bill_rate(allocation, project, member)
        resolved.append(allocation.model_copy(update={"bill_rate": rate}))
    return resolved


def allocation_revenue(
    allocations: Iterable[ResourceAllocation],
    start: dt.date,
    end: dt.date,
    tentative_weight: NumericInput = DEFAULT_TENTATIVE_WEIGHT,
) -> Decimal:
    """Planned revenue of allocations over an inclusive date range, unrounded.

    Args:
        allocations: Allocations with resolved bill rates
        start: First day of the range
        end: Last day of the range
        tentative_weight: Weight of tentative allocations

    Returns:
        Weighted planned revenue
    """
    total = ZERO
    for allocation in allocations:
        if not ALLOCATION_COUNTS_FORWARD[allocation.status]:
            continue
        working_days = count_business_days(
            max(allocation.start_date, start), min(allocation.end_date, end)
        )
        if working_days == 0:
            continue
        total += (
            working_days
            * allocation.hours_per_day
            * (allocation.bill_rate or ZERO)
            * allocation_weight(allocation.status, tentative_weight)
        )
    return total


def compute_staffing_forecast(
    allocations: Sequence[ResourceAllocation],
    today: dt.date,
    window_days: int = DEFAULT_WINDOW_DAYS,
    tentative_weight: NumericInput = DEFAULT_TENTATIVE_WEIGHT,
) -> Decimal:
    """Forecast revenue from allocations over the next ``window_days`` days.

    The window is ``[today, today + window_days]`` inclusive.

    Args:
        allocations: Allocations with resolved bill rates
        today: First day of the window
        window_days: Length of the window in days
        tentative_weight: Weight of tentative allocations

    Returns:
        Forecast revenue, rounded to currency precision

    Example:
        >>> compute_staffing_forecast([confirmed_8h_at_100], dt.date(2024, 1, 1))
        Decimal('18400.00')
    """
    window_end = today + dt.timedelta(days=window_days)
    total = round_currency(
        allocation_revenue(allocations, today, window_end, tentative_weight)
    )
    logger.info(
        f"Staffing forecast {today}..{window_end}: {total} "
        f"from {len(allocations)} allocation(s)"
    )
    return total
