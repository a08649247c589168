"""Budget velocity: budget consumption against schedule progress.

A project is over pace when its share of budget consumed is strictly
greater than its share of schedule elapsed. Equal shares are on pace.
"""

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from analytics_engine.aggregators.project import budget_hours_used
from analytics_engine.aggregators.results import BudgetVelocityPoint
from analytics_engine.calculators.metric_formulas import (
    HUNDRED,
    ZERO,
    percent_of,
    round_hours,
    round_percent,
)
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)


def clamp_percent(value: Decimal) -> Decimal:
    """Clamp a percentage into ``[0, 100]``."""
    return max(ZERO, min(HUNDRED, value))


def time_elapsed_percent(start: dt.date, end: dt.date, today: dt.date) -> Decimal:
    """Share of a schedule elapsed at ``today``, clamped to ``[0, 100]``.

    A zero-length schedule is 100% elapsed once ``today`` reaches its end
    and 0% before.

    Example:
        >>> time_elapsed_percent(dt.date(2024, 1, 1), dt.date(2024, 1, 11), dt.date(2024, 1, 6))
        Decimal('50')
    """
    span = (end - start).days
    if span <= 0:
        return HUNDRED if today >= end else ZERO
    return clamp_percent(Decimal((today - start).days) / Decimal(span) * HUNDRED)


def build_budget_velocity(
    projects: Sequence[Project], entries: Sequence[TimeEntry], today: dt.date
) -> List[BudgetVelocityPoint]:
    """Build one budget velocity point per scheduled, budgeted project.

    Projects without a positive budget or without both a start and an end
    date are left out. Hours used are the project's billable and included
    hours.

    Args:
        projects: Projects to evaluate, in display order
        entries: Time entries of all projects
        today: Reference date for schedule progress

    Returns:
        One point per qualifying project, in input order
    """
    by_project: Dict[str, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        by_project[entry.project_id].append(entry)

    points: List[BudgetVelocityPoint] = []
    for project in projects:
        if not (project.has_budget and project.start_date and project.end_date):
            continue

        used = budget_hours_used(by_project.get(project.id, []))
        elapsed = time_elapsed_percent(project.start_date, project.end_date, today)
        consumed = clamp_percent(percent_of(used, project.budget_hours))

        points.append(
            BudgetVelocityPoint(
                project_id=project.id,
                name=project.name,
                client=project.client,
                time_elapsed_percent=round_percent(elapsed),
                budget_consumed_percent=round_percent(consumed),
                over_pace=consumed > elapsed,
                hours_used=round_hours(used),
                budget_hours=round_hours(project.budget_hours),
            )
        )

    over_pace = sum(1 for point in points if point.over_pace)
    logger.info(
        f"Budget velocity: {over_pace} of {len(points)} project(s) over pace as of {today}"
    )
    return points
