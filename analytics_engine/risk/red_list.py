"""Red List: projects whose budget consumption crossed a risk threshold."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from analytics_engine.aggregators.project import (
    budget_consumed_ratio,
    budget_hours_used,
    project_margin_percent,
)
from analytics_engine.aggregators.results import RedListRow
from analytics_engine.calculators.metric_formulas import (
    HUNDRED,
    ZERO,
    round_hours,
    round_percent,
)
from analytics_engine.models.base import NumericInput, convert_to_decimal
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

DEFAULT_RED_LIST_THRESHOLD = Decimal("0.90")


def build_red_list(
    projects: Sequence[Project],
    entries: Sequence[TimeEntry],
    threshold: NumericInput = DEFAULT_RED_LIST_THRESHOLD,
) -> List[RedListRow]:
    """Find projects that used at least ``threshold`` of their budget.

    A project qualifies when it has a positive budget and
    ``hours used / budget >= threshold`` (inclusive). Hours used are the
    project's billable and included hours. Rows keep the input order;
    sorting for display is left to the caller.

    Args:
        projects: Projects to evaluate
        entries: Time entries of all projects
        threshold: Consumption ratio at which a project is flagged

    Returns:
        One row per qualifying project

    Example:
        >>> rows = build_red_list([project_100h], entries_90h)
        >>> rows[0].consumed_percent, rows[0].overrun
        (Decimal('90.0'), Decimal('0.0'))
    """
    threshold = convert_to_decimal(threshold)
    by_project: Dict[str, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        by_project[entry.project_id].append(entry)

    rows: List[RedListRow] = []
    for project in projects:
        if not project.has_budget:
            continue

        project_entries = by_project.get(project.id, [])
        used = budget_hours_used(project_entries)
        ratio = budget_consumed_ratio(used, project.budget_hours)
        if ratio < threshold:
            continue

        rows.append(
            RedListRow(
                project_id=project.id,
                name=project.name,
                client=project.client,
                budget_hours=round_hours(project.budget_hours),
                hours_used=round_hours(used),
                consumed_percent=round_percent(ratio * HUNDRED),
                overrun=round_hours(max(ZERO, used - project.budget_hours)),
                margin_percent=round_percent(project_margin_percent(project_entries)),
            )
        )

    logger.info(f"Red list flagged {len(rows)} of {len(projects)} project(s)")
    return rows
