"""Team-level aggregations.

Each report returns exactly one row per member, in the order the members
were given. A member without matching entries still gets a row with zero
values. Entries logged by members outside the given list are ignored.
"""

import datetime as dt
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Union

from analytics_engine.aggregators.results import (
    MemberProfitability,
    MemberTimeMix,
    MemberUtilization,
)
from analytics_engine.calculators.metric_formulas import (
    billable_hours,
    cost,
    hours_by_status,
    margin_percent,
    profit,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    total_hours,
    utilization_percent,
)
from analytics_engine.models.enums import BillingStatus, Granularity
from analytics_engine.models.member import Member
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.capacity import CapacityModel
from analytics_engine.periods.period_calendar import validate_date_range

logger = logging.getLogger(__name__)


def _entries_by_member(
    entries: Sequence[TimeEntry], members: Sequence[Member]
) -> Dict[str, List[TimeEntry]]:
    """Group entries by member, dropping entries of unknown members."""
    known = {member.id for member in members}
    grouped: Dict[str, List[TimeEntry]] = defaultdict(list)
    unknown = 0
    for entry in entries:
        if entry.user_id not in known:
            unknown += 1
            continue
        grouped[entry.user_id].append(entry)
    if unknown:
        logger.debug(f"Skipped {unknown} entr(ies) from members outside the team")
    return grouped


def aggregate_team_utilization(
    entries: Sequence[TimeEntry],
    members: Sequence[Member],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
    capacity: Optional[CapacityModel] = None,
) -> List[MemberUtilization]:
    """Calculate utilization for every member over the whole window.

    Expected hours cover the full window (its length in weeks times the
    member's weekly capacity, minus holidays), independent of how the window
    is bucketed. The granularity is still validated so a malformed request
    is rejected consistently with the bucketed reports.

    Args:
        entries: Entries of the team, narrowed to the window
        members: Team members, in display order
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly
        capacity: Capacity model; defaults to a standard week with no holidays

    Returns:
        One row per member, in input order
    """
    Granularity.parse(granularity)
    validate_date_range(start, end)
    capacity = capacity or CapacityModel()
    grouped = _entries_by_member(entries, members)

    rows: List[MemberUtilization] = []
    for member in members:
        member_entries = grouped.get(member.id, [])
        actual = total_hours(member_entries)
        billable = billable_hours(member_entries)
        expected = capacity.expected_hours(member, start, end)

        rows.append(
            MemberUtilization(
                member_id=member.id,
                name=member.display_name,
                billable_util=round_percent(utilization_percent(billable, expected)),
                total_util=round_percent(utilization_percent(actual, expected)),
                billable_hours=round_hours(billable),
                total_hours=round_hours(actual),
                expected_hours=round_hours(expected),
            )
        )

    logger.info(f"Calculated utilization for {len(rows)} team member(s)")
    return rows


def aggregate_team_profitability(
    entries: Sequence[TimeEntry], members: Sequence[Member]
) -> List[MemberProfitability]:
    """Calculate revenue, cost and margin percentage per member.

    Revenue is billable hours at the member's hourly rate, cost is all hours
    at the member's cost rate. Margin is 0 for members without revenue.

    Args:
        entries: Entries of the team, narrowed to the window
        members: Team members, in display order

    Returns:
        One row per member, in input order
    """
    grouped = _entries_by_member(entries, members)

    rows: List[MemberProfitability] = []
    for member in members:
        member_entries = grouped.get(member.id, [])
        member_revenue = round_currency(revenue(member_entries, member.hourly_rate))
        member_cost = round_currency(cost(member_entries, member.cost_rate))
        rows.append(
            MemberProfitability(
                member_id=member.id,
                name=member.display_name,
                revenue=member_revenue,
                cost=member_cost,
                margin=round_percent(
                    margin_percent(profit(member_revenue, member_cost), member_revenue)
                ),
            )
        )
    return rows


def aggregate_team_time_mix(
    entries: Sequence[TimeEntry], members: Sequence[Member]
) -> List[MemberTimeMix]:
    """Split every member's hours across all billing statuses.

    Args:
        entries: Entries of the team, narrowed to the window
        members: Team members, in display order

    Returns:
        One row per member with a column per billing status
    """
    grouped = _entries_by_member(entries, members)

    rows: List[MemberTimeMix] = []
    for member in members:
        mix = hours_by_status(grouped.get(member.id, []))
        rows.append(
            MemberTimeMix(
                member_id=member.id,
                name=member.display_name,
                billable=round_hours(mix[BillingStatus.BILLABLE]),
                included=round_hours(mix[BillingStatus.INCLUDED]),
                non_billable=round_hours(mix[BillingStatus.NON_BILLABLE]),
                internal=round_hours(mix[BillingStatus.INTERNAL]),
                presales=round_hours(mix[BillingStatus.PRESALES]),
            )
        )
    return rows
