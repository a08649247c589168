"""Company-level aggregations.

This module provides the company reports:
- Revenue, overhead and contribution margin per period
- Expense breakdown per category and period
- Non-billable share of hours per period
- Unbilled work per project
- Billing velocity and collection summary over invoices

Company expenses are expected as dated occurrences, i.e. recurring expenses
already expanded with ``expand_recurring_expenses``.
"""

import datetime as dt
import logging
from collections import OrderedDict, defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from analytics_engine.aggregators.project import EstimateMap, estimated_percent_for
from analytics_engine.aggregators.results import (
    BillingVelocityPoint,
    CollectionSummary,
    CompanyPeriodPoint,
    ExpenseBreakdownPoint,
    NonBillableTrendPoint,
    UnbilledWorkRow,
)
from analytics_engine.calculators.metric_formulas import (
    HUNDRED,
    ZERO,
    cost,
    percent_of,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    total_hours,
)
from analytics_engine.models.enums import (
    INVOICE_IS_BILLED,
    NON_BILLABLE_CATEGORY,
    ApprovalStatus,
    Granularity,
    InvoiceStatus,
)
from analytics_engine.models.expense import (
    EXPENSE_BREAKDOWN_CATEGORIES,
    MaterializedExpense,
    ProjectExpense,
)
from analytics_engine.models.invoice import Invoice
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import TimeEntry
from analytics_engine.periods.period_calendar import PeriodCalendar

logger = logging.getLogger(__name__)

DatedExpense = Union[ProjectExpense, MaterializedExpense]


def _sum_amounts(expenses: Iterable[DatedExpense]) -> Decimal:
    return sum((expense.amount for expense in expenses), ZERO)


def _estimated_overhead(
    entries: Sequence[TimeEntry], estimated_non_billable: Optional[EstimateMap]
) -> Decimal:
    """Estimated non-billable overhead of the billable entries of a period.

    Per project with an estimate: billable hours * pct / 100 * the average
    cost rate of those billable entries.
    """
    if not estimated_non_billable:
        return ZERO

    by_project: Dict[str, List[TimeEntry]] = defaultdict(list)
    for entry in entries:
        if entry.is_billable:
            by_project[entry.project_id].append(entry)

    overhead = ZERO
    for project_id, project_entries in by_project.items():
        percent = estimated_percent_for(estimated_non_billable, project_id)
        if percent <= ZERO:
            continue
        hours = total_hours(project_entries)
        average_rate = sum(
            (entry.user.cost_rate for entry in project_entries), ZERO
        ) / len(project_entries)
        overhead += hours * percent / HUNDRED * average_rate
    return overhead


def aggregate_company_revenue_overhead(
    entries: Sequence[TimeEntry],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
    project_expenses: Sequence[ProjectExpense] = (),
    company_expenses: Sequence[MaterializedExpense] = (),
    estimated_non_billable: Optional[EstimateMap] = None,
) -> List[CompanyPeriodPoint]:
    """Calculate revenue, overhead and contribution margin per period.

    - ``total_cost`` = labor cost of all entries + estimated non-billable
      overhead + project expenses + company expenses
    - ``overhead`` = labor cost of non-billable entries + estimated
      non-billable overhead + project expenses + company expenses
    - ``contribution_margin`` = revenue - total cost

    Args:
        entries: Time entries narrowed to the window and approval filter
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly
        project_expenses: Approved project expenses
        company_expenses: Materialized company expense occurrences
        estimated_non_billable: Project id to estimated non-billable percent

    Returns:
        One point per period, chronological

    Example:
        >>> points = aggregate_company_revenue_overhead(
        ...     entries, dt.date(2024, 1, 1), dt.date(2024, 1, 31), "monthly",
        ...     project_expenses=[travel_200], company_expenses=[rent_300],
        ... )
        >>> points[0].revenue, points[0].total_cost
        (Decimal('1000.00'), Decimal('1000.00'))
    """
    calendar = PeriodCalendar(start, end, granularity)
    entries_by_period = calendar.group(entries)
    project_by_period = calendar.group(project_expenses)
    company_by_period = calendar.group(company_expenses)

    points: List[CompanyPeriodPoint] = []
    for bucket in calendar:
        period_entries = entries_by_period[bucket.key]
        labor_cost = cost(period_entries)
        labor_overhead = cost(entry for entry in period_entries if not entry.is_billable)
        estimated = _estimated_overhead(period_entries, estimated_non_billable)

        period_project_expenses = round_currency(
            _sum_amounts(project_by_period[bucket.key])
        )
        period_company_expenses = round_currency(
            _sum_amounts(company_by_period[bucket.key])
        )
        expenses = period_project_expenses + period_company_expenses

        period_revenue = round_currency(revenue(period_entries))
        total_cost = round_currency(labor_cost + estimated) + expenses
        overhead = round_currency(labor_overhead + estimated) + expenses

        points.append(
            CompanyPeriodPoint(
                period=bucket.label,
                period_key=bucket.key,
                revenue=period_revenue,
                overhead=overhead,
                total_cost=total_cost,
                contribution_margin=period_revenue - total_cost,
                project_expenses=period_project_expenses,
                company_expenses=period_company_expenses,
            )
        )

    logger.info(
        f"Built company revenue/overhead series with {len(points)} period(s) "
        f"from {len(entries)} entries"
    )
    return points


def aggregate_expense_breakdown(
    project_expenses: Sequence[ProjectExpense],
    company_expenses: Sequence[MaterializedExpense],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[ExpenseBreakdownPoint]:
    """Sum expenses per category for every period of a window.

    Every category column is present in every period. Categories outside
    the known set are folded into ``other``.

    Args:
        project_expenses: Project expenses
        company_expenses: Materialized company expense occurrences
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period, chronological
    """
    calendar = PeriodCalendar(start, end, granularity)
    totals: Dict[Tuple[str, str], Decimal] = defaultdict(lambda: ZERO)

    for expenses in (project_expenses, company_expenses):
        for period_key, period_expenses in calendar.group(expenses).items():
            for expense in period_expenses:
                category = (
                    expense.category
                    if expense.category in EXPENSE_BREAKDOWN_CATEGORIES
                    else "other"
                )
                totals[(period_key, category)] += expense.amount

    return [
        ExpenseBreakdownPoint(
            period=bucket.label,
            period_key=bucket.key,
            amounts=OrderedDict(
                (category, round_currency(totals[(bucket.key, category)]))
                for category in EXPENSE_BREAKDOWN_CATEGORIES
            ),
        )
        for bucket in calendar
    ]


def aggregate_non_billable_trend(
    entries: Sequence[TimeEntry],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[NonBillableTrendPoint]:
    """Calculate the non-billable share of hours for every period.

    Percentages are relative to all hours of the period. A period without
    hours reports 0 everywhere.

    Args:
        entries: Time entries narrowed to the window
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period, chronological
    """
    calendar = PeriodCalendar(start, end, granularity)
    grouped = calendar.group(entries)

    points: List[NonBillableTrendPoint] = []
    for bucket in calendar:
        period_entries = grouped[bucket.key]
        period_total = total_hours(period_entries)
        by_category: Dict[str, Decimal] = {
            "internal": ZERO,
            "presales": ZERO,
            "non_billable": ZERO,
        }
        for entry in period_entries:
            category = NON_BILLABLE_CATEGORY[entry.billing_status]
            if category is not None:
                by_category[category] += entry.hours

        points.append(
            NonBillableTrendPoint(
                period=bucket.label,
                period_key=bucket.key,
                total_percent=round_percent(
                    percent_of(sum(by_category.values(), ZERO), period_total)
                ),
                internal=round_percent(percent_of(by_category["internal"], period_total)),
                presales=round_percent(percent_of(by_category["presales"], period_total)),
                non_billable=round_percent(
                    percent_of(by_category["non_billable"], period_total)
                ),
            )
        )
    return points


def aggregate_unbilled_work(
    entries: Sequence[TimeEntry],
    today: dt.date,
    projects: Sequence[Project] = (),
) -> List[UnbilledWorkRow]:
    """Summarize approved billable hours that are not yet invoiced.

    Only entries that are billable, approved (not locked, submitted or
    draft) and not attached to an invoice count. The project name comes
    from the entry's project snapshot or, failing that, from ``projects``;
    entries whose project cannot be resolved are skipped.

    Args:
        entries: Time entries
        today: Reference date for the age of the oldest entry
        projects: Projects used to resolve names missing from entries

    Returns:
        One row per project, highest estimated revenue first
    """
    names = {project.id: project.name for project in projects}
    groups: Dict[str, List[TimeEntry]] = OrderedDict()
    project_names: Dict[str, str] = {}
    skipped = 0

    for entry in entries:
        if not (
            entry.is_billable
            and entry.approval_status == ApprovalStatus.APPROVED
            and entry.invoice_id is None
        ):
            continue
        name = entry.project.name if entry.project else names.get(entry.project_id)
        if name is None:
            skipped += 1
            continue
        project_names.setdefault(entry.project_id, name)
        groups.setdefault(entry.project_id, []).append(entry)

    if skipped:
        logger.debug(f"Skipped {skipped} unbilled entr(ies) with unknown projects")

    rows: List[UnbilledWorkRow] = []
    for project_id, project_entries in groups.items():
        oldest = min(entry.date for entry in project_entries)
        rows.append(
            UnbilledWorkRow(
                project_id=project_id,
                project_name=project_names[project_id],
                hours=round_hours(total_hours(project_entries)),
                estimated_revenue=round_currency(revenue(project_entries)),
                oldest_entry_date=oldest,
                age_in_days=(today - oldest).days,
                entry_count=len(project_entries),
            )
        )

    rows.sort(key=lambda row: row.estimated_revenue, reverse=True)
    return rows


def aggregate_billing_velocity(
    invoices: Sequence[Invoice],
    start: dt.date,
    end: dt.date,
    granularity: Union[str, Granularity],
) -> List[BillingVelocityPoint]:
    """Sum invoiced and collected amounts per period of invoice date.

    Draft and void invoices are not billed and are excluded. ``paid`` is the
    part of the period's invoiced amount that has been paid.

    Args:
        invoices: Invoices
        start: First day of the window
        end: Last day of the window
        granularity: Weekly or monthly

    Returns:
        One point per period, chronological
    """
    calendar = PeriodCalendar(start, end, granularity)
    billed = [invoice for invoice in invoices if INVOICE_IS_BILLED[invoice.status]]
    grouped = calendar.group(billed, date_of=lambda invoice: invoice.invoice_date)

    points: List[BillingVelocityPoint] = []
    for bucket in calendar:
        period_invoices = grouped[bucket.key]
        invoiced = sum((invoice.total for invoice in period_invoices), ZERO)
        paid = sum(
            (
                invoice.total
                for invoice in period_invoices
                if invoice.status == InvoiceStatus.PAID
            ),
            ZERO,
        )
        points.append(
            BillingVelocityPoint(
                period=bucket.label,
                period_key=bucket.key,
                invoiced=round_currency(invoiced),
                paid=round_currency(paid),
                outstanding=round_currency(invoiced - paid),
                collection_rate=round_percent(percent_of(paid, invoiced)),
            )
        )
    return points


def summarize_collections(
    invoices: Sequence[Invoice], today: dt.date
) -> CollectionSummary:
    """Summarize billed, paid and outstanding amounts over invoices.

    An invoice is overdue when it was sent, is unpaid and its due date lies
    before ``today``.

    Args:
        invoices: Invoices
        today: Reference date for overdue detection

    Returns:
        Collection totals
    """
    billed = [invoice for invoice in invoices if INVOICE_IS_BILLED[invoice.status]]
    invoiced = sum((invoice.total for invoice in billed), ZERO)
    paid = sum(
        (invoice.total for invoice in billed if invoice.status == InvoiceStatus.PAID),
        ZERO,
    )
    overdue = sum(
        1
        for invoice in billed
        if invoice.status == InvoiceStatus.SENT
        and invoice.due_date is not None
        and invoice.due_date < today
    )
    return CollectionSummary(
        invoiced=round_currency(invoiced),
        paid=round_currency(paid),
        outstanding=round_currency(invoiced - paid),
        overdue_count=overdue,
        collection_rate=round_percent(percent_of(paid, invoiced)),
    )
