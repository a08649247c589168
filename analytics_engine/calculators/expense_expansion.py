"""Materialization of company expenses into dated monthly occurrences.

Company aggregators consume one dated expense per occurrence. Recurring
expenses are amortized to one occurrence per covered month:
- monthly: the full amount every month
- quarterly: a third of the amount every month
- yearly: a twelfth of the amount every month

Occurrences start at the month of the expense's first date and are only
emitted for months overlapping the requested range.
"""

import datetime as dt
import logging
from typing import Iterable, List

from dateutil.relativedelta import relativedelta

from analytics_engine.models.enums import MONTHLY_AMORTIZATION, ExpenseFrequency
from analytics_engine.models.expense import CompanyExpense, MaterializedExpense
from analytics_engine.periods.period_calendar import validate_date_range

logger = logging.getLogger(__name__)


def expand_recurring_expenses(
    expenses: Iterable[CompanyExpense],
    start: dt.date,
    end: dt.date,
) -> List[MaterializedExpense]:
    """Expand company expenses into dated occurrences inside a range.

    One-time expenses are kept when their date lies in ``[start, end]``.
    Recurring expenses yield one amortized occurrence per month from the
    expense's first month through ``end``; an occurrence is dated on the
    first of its month, or on ``start`` when the range begins mid-month.

    Args:
        expenses: Company expenses, recurring or not
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)

    Returns:
        Materialized expenses ordered as the inputs, then by date

    Raises:
        InvalidDateRangeError: If the range is missing or reversed

    Example:
        >>> rent = CompanyExpense(
        ...     amount=Decimal("1200"),
        ...     date=dt.date(2024, 1, 1),
        ...     category="insurance",
        ...     recurring=True,
        ...     frequency="yearly",
        ... )
        >>> rows = expand_recurring_expenses(
        ...     [rent], dt.date(2024, 1, 1), dt.date(2024, 3, 31)
        ... )
        >>> [(r.date.month, r.amount) for r in rows]
        [(1, Decimal('100')), (2, Decimal('100')), (3, Decimal('100'))]
    """
    validate_date_range(start, end)
    result: List[MaterializedExpense] = []

    for expense in expenses:
        if not expense.recurring:
            if start <= expense.date <= end:
                result.append(
                    MaterializedExpense(
                        amount=expense.amount,
                        date=expense.date,
                        category=expense.category,
                        description=expense.description,
                    )
                )
            continue

        frequency = expense.frequency or ExpenseFrequency.MONTHLY
        monthly_amount = expense.amount / MONTHLY_AMORTIZATION[frequency]
        current = expense.date.replace(day=1)
        occurrences = 0

        while current <= end:
            month_end = current + relativedelta(months=1) - dt.timedelta(days=1)
            if month_end >= start:
                result.append(
                    MaterializedExpense(
                        amount=monthly_amount,
                        date=max(current, start),
                        category=expense.category,
                        description=expense.description,
                    )
                )
                occurrences += 1
            current += relativedelta(months=1)

        logger.debug(
            f"Expanded recurring {frequency.value} expense "
            f"'{expense.description}' into {occurrences} occurrence(s)"
        )

    return result
