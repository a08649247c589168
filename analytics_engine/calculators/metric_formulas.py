"""Financial formulas and the rounding policy shared by every report.

This module implements the per-record metrics:
- Revenue (billable hours at the bill rate)
- Cost (all hours at the cost rate)
- Profit, utilization and margin percentages
- Guarded ratios that never divide by zero

and the single rounding policy applied where a value leaves a component:
hours and percentages to 1 decimal, currency to 2 decimals, both
``ROUND_HALF_UP`` (half away from zero) on Decimals. Formulas return
unrounded values; callers round once at the output boundary.
"""

from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional, Sequence

from analytics_engine.models.enums import BillingStatus
from analytics_engine.models.time_entry import TimeEntry

ZERO = Decimal("0")
HUNDRED = Decimal("100")
HOURS_QUANT = Decimal("0.1")
PERCENT_QUANT = Decimal("0.1")
CURRENCY_QUANT = Decimal("0.01")


def round_hours(value: Decimal) -> Decimal:
    """Round hours to 1 decimal place, half away from zero.

    Example:
        >>> round_hours(Decimal("7.25"))
        Decimal('7.3')
    """
    return Decimal(value).quantize(HOURS_QUANT, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage to 1 decimal place, half away from zero.

    Example:
        >>> round_percent(Decimal("-12.35"))
        Decimal('-12.4')
    """
    return Decimal(value).quantize(PERCENT_QUANT, rounding=ROUND_HALF_UP)


def round_currency(value: Decimal) -> Decimal:
    """Round a currency amount to 2 decimal places, half away from zero.

    Example:
        >>> round_currency(Decimal("1234.565"))
        Decimal('1234.57')
    """
    return Decimal(value).quantize(CURRENCY_QUANT, rounding=ROUND_HALF_UP)


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is not positive."""
    if denominator <= ZERO:
        return ZERO
    return numerator / denominator


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100``, or 0 when whole is not positive."""
    return safe_ratio(part, whole) * HUNDRED


def total_hours(entries: Iterable[TimeEntry]) -> Decimal:
    """Sum the hours of all entries."""
    return sum((entry.hours for entry in entries), ZERO)


def billable_hours(entries: Iterable[TimeEntry]) -> Decimal:
    """Sum the hours of billable entries only."""
    return sum((entry.hours for entry in entries if entry.is_billable), ZERO)


def revenue(
    entries: Iterable[TimeEntry], hourly_rate: Optional[Decimal] = None
) -> Decimal:
    """Revenue of billable entries.

    Args:
        entries: Time entries (non-billable ones are ignored)
        hourly_rate: Rate to apply to every entry; defaults to each entry's
            own member rate snapshot

    Returns:
        ``sum(hours * hourly_rate)`` over billable entries, unrounded

    Example:
        >>> revenue([billable_10h], hourly_rate=Decimal("100"))
        Decimal('1000')
    """
    return sum(
        (
            entry.hours
            * (hourly_rate if hourly_rate is not None else entry.user.hourly_rate)
            for entry in entries
            if entry.is_billable
        ),
        ZERO,
    )


def cost(entries: Iterable[TimeEntry], cost_rate: Optional[Decimal] = None) -> Decimal:
    """Cost of all entries regardless of billing status.

    Args:
        entries: Time entries
        cost_rate: Rate to apply to every entry; defaults to each entry's
            own member cost snapshot

    Returns:
        ``sum(hours * cost_rate)`` over all entries, unrounded
    """
    return sum(
        (
            entry.hours * (cost_rate if cost_rate is not None else entry.user.cost_rate)
            for entry in entries
        ),
        ZERO,
    )


def profit(revenue_amount: Decimal, cost_amount: Decimal) -> Decimal:
    """Revenue minus cost."""
    return revenue_amount - cost_amount


def utilization_percent(actual_hours: Decimal, expected_hours: Decimal) -> Decimal:
    """Actual hours as a percentage of expected hours.

    Returns 0 when expected hours are zero or negative.

    Example:
        >>> utilization_percent(Decimal("30"), Decimal("40"))
        Decimal('75')
        >>> utilization_percent(Decimal("10"), Decimal("0"))
        Decimal('0')
    """
    return percent_of(actual_hours, expected_hours)


def margin_percent(profit_amount: Decimal, revenue_amount: Decimal) -> Decimal:
    """Profit as a percentage of revenue, 0 when there is no revenue."""
    return percent_of(profit_amount, revenue_amount)


def average_cost_rate(entries: Sequence[TimeEntry]) -> Decimal:
    """Unweighted mean of the entries' cost rate snapshots (0 for none)."""
    if not entries:
        return ZERO
    return sum((entry.user.cost_rate for entry in entries), ZERO) / len(entries)


def mean(values: Sequence[Decimal]) -> Decimal:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def hours_by_status(
    entries: Iterable[TimeEntry], include_empty: bool = True
) -> Dict[BillingStatus, Decimal]:
    """Sum hours per billing status.

    Args:
        entries: Time entries
        include_empty: Whether statuses without hours appear with 0

    Returns:
        Ordered mapping; with include_empty every status appears in enum
        order, otherwise statuses appear in first-seen order
    """
    if include_empty:
        totals: Dict[BillingStatus, Decimal] = OrderedDict(
            (status, ZERO) for status in BillingStatus
        )
    else:
        totals = OrderedDict()

    for entry in entries:
        totals[entry.billing_status] = totals.get(entry.billing_status, ZERO) + entry.hours

    return totals
