"""Period calendar for bucketing date-stamped records.

This module turns a date range and a granularity into an ordered, gapless
sequence of period buckets and assigns dates to those buckets:
- Monthly buckets follow calendar months, keyed ``YYYY-MM``
- Weekly buckets follow ISO weeks starting Monday, keyed by the Monday
- First and last buckets are clipped to the requested range
- Dates outside the range are never assigned to any bucket

Every report in the engine buckets through this module so period boundaries
are identical across reports.
"""

import datetime as dt
import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from operator import attrgetter
from typing import Callable, Dict, Iterable, Iterator, List, Optional, TypeVar, Union

from dateutil.relativedelta import relativedelta

from analytics_engine.errors import InvalidDateRangeError
from analytics_engine.models.enums import Granularity

logger = logging.getLogger(__name__)

T = TypeVar("T")

DAYS_PER_WEEK = Decimal("7")


@dataclass(frozen=True)
class PeriodBucket:
    """One period of a report window.

    Attributes:
        key: Stable period key (``YYYY-MM`` or the ISO week's Monday)
        label: Display label (``January 2024`` or ``Jan 8``)
        start: First day of the bucket inside the window (inclusive)
        end: Last day of the bucket inside the window (inclusive)

    Example:
        >>> bucket = PeriodBucket(
        ...     key="2024-01",
        ...     label="January 2024",
        ...     start=dt.date(2024, 1, 1),
        ...     end=dt.date(2024, 1, 31),
        ... )
        >>> bucket.days
        31
    """

    key: str
    label: str
    start: dt.date
    end: dt.date

    @property
    def days(self) -> int:
        """Number of calendar days covered by the bucket."""
        return (self.end - self.start).days + 1

    @property
    def weeks(self) -> Decimal:
        """Fractional number of weeks covered by the bucket."""
        return periods_between(
            self.start, self.end + dt.timedelta(days=1), Granularity.WEEKLY
        )

    def contains(self, date: dt.date) -> bool:
        """Check whether a date falls inside the bucket."""
        return self.start <= date <= self.end


def validate_date_range(
    start: Optional[dt.date], end: Optional[dt.date]
) -> None:
    """Reject a missing or reversed date range.

    Args:
        start: First day of the range
        end: Last day of the range

    Raises:
        InvalidDateRangeError: If either bound is missing or start is after end
    """
    if start is None or end is None:
        raise InvalidDateRangeError(
            "start_date and end_date are required", field="date_range"
        )
    if start > end:
        raise InvalidDateRangeError(
            f"start_date ({start}) must not be after end_date ({end})",
            field="date_range",
        )


def period_start_of(date: dt.date, granularity: Union[str, Granularity]) -> dt.date:
    """Get the first day of the full (unclipped) period containing a date.

    Args:
        date: Any date
        granularity: Weekly or monthly

    Returns:
        The Monday of the ISO week, or the first of the month
    """
    granularity = Granularity.parse(granularity)
    if granularity == Granularity.WEEKLY:
        return date - dt.timedelta(days=date.weekday())
    return date.replace(day=1)


def period_key_of(date: dt.date, granularity: Union[str, Granularity]) -> str:
    """Get the period key a date belongs to.

    This is a pure calendar lookup; it does not check any report window.

    Args:
        date: Any date
        granularity: Weekly or monthly

    Returns:
        ``YYYY-MM`` for monthly, ``YYYY-MM-DD`` of the Monday for weekly

    Example:
        >>> period_key_of(dt.date(2024, 1, 17), "weekly")
        '2024-01-15'
        >>> period_key_of(dt.date(2024, 1, 17), "monthly")
        '2024-01'
    """
    granularity = Granularity.parse(granularity)
    start = period_start_of(date, granularity)
    if granularity == Granularity.WEEKLY:
        return start.isoformat()
    return start.strftime("%Y-%m")


def parse_period_key(key: str, granularity: Union[str, Granularity]) -> dt.date:
    """Get the first day of the period identified by a key.

    Args:
        key: Period key produced by period_key_of
        granularity: Weekly or monthly

    Returns:
        The Monday of the week or the first of the month

    Raises:
        ValueError: If the key does not match the granularity's format
    """
    granularity = Granularity.parse(granularity)
    if granularity == Granularity.WEEKLY:
        return dt.date.fromisoformat(key)
    return dt.datetime.strptime(key, "%Y-%m").date()


def period_label(key: str, granularity: Union[str, Granularity]) -> str:
    """Get the display label for a period key.

    Example:
        >>> period_label("2024-01", "monthly")
        'January 2024'
        >>> period_label("2024-01-08", "weekly")
        'Jan 8'
    """
    granularity = Granularity.parse(granularity)
    start = parse_period_key(key, granularity)
    if granularity == Granularity.WEEKLY:
        return f"{start.strftime('%b')} {start.day}"
    return start.strftime("%B %Y")


def shift_period_key(
    key: str, granularity: Union[str, Granularity], steps: int
) -> str:
    """Move a period key forward (or backward) by a number of periods.

    Example:
        >>> shift_period_key("2024-11", "monthly", 3)
        '2025-02'
    """
    granularity = Granularity.parse(granularity)
    start = parse_period_key(key, granularity)
    if granularity == Granularity.WEEKLY:
        return period_key_of(start + dt.timedelta(weeks=steps), granularity)
    return period_key_of(start + relativedelta(months=steps), granularity)


def get_period_keys(
    start: dt.date, end: dt.date, granularity: Union[str, Granularity]
) -> List[PeriodBucket]:
    """Build the ordered, gapless bucket sequence for a date range.

    Args:
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)
        granularity: Weekly or monthly

    Returns:
        Buckets in chronological order, first and last clipped to the range

    Raises:
        InvalidDateRangeError: If the range is missing or reversed
        InvalidGranularityError: If the granularity is not supported

    Example:
        >>> buckets = get_period_keys(
        ...     dt.date(2024, 1, 15), dt.date(2024, 3, 10), "monthly"
        ... )
        >>> [(b.key, b.start.day, b.end.day) for b in buckets]
        [('2024-01', 15, 31), ('2024-02', 1, 29), ('2024-03', 1, 10)]
    """
    granularity = Granularity.parse(granularity)
    validate_date_range(start, end)

    buckets: List[PeriodBucket] = []
    current = period_start_of(start, granularity)

    while current <= end:
        if granularity == Granularity.WEEKLY:
            following = current + dt.timedelta(weeks=1)
        else:
            following = current + relativedelta(months=1)

        key = period_key_of(current, granularity)
        buckets.append(
            PeriodBucket(
                key=key,
                label=period_label(key, granularity),
                start=max(current, start),
                end=min(following - dt.timedelta(days=1), end),
            )
        )
        current = following

    return buckets


def periods_between(
    start: dt.date, end: dt.date, granularity: Union[str, Granularity]
) -> Decimal:
    """Measure a span in (fractional) weeks or months.

    ``end`` is exclusive, so one full ISO week is ``(monday, next_monday)``.
    This is a length used to prorate expected hours, NOT a bucket count.

    Args:
        start: Start of the span
        end: End of the span (exclusive)
        granularity: Unit to measure in

    Returns:
        ``(end - start).days / 7`` for weekly; whole months plus the
        fractional remainder of the following month for monthly. Zero when
        end is not after start.

    Example:
        >>> periods_between(dt.date(2024, 1, 1), dt.date(2024, 1, 11), "weekly")
        Decimal('1.428571428571428571428571429')
        >>> periods_between(dt.date(2024, 1, 1), dt.date(2024, 3, 16), "monthly")
        Decimal('2.483870967741935483870967742')
    """
    granularity = Granularity.parse(granularity)
    if end <= start:
        return Decimal("0")

    if granularity == Granularity.WEEKLY:
        return Decimal((end - start).days) / DAYS_PER_WEEK

    delta = relativedelta(end, start)
    whole_months = delta.years * 12 + delta.months
    anchor = start + relativedelta(months=whole_months)
    month_length = ((anchor + relativedelta(months=1)) - anchor).days
    return Decimal(whole_months) + Decimal((end - anchor).days) / Decimal(month_length)


class PeriodCalendar:
    """Report window split into period buckets.

    A calendar is built once per report call and answers which bucket a
    record belongs to. Construction validates the window and granularity, so
    a malformed request fails before any aggregation runs.

    Attributes:
        start: First day of the window (inclusive)
        end: Last day of the window (inclusive)
        granularity: Bucketing resolution
        buckets: Ordered, gapless buckets covering the window

    Example:
        >>> calendar = PeriodCalendar(
        ...     dt.date(2024, 1, 1), dt.date(2024, 2, 29), "monthly"
        ... )
        >>> calendar.keys
        ['2024-01', '2024-02']
        >>> calendar.assign(dt.date(2024, 2, 14))
        '2024-02'
        >>> calendar.assign(dt.date(2024, 3, 1)) is None
        True
    """

    def __init__(
        self,
        start: dt.date,
        end: dt.date,
        granularity: Union[str, Granularity],
    ):
        self.granularity = Granularity.parse(granularity)
        self.buckets = get_period_keys(start, end, self.granularity)
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[PeriodBucket]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    @property
    def keys(self) -> List[str]:
        """Period keys in chronological order."""
        return [bucket.key for bucket in self.buckets]

    def contains(self, date: dt.date) -> bool:
        """Check whether a date falls inside the report window."""
        return self.start <= date <= self.end

    def assign(self, date: dt.date) -> Optional[str]:
        """Get the bucket key for a date, or None if outside the window."""
        if not self.contains(date):
            return None
        return period_key_of(date, self.granularity)

    def group(
        self,
        records: Iterable[T],
        date_of: Callable[[T], dt.date] = attrgetter("date"),
    ) -> Dict[str, List[T]]:
        """Group records by the bucket their date falls in.

        Every bucket key is present, in chronological order, even when no
        record falls in it. Records dated outside the window are dropped.

        Args:
            records: Date-stamped records (entries, expenses, ...)
            date_of: Accessor returning a record's date

        Returns:
            Records per bucket key, in input order within each bucket
        """
        grouped: Dict[str, List[T]] = OrderedDict((key, []) for key in self.keys)
        skipped = 0
        for record in records:
            key = self.assign(date_of(record))
            if key is None:
                skipped += 1
                continue
            grouped[key].append(record)
        if skipped:
            logger.debug(f"Skipped {skipped} record(s) dated outside {self.start}..{self.end}")
        return grouped

    @property
    def total_weeks(self) -> Decimal:
        """Length of the whole window in fractional weeks."""
        return periods_between(
            self.start, self.end + dt.timedelta(days=1), Granularity.WEEKLY
        )
