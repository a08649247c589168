"""Capacity model for expected working hours.

Expected hours drive every utilization figure. A member's weekly capacity is
prorated over the days of a period; holidays that fall on business days are
deducted at one fifth of the weekly capacity each. Holiday dates are an
input: computing a country's holiday calendar is not done here.
"""

import datetime as dt
import logging
from decimal import Decimal
from typing import FrozenSet, Iterable, Optional, Union

from analytics_engine.models.enums import Granularity
from analytics_engine.models.member import Member
from analytics_engine.models.time_entry import EntryUser
from analytics_engine.periods.period_calendar import PeriodBucket, periods_between

logger = logging.getLogger(__name__)

STANDARD_WEEKLY_HOURS = Decimal("37")
BUSINESS_DAYS_PER_WEEK = Decimal("5")


def count_business_days(
    start: dt.date, end: dt.date, holidays: Iterable[dt.date] = ()
) -> int:
    """Count Monday-to-Friday days in an inclusive range, minus holidays.

    Args:
        start: First day (inclusive)
        end: Last day (inclusive)
        holidays: Dates that are not worked

    Returns:
        Number of working days; 0 when end is before start

    Example:
        >>> count_business_days(dt.date(2024, 1, 1), dt.date(2024, 1, 7))
        5
        >>> count_business_days(
        ...     dt.date(2024, 1, 1), dt.date(2024, 1, 7), [dt.date(2024, 1, 1)]
        ... )
        4
    """
    if end < start:
        return 0
    excluded = set(holidays)
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5 and current not in excluded:
            days += 1
        current += dt.timedelta(days=1)
    return days


class CapacityModel:
    """Computes expected working hours for members.

    Attributes:
        standard_weekly_hours: Capacity used when a member has no weekly
            target configured
        holidays: Non-working dates deducted from capacity

    Example:
        >>> model = CapacityModel()
        >>> member = Member(id="u1", email="a@b.c", weekly_target=40)
        >>> model.expected_hours(member, dt.date(2024, 1, 8), dt.date(2024, 1, 14))
        Decimal('40')
    """

    def __init__(
        self,
        standard_weekly_hours: Decimal = STANDARD_WEEKLY_HOURS,
        holidays: Iterable[dt.date] = (),
    ):
        self.standard_weekly_hours = Decimal(str(standard_weekly_hours))
        self.holidays: FrozenSet[dt.date] = frozenset(holidays)

    def weekly_capacity(self, member: Union[Member, EntryUser]) -> Decimal:
        """Get a member's effective weekly capacity.

        An unset target falls back to the standard full-time week. An
        explicit target of 0 is kept, so utilization for that member is 0.
        """
        if member.weekly_target is None:
            return self.standard_weekly_hours
        return member.weekly_target

    def holiday_business_days(self, start: dt.date, end: dt.date) -> int:
        """Count holidays that fall on business days inside a range."""
        return sum(
            1 for day in self.holidays if start <= day <= end and day.weekday() < 5
        )

    def expected_hours(
        self,
        member: Union[Member, EntryUser],
        start: dt.date,
        end: dt.date,
    ) -> Decimal:
        """Expected hours for a member over an inclusive date range.

        ``weekly capacity * weeks in range``, minus ``weekly capacity / 5`` for
        every holiday on a business day. Never negative.

        Args:
            member: Member (or rate snapshot) whose capacity is used
            start: First day (inclusive)
            end: Last day (inclusive)

        Returns:
            Expected hours, unrounded
        """
        capacity = self.weekly_capacity(member)
        if capacity <= 0 or end < start:
            return Decimal("0")

        weeks = periods_between(start, end + dt.timedelta(days=1), Granularity.WEEKLY)
        expected = capacity * weeks
        holidays = self.holiday_business_days(start, end)
        if holidays:
            expected -= capacity / BUSINESS_DAYS_PER_WEEK * holidays
            logger.debug(
                f"Deducted {holidays} holiday(s) from capacity between {start} and {end}"
            )
        return max(expected, Decimal("0"))

    def expected_hours_for_bucket(
        self, member: Union[Member, EntryUser], bucket: PeriodBucket
    ) -> Decimal:
        """Expected hours for a member over one period bucket."""
        return self.expected_hours(member, bucket.start, bucket.end)

    def expected_business_day_hours(
        self,
        member: Union[Member, EntryUser],
        start: dt.date,
        end: dt.date,
        extra_days_off: Optional[Iterable[dt.date]] = None,
    ) -> Decimal:
        """Expected hours from the business-day calendar.

        Counts working days (excluding holidays and any extra days off such
        as approved vacation) and multiplies by the daily target of
        ``weekly capacity / 5``.
        """
        days_off = set(self.holidays)
        if extra_days_off:
            days_off.update(extra_days_off)
        working_days = count_business_days(start, end, days_off)
        return self.weekly_capacity(member) / BUSINESS_DAYS_PER_WEEK * working_days
