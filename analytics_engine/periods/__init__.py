"""Period bucketing and capacity modules."""

from analytics_engine.periods.capacity import (
    STANDARD_WEEKLY_HOURS,
    CapacityModel,
    count_business_days,
)
from analytics_engine.periods.period_calendar import (
    PeriodBucket,
    PeriodCalendar,
    get_period_keys,
    parse_period_key,
    period_key_of,
    period_label,
    periods_between,
    shift_period_key,
    validate_date_range,
)

__all__ = [
    # capacity
    "STANDARD_WEEKLY_HOURS",
    "CapacityModel",
    "count_business_days",
    # period_calendar
    "PeriodBucket",
    "PeriodCalendar",
    "get_period_keys",
    "parse_period_key",
    "period_key_of",
    "period_label",
    "periods_between",
    "shift_period_key",
    "validate_date_range",
]
