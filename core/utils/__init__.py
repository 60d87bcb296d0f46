"""Date and numeric helpers"""

from core.utils.dates import (
    parse_local_date,
    format_local_date,
    local_today,
    week_start,
    week_bounds,
    next_monday,
    days_inclusive,
    iter_dates,
    age_on,
)
from core.utils.helpers import round_half_up, percentage

__all__ = [
    "parse_local_date",
    "format_local_date",
    "local_today",
    "week_start",
    "week_bounds",
    "next_monday",
    "days_inclusive",
    "iter_dates",
    "age_on",
    "round_half_up",
    "percentage",
]
