"""
Tests for the date and numeric helpers.
"""

from datetime import date, datetime, timezone

import pytest

from core.utils import (
    age_on,
    days_inclusive,
    format_local_date,
    iter_dates,
    local_today,
    next_monday,
    parse_local_date,
    percentage,
    round_half_up,
    week_bounds,
    week_start,
)
from test_constants import MONDAY, NEXT_MONDAY, SATURDAY, SUNDAY, WEDNESDAY


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (3.5, 4), (2447.5, 2448), (2.4999, 2), (-2.5, -3), (83.333, 83), (0, 0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_percentage():
    assert percentage(50, 200) == 25.0
    assert percentage(10, 0) == 0.0


def test_week_helpers():
    assert week_start(WEDNESDAY) == MONDAY
    assert week_start(SUNDAY) == MONDAY
    assert week_start(MONDAY) == MONDAY
    assert week_bounds(SATURDAY) == (MONDAY, SUNDAY)
    assert next_monday(SUNDAY) == NEXT_MONDAY
    assert next_monday(MONDAY) == NEXT_MONDAY


def test_days_inclusive_and_iteration():
    assert days_inclusive(MONDAY, SUNDAY) == 7
    assert days_inclusive(SUNDAY, SUNDAY) == 1
    assert days_inclusive(SUNDAY, MONDAY) == 0
    assert list(iter_dates(SATURDAY, NEXT_MONDAY)) == [SATURDAY, SUNDAY, NEXT_MONDAY]


def test_parse_and_format_local_date():
    assert parse_local_date("2025-01-06") == MONDAY
    assert format_local_date(MONDAY) == "2025-01-06"
    with pytest.raises(ValueError):
        parse_local_date("06/01/2025")


def test_local_today_uses_zone():
    """23:30 UTC on Sunday is already Monday in Tokyo and still Sunday in Chicago"""
    now = datetime(2025, 1, 12, 23, 30, tzinfo=timezone.utc)

    assert local_today("Asia/Tokyo", now=now) == MONDAY
    assert local_today("America/Chicago", now=now) == SUNDAY
    # unknown zones fall back to the configured default (UTC in tests)
    assert local_today("Not/AZone", now=now) == SUNDAY


@pytest.mark.parametrize(
    "on,age",
    [
        (date(2025, 6, 14), 30),
        (date(2025, 6, 15), 31),
        (date(2024, 12, 31), 30),
    ],
)
def test_age_on_birthday_boundary(on, age):
    assert age_on(date(1994, 6, 15), on) == age
