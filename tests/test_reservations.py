"""
Tests for reservations and the overage distributor.

Scenario used throughout: a 14,000 kcal week (2,000/day) starting Monday.
"""

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import ReservationSafety
from repositories.period_repository import PeriodRepository
from repositories.reservation_repository import ReservationRepository
from services.reservation_service import ReservationService
from test_constants import (
    FRIDAY,
    MONDAY,
    NEXT_MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
)
from test_fixtures import create_period, create_profile, log_days, reserve


@pytest.fixture
def week(db_session: Session):
    """Profiled user with an active 14,000 kcal period for the week of MONDAY"""
    user_id = create_profile(db_session)
    period = create_period(db_session, user_id, MONDAY)
    return user_id, period


# =============================================================================
# RESERVATIONS
# =============================================================================


def test_reserve_then_reserve_again_keeps_one_row(db_session: Session, week):
    user_id, _ = week

    ReservationService.reserve(db_session, user_id, SATURDAY, 2500, note="wedding", today=MONDAY)
    result = ReservationService.reserve(db_session, user_id, SATURDAY, 2800, today=MONDAY)

    assert result.reservation.planned_calories == 2800
    rows = ReservationRepository(db_session).get_between(user_id, MONDAY, SUNDAY)
    assert len(rows) == 1
    assert rows[0].planned_calories == 2800


def test_reserve_in_past_is_rejected(db_session: Session, week):
    user_id, _ = week
    with pytest.raises(ServiceValidationError) as exc_info:
        ReservationService.reserve(db_session, user_id, MONDAY, 2500, today=TUESDAY)
    assert exc_info.value.code == "RESERVATION_IN_PAST"


def test_reserve_today_is_allowed(db_session: Session, week):
    user_id, _ = week
    result = ReservationService.reserve(db_session, user_id, TUESDAY, 2500, today=TUESDAY)
    assert result.reservation.reserved_on == TUESDAY


def test_reserve_outside_any_period_has_no_verdict(db_session: Session, week):
    user_id, _ = week
    far = NEXT_MONDAY + timedelta(days=14)
    result = ReservationService.reserve(db_session, user_id, far, 2500, today=MONDAY)

    assert result.reservation.reserved_on == far
    assert result.evaluation.safety is None


def test_evaluation_safe(db_session: Session, week):
    """2,500 on Saturday leaves (14000 - 2500) / 6 = 1917 for the others"""
    user_id, _ = week
    evaluation = ReservationService.evaluate_reservation(db_session, user_id, SATURDAY, 2500)

    assert evaluation.daily_base == 2000
    assert evaluation.other_days_average == 1917
    assert evaluation.safety == ReservationSafety.SAFE
    assert evaluation.suggestions.light == 2600
    assert evaluation.suggestions.moderate == 3000
    assert evaluation.suggestions.celebration == 3500
    assert evaluation.minimum == 2200
    # 14000 - 6 * 1200
    assert evaluation.maximum == 6800


def test_evaluation_challenging_and_unsafe(db_session: Session, week):
    user_id, _ = week

    challenging = ReservationService.evaluate_reservation(db_session, user_id, SATURDAY, 5800)
    assert challenging.other_days_average == 1367
    assert challenging.safety == ReservationSafety.CHALLENGING

    unsafe = ReservationService.evaluate_reservation(db_session, user_id, SATURDAY, 7000)
    assert unsafe.other_days_average == 1167
    assert unsafe.safety == ReservationSafety.UNSAFE
    assert "1200" in unsafe.message


def test_evaluation_accounts_for_other_reservations(db_session: Session, week):
    user_id, _ = week
    reserve(db_session, user_id, FRIDAY, 3000)

    evaluation = ReservationService.evaluate_reservation(db_session, user_id, SATURDAY, 3000)

    # (14000 - 3000 - 3000) / 5
    assert evaluation.other_days_average == 1600
    # (14000 - 3000) - 5 * 1200
    assert evaluation.maximum == 5000


def test_unsafe_reservation_is_still_saved(db_session: Session, week):
    user_id, _ = week
    result = ReservationService.reserve(db_session, user_id, SATURDAY, 8000, today=MONDAY)

    assert result.evaluation.safety == ReservationSafety.UNSAFE
    assert ReservationRepository(db_session).get_for_date(user_id, SATURDAY) is not None


def test_cancel_reservation(db_session: Session, week):
    user_id, _ = week
    reserve(db_session, user_id, SATURDAY, 2500)

    ReservationService.cancel_reservation(db_session, user_id, SATURDAY, today=MONDAY)
    assert ReservationRepository(db_session).get_for_date(user_id, SATURDAY) is None

    with pytest.raises(NotFoundError):
        ReservationService.cancel_reservation(db_session, user_id, SATURDAY, today=MONDAY)


def test_cancel_past_reservation_rejected(db_session: Session, week):
    user_id, _ = week
    reserve(db_session, user_id, MONDAY, 2500)
    with pytest.raises(ServiceValidationError):
        ReservationService.cancel_reservation(db_session, user_id, MONDAY, today=WEDNESDAY)


# =============================================================================
# OVERAGE DISTRIBUTION
# =============================================================================


def test_overage_counts_only_elapsed_ordinary_days(db_session: Session, week):
    """
    Verifies:
    - Under-eating does not bank credit
    - Reserved days are excluded from the overage
    - Today's intake is not yet counted
    """
    user_id, period = week
    reserve(db_session, user_id, TUESDAY, 3000)
    log_days(db_session, user_id, MONDAY, [2150, 3200, 1800, 5000])

    overage = ReservationService.compute_overage(db_session, period, THURSDAY)

    # Monday +150, Tuesday reserved, Wednesday under; Thursday not elapsed
    assert overage == 150


def test_overage_uses_net_of_exercise(db_session: Session, week):
    user_id, period = week
    log_days(db_session, user_id, MONDAY, [2600], [400])

    assert ReservationService.compute_overage(db_session, period, TUESDAY) == 200


def test_distribute_requires_previous_day_intake(db_session: Session, week):
    user_id, _ = week
    log_days(db_session, user_id, MONDAY, [2500, 0])

    assert ReservationService.recalculate_and_distribute(db_session, user_id, WEDNESDAY) is False
    assert ReservationService.recalculate_and_distribute(db_session, user_id, TUESDAY) is True

    period = PeriodRepository(db_session).get_active(user_id)
    assert period.cumulative_overage == 500
    assert period.overage_calculated_on == TUESDAY


def test_reserved_tomorrow_with_overage_spread(db_session: Session, week):
    """
    300 kcal over across Monday and Tuesday, 2,500 reserved for Thursday.

    Verifies:
    - Wednesday's adjustment spreads 300 over Wed, Fri, Sat, Sun (-75)
    - Thursday keeps exactly its reserved 2,500
    """
    user_id, _ = week
    log_days(db_session, user_id, MONDAY, [2150, 2150])
    reserve(db_session, user_id, THURSDAY, 2500)

    assert ReservationService.recalculate_and_distribute(db_session, user_id, WEDNESDAY)

    wednesday = ReservationService.get_adjusted_budget(db_session, user_id, WEDNESDAY)
    assert wednesday.cumulative_overage == 300
    assert wednesday.remaining_ordinary_days == 4
    assert wednesday.adjustment == -75
    assert wednesday.adjusted_budget == 1925
    assert wednesday.is_reserved_day is False

    thursday = ReservationService.get_adjusted_budget(db_session, user_id, THURSDAY)
    assert thursday.is_reserved_day is True
    assert thursday.adjustment == 0
    assert thursday.adjusted_budget == 2500
    assert thursday.reserved_calories == 2500


def test_adjusted_budget_respects_comfort_floor(db_session: Session):
    user_id = create_profile(db_session, goal="lose", target_weight=70)
    create_period(db_session, user_id, MONDAY)
    log_days(db_session, user_id, MONDAY, [2000] * 5 + [6000])

    ReservationService.recalculate_and_distribute(db_session, user_id, SUNDAY)
    sunday = ReservationService.get_adjusted_budget(db_session, user_id, SUNDAY)

    assert sunday.cumulative_overage == 4000
    assert sunday.comfort_floor == 1500
    assert sunday.adjusted_budget == 1500


@pytest.mark.parametrize(
    "goal,sex,floor",
    [
        ("lose", "male", 1500),
        ("lose", "female", 1300),
        ("maintain", "male", 1600),
        ("maintain", "other", 1400),
        ("gain", "male", 1800),
        ("gain", "female", 1500),
    ],
)
def test_comfort_floors(goal, sex, floor):
    assert ReservationService.comfort_floor(SimpleNamespace(goal=goal, sex=sex)) == floor


def test_adjusted_budget_without_period(db_session: Session):
    with pytest.raises(NotFoundError):
        ReservationService.get_adjusted_budget(db_session, uuid.uuid4(), MONDAY)
