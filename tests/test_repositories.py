"""
Tests for the repository classes.

This test suite validates the data access layer directly against the
database:
- ObservationRepository: (user, date) upserts, increments, range totals
- ReservationRepository: one row per (user, date), delete
- PeriodRepository: insert-if-absent, active/covering lookups, overage
- BaselineRepository: restart clears earlier results
- MetricRepository: totals-only writes keep scores
- ProfileRepository: create then replace

All tests use real database sessions (via test_fixtures) to ensure:
- The ON CONFLICT statements behave as a single atomic write
- Unique constraints are enforced
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from domain.enums import (
    ActivityLevel,
    BaselineStatus,
    DayType,
    GoalType,
    HeightUnit,
    PeriodStatus,
    Sex,
    WeightUnit,
)
from domain.models import DailyObservation
from repositories import (
    BaselineRepository,
    MetricRepository,
    ObservationRepository,
    PeriodRepository,
    ProfileRepository,
    ReservationRepository,
)
from test_constants import MONDAY, NEXT_MONDAY, SUNDAY, TUESDAY, WEDNESDAY, WEEKLY_BUDGET
from test_fixtures import create_period


# =============================================================================
# OBSERVATION REPOSITORY TESTS
# =============================================================================


def test_observation_add_consumed_increments(db_session: Session):
    """
    Verifies:
    - First event inserts the row
    - Later events add to the same row
    - A day type is only overwritten when one is given
    """
    repo = ObservationRepository(db_session)
    user_id = uuid.uuid4()

    repo.add_consumed(user_id, MONDAY, 500, DayType.SPECIAL_OCCASION)
    repo.add_consumed(user_id, MONDAY, 700)
    row = repo.add_consumed(user_id, MONDAY, 300)

    assert row.calories_consumed == 1500
    assert row.calories_burned == 0
    assert row.day_type == DayType.SPECIAL_OCCASION
    assert db_session.query(DailyObservation).filter_by(user_id=user_id).count() == 1


def test_observation_set_burned_keeps_intake(db_session: Session):
    repo = ObservationRepository(db_session)
    user_id = uuid.uuid4()

    repo.add_consumed(user_id, MONDAY, 1800)
    row = repo.set_burned(user_id, MONDAY, 400)

    assert row.calories_consumed == 1800
    assert row.calories_burned == 400


def test_observation_set_totals_replaces(db_session: Session):
    repo = ObservationRepository(db_session)
    user_id = uuid.uuid4()

    repo.add_consumed(user_id, MONDAY, 1800)
    row = repo.set_totals(user_id, MONDAY, 1200, 100)

    assert row.calories_consumed == 1200
    assert row.calories_burned == 100


def test_observation_range_and_totals(db_session: Session):
    repo = ObservationRepository(db_session)
    user_id = uuid.uuid4()
    other_user = uuid.uuid4()

    repo.set_totals(user_id, MONDAY, 2000, 100)
    repo.set_totals(user_id, TUESDAY, 2200, 0)
    repo.set_totals(user_id, NEXT_MONDAY, 9999, 0)
    repo.set_totals(other_user, MONDAY, 5000, 0)

    rows = repo.get_between(user_id, MONDAY, SUNDAY)
    assert [r.observed_on for r in rows] == [MONDAY, TUESDAY]
    assert repo.get_totals(user_id, MONDAY, SUNDAY) == (4200, 100)
    assert repo.get_totals(user_id, WEDNESDAY, SUNDAY) == (0, 0)


# =============================================================================
# RESERVATION REPOSITORY TESTS
# =============================================================================


def test_reservation_upsert_and_delete(db_session: Session):
    repo = ReservationRepository(db_session)
    user_id = uuid.uuid4()

    repo.upsert_reservation(user_id, SUNDAY, 2500, "birthday")
    row = repo.upsert_reservation(user_id, SUNDAY, 3000)

    assert row.planned_calories == 3000
    assert row.note is None
    assert len(repo.get_between(user_id, MONDAY, SUNDAY)) == 1

    assert repo.delete_for_date(user_id, SUNDAY) is True
    assert repo.delete_for_date(user_id, SUNDAY) is False


# =============================================================================
# PERIOD REPOSITORY TESTS
# =============================================================================


def _period_values(user_id, week_start, status=PeriodStatus.ACTIVE):
    return dict(
        user_id=user_id,
        week_start_date=week_start,
        week_end_date=week_start + timedelta(days=6),
        tracking_start_date=week_start,
        baseline_average_daily=2000,
        weekly_budget=WEEKLY_BUDGET,
        cumulative_overage=0,
        status=status,
    )


def test_period_insert_if_absent(db_session: Session):
    repo = PeriodRepository(db_session)
    user_id = uuid.uuid4()

    assert repo.insert_if_absent(**_period_values(user_id, MONDAY, PeriodStatus.COMPLETED))
    assert not repo.insert_if_absent(**_period_values(user_id, MONDAY, PeriodStatus.COMPLETED))
    assert len(repo.get_by_user_id(user_id)) == 1


def test_period_lookups(db_session: Session):
    repo = PeriodRepository(db_session)
    user_id = uuid.uuid4()
    old = create_period(db_session, user_id, MONDAY, status=PeriodStatus.COMPLETED)
    current = create_period(db_session, user_id, NEXT_MONDAY)

    assert repo.get_active(user_id).period_id == current.period_id
    assert repo.get_covering(user_id, WEDNESDAY).period_id == old.period_id
    assert repo.get_latest(user_id).period_id == current.period_id
    assert repo.get_for_week(user_id, MONDAY).period_id == old.period_id
    assert len(repo.get_overlapping(user_id, SUNDAY, NEXT_MONDAY)) == 2
    assert [p.period_id for p in repo.get_all_active()] == [current.period_id]


def test_period_save_overage_and_complete(db_session: Session):
    repo = PeriodRepository(db_session)
    period = create_period(db_session, uuid.uuid4(), MONDAY)

    repo.save_overage(period, 350, WEDNESDAY)
    repo.mark_completed(period)

    stored = repo.get_by_id(period.period_id)
    assert stored.cumulative_overage == 350
    assert stored.overage_calculated_on == WEDNESDAY
    assert stored.status == PeriodStatus.COMPLETED


# =============================================================================
# BASELINE REPOSITORY TESTS
# =============================================================================


def test_baseline_restart_clears_results(db_session: Session):
    repo = BaselineRepository(db_session)
    user_id = uuid.uuid4()

    baseline = repo.start(user_id, MONDAY, SUNDAY, BaselineStatus.ACTIVE)
    repo.finish(baseline, BaselineStatus.COMPLETED, qualifying_days=6, daily_target=2200)

    restarted = repo.start(
        user_id, NEXT_MONDAY, NEXT_MONDAY + timedelta(days=6), BaselineStatus.PENDING
    )

    assert restarted.baseline_id == baseline.baseline_id
    assert restarted.status == BaselineStatus.PENDING
    assert restarted.start_date == NEXT_MONDAY
    assert restarted.qualifying_days is None
    assert restarted.daily_target is None


def test_baseline_finish_rejects_unknown_field(db_session: Session):
    repo = BaselineRepository(db_session)
    baseline = repo.start(uuid.uuid4(), MONDAY, SUNDAY, BaselineStatus.ACTIVE)

    with pytest.raises(ValueError):
        repo.finish(baseline, BaselineStatus.COMPLETED, bogus=1)


# =============================================================================
# METRIC REPOSITORY TESTS
# =============================================================================


def test_metric_totals_write_keeps_scores(db_session: Session):
    repo = MetricRepository(db_session)
    user_id = uuid.uuid4()
    period = create_period(db_session, user_id, MONDAY)
    totals = dict(
        total_consumed=2000,
        total_burned=0,
        net_consumed=2000,
        total_remaining=12000,
        calories_reserved=0,
    )
    scores = dict(balance_score=100, consistency_score=50, drift_score=50)

    repo.upsert_scores(user_id, period.period_id, TUESDAY, totals, scores)
    row = repo.upsert_totals(
        user_id, period.period_id, TUESDAY, {**totals, "total_consumed": 2600, "net_consumed": 2600}
    )

    assert row.total_consumed == 2600
    assert row.balance_score == 100
    assert len(repo.get_by_period(period.period_id)) == 1


# =============================================================================
# PROFILE REPOSITORY TESTS
# =============================================================================


def test_profile_upsert_replaces(db_session: Session):
    repo = ProfileRepository(db_session)
    user_id = uuid.uuid4()
    fields = dict(
        sex=Sex.MALE,
        weight=80,
        weight_unit=WeightUnit.KG,
        height=180,
        height_unit=HeightUnit.CM,
        birth_date=MONDAY - timedelta(days=365 * 30),
        activity_level=ActivityLevel.SEDENTARY,
        goal=GoalType.MAINTAIN,
        target_weight=None,
        timezone="UTC",
    )

    repo.upsert_profile(user_id, **fields)
    profile = repo.upsert_profile(user_id, **{**fields, "weight": 78, "timezone": "Europe/Berlin"})

    assert float(profile.weight) == 78
    assert profile.timezone == "Europe/Berlin"
