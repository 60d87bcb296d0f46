"""
Period manager.

Owns the lifecycle of weekly tracking windows: first-window assignment after
a baseline, idempotent creation keyed by (user, week_start_date), rotation
into the next week, and the per-user tracking state.
"""

from datetime import date, timedelta
from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging
import uuid

from app.exceptions import MissingBaselineData, NotFoundError, PeriodConflict
from core.utils import next_monday, week_start
from domain.enums import (
    BaselineStatus,
    PeriodOutcome,
    PeriodStatus,
    PeriodType,
    TrackingState,
)
from domain.models import BaselinePeriod, WeeklyPeriod
from domain.schemas.tracking_schemas import (
    BaselineResponse,
    PeriodOperationResponse,
    PeriodResponse,
    TrackingStateResponse,
)
from repositories.baseline_repository import BaselineRepository
from repositories.period_repository import PeriodRepository

logger = logging.getLogger("haven.periods")

# Fewer remaining days than this (counting today) defers the first window to next Monday
SMART_ASSIGNMENT_MIN_DAYS = 3


class PeriodService:
    @staticmethod
    def first_window(today: date) -> Tuple[date, date]:
        """
        Week start and tracking start for a user's first steady-state window.

        Returns:
            (week_start_date, tracking_start_date)
        """
        days_remaining = 7 - today.weekday()
        if days_remaining < SMART_ASSIGNMENT_MIN_DAYS:
            monday = next_monday(today)
            return monday, monday
        return week_start(today), today

    @staticmethod
    def _insert_period(
        db: Session,
        user_id: uuid.UUID,
        monday: date,
        tracking_start: date,
        weekly_budget: int,
        baseline_average: int,
        period_type: PeriodType,
        replacing: Optional[WeeklyPeriod] = None,
    ) -> Tuple[PeriodOutcome, WeeklyPeriod]:
        """
        Insert the window for ``monday`` unless it already exists.

        When ``replacing`` is given it is completed in the same transaction,
        so a rotation either lands entirely or not at all.

        Raises:
            PeriodConflict: If the window would overlap a different one or add a
                second active period
        """
        repo = PeriodRepository(db)
        sunday = monday + timedelta(days=6)

        existing = repo.get_for_week(user_id, monday)
        if existing:
            if replacing is not None and replacing.period_id != existing.period_id:
                repo.mark_completed(replacing)
            return PeriodOutcome.ALREADY_EXISTS, existing

        overlapping = [
            p for p in repo.get_overlapping(user_id, monday, sunday) if p.week_start_date != monday
        ]
        if overlapping:
            logger.error(
                f"period_conflict user_id={user_id} week_start={monday} "
                f"overlaps={[str(p.week_start_date) for p in overlapping]}"
            )
            raise PeriodConflict(
                "New period would overlap an existing one",
                details={
                    "week_start_date": monday.isoformat(),
                    "overlapping": [p.week_start_date.isoformat() for p in overlapping],
                },
            )

        active = repo.get_active(user_id)
        if active and (replacing is None or active.period_id != replacing.period_id):
            logger.error(
                f"period_conflict user_id={user_id} week_start={monday} "
                f"active_period={active.period_id}"
            )
            raise PeriodConflict(
                "User already has an active period",
                details={
                    "active_period_id": str(active.period_id),
                    "active_week_start": active.week_start_date.isoformat(),
                },
            )

        try:
            if replacing is not None:
                repo.mark_completed(replacing, commit=False)
            inserted = repo.insert_if_absent(
                commit=False,
                user_id=user_id,
                week_start_date=monday,
                week_end_date=sunday,
                tracking_start_date=tracking_start,
                baseline_average_daily=baseline_average,
                weekly_budget=weekly_budget,
                cumulative_overage=0,
                status=PeriodStatus.ACTIVE,
                period_type=period_type,
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error(f"period_conflict user_id={user_id} week_start={monday} error={e.orig}")
            raise PeriodConflict(
                "User already has an active period",
                details={"week_start_date": monday.isoformat()},
            ) from e

        period = repo.get_for_week(user_id, monday)
        if not inserted:
            return PeriodOutcome.ALREADY_EXISTS, period

        logger.info(
            f"period_created user_id={user_id} week_start={monday} "
            f"tracking_start={tracking_start} weekly_budget={weekly_budget} "
            f"type={period_type.value}"
        )
        return PeriodOutcome.CREATED, period

    @staticmethod
    def create_first_period(
        db: Session,
        user_id: uuid.UUID,
        today: date,
        weekly_budget: int,
        baseline_average: int,
        period_type: PeriodType = PeriodType.BASELINE,
    ) -> Tuple[PeriodOutcome, WeeklyPeriod]:
        """First window after a baseline, placed by smart assignment"""
        monday, tracking_start = PeriodService.first_window(today)
        return PeriodService._insert_period(
            db, user_id, monday, tracking_start, weekly_budget, baseline_average, period_type
        )

    @staticmethod
    def _pending_baseline(db: Session, user_id: uuid.UUID) -> Optional[BaselinePeriod]:
        """Finished baseline whose budget has not reached any period yet"""
        baseline = BaselineRepository(db).get_by_user_id(user_id)
        if (
            baseline
            and baseline.status in (BaselineStatus.COMPLETED, BaselineStatus.ABANDONED)
            and baseline.weekly_budget
            and baseline.applied_period_id is None
        ):
            return baseline
        return None

    @staticmethod
    def _open_week(
        db: Session,
        user_id: uuid.UUID,
        today: date,
        previous: WeeklyPeriod,
        replacing: Optional[WeeklyPeriod] = None,
    ) -> Tuple[PeriodOutcome, WeeklyPeriod]:
        """Window for this week, carrying forward the previous budget unless a re-baseline is pending"""
        pending = PeriodService._pending_baseline(db, user_id)
        if pending:
            weekly_budget = pending.weekly_budget
            baseline_average = pending.measured_average_daily or pending.daily_target
        else:
            weekly_budget = previous.weekly_budget
            baseline_average = previous.baseline_average_daily

        monday = week_start(today)
        outcome, period = PeriodService._insert_period(
            db,
            user_id,
            monday,
            monday,
            weekly_budget,
            baseline_average,
            PeriodType.STEADY,
            replacing=replacing,
        )
        if pending and outcome == PeriodOutcome.CREATED:
            BaselineRepository(db).mark_applied(pending, period.period_id)
        return outcome, period

    @staticmethod
    def create_or_rotate_period(
        db: Session, user_id: uuid.UUID, today: date
    ) -> PeriodOperationResponse:
        """
        Make sure the user has an active window for ``today``.

        * An active window that has not ended is returned unchanged.
        * An active window that ended before ``today`` is completed and the
          window for this week is created, carrying forward its weekly budget
          and baseline average. Budgets are only recomputed through an
          explicit re-baseline, whose result is picked up here.
        * Without any window, the first one is derived from the finished
          baseline by smart assignment.

        Repeated calls for the same week return the same row.

        Raises:
            MissingBaselineData: No prior period and no finished baseline
            PeriodConflict: The new window would break the one-active invariant
        """
        repo = PeriodRepository(db)
        active = repo.get_active(user_id)

        if active and active.week_end_date >= today:
            return PeriodOperationResponse(
                outcome=PeriodOutcome.ALREADY_EXISTS,
                period=PeriodResponse.model_validate(active),
            )

        if active:
            outcome, period = PeriodService._open_week(
                db, user_id, today, active, replacing=active
            )
            if outcome == PeriodOutcome.CREATED:
                outcome = PeriodOutcome.ROTATED
                logger.info(
                    f"period_rotated user_id={user_id} previous={active.week_start_date} "
                    f"week_start={period.week_start_date} weekly_budget={period.weekly_budget}"
                )
            return PeriodOperationResponse(
                outcome=outcome, period=PeriodResponse.model_validate(period)
            )

        current = repo.get_for_week(user_id, week_start(today))
        if current:
            return PeriodOperationResponse(
                outcome=PeriodOutcome.ALREADY_EXISTS,
                period=PeriodResponse.model_validate(current),
            )

        latest = repo.get_latest(user_id)
        if latest:
            outcome, period = PeriodService._open_week(db, user_id, today, latest)
            return PeriodOperationResponse(
                outcome=outcome, period=PeriodResponse.model_validate(period)
            )

        baseline = PeriodService._pending_baseline(db, user_id)
        if not baseline:
            existing = BaselineRepository(db).get_by_user_id(user_id)
            logger.warning(f"rotation_refused user_id={user_id} reason=missing_baseline")
            raise MissingBaselineData(
                "No prior period and no completed baseline to derive a budget from",
                details={"baseline_status": existing.status.value if existing else None},
            )

        outcome, period = PeriodService.create_first_period(
            db,
            user_id,
            today,
            baseline.weekly_budget,
            baseline.measured_average_daily or baseline.daily_target,
        )
        if outcome == PeriodOutcome.CREATED:
            BaselineRepository(db).mark_applied(baseline, period.period_id)
        return PeriodOperationResponse(outcome=outcome, period=PeriodResponse.model_validate(period))

    @staticmethod
    def get_current_period(db: Session, user_id: uuid.UUID, day: date) -> WeeklyPeriod:
        """
        Window whose tracked range contains ``day``.

        Raises:
            NotFoundError: If no window covers the date
        """
        period = PeriodRepository(db).get_covering(user_id, day)
        if not period:
            raise NotFoundError(
                f"No weekly period covers {day.isoformat()}",
                details={"date": day.isoformat()},
                code="PERIOD_NOT_FOUND",
            )
        return period

    @staticmethod
    def find_current_period(db: Session, user_id: uuid.UUID, day: date) -> Optional[WeeklyPeriod]:
        return PeriodRepository(db).get_covering(user_id, day)

    @staticmethod
    def get_tracking_state(db: Session, user_id: uuid.UUID, today: date) -> TrackingStateResponse:
        """Where the user is in none -> baseline -> active -> rotated"""
        periods = PeriodRepository(db).get_by_user_id(user_id)
        baseline = BaselineRepository(db).get_by_user_id(user_id)
        baseline_out = BaselineResponse.model_validate(baseline) if baseline else None

        active = next((p for p in periods if p.status == PeriodStatus.ACTIVE), None)
        if periods:
            rotated = any(p.status == PeriodStatus.COMPLETED for p in periods)
            return TrackingStateResponse(
                state=TrackingState.ACTIVE_ROTATED if rotated else TrackingState.ACTIVE,
                period=PeriodResponse.model_validate(active or periods[0]),
                baseline=baseline_out,
            )

        if not baseline:
            return TrackingStateResponse(state=TrackingState.NONE)

        if baseline.status == BaselineStatus.PENDING and baseline.start_date > today:
            state = TrackingState.BASELINE_PENDING
        else:
            state = TrackingState.BASELINE_ACTIVE
        return TrackingStateResponse(state=state, baseline=baseline_out)
