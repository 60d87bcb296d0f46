"""
Baseline aggregator and baseline lifecycle.

A baseline is a 7-day window of real intake/exercise used to measure the
user before any budget exists. Completing it blends the measurement into a
budget and opens the first weekly period.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from app.config import settings
from app.exceptions import ConflictError, InsufficientBaselineData, NotFoundError
from core.utils import days_inclusive, round_half_up
from domain.enums import BaselineStatus, PeriodOutcome, PeriodType
from domain.models import BaselinePeriod, DailyObservation, WeeklyPeriod
from domain.schemas.tracking_schemas import (
    BaselineAggregate,
    BaselineCompletionResponse,
    BaselineProgressResponse,
    BaselineResponse,
    PeriodResponse,
)
from repositories.baseline_repository import BaselineRepository
from repositories.observation_repository import ObservationRepository
from repositories.period_repository import PeriodRepository
from services.budget_service import BudgetService
from services.metabolic_service import MetabolicService
from services.period_service import PeriodService
from services.profile_service import ProfileService

logger = logging.getLogger("haven.baseline")

# (cumulative exercise burn upper bound, tier); anything above the last bound is tier 4
ACTIVITY_TIER_THRESHOLDS = ((500, 1), (1200, 2), (2000, 3))

FINISHED = (BaselineStatus.COMPLETED, BaselineStatus.ABANDONED)


class BaselineService:
    @staticmethod
    def classify_activity(total_exercise: int) -> int:
        """Activity tier (1-4) for the cumulative exercise burn of a baseline week"""
        for bound, tier in ACTIVITY_TIER_THRESHOLDS:
            if total_exercise < bound:
                return tier
        return 4

    @staticmethod
    def aggregate(observations: Iterable[DailyObservation]) -> BaselineAggregate:
        """
        Measure a baseline window.

        Only days with positive intake qualify; zero-intake days are left out
        rather than averaged in. Exercise is summed over every day of the window.

        Raises:
            InsufficientBaselineData: Fewer qualifying days than required
        """
        observations = list(observations)
        qualifying = [o for o in observations if (o.calories_consumed or 0) > 0]
        required = settings.baseline_min_qualifying_days

        if len(qualifying) < required:
            raise InsufficientBaselineData(
                f"Need at least {required} days with logged food. Found: {len(qualifying)}",
                details={"qualifying_days": len(qualifying), "required_days": required},
            )

        total_consumed = sum(o.calories_consumed for o in qualifying)
        total_exercise = sum(o.calories_burned or 0 for o in observations)
        tier = BaselineService.classify_activity(total_exercise)
        level = MetabolicService.level_for_tier(tier)

        return BaselineAggregate(
            qualifying_days=len(qualifying),
            total_consumed=total_consumed,
            total_exercise=total_exercise,
            measured_average=round_half_up(total_consumed / len(qualifying)),
            activity_tier=tier,
            activity_level=level,
            activity_multiplier=MetabolicService.multiplier_for(level),
        )

    @staticmethod
    def aggregate_window(
        db: Session, user_id: uuid.UUID, start: date, end: date
    ) -> BaselineAggregate:
        return BaselineService.aggregate(ObservationRepository(db).get_between(user_id, start, end))

    @staticmethod
    def require_baseline(db: Session, user_id: uuid.UUID) -> BaselinePeriod:
        baseline = BaselineRepository(db).get_by_user_id(user_id)
        if not baseline:
            raise NotFoundError(
                f"No baseline period for user {user_id}", code="BASELINE_NOT_FOUND"
            )
        return baseline

    @staticmethod
    def start_baseline(
        db: Session, user_id: uuid.UUID, today: date, start_date: Optional[date] = None
    ) -> BaselineResponse:
        """
        Open (or restart) the user's baseline window.

        Restarting a finished baseline is the explicit re-baseline flow; the
        new results only reach future periods.
        """
        ProfileService.require_profile(db, user_id)
        start = start_date or today
        end = start + timedelta(days=settings.baseline_window_days - 1)
        status = BaselineStatus.PENDING if start > today else BaselineStatus.ACTIVE

        previous = BaselineRepository(db).get_by_user_id(user_id)
        baseline = BaselineRepository(db).start(user_id, start, end, status)
        logger.info(
            f"baseline_started user_id={user_id} start={start} end={end} "
            f"status={status.value} restarted={previous is not None}"
        )
        return BaselineResponse.model_validate(baseline)

    @staticmethod
    def _refresh_status(db: Session, baseline: BaselinePeriod, today: date) -> BaselinePeriod:
        if baseline.status == BaselineStatus.PENDING and baseline.start_date <= today:
            return BaselineRepository(db).set_status(baseline, BaselineStatus.ACTIVE)
        return baseline

    @staticmethod
    def get_progress(db: Session, user_id: uuid.UUID, today: date) -> BaselineProgressResponse:
        baseline = BaselineService._refresh_status(
            db, BaselineService.require_baseline(db, user_id), today
        )
        observations = ObservationRepository(db).get_between(
            user_id, baseline.start_date, baseline.end_date
        )
        qualifying = sum(1 for o in observations if (o.calories_consumed or 0) > 0)
        required = settings.baseline_min_qualifying_days
        elapsed = min(
            days_inclusive(baseline.start_date, today),
            days_inclusive(baseline.start_date, baseline.end_date),
        )

        return BaselineProgressResponse(
            baseline_id=baseline.baseline_id,
            status=baseline.status,
            start_date=baseline.start_date,
            end_date=baseline.end_date,
            days_elapsed=elapsed,
            days_logged=len(observations),
            qualifying_days=qualifying,
            required_days=required,
            can_complete=baseline.status not in FINISHED and qualifying >= required,
        )

    @staticmethod
    def _require_open(db: Session, user_id: uuid.UUID, today: date) -> BaselinePeriod:
        baseline = BaselineService._refresh_status(
            db, BaselineService.require_baseline(db, user_id), today
        )
        if baseline.status in FINISHED:
            raise ConflictError(
                f"Baseline is already {baseline.status.value}",
                details={"status": baseline.status.value},
                code="BASELINE_FINISHED",
            )
        return baseline

    @staticmethod
    def _open_first_period(
        db: Session, user_id: uuid.UUID, today: date, weekly_budget: int, baseline_average: int
    ) -> Tuple[PeriodOutcome, WeeklyPeriod]:
        """
        First period for a finished baseline.

        On a re-baseline the user already tracks in an active period; it is
        left untouched and the new budget is picked up at the next rotation.
        """
        active = PeriodRepository(db).get_active(user_id)
        if active:
            logger.info(
                f"rebaseline_deferred user_id={user_id} active_week_start={active.week_start_date}"
            )
            return PeriodOutcome.ALREADY_EXISTS, active
        return PeriodService.create_first_period(
            db, user_id, today, weekly_budget, baseline_average, PeriodType.BASELINE
        )

    @staticmethod
    def complete_baseline(
        db: Session, user_id: uuid.UUID, today: date
    ) -> BaselineCompletionResponse:
        """
        Turn the baseline measurement into a budget and the first weekly period.

        Raises:
            NotFoundError: No profile or no baseline
            ConflictError: Baseline already completed or abandoned
            InsufficientBaselineData: Fewer than the required qualifying days
            UnsafeBudgetFloor: The synthesized target is below the safety floor
            PeriodConflict: The first period would break the one-active invariant
        """
        profile = ProfileService.require_profile(db, user_id)
        baseline = BaselineService._require_open(db, user_id, today)

        try:
            measured = BaselineService.aggregate_window(
                db, user_id, baseline.start_date, baseline.end_date
            )
        except InsufficientBaselineData:
            logger.info(f"baseline_incomplete user_id={user_id} start={baseline.start_date}")
            raise

        budget = BudgetService.synthesize_budget(
            profile,
            measured_average=measured.measured_average,
            activity_tier_override=measured.activity_tier,
            as_of=today,
        )
        outcome, period = BaselineService._open_first_period(
            db, user_id, today, budget.weekly_budget, measured.measured_average
        )
        baseline = BaselineRepository(db).finish(
            baseline,
            BaselineStatus.COMPLETED,
            qualifying_days=measured.qualifying_days,
            measured_average_daily=measured.measured_average,
            total_exercise=measured.total_exercise,
            measured_activity_level=measured.activity_level,
            daily_target=budget.daily_target,
            weekly_budget=budget.weekly_budget,
            completed_at=datetime.now(timezone.utc),
        )
        if outcome == PeriodOutcome.CREATED:
            baseline = BaselineRepository(db).mark_applied(baseline, period.period_id)

        logger.info(
            f"baseline_completed user_id={user_id} qualifying_days={measured.qualifying_days} "
            f"measured_average={measured.measured_average} tier={measured.activity_tier} "
            f"daily_target={budget.daily_target} period_start={period.tracking_start_date}"
        )
        return BaselineCompletionResponse(
            baseline=BaselineResponse.model_validate(baseline),
            budget=budget,
            outcome=outcome,
            period=PeriodResponse.model_validate(period),
        )

    @staticmethod
    def abandon_baseline(
        db: Session, user_id: uuid.UUID, today: date
    ) -> BaselineCompletionResponse:
        """
        Fall back to a declared-only estimate (formula with the declared activity level).

        Only ever done on explicit request; an incomplete baseline is never
        replaced by an estimate on its own.
        """
        profile = ProfileService.require_profile(db, user_id)
        baseline = BaselineService._require_open(db, user_id, today)

        budget = BudgetService.synthesize_budget(profile, as_of=today)
        outcome, period = BaselineService._open_first_period(
            db, user_id, today, budget.weekly_budget, budget.daily_target
        )
        baseline = BaselineRepository(db).finish(
            baseline,
            BaselineStatus.ABANDONED,
            daily_target=budget.daily_target,
            weekly_budget=budget.weekly_budget,
            completed_at=datetime.now(timezone.utc),
        )
        if outcome == PeriodOutcome.CREATED:
            baseline = BaselineRepository(db).mark_applied(baseline, period.period_id)

        logger.info(
            f"baseline_abandoned user_id={user_id} daily_target={budget.daily_target} "
            f"period_start={period.tracking_start_date}"
        )
        return BaselineCompletionResponse(
            baseline=BaselineResponse.model_validate(baseline),
            budget=budget,
            outcome=outcome,
            period=PeriodResponse.model_validate(period),
        )
