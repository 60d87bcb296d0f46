"""
Reservation & overage distributor.

Reservations pre-commit calories to a future exception day. Overage from
elapsed ordinary days is spread over the ordinary days still ahead;
reserved days keep exactly their planned amount.
"""

from datetime import date, timedelta
from typing import List, Optional, Set
from sqlalchemy.orm import Session
import logging
import uuid

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from core.utils import iter_dates, round_half_up
from domain.enums import GoalType, ReservationSafety, Sex
from domain.models import WeeklyPeriod
from domain.schemas.budget_schemas import (
    AdjustedBudgetResponse,
    ReservationEvaluation,
    ReservationSuggestions,
)
from domain.schemas.tracking_schemas import ReservationResponse, ReservationWriteResponse
from repositories.observation_repository import ObservationRepository
from repositories.period_repository import PeriodRepository
from repositories.reservation_repository import ReservationRepository
from services.period_service import PeriodService
from services.profile_service import ProfileService

logger = logging.getLogger("haven.reservations")

# (male, female/other) comfort floors by goal
COMFORT_FLOORS = {
    GoalType.LOSE: (1500, 1300),
    GoalType.MAINTAIN: (1600, 1400),
    GoalType.GAIN: (1800, 1500),
}

SUGGESTION_FACTORS = {"light": 1.3, "moderate": 1.5, "celebration": 1.75}
MINIMUM_BONUS = 200
CHALLENGING_BELOW = 1400


class ReservationService:
    @staticmethod
    def comfort_floor(profile) -> int:
        """Lowest adjusted allowance for an ordinary day"""
        if profile is None:
            return COMFORT_FLOORS[GoalType.MAINTAIN][0]
        male, other = COMFORT_FLOORS[GoalType(profile.goal)]
        return male if Sex(profile.sex) == Sex.MALE else other

    @staticmethod
    def _period_for(db: Session, user_id: uuid.UUID, day: date) -> WeeklyPeriod:
        """Period covering ``day``; before tracking starts, the active one"""
        period = PeriodRepository(db).get_covering(user_id, day)
        if period:
            return period
        active = PeriodRepository(db).get_active(user_id)
        if active and active.week_start_date <= day <= active.week_end_date:
            return active
        raise NotFoundError(
            f"No weekly period covers {day.isoformat()}",
            details={"date": day.isoformat()},
            code="PERIOD_NOT_FOUND",
        )

    # ------------------------------------------------------------------
    # Reservations
    # ------------------------------------------------------------------

    @staticmethod
    def evaluate_reservation(
        db: Session, user_id: uuid.UUID, day: date, planned_calories: Optional[int] = None
    ) -> ReservationEvaluation:
        """
        Suggested amounts and a safety verdict for reserving ``day``.

        The verdict looks at the average left for the week's other unreserved
        days: below the other-day minimum is unsafe, below 1,400 challenging.
        """
        period = ReservationService._period_for(db, user_id, day)
        weekly_budget = period.weekly_budget
        daily_base = weekly_budget / 7
        other_day_minimum = settings.reservation_other_day_minimum

        others = [
            r
            for r in ReservationRepository(db).get_between(
                user_id, period.week_start_date, period.week_end_date
            )
            if r.reserved_on != day
        ]
        reserved_elsewhere = sum(r.planned_calories for r in others)
        regular_days = 7 - len(others)

        minimum = round_half_up(daily_base + MINIMUM_BONUS)
        max_safe = (weekly_budget - reserved_elsewhere) - (regular_days - 1) * other_day_minimum

        evaluation = ReservationEvaluation(
            date=day,
            daily_base=round_half_up(daily_base),
            planned_calories=planned_calories,
            suggestions=ReservationSuggestions(
                **{
                    name: round_half_up(daily_base * factor)
                    for name, factor in SUGGESTION_FACTORS.items()
                }
            ),
            minimum=minimum,
            maximum=max(max_safe, minimum),
        )
        if planned_calories is None:
            return evaluation

        other_days = regular_days - 1
        if other_days > 0:
            average = (weekly_budget - reserved_elsewhere - planned_calories) / other_days
        else:
            average = 0
        evaluation.other_days_average = round_half_up(average)

        if average < other_day_minimum:
            evaluation.safety = ReservationSafety.UNSAFE
            evaluation.message = (
                f"This would leave your other {other_days} days at only "
                f"{evaluation.other_days_average} kcal each, below the safe "
                f"{other_day_minimum} minimum."
            )
        elif average < CHALLENGING_BELOW:
            evaluation.safety = ReservationSafety.CHALLENGING
            evaluation.message = (
                f"This leaves your other {other_days} days at "
                f"{evaluation.other_days_average} kcal each."
            )
        else:
            evaluation.safety = ReservationSafety.SAFE
            evaluation.message = (
                f"Your other {other_days} days will have "
                f"{evaluation.other_days_average} kcal each."
            )
        return evaluation

    @staticmethod
    def reserve(
        db: Session,
        user_id: uuid.UUID,
        day: date,
        planned_calories: int,
        note: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ReservationWriteResponse:
        """
        Reserve calories for an exception day (upsert by user and date).

        The safety verdict is returned with the reservation; it does not block it.

        Raises:
            ServiceValidationError: Past date or non-positive calories
        """
        today = today or ProfileService.user_today(db, user_id)
        if day < today:
            raise ServiceValidationError(
                "Cannot reserve a date in the past",
                details={"date": day.isoformat(), "today": today.isoformat()},
                code="RESERVATION_IN_PAST",
            )
        if planned_calories is None or planned_calories <= 0:
            raise ServiceValidationError(
                "Planned calories must be greater than 0",
                details={"planned_calories": planned_calories},
            )

        reservation = ReservationRepository(db).upsert_reservation(
            user_id, day, planned_calories, note
        )
        try:
            evaluation = ReservationService.evaluate_reservation(
                db, user_id, day, planned_calories
            )
        except NotFoundError:
            # reservation ahead of any period: no budget to judge it against yet
            evaluation = ReservationEvaluation(
                date=day,
                daily_base=0,
                planned_calories=planned_calories,
                suggestions=ReservationSuggestions(light=0, moderate=0, celebration=0),
                minimum=0,
                maximum=0,
            )

        logger.info(
            f"reservation_saved user_id={user_id} date={day} "
            f"planned_calories={planned_calories} safety="
            f"{evaluation.safety.value if evaluation.safety else 'unknown'}"
        )
        return ReservationWriteResponse(
            reservation=ReservationResponse.model_validate(reservation),
            evaluation=evaluation,
        )

    @staticmethod
    def cancel_reservation(
        db: Session, user_id: uuid.UUID, day: date, today: Optional[date] = None
    ) -> None:
        """
        Remove a reservation that has not happened yet.

        Raises:
            ServiceValidationError: Past date (it is historical record)
            NotFoundError: No reservation on that date
        """
        today = today or ProfileService.user_today(db, user_id)
        if day < today:
            raise ServiceValidationError(
                "Past reservations cannot be cancelled",
                details={"date": day.isoformat(), "today": today.isoformat()},
                code="RESERVATION_IN_PAST",
            )
        if not ReservationRepository(db).delete_for_date(user_id, day):
            raise NotFoundError(
                f"No reservation on {day.isoformat()}", code="RESERVATION_NOT_FOUND"
            )
        logger.info(f"reservation_cancelled user_id={user_id} date={day}")

    @staticmethod
    def list_reservations(
        db: Session, user_id: uuid.UUID, start: date, end: date
    ) -> List[ReservationResponse]:
        if end < start:
            raise ServiceValidationError(
                "end must not be before start",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        return [
            ReservationResponse.model_validate(r)
            for r in ReservationRepository(db).get_between(user_id, start, end)
        ]

    # ------------------------------------------------------------------
    # Overage distribution
    # ------------------------------------------------------------------

    @staticmethod
    def reserved_dates(db: Session, period: WeeklyPeriod) -> Set[date]:
        return {
            r.reserved_on
            for r in ReservationRepository(db).get_between(
                period.user_id, period.week_start_date, period.week_end_date
            )
        }

    @staticmethod
    def compute_overage(db: Session, period: WeeklyPeriod, as_of: date) -> int:
        """
        Cumulative overage of the elapsed (< as_of) ordinary days of the period.

        Each day contributes max(0, net consumed - daily base); under-eating
        does not bank credit and reserved days are skipped.
        """
        last_elapsed = min(as_of - timedelta(days=1), period.week_end_date)
        if last_elapsed < period.tracking_start_date:
            return 0

        reserved = ReservationService.reserved_dates(db, period)
        daily_base = period.daily_base
        overage = 0.0
        for obs in ObservationRepository(db).get_between(
            period.user_id, period.tracking_start_date, last_elapsed
        ):
            if obs.observed_on in reserved:
                continue
            overage += max(0.0, obs.net_calories - daily_base)
        return round_half_up(overage)

    @staticmethod
    def recalculate_and_distribute(db: Session, user_id: uuid.UUID, as_of: date) -> bool:
        """
        Recompute and store the period's cumulative overage for ``as_of``.

        Only runs when the previous day has a consumption record with intake
        above zero; otherwise there is nothing new to fold in.

        Returns:
            True when the overage was recomputed
        """
        period = PeriodRepository(db).get_covering(user_id, as_of)
        if not period:
            logger.debug(f"overage_skipped user_id={user_id} as_of={as_of} reason=no_period")
            return False

        previous = ObservationRepository(db).get_for_date(user_id, as_of - timedelta(days=1))
        if not previous or (previous.calories_consumed or 0) <= 0:
            logger.debug(f"overage_skipped user_id={user_id} as_of={as_of} reason=no_new_intake")
            return False

        overage = ReservationService.compute_overage(db, period, as_of)
        PeriodRepository(db).save_overage(period, overage, as_of)
        logger.info(
            f"overage_recalculated user_id={user_id} period_id={period.period_id} "
            f"as_of={as_of} cumulative_overage={overage}"
        )
        return True

    @staticmethod
    def get_adjusted_budget(db: Session, user_id: uuid.UUID, day: date) -> AdjustedBudgetResponse:
        """
        Allowance for ``day`` after spreading the stored overage.

        Ordinary day: adjustment = -round(overage / remaining ordinary days,
        counting ``day``), floored at the comfort floor. Reserved day: the
        planned amount, unadjusted.

        Raises:
            NotFoundError: If no period covers the date
        """
        period = PeriodService.get_current_period(db, user_id, day)
        profile = ProfileService.get_profile_model(db, user_id)
        floor = ReservationService.comfort_floor(profile)
        base = round_half_up(period.daily_base)
        overage = period.cumulative_overage or 0

        reserved = ReservationService.reserved_dates(db, period)
        remaining = sum(
            1 for d in iter_dates(max(day, period.tracking_start_date), period.week_end_date)
            if d not in reserved
        )

        reservation = ReservationRepository(db).get_for_date(user_id, day)
        if reservation:
            return AdjustedBudgetResponse(
                date=day,
                period_id=period.period_id,
                base_budget=base,
                adjustment=0,
                adjusted_budget=reservation.planned_calories,
                is_reserved_day=True,
                reserved_calories=reservation.planned_calories,
                remaining_ordinary_days=remaining,
                cumulative_overage=overage,
                comfort_floor=floor,
            )

        remaining = max(remaining, 1)
        adjustment = -round_half_up(overage / remaining)
        return AdjustedBudgetResponse(
            date=day,
            period_id=period.period_id,
            base_budget=base,
            adjustment=adjustment,
            adjusted_budget=max(base + adjustment, floor),
            is_reserved_day=False,
            reserved_calories=None,
            remaining_ordinary_days=remaining,
            cumulative_overage=overage,
            comfort_floor=floor,
        )
