"""
Daily observations and the daily adjustment recalculator.

Every write is an upsert on (user, date) followed by a refresh of the owning
period's totals and the shared recalculation.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from app.exceptions import ServiceValidationError
from domain.enums import DayType, RecalculationReason
from domain.models import DailyObservation
from domain.schemas.tracking_schemas import (
    MetricSnapshotResponse,
    ObservationRecalculationResponse,
    ObservationResponse,
)
from repositories.metric_repository import MetricRepository
from repositories.observation_repository import ObservationRepository
from repositories.period_repository import PeriodRepository
from services.adherence_service import AdherenceService
from services.profile_service import ProfileService
from services.recalculation_service import RecalculationService

logger = logging.getLogger("haven.observations")


class ObservationService:
    @staticmethod
    def _check_not_future(day: date, today: date) -> None:
        if day > today:
            raise ServiceValidationError(
                "Cannot log a date in the future",
                details={"date": day.isoformat(), "today": today.isoformat()},
                code="OBSERVATION_IN_FUTURE",
            )

    @staticmethod
    def refresh_period_totals(
        db: Session, user_id: uuid.UUID, observed_on: date, today: date
    ) -> Optional[MetricSnapshotResponse]:
        """
        Recompute the totals of the period owning ``observed_on`` through
        ``today`` and upsert its snapshot row for ``today`` (totals only).

        Returns None when the date is outside every period.
        """
        period = PeriodRepository(db).get_covering(user_id, observed_on)
        if not period:
            logger.debug(f"totals_skipped user_id={user_id} date={observed_on} reason=no_period")
            return None

        totals, _, _ = AdherenceService.period_totals(db, period, today)
        snapshot = MetricRepository(db).upsert_totals(user_id, period.period_id, today, totals)
        logger.debug(
            f"totals_refreshed user_id={user_id} period_id={period.period_id} "
            f"net={totals['net_consumed']} remaining={totals['total_remaining']}"
        )
        return MetricSnapshotResponse.model_validate(snapshot)

    @staticmethod
    def _after_write(
        db: Session, user_id: uuid.UUID, observation: DailyObservation, today: date
    ) -> ObservationRecalculationResponse:
        ObservationService.refresh_period_totals(db, user_id, observation.observed_on, today)
        recalculation = RecalculationService.recalculate(
            db, user_id, today, RecalculationReason.OBSERVATION
        )
        return ObservationRecalculationResponse(
            observation=ObservationResponse.model_validate(observation),
            recalculation=recalculation,
        )

    @staticmethod
    def log_exercise(
        db: Session,
        user_id: uuid.UUID,
        day: date,
        calories_burned: int,
        today: Optional[date] = None,
    ) -> ObservationRecalculationResponse:
        """
        Record the day's exercise burn.

        Creates the observation with zero intake when the day has none yet.
        Repeated events for the same date update the same observation and the
        same snapshot row.
        """
        today = today or ProfileService.user_today(db, user_id)
        ObservationService._check_not_future(day, today)
        if calories_burned < 0:
            raise ServiceValidationError("Calories burned must not be negative")

        observation = ObservationRepository(db).set_burned(user_id, day, calories_burned)
        logger.info(f"exercise_logged user_id={user_id} date={day} burned={calories_burned}")
        return ObservationService._after_write(db, user_id, observation, today)

    @staticmethod
    def log_intake(
        db: Session,
        user_id: uuid.UUID,
        day: date,
        calories: int,
        day_type: Optional[DayType] = None,
        today: Optional[date] = None,
    ) -> ObservationRecalculationResponse:
        """Add one food event's calories to the day"""
        today = today or ProfileService.user_today(db, user_id)
        ObservationService._check_not_future(day, today)
        if calories <= 0:
            raise ServiceValidationError("Calories must be greater than 0")

        observation = ObservationRepository(db).add_consumed(user_id, day, calories, day_type)
        logger.info(
            f"intake_logged user_id={user_id} date={day} calories={calories} "
            f"day_total={observation.calories_consumed}"
        )
        return ObservationService._after_write(db, user_id, observation, today)

    @staticmethod
    def set_observation(
        db: Session,
        user_id: uuid.UUID,
        day: date,
        calories_consumed: int,
        calories_burned: int = 0,
        day_type: Optional[DayType] = None,
        today: Optional[date] = None,
    ) -> ObservationRecalculationResponse:
        """Replace the day's totals"""
        today = today or ProfileService.user_today(db, user_id)
        ObservationService._check_not_future(day, today)
        if calories_consumed < 0 or calories_burned < 0:
            raise ServiceValidationError("Calorie totals must not be negative")

        observation = ObservationRepository(db).set_totals(
            user_id, day, calories_consumed, calories_burned, day_type
        )
        logger.info(
            f"observation_set user_id={user_id} date={day} consumed={calories_consumed} "
            f"burned={calories_burned}"
        )
        return ObservationService._after_write(db, user_id, observation, today)

    @staticmethod
    def list_observations(
        db: Session, user_id: uuid.UUID, start: date, end: date
    ) -> List[ObservationResponse]:
        return [
            ObservationResponse.model_validate(o)
            for o in ObservationRepository(db).get_between(user_id, start, end)
        ]
