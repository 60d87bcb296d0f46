"""
Observation Repository - Data access layer for daily intake/exercise rows
"""

from typing import List, Optional, Tuple
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import DailyObservation
from domain.enums import DayType

KEY = ("user_id", "observed_on")


class ObservationRepository(BaseRepository[DailyObservation]):
    """Repository for daily observations. Every write is an upsert on (user, date)."""

    def __init__(self, db: Session):
        super().__init__(db, DailyObservation)

    def get_by_id(self, observation_id: UUID) -> Optional[DailyObservation]:
        return (
            self.db.query(DailyObservation)
            .filter(DailyObservation.observation_id == observation_id)
            .first()
        )

    def get_for_date(self, user_id: UUID, day: date) -> Optional[DailyObservation]:
        """Get the observation row for a user's calendar date"""
        return (
            self.db.query(DailyObservation)
            .filter(
                DailyObservation.user_id == user_id,
                DailyObservation.observed_on == day,
            )
            .execution_options(populate_existing=True)
            .first()
        )

    def get_between(self, user_id: UUID, start: date, end: date) -> List[DailyObservation]:
        """Observations with start <= observed_on <= end, oldest first"""
        return (
            self.db.query(DailyObservation)
            .filter(
                DailyObservation.user_id == user_id,
                DailyObservation.observed_on >= start,
                DailyObservation.observed_on <= end,
            )
            .order_by(DailyObservation.observed_on)
            .execution_options(populate_existing=True)
            .all()
        )

    def get_totals(self, user_id: UUID, start: date, end: date) -> Tuple[int, int]:
        """Sum of (consumed, burned) over an inclusive date range"""
        consumed, burned = (
            self.db.query(
                func.coalesce(func.sum(DailyObservation.calories_consumed), 0),
                func.coalesce(func.sum(DailyObservation.calories_burned), 0),
            )
            .filter(
                DailyObservation.user_id == user_id,
                DailyObservation.observed_on >= start,
                DailyObservation.observed_on <= end,
            )
            .one()
        )
        return int(consumed), int(burned)

    def add_consumed(
        self, user_id: UUID, day: date, calories: int, day_type: Optional[DayType] = None
    ) -> DailyObservation:
        """Atomically add one food event's calories to the day"""
        values = {
            "user_id": user_id,
            "observed_on": day,
            "calories_consumed": calories,
            "calories_burned": 0,
            "day_type": day_type,
        }
        self.upsert(
            values,
            KEY,
            update_columns=("day_type",) if day_type else (),
            increment_columns=("calories_consumed",),
        )
        return self.get_for_date(user_id, day)

    def set_burned(self, user_id: UUID, day: date, calories: int) -> DailyObservation:
        """Set the day's exercise burn, creating the row with zero intake if absent"""
        values = {
            "user_id": user_id,
            "observed_on": day,
            "calories_consumed": 0,
            "calories_burned": calories,
        }
        self.upsert(values, KEY, update_columns=("calories_burned",))
        return self.get_for_date(user_id, day)

    def set_totals(
        self,
        user_id: UUID,
        day: date,
        consumed: int,
        burned: int,
        day_type: Optional[DayType] = None,
    ) -> DailyObservation:
        """Replace the day's totals"""
        values = {
            "user_id": user_id,
            "observed_on": day,
            "calories_consumed": consumed,
            "calories_burned": burned,
            "day_type": day_type,
        }
        self.upsert(
            values,
            KEY,
            update_columns=("calories_consumed", "calories_burned", "day_type"),
        )
        return self.get_for_date(user_id, day)
