"""
Period Repository - Data access layer for weekly tracking windows
"""

from typing import List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import WeeklyPeriod
from domain.enums import PeriodStatus


class PeriodRepository(BaseRepository[WeeklyPeriod]):
    """Repository for weekly periods, unique per (user, week_start_date)"""

    def __init__(self, db: Session):
        super().__init__(db, WeeklyPeriod)

    def get_by_id(self, period_id: UUID) -> Optional[WeeklyPeriod]:
        return (
            self.db.query(WeeklyPeriod)
            .filter(WeeklyPeriod.period_id == period_id)
            .execution_options(populate_existing=True)
            .first()
        )

    def get_for_week(self, user_id: UUID, week_start: date) -> Optional[WeeklyPeriod]:
        return (
            self.db.query(WeeklyPeriod)
            .filter(
                WeeklyPeriod.user_id == user_id,
                WeeklyPeriod.week_start_date == week_start,
            )
            .execution_options(populate_existing=True)
            .first()
        )

    def get_active(self, user_id: UUID) -> Optional[WeeklyPeriod]:
        """The user's single active period, if any"""
        return (
            self.db.query(WeeklyPeriod)
            .filter(
                WeeklyPeriod.user_id == user_id,
                WeeklyPeriod.status == PeriodStatus.ACTIVE,
            )
            .execution_options(populate_existing=True)
            .first()
        )

    def get_covering(self, user_id: UUID, day: date) -> Optional[WeeklyPeriod]:
        """Period whose tracked range contains the date, whatever its status"""
        return (
            self.db.query(WeeklyPeriod)
            .filter(
                WeeklyPeriod.user_id == user_id,
                WeeklyPeriod.tracking_start_date <= day,
                WeeklyPeriod.week_end_date >= day,
            )
            .execution_options(populate_existing=True)
            .first()
        )

    def get_latest(self, user_id: UUID) -> Optional[WeeklyPeriod]:
        """Most recent window by week start"""
        return (
            self.db.query(WeeklyPeriod)
            .filter(WeeklyPeriod.user_id == user_id)
            .order_by(WeeklyPeriod.week_start_date.desc())
            .execution_options(populate_existing=True)
            .first()
        )

    def get_overlapping(self, user_id: UUID, start: date, end: date) -> List[WeeklyPeriod]:
        """Periods whose Monday-Sunday range intersects [start, end]"""
        return (
            self.db.query(WeeklyPeriod)
            .filter(
                WeeklyPeriod.user_id == user_id,
                WeeklyPeriod.week_start_date <= end,
                WeeklyPeriod.week_end_date >= start,
            )
            .all()
        )

    def get_by_user_id(self, user_id: UUID) -> List[WeeklyPeriod]:
        return (
            self.db.query(WeeklyPeriod)
            .filter(WeeklyPeriod.user_id == user_id)
            .order_by(WeeklyPeriod.week_start_date.desc())
            .all()
        )

    def get_all_active(self) -> List[WeeklyPeriod]:
        return (
            self.db.query(WeeklyPeriod)
            .filter(WeeklyPeriod.status == PeriodStatus.ACTIVE)
            .order_by(WeeklyPeriod.user_id)
            .all()
        )

    def count_active(self, user_id: UUID) -> int:
        return (
            self.db.query(WeeklyPeriod)
            .filter(
                WeeklyPeriod.user_id == user_id,
                WeeklyPeriod.status == PeriodStatus.ACTIVE,
            )
            .count()
        )

    def insert_if_absent(self, commit: bool = True, **values) -> bool:
        """
        Insert a period unless one already exists for (user, week_start_date).

        Returns:
            True when a row was inserted, False when the key already existed
        """
        inserted = self.upsert(values, ("user_id", "week_start_date"), commit=commit)
        return inserted > 0

    def mark_completed(self, period: WeeklyPeriod, commit: bool = True) -> WeeklyPeriod:
        period.status = PeriodStatus.COMPLETED
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return period

    def save_overage(self, period: WeeklyPeriod, overage: int, calculated_on: date) -> WeeklyPeriod:
        """Persist the cumulative overage computed for a date"""
        period.cumulative_overage = overage
        period.overage_calculated_on = calculated_on
        self.db.commit()
        return period
