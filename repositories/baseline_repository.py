"""
Baseline Repository - Data access layer for baseline measurement windows
"""

from typing import Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import BaselinePeriod
from domain.enums import BaselineStatus

RESULT_FIELDS = (
    "qualifying_days",
    "measured_average_daily",
    "total_exercise",
    "measured_activity_level",
    "daily_target",
    "weekly_budget",
    "applied_period_id",
    "completed_at",
)


class BaselineRepository(BaseRepository[BaselinePeriod]):
    """Repository for baseline periods (one row per user)"""

    def __init__(self, db: Session):
        super().__init__(db, BaselinePeriod)

    def get_by_id(self, baseline_id: UUID) -> Optional[BaselinePeriod]:
        return (
            self.db.query(BaselinePeriod)
            .filter(BaselinePeriod.baseline_id == baseline_id)
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> Optional[BaselinePeriod]:
        return (
            self.db.query(BaselinePeriod)
            .filter(BaselinePeriod.user_id == user_id)
            .execution_options(populate_existing=True)
            .first()
        )

    def start(
        self, user_id: UUID, start_date: date, end_date: date, status: BaselineStatus
    ) -> BaselinePeriod:
        """Open the user's baseline window, discarding results of an earlier one"""
        values = {
            "user_id": user_id,
            "start_date": start_date,
            "end_date": end_date,
            "status": status,
        }
        values.update({name: None for name in RESULT_FIELDS})
        self.upsert(
            values,
            ("user_id",),
            update_columns=("start_date", "end_date", "status") + RESULT_FIELDS,
        )
        return self.get_by_user_id(user_id)

    def finish(self, baseline: BaselinePeriod, status: BaselineStatus, **results) -> BaselinePeriod:
        """Record the terminal status and the measured results"""
        baseline.status = status
        for name, value in results.items():
            if name not in RESULT_FIELDS:
                raise ValueError(f"Unknown baseline result field: {name}")
            setattr(baseline, name, value)
        self.db.commit()
        return baseline

    def set_status(self, baseline: BaselinePeriod, status: BaselineStatus) -> BaselinePeriod:
        baseline.status = status
        self.db.commit()
        return baseline

    def mark_applied(self, baseline: BaselinePeriod, period_id: UUID) -> BaselinePeriod:
        """Record the period that first received this baseline's budget"""
        baseline.applied_period_id = period_id
        self.db.commit()
        return baseline
