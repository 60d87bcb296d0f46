"""
Metric Repository - Data access layer for weekly metric snapshots
"""

from typing import List, Mapping, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import WeeklyMetricSnapshot

KEY = ("user_id", "period_id", "calculated_date")
TOTAL_FIELDS = (
    "total_consumed",
    "total_burned",
    "net_consumed",
    "total_remaining",
    "calories_reserved",
)
SCORE_FIELDS = ("balance_score", "consistency_score", "drift_score")


class MetricRepository(BaseRepository[WeeklyMetricSnapshot]):
    """
    Repository for metric snapshots.

    Every write is an upsert on (user, period, calculated_date); reads go
    through the same key, never "latest row for the period".
    """

    def __init__(self, db: Session):
        super().__init__(db, WeeklyMetricSnapshot)

    def get_by_id(self, snapshot_id: UUID) -> Optional[WeeklyMetricSnapshot]:
        return (
            self.db.query(WeeklyMetricSnapshot)
            .filter(WeeklyMetricSnapshot.snapshot_id == snapshot_id)
            .first()
        )

    def get_for_date(
        self, user_id: UUID, period_id: UUID, calculated_date: date
    ) -> Optional[WeeklyMetricSnapshot]:
        return (
            self.db.query(WeeklyMetricSnapshot)
            .filter(
                WeeklyMetricSnapshot.user_id == user_id,
                WeeklyMetricSnapshot.period_id == period_id,
                WeeklyMetricSnapshot.calculated_date == calculated_date,
            )
            .execution_options(populate_existing=True)
            .first()
        )

    def get_by_period(self, period_id: UUID) -> List[WeeklyMetricSnapshot]:
        return (
            self.db.query(WeeklyMetricSnapshot)
            .filter(WeeklyMetricSnapshot.period_id == period_id)
            .order_by(WeeklyMetricSnapshot.calculated_date)
            .all()
        )

    def upsert_totals(
        self, user_id: UUID, period_id: UUID, calculated_date: date, totals: Mapping[str, int]
    ) -> WeeklyMetricSnapshot:
        """Write totals only; scores already on the row are kept"""
        values = {"user_id": user_id, "period_id": period_id, "calculated_date": calculated_date}
        values.update({name: totals[name] for name in TOTAL_FIELDS})
        self.upsert(values, KEY, update_columns=TOTAL_FIELDS)
        return self.get_for_date(user_id, period_id, calculated_date)

    def upsert_scores(
        self,
        user_id: UUID,
        period_id: UUID,
        calculated_date: date,
        totals: Mapping[str, int],
        scores: Mapping[str, int],
    ) -> WeeklyMetricSnapshot:
        """Write totals and the three adherence scores"""
        values = {"user_id": user_id, "period_id": period_id, "calculated_date": calculated_date}
        values.update({name: totals[name] for name in TOTAL_FIELDS})
        values.update({name: scores[name] for name in SCORE_FIELDS})
        self.upsert(values, KEY, update_columns=TOTAL_FIELDS + SCORE_FIELDS)
        return self.get_for_date(user_id, period_id, calculated_date)
