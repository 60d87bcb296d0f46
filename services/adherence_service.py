"""
Adherence scorer.

Three independent, deliberately coarse scores (balance, consistency, drift)
written to the period's snapshot for the calculation date.
"""

from datetime import date
from statistics import mean, pstdev
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from core.utils import days_inclusive, percentage
from domain.models import DailyObservation, Reservation, WeeklyPeriod
from domain.schemas.tracking_schemas import MetricSnapshotResponse
from repositories.metric_repository import MetricRepository
from repositories.observation_repository import ObservationRepository
from repositories.reservation_repository import ReservationRepository
from services.period_service import PeriodService

logger = logging.getLogger("haven.adherence")

NEUTRAL_SCORE = 50
CONSISTENCY_MIN_DAYS = 3


class AdherenceService:
    @staticmethod
    def balance_score(remaining: int, days_left: int, baseline_average: int) -> int:
        """Implied daily allowance for the rest of the period vs the baseline average"""
        if baseline_average is None or baseline_average <= 0:
            return NEUTRAL_SCORE
        implied = remaining / max(days_left, 1)
        if implied >= baseline_average:
            return 100
        if implied >= baseline_average * 0.7:
            return 65
        return 30

    @staticmethod
    def consistency_score(consumed: Iterable[int]) -> int:
        """Coefficient of variation (population) of daily intake, zero-intake days included"""
        values = list(consumed)
        if len(values) < CONSISTENCY_MIN_DAYS or not any(values):
            return NEUTRAL_SCORE
        cv = percentage(pstdev(values), mean(values))
        if cv < 15:
            return 85
        if cv < 30:
            return 55
        return 25

    @staticmethod
    def drift_score(
        elapsed_reservations: List[Reservation], consumed_by_date: Dict[date, int]
    ) -> int:
        """Average overspend on elapsed reserved days vs their planned amounts"""
        if not elapsed_reservations:
            return NEUTRAL_SCORE
        total = sum(
            max(0, consumed_by_date.get(r.reserved_on, 0) - r.planned_calories)
            for r in elapsed_reservations
        )
        average = total / len(elapsed_reservations)
        if average < 200:
            return 80
        if average < 500:
            return 50
        return 20

    @staticmethod
    def period_totals(
        db: Session, period: WeeklyPeriod, through: date
    ) -> Tuple[Dict[str, int], List[DailyObservation], List[Reservation]]:
        """
        Totals of the period's observations up to and including ``through``.

        remaining = effective budget - net consumed; calories_reserved counts
        reservations dated after ``through``.
        """
        last = min(through, period.week_end_date)
        observations = ObservationRepository(db).get_between(
            period.user_id, period.tracking_start_date, last
        )
        reservations = ReservationRepository(db).get_between(
            period.user_id, period.tracking_start_date, period.week_end_date
        )

        consumed = sum(o.calories_consumed or 0 for o in observations)
        burned = sum(o.calories_burned or 0 for o in observations)
        net = consumed - burned
        totals = {
            "total_consumed": consumed,
            "total_burned": burned,
            "net_consumed": net,
            "total_remaining": period.effective_budget - net,
            "calories_reserved": sum(
                r.planned_calories for r in reservations if r.reserved_on > through
            ),
        }
        return totals, observations, reservations

    @staticmethod
    def score_period(
        db: Session, period: WeeklyPeriod, day: date
    ) -> Tuple[Dict[str, int], Dict[str, int]]:
        totals, observations, reservations = AdherenceService.period_totals(db, period, day)
        days_left = days_inclusive(max(day, period.tracking_start_date), period.week_end_date)
        consumed_by_date = {o.observed_on: o.calories_consumed or 0 for o in observations}
        elapsed = [r for r in reservations if r.reserved_on < day]

        scores = {
            "balance_score": AdherenceService.balance_score(
                totals["total_remaining"], days_left, period.baseline_average_daily
            ),
            "consistency_score": AdherenceService.consistency_score(
                o.calories_consumed or 0 for o in observations
            ),
            "drift_score": AdherenceService.drift_score(elapsed, consumed_by_date),
        }
        return totals, scores

    @staticmethod
    def recalculate_metrics(
        db: Session, user_id: uuid.UUID, day: date, period: Optional[WeeklyPeriod] = None
    ) -> MetricSnapshotResponse:
        """
        Score the period covering ``day`` and upsert its snapshot for that date.

        Recomputing the same date overwrites the same row.

        Raises:
            NotFoundError: If no period covers the date
        """
        period = period or PeriodService.get_current_period(db, user_id, day)
        totals, scores = AdherenceService.score_period(db, period, day)
        snapshot = MetricRepository(db).upsert_scores(
            user_id, period.period_id, day, totals, scores
        )

        logger.info(
            f"metrics_calculated user_id={user_id} period_id={period.period_id} date={day} "
            f"balance={scores['balance_score']} consistency={scores['consistency_score']} "
            f"drift={scores['drift_score']} remaining={totals['total_remaining']}"
        )
        return MetricSnapshotResponse.model_validate(snapshot)

    @staticmethod
    def get_snapshot(
        db: Session, user_id: uuid.UUID, day: date
    ) -> Optional[MetricSnapshotResponse]:
        period = PeriodService.find_current_period(db, user_id, day)
        if not period:
            return None
        snapshot = MetricRepository(db).get_for_date(user_id, period.period_id, day)
        return MetricSnapshotResponse.model_validate(snapshot) if snapshot else None
