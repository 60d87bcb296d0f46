"""
Daily batch jobs: period rotation and adherence scoring for every user with
an active period. One user's failure is logged and counted, never fatal for
the batch.
"""

from datetime import date
from typing import Callable, Dict, Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
import uuid

from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from core.utils import local_today
from domain.enums import RecalculationReason
from domain.schemas.tracking_schemas import JobRunResponse
from repositories.period_repository import PeriodRepository
from repositories.profile_repository import ProfileRepository
from services.period_service import PeriodService
from services.recalculation_service import RecalculationService

logger = logging.getLogger("haven.jobs")

JOB_ERRORS = (ServiceValidationError, NotFoundError, ConflictError, SQLAlchemyError)


class JobService:
    @staticmethod
    def _user_today(db: Session, user_id: uuid.UUID, run_date: Optional[date]) -> date:
        if run_date:
            return run_date
        profile = ProfileRepository(db).get_by_id(user_id)
        return local_today(profile.timezone if profile else None)

    @staticmethod
    def _run(
        db: Session,
        job: str,
        run_date: Optional[date],
        step: Callable[[uuid.UUID, date], Optional[Dict[str, Any]]],
    ) -> JobRunResponse:
        user_ids = sorted({p.user_id for p in PeriodRepository(db).get_all_active()}, key=str)
        response = JobRunResponse(job=job, run_date=run_date, processed=0, succeeded=0, failed=0)

        for user_id in user_ids:
            today = JobService._user_today(db, user_id, run_date)
            try:
                result = step(user_id, today)
            except JOB_ERRORS as e:
                db.rollback()
                response.failed += 1
                response.results.append(
                    {"user_id": str(user_id), "status": "failed", "error": str(e)}
                )
                logger.error(f"{job}_failed user_id={user_id} date={today} error={e}")
                continue

            if result is None:
                continue
            response.processed += 1
            response.succeeded += 1
            response.results.append({"user_id": str(user_id), "status": "ok", **result})

        logger.info(
            f"{job}_finished users={len(user_ids)} processed={response.processed} "
            f"succeeded={response.succeeded} failed={response.failed}"
        )
        return response

    @staticmethod
    def rotate_all(db: Session, run_date: Optional[date] = None) -> JobRunResponse:
        """
        Rotate every active period whose end date is before the user's today.

        Safe to re-run: a rotated user already has this week's period.
        """

        def rotate(user_id: uuid.UUID, today: date) -> Optional[Dict[str, Any]]:
            active = PeriodRepository(db).get_active(user_id)
            if not active or active.week_end_date >= today:
                return None
            result = PeriodService.create_or_rotate_period(db, user_id, today)
            return {
                "outcome": result.outcome.value,
                "week_start_date": result.period.week_start_date.isoformat(),
            }

        return JobService._run(db, "rotate_periods", run_date, rotate)

    @staticmethod
    def score_all(db: Session, run_date: Optional[date] = None) -> JobRunResponse:
        """Scheduled recalculation (overage + adherence snapshot) for each active user"""

        def score(user_id: uuid.UUID, today: date) -> Optional[Dict[str, Any]]:
            result = RecalculationService.recalculate(
                db, user_id, today, RecalculationReason.SCHEDULED
            )
            if result.metrics is None:
                return None
            return {
                "date": today.isoformat(),
                "balance_score": result.metrics.balance_score,
                "consistency_score": result.metrics.consistency_score,
                "drift_score": result.metrics.drift_score,
            }

        return JobService._run(db, "daily_metrics", run_date, score)
