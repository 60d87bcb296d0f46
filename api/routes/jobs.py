"""Scheduled job routes (called by the platform scheduler, not by users)"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, require_job_token
from api.responses import error_responses
from domain.schemas.tracking_schemas import JobRunResponse
from services.job_service import JobService

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
    dependencies=[Depends(require_job_token)],
    responses=error_responses(401),
)
logger = logging.getLogger("haven.api.jobs")


@router.post("/rotate-periods", response_model=JobRunResponse)
def rotate_periods(
    run_date: Optional[date] = Query(
        None, description="Date to rotate for (defaults to each user's local today)"
    ),
    db: Session = Depends(get_db),
):
    """
    Complete every active period that ended and open the current week.

    Idempotent: running twice for the same date leaves the same rows.
    """
    logger.info(f"rotate_periods_requested run_date={run_date}")
    return JobService.rotate_all(db, run_date)


@router.post("/daily-metrics", response_model=JobRunResponse)
def daily_metrics(
    run_date: Optional[date] = Query(
        None, description="Date to score (defaults to each user's local today)"
    ),
    db: Session = Depends(get_db),
):
    """Scheduled recalculation of overage and adherence for every active user."""
    logger.info(f"daily_metrics_requested run_date={run_date}")
    return JobService.score_all(db, run_date)
