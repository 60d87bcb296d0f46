"""Daily observation routes: food and exercise events"""

from datetime import date, timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from app.exceptions import ServiceValidationError
from domain.schemas.tracking_schemas import (
    ExerciseRequest,
    IntakeRequest,
    ObservationRecalculationResponse,
    ObservationResponse,
    ObservationUpsertRequest,
)
from services.observation_service import ObservationService
from services.profile_service import ProfileService

router = APIRouter(prefix="/observations", tags=["Observations"])
logger = logging.getLogger("haven.api.observations")

MAX_LIST_DAYS = 92


@router.get("", response_model=List[ObservationResponse], responses=error_responses(400, 401))
def list_observations(
    start: Optional[date] = Query(None, description="First date (defaults to 6 days ago)"),
    end: Optional[date] = Query(None, description="Last date (defaults to today)"),
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Logged days of the caller, oldest first."""
    end = end or ProfileService.user_today(db, user_id)
    start = start or end - timedelta(days=6)
    if end < start or (end - start).days >= MAX_LIST_DAYS:
        raise ServiceValidationError(
            f"Date range must be ordered and at most {MAX_LIST_DAYS} days",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )
    return ObservationService.list_observations(db, user_id, start, end)


@router.put(
    "/{observed_on}",
    response_model=ObservationRecalculationResponse,
    responses=error_responses(400, 401),
)
def put_observation(
    observed_on: date,
    request: ObservationUpsertRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Replace the day's consumed and burned totals.

    Period totals and the derived budget are recalculated before returning.

    Raises:
        400: Date in the future
    """
    return ObservationService.set_observation(
        db,
        user_id,
        observed_on,
        request.calories_consumed,
        calories_burned=request.calories_burned,
        day_type=request.day_type,
    )


@router.post(
    "/{observed_on}/intake",
    response_model=ObservationRecalculationResponse,
    responses=error_responses(400, 401),
)
def log_intake(
    observed_on: date,
    request: IntakeRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add a food entry's calories to the day."""
    return ObservationService.log_intake(
        db, user_id, observed_on, request.calories, day_type=request.day_type
    )


@router.post(
    "/{observed_on}/exercise",
    response_model=ObservationRecalculationResponse,
    responses=error_responses(400, 401),
)
def log_exercise(
    observed_on: date,
    request: ExerciseRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Record the day's exercise burn.

    A day without any food yet is created with zero intake. Repeated events
    for the same day update the same observation.
    """
    return ObservationService.log_exercise(db, user_id, observed_on, request.calories_burned)
