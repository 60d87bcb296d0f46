"""Weekly period routes"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from domain.enums import PeriodOutcome
from domain.schemas.tracking_schemas import (
    PeriodCreateRequest,
    PeriodOperationResponse,
    PeriodResponse,
    TrackingStateResponse,
)
from services.period_service import PeriodService
from services.profile_service import ProfileService

router = APIRouter(prefix="/periods", tags=["Periods"])
logger = logging.getLogger("haven.api.periods")


@router.post(
    "",
    response_model=PeriodOperationResponse,
    responses=error_responses(401, 409, 422),
)
def create_or_rotate_period(
    response: Response,
    request: Optional[PeriodCreateRequest] = None,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Make sure the caller has an active weekly period for today.

    Safe to call repeatedly: an existing period for the week is returned
    with outcome ``already_exists`` (200); a new one answers 201.

    Raises:
        409: The new period would overlap another or add a second active one
        422: No prior period and no finished baseline
    """
    today = (request.as_of if request else None) or ProfileService.user_today(db, user_id)
    result = PeriodService.create_or_rotate_period(db, user_id, today)
    if result.outcome != PeriodOutcome.ALREADY_EXISTS:
        response.status_code = status.HTTP_201_CREATED
    return result


@router.get("/current", response_model=PeriodResponse, responses=error_responses(401, 404))
def get_current_period(
    on: Optional[date] = Query(None, description="Date to look up (defaults to today)"),
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """The period whose tracked range contains the date."""
    day = on or ProfileService.user_today(db, user_id)
    return PeriodResponse.model_validate(PeriodService.get_current_period(db, user_id, day))


@router.get("/state", response_model=TrackingStateResponse, responses=error_responses(401))
def get_tracking_state(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Where the caller is in the none / baseline / active / rotated lifecycle."""
    today = ProfileService.user_today(db, user_id)
    return PeriodService.get_tracking_state(db, user_id, today)
