"""Baseline week routes: start, progress, complete, abandon"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from domain.schemas.tracking_schemas import (
    BaselineCompletionResponse,
    BaselineProgressResponse,
    BaselineResponse,
    BaselineStartRequest,
)
from services.baseline_service import BaselineService
from services.profile_service import ProfileService

router = APIRouter(prefix="/baseline", tags=["Baseline"])
logger = logging.getLogger("haven.api.baseline")


@router.post(
    "",
    response_model=BaselineResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 404),
)
def start_baseline(
    request: Optional[BaselineStartRequest] = None,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Start (or restart) the caller's 7-day baseline week.

    The window starts today unless a later start date is given. Restarting
    after a finished baseline is how a user re-baselines; the new budget only
    applies to periods created afterwards.

    Raises:
        404: No metabolic profile yet
    """
    today = ProfileService.user_today(db, user_id)
    start_date = request.start_date if request else None
    return BaselineService.start_baseline(db, user_id, today, start_date=start_date)


@router.get(
    "/progress",
    response_model=BaselineProgressResponse,
    responses=error_responses(401, 404),
)
def get_baseline_progress(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Days elapsed, days logged and whether the baseline can be completed."""
    today = ProfileService.user_today(db, user_id)
    return BaselineService.get_progress(db, user_id, today)


@router.post(
    "/complete",
    response_model=BaselineCompletionResponse,
    responses=error_responses(401, 404, 409, 422),
)
def complete_baseline(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Finish the baseline from its logged data.

    1. Aggregate qualifying days (intake above zero) and exercise burn
    2. Classify the measured activity tier
    3. Blend formula and measured maintenance into a budget
    4. Open the first weekly period by smart assignment

    Raises:
        404: No profile or no baseline
        409: Baseline already finished, or the period would conflict
        422: Too few qualifying days, or the budget is below the safety floor
    """
    today = ProfileService.user_today(db, user_id)
    return BaselineService.complete_baseline(db, user_id, today)


@router.post(
    "/abandon",
    response_model=BaselineCompletionResponse,
    responses=error_responses(401, 404, 409, 422),
)
def abandon_baseline(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Give up on the baseline and use the declared-only estimate instead.

    Raises:
        404: No profile or no baseline
        409: Baseline already finished
        422: The estimate is below the safety floor
    """
    today = ProfileService.user_today(db, user_id)
    return BaselineService.abandon_baseline(db, user_id, today)
