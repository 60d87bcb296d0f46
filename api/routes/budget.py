"""Adjusted daily budget and recalculation routes"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from domain.enums import RecalculationReason
from domain.schemas.budget_schemas import AdjustedBudgetResponse
from domain.schemas.tracking_schemas import RecalculateRequest, RecalculationResponse
from services.profile_service import ProfileService
from services.recalculation_service import RecalculationService
from services.reservation_service import ReservationService

router = APIRouter(tags=["Budget"])
logger = logging.getLogger("haven.api.budget")


@router.get(
    "/budget/adjusted",
    response_model=AdjustedBudgetResponse,
    responses=error_responses(401, 404),
)
def get_adjusted_budget(
    on: Optional[date] = Query(None, description="Date to read (defaults to today)"),
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Today's allowance after the week's overage has been spread.

    Opening the app is an interactive recalculation trigger, so the derived
    numbers are brought up to date before the allowance is read. Reading a
    date other than today does not recalculate.

    Raises:
        404: No weekly period contains the date
    """
    today = ProfileService.user_today(db, user_id)
    day = on or today
    if day == today:
        RecalculationService.recalculate(db, user_id, day, RecalculationReason.INTERACTIVE)
    return ReservationService.get_adjusted_budget(db, user_id, day)


@router.post(
    "/metrics/recalculate",
    response_model=RecalculationResponse,
    responses=error_responses(401),
)
def recalculate_metrics(
    request: Optional[RecalculateRequest] = None,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Recompute overage, adherence snapshot and adjusted budget for a date.

    Re-running for the same date overwrites the same snapshot row.
    """
    day = (request.date if request else None) or ProfileService.user_today(db, user_id)
    return RecalculationService.recalculate(db, user_id, day, RecalculationReason.INTERACTIVE)
