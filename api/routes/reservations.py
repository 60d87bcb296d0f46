"""Reservation routes: set aside calories for an exception day"""

from datetime import date, timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from core.utils import week_bounds
from domain.schemas.budget_schemas import ReservationEvaluation
from domain.schemas.tracking_schemas import (
    ReservationEvaluateRequest,
    ReservationRequest,
    ReservationResponse,
    ReservationWriteResponse,
)
from services.profile_service import ProfileService
from services.reservation_service import ReservationService

router = APIRouter(prefix="/reservations", tags=["Reservations"])
logger = logging.getLogger("haven.api.reservations")


@router.get("", response_model=List[ReservationResponse], responses=error_responses(400, 401))
def list_reservations(
    start: Optional[date] = Query(None, description="First date (defaults to this week's Monday)"),
    end: Optional[date] = Query(None, description="Last date (defaults to start + 6 days)"),
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Reservations of the caller between two dates, inclusive."""
    if start is None:
        start, _ = week_bounds(ProfileService.user_today(db, user_id))
    end = end or start + timedelta(days=6)
    return ReservationService.list_reservations(db, user_id, start, end)


@router.post(
    "/evaluate",
    response_model=ReservationEvaluation,
    responses=error_responses(401, 404),
)
def evaluate_reservation(
    request: ReservationEvaluateRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Suggested amounts for a date and, when an amount is given, a safety
    verdict based on what would be left for the other days of the week.

    Raises:
        404: No weekly period contains the date
    """
    return ReservationService.evaluate_reservation(
        db, user_id, request.date, request.planned_calories
    )


@router.put(
    "/{reserved_on}",
    response_model=ReservationWriteResponse,
    responses=error_responses(400, 401),
)
def put_reservation(
    reserved_on: date,
    request: ReservationRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Reserve calories for a date (one reservation per date; a second call
    replaces the planned amount).

    The response carries the safety evaluation; an unsafe verdict does not
    block the reservation.

    Raises:
        400: Date in the past
    """
    return ReservationService.reserve(
        db, user_id, reserved_on, request.planned_calories, note=request.note
    )


@router.delete(
    "/{reserved_on}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(400, 401, 404),
)
def delete_reservation(
    reserved_on: date,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Cancel a reservation that has not happened yet.

    Raises:
        400: Date in the past
        404: No reservation on the date
    """
    ReservationService.cancel_reservation(db, user_id, reserved_on)
