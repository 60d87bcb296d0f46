"""Metabolic profile routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_current_user_id, get_db
from api.responses import error_responses
from domain.schemas.profile_schemas import ProfileInput, ProfileResponse
from services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])
logger = logging.getLogger("haven.api.profiles")


@router.get("", response_model=ProfileResponse, responses=error_responses(401, 404))
def get_profile(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get the caller's stored metabolic profile."""
    return ProfileService.get_profile(db, user_id)


@router.put("", response_model=ProfileResponse, responses=error_responses(400, 401))
def put_profile(
    profile_in: ProfileInput,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create or replace the caller's metabolic profile.

    Weight, height, birth date, sex, declared activity level and goal feed the
    budget formulas. Saving a profile does not change the budget of a period
    that already exists; start a new baseline to re-derive it.

    Raises:
        400: Non-positive weight or height, future birth date, unknown time zone
    """
    return ProfileService.upsert_profile(db, user_id, profile_in)
