from typing import Optional
from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from sqlalchemy.orm import Session
import logging
import uuid

from app.exceptions import InvalidProfileInput, NotFoundError
from core.utils import local_today
from domain.models import MetabolicProfile
from domain.schemas.profile_schemas import ProfileInput, ProfileResponse
from repositories.profile_repository import ProfileRepository
from services.metabolic_service import MetabolicService

logger = logging.getLogger("haven.profile")


class ProfileService:
    @staticmethod
    def get_profile_model(db: Session, user_id: uuid.UUID) -> Optional[MetabolicProfile]:
        return ProfileRepository(db).get_by_id(user_id)

    @staticmethod
    def require_profile(db: Session, user_id: uuid.UUID) -> MetabolicProfile:
        """
        Load the stored profile.

        Raises:
            NotFoundError: If the user has not submitted a profile
        """
        profile = ProfileRepository(db).get_by_id(user_id)
        if not profile:
            logger.warning(f"profile_missing user_id={user_id}")
            raise NotFoundError(
                f"Metabolic profile for user {user_id} not found", code="PROFILE_NOT_FOUND"
            )
        return profile

    @staticmethod
    def get_profile(db: Session, user_id: uuid.UUID) -> ProfileResponse:
        return ProfileResponse.model_validate(ProfileService.require_profile(db, user_id))

    @staticmethod
    def user_today(db: Session, user_id: uuid.UUID) -> date:
        """Today's calendar date in the user's time zone (configured default if unknown)"""
        profile = ProfileRepository(db).get_by_id(user_id)
        return local_today(profile.timezone if profile else None)

    @staticmethod
    def upsert_profile(
        db: Session, user_id: uuid.UUID, profile_in: ProfileInput
    ) -> ProfileResponse:
        """
        Create or replace the user's metabolic profile.

        Existing periods keep the budget they were created with; a new budget
        only comes from an explicit re-baseline.

        Raises:
            InvalidProfileInput: If measurements or the time zone are malformed
        """
        if profile_in.timezone:
            try:
                ZoneInfo(profile_in.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise InvalidProfileInput(
                    f"Unknown time zone '{profile_in.timezone}'",
                    details={"timezone": profile_in.timezone},
                )

        MetabolicService.validate_profile(profile_in, local_today(profile_in.timezone))

        profile = ProfileRepository(db).upsert_profile(user_id, **profile_in.model_dump())
        logger.info(
            f"profile_saved user_id={user_id} goal={profile.goal.value} "
            f"activity_level={profile.activity_level.value}"
        )
        return ProfileResponse.model_validate(profile)
