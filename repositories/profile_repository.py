"""
Profile Repository - Data access layer for metabolic profiles
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MetabolicProfile

PROFILE_FIELDS = (
    "sex",
    "weight",
    "weight_unit",
    "height",
    "height_unit",
    "birth_date",
    "activity_level",
    "goal",
    "target_weight",
    "timezone",
)


class ProfileRepository(BaseRepository[MetabolicProfile]):
    """Repository for metabolic profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, MetabolicProfile)

    def get_by_id(self, user_id: UUID) -> Optional[MetabolicProfile]:
        """Get profile by user ID"""
        return (
            self.db.query(MetabolicProfile)
            .filter(MetabolicProfile.user_id == user_id)
            .execution_options(populate_existing=True)
            .first()
        )

    def upsert_profile(self, user_id: UUID, **fields) -> MetabolicProfile:
        """Create or replace the user's profile"""
        values = {name: fields.get(name) for name in PROFILE_FIELDS}
        values["user_id"] = user_id
        self.upsert(values, ["user_id"], update_columns=PROFILE_FIELDS)
        return self.get_by_id(user_id)
