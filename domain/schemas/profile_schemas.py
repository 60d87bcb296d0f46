from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID

from domain.enums import Sex, WeightUnit, HeightUnit, ActivityLevel, GoalType


class ProfileInput(BaseModel):
    """Physical profile as submitted by the client.

    Weight and height are range-checked by the estimator, not here, so a
    malformed measurement surfaces as INVALID_PROFILE_INPUT.
    """

    sex: Sex
    weight: float = Field(..., description="Body weight in weight_unit")
    weight_unit: WeightUnit = WeightUnit.LB
    height: float = Field(..., description="Height in height_unit")
    height_unit: HeightUnit = HeightUnit.INCH
    birth_date: date
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    goal: GoalType = GoalType.MAINTAIN
    target_weight: Optional[float] = Field(
        None, description="Goal weight, same unit as weight"
    )
    timezone: Optional[str] = Field(
        None, description="IANA time zone used to resolve 'today' (e.g. 'America/Chicago')"
    )

    model_config = {"from_attributes": True}


class ProfileResponse(ProfileInput):
    """Stored metabolic profile"""

    user_id: UUID
    updated_at: Optional[datetime] = None


class EstimateRequest(ProfileInput):
    """Profile plus the evaluation date used for age (defaults to today)"""

    as_of: Optional[date] = None


class EstimateResponse(BaseModel):
    """Formula-based energy expenditure"""

    age: int
    weight_kg: float
    height_cm: float
    sex_offset: int
    sex_offset_category: Sex = Field(
        ..., description="Category whose offset was applied; 'other' maps to female"
    )
    bmr: int
    activity_level: ActivityLevel
    activity_multiplier: float
    tdee: int
