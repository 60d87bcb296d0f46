from pydantic import BaseModel, Field
from typing import Optional
import datetime as dt
from datetime import date
from uuid import UUID

from domain.enums import ActivityLevel, ReservationSafety
from domain.schemas.profile_schemas import ProfileInput


class SynthesizeRequest(BaseModel):
    """Inputs of a budget synthesis"""

    profile: ProfileInput
    measured_average: Optional[int] = Field(
        None, gt=0, description="Measured average daily intake from a baseline week"
    )
    activity_tier_override: Optional[int] = Field(
        None, ge=1, le=4, description="Measured activity tier replacing the declared level"
    )
    as_of: Optional[date] = None


class MacroTargets(BaseModel):
    """Weekly macro targets in grams"""

    protein_g: int
    carbs_g: int
    fat_g: int


class BudgetResponse(BaseModel):
    """Synthesized daily target, weekly budget and macros"""

    bmr: int
    activity_level: ActivityLevel
    activity_multiplier: float
    formula_tdee: int
    measured_average: Optional[int] = None
    blended_tdee: int
    goal_adjustment: int
    daily_target: int
    weekly_budget: int
    minimum_safe_calories: int
    macros: MacroTargets
    estimated_goal_date: Optional[date] = Field(
        None, description="Projection at one pound per week; absent when maintaining"
    )


class AdjustedBudgetResponse(BaseModel):
    """Today's allowance after redistributing overage around reserved days"""

    date: dt.date
    period_id: UUID
    base_budget: int
    adjustment: int
    adjusted_budget: int
    is_reserved_day: bool
    reserved_calories: Optional[int] = None
    remaining_ordinary_days: int
    cumulative_overage: int
    comfort_floor: int


class ReservationSuggestions(BaseModel):
    light: int
    moderate: int
    celebration: int


class ReservationEvaluation(BaseModel):
    """Suggested allowance and safety verdict for a reserved day"""

    date: dt.date
    daily_base: int
    planned_calories: Optional[int] = None
    suggestions: ReservationSuggestions
    minimum: int
    maximum: int
    other_days_average: Optional[int] = None
    safety: Optional[ReservationSafety] = None
    message: Optional[str] = None
