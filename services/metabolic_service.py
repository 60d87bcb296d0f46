"""
Metabolic estimator.

Pure functions over a physical profile: unit conversion, age, Mifflin-St Jeor
basal rate, and activity multipliers. Any object exposing the profile
attributes works (``ProfileInput`` or the stored ``MetabolicProfile``).
"""

from datetime import date
from typing import Optional
import logging

from app.exceptions import InvalidProfileInput
from core.utils import age_on, local_today, round_half_up
from domain.enums import ActivityLevel, HeightUnit, Sex, WeightUnit
from domain.schemas.profile_schemas import EstimateResponse

logger = logging.getLogger("haven.metabolic")

KG_PER_LB = 0.453592
CM_PER_INCH = 2.54

MALE_OFFSET = 5
FEMALE_OFFSET = -161

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

# Measured activity tiers (baseline exercise) and the level each maps to
TIER_LEVELS = {
    1: ActivityLevel.SEDENTARY,
    2: ActivityLevel.LIGHTLY_ACTIVE,
    3: ActivityLevel.MODERATELY_ACTIVE,
    4: ActivityLevel.VERY_ACTIVE,
}


class MetabolicService:
    @staticmethod
    def weight_in_kg(weight: float, unit: WeightUnit) -> float:
        if WeightUnit(unit) == WeightUnit.KG:
            return float(weight)
        return float(weight) * KG_PER_LB

    @staticmethod
    def weight_in_lb(weight: float, unit: WeightUnit) -> float:
        if WeightUnit(unit) == WeightUnit.LB:
            return float(weight)
        return float(weight) / KG_PER_LB

    @staticmethod
    def height_in_cm(height: float, unit: HeightUnit) -> float:
        if HeightUnit(unit) == HeightUnit.CM:
            return float(height)
        return float(height) * CM_PER_INCH

    @staticmethod
    def offset_category(sex: Sex) -> Sex:
        """Category whose offset is applied. OTHER uses the female offset."""
        return Sex.MALE if Sex(sex) == Sex.MALE else Sex.FEMALE

    @staticmethod
    def validate_profile(profile, as_of: date) -> None:
        """
        Reject malformed physical measurements.

        Raises:
            InvalidProfileInput: non-positive weight/height or a birth date after as_of
        """
        errors = {}
        if profile.weight is None or float(profile.weight) <= 0:
            errors["weight"] = "must be greater than 0"
        if profile.height is None or float(profile.height) <= 0:
            errors["height"] = "must be greater than 0"
        if profile.birth_date is None or profile.birth_date > as_of:
            errors["birth_date"] = "must not be after the evaluation date"
        if errors:
            logger.warning(f"invalid_profile fields={sorted(errors)}")
            raise InvalidProfileInput("Invalid profile measurements", details=errors)

    @staticmethod
    def basal_rate(profile, as_of: date) -> int:
        """Mifflin-St Jeor: 10*kg + 6.25*cm - 5*age + offset, rounded to whole kcal"""
        MetabolicService.validate_profile(profile, as_of)
        kg = MetabolicService.weight_in_kg(profile.weight, profile.weight_unit)
        cm = MetabolicService.height_in_cm(profile.height, profile.height_unit)
        age = age_on(profile.birth_date, as_of)
        offset = (
            MALE_OFFSET
            if MetabolicService.offset_category(profile.sex) == Sex.MALE
            else FEMALE_OFFSET
        )
        return round_half_up(10 * kg + 6.25 * cm - 5 * age + offset)

    @staticmethod
    def multiplier_for(level: ActivityLevel) -> float:
        return ACTIVITY_MULTIPLIERS[ActivityLevel(level)]

    @staticmethod
    def level_for_tier(tier: int) -> ActivityLevel:
        if tier not in TIER_LEVELS:
            raise InvalidProfileInput(
                "Activity tier must be between 1 and 4", details={"activity_tier": tier}
            )
        return TIER_LEVELS[tier]

    @staticmethod
    def apply_multiplier(bmr: int, level: ActivityLevel) -> int:
        return round_half_up(bmr * MetabolicService.multiplier_for(level))

    @staticmethod
    def estimate_baseline(profile, as_of: Optional[date] = None) -> EstimateResponse:
        """
        Formula-based total daily energy expenditure for a profile.

        Args:
            profile: Object with sex, weight(+unit), height(+unit), birth_date, activity_level
            as_of: Date the age is evaluated on (defaults to today in the profile's zone)

        Returns:
            EstimateResponse with the basal rate, multiplier and TDEE

        Raises:
            InvalidProfileInput: If the measurements are malformed
        """
        as_of = as_of or local_today(getattr(profile, "timezone", None))
        bmr = MetabolicService.basal_rate(profile, as_of)
        category = MetabolicService.offset_category(profile.sex)
        level = ActivityLevel(profile.activity_level)

        return EstimateResponse(
            age=age_on(profile.birth_date, as_of),
            weight_kg=round(MetabolicService.weight_in_kg(profile.weight, profile.weight_unit), 2),
            height_cm=round(MetabolicService.height_in_cm(profile.height, profile.height_unit), 2),
            sex_offset=MALE_OFFSET if category == Sex.MALE else FEMALE_OFFSET,
            sex_offset_category=category,
            bmr=bmr,
            activity_level=level,
            activity_multiplier=MetabolicService.multiplier_for(level),
            tdee=MetabolicService.apply_multiplier(bmr, level),
        )
