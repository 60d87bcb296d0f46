"""
Budget synthesizer.

Blends the formula estimate with a measured baseline average, applies the
goal adjustment and safety floor, and derives the weekly budget and macros.
"""

from datetime import date, timedelta
from typing import Optional
import logging
import math

from app.config import settings
from app.exceptions import UnsafeBudgetFloor
from core.utils import local_today, round_half_up
from domain.enums import ActivityLevel, GoalType
from domain.schemas.budget_schemas import BudgetResponse, MacroTargets
from services.metabolic_service import MetabolicService

logger = logging.getLogger("haven.budget")

GAIN_SURPLUS = 500

# (minimum lb to lose, daily deficit), checked in order
LOSS_DEFICITS = ((50, 750), (25, 625), (15, 500))
SMALL_LOSS_DEFICIT = 375

# share of weekly calories, kcal per gram
MACRO_SPLIT = {
    "protein_g": (0.30, 4),
    "carbs_g": (0.40, 4),
    "fat_g": (0.30, 9),
}


class BudgetService:
    @staticmethod
    def pounds_to_lose(profile) -> float:
        if profile.target_weight is None:
            return 0.0
        diff = float(profile.weight) - float(profile.target_weight)
        return MetabolicService.weight_in_lb(diff, profile.weight_unit)

    @staticmethod
    def goal_adjustment(profile) -> int:
        """Signed daily adjustment for the profile's goal"""
        goal = GoalType(profile.goal)
        if goal == GoalType.GAIN:
            return GAIN_SURPLUS
        if goal == GoalType.MAINTAIN:
            return 0

        to_lose = BudgetService.pounds_to_lose(profile)
        for threshold, deficit in LOSS_DEFICITS:
            if to_lose >= threshold:
                return -deficit
        return -SMALL_LOSS_DEFICIT

    @staticmethod
    def macros(weekly_calories: int) -> MacroTargets:
        grams = {
            name: round_half_up(weekly_calories * share / kcal_per_gram)
            for name, (share, kcal_per_gram) in MACRO_SPLIT.items()
        }
        return MacroTargets(**grams)

    @staticmethod
    def estimated_goal_date(profile, as_of: date) -> Optional[date]:
        """Projected date at one pound per week"""
        if GoalType(profile.goal) == GoalType.MAINTAIN or profile.target_weight is None:
            return None
        weeks = math.ceil(abs(BudgetService.pounds_to_lose(profile)))
        return as_of + timedelta(weeks=weeks)

    @staticmethod
    def synthesize_budget(
        profile,
        measured_average: Optional[int] = None,
        activity_tier_override: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> BudgetResponse:
        """
        Produce the daily target and weekly budget for a profile.

        The activity-corrected formula TDEE and the measured average are
        blended with equal weight; without a measured average the formula
        value is used alone.

        Args:
            profile: Metabolic profile (schema or ORM object)
            measured_average: Average daily intake measured during the baseline week
            activity_tier_override: Measured activity tier (1-4) replacing the declared level
            as_of: Evaluation date for age

        Returns:
            BudgetResponse

        Raises:
            InvalidProfileInput: If the profile measurements are malformed
            UnsafeBudgetFloor: If the daily target is below the configured safety floor
        """
        as_of = as_of or local_today(getattr(profile, "timezone", None))
        bmr = MetabolicService.basal_rate(profile, as_of)

        if activity_tier_override is not None:
            level = MetabolicService.level_for_tier(activity_tier_override)
        else:
            level = ActivityLevel(profile.activity_level)
        formula_tdee = MetabolicService.apply_multiplier(bmr, level)

        if measured_average:
            blended = round_half_up((formula_tdee + measured_average) / 2)
        else:
            blended = formula_tdee

        adjustment = BudgetService.goal_adjustment(profile)
        daily_target = blended + adjustment
        floor = settings.minimum_safe_calories

        if daily_target < floor:
            logger.warning(
                f"unsafe_budget daily_target={daily_target} floor={floor} "
                f"goal={GoalType(profile.goal).value}"
            )
            raise UnsafeBudgetFloor(
                f"Target of {daily_target} kcal/day is below the safe minimum of {floor}",
                details={"daily_target": daily_target, "minimum_safe_calories": floor},
            )

        weekly_budget = daily_target * 7
        logger.debug(
            f"budget_synthesized formula_tdee={formula_tdee} measured={measured_average} "
            f"daily_target={daily_target} weekly_budget={weekly_budget}"
        )

        return BudgetResponse(
            bmr=bmr,
            activity_level=level,
            activity_multiplier=MetabolicService.multiplier_for(level),
            formula_tdee=formula_tdee,
            measured_average=measured_average,
            blended_tdee=blended,
            goal_adjustment=adjustment,
            daily_target=daily_target,
            weekly_budget=weekly_budget,
            minimum_safe_calories=floor,
            macros=BudgetService.macros(weekly_budget),
            estimated_goal_date=BudgetService.estimated_goal_date(profile, as_of),
        )
