"""
Tests for the metabolic estimator and budget synthesizer.

These are pure calculations over a profile; no database is involved.
- MetabolicService: unit conversion, basal rate, activity multipliers
- BudgetService: blending, goal adjustment, safety floor, macros, goal date
"""

from datetime import date, timedelta

import pytest

from app.exceptions import InvalidProfileInput, UnsafeBudgetFloor
from domain.enums import ActivityLevel, HeightUnit, Sex, WeightUnit
from services.budget_service import BudgetService
from services.metabolic_service import MetabolicService
from test_constants import (
    IMPERIAL_LOSS_PROFILE,
    MONDAY,
    REFERENCE_BMR_FEMALE,
    REFERENCE_BMR_MALE,
    REFERENCE_TDEE_LIGHT,
    REFERENCE_TDEE_SEDENTARY,
)
from test_fixtures import make_profile_input


# =============================================================================
# METABOLIC ESTIMATOR
# =============================================================================


def test_unit_conversions():
    assert MetabolicService.weight_in_kg(100, WeightUnit.LB) == pytest.approx(45.3592)
    assert MetabolicService.weight_in_kg(80, WeightUnit.KG) == 80
    assert MetabolicService.height_in_cm(70, HeightUnit.INCH) == pytest.approx(177.8)
    assert MetabolicService.height_in_cm(180, HeightUnit.CM) == 180


def test_basal_rate_reference_profile():
    """
    Mifflin-St Jeor on the reference profile.

    Verifies:
    - 10*80 + 6.25*180 - 5*30 + 5 = 1780 for male
    - The female offset gives 1614
    - "other" uses the female offset
    """
    male = make_profile_input()
    female = make_profile_input(sex="female")
    other = make_profile_input(sex="other")

    assert MetabolicService.basal_rate(male, MONDAY) == REFERENCE_BMR_MALE
    assert MetabolicService.basal_rate(female, MONDAY) == REFERENCE_BMR_FEMALE
    assert MetabolicService.basal_rate(other, MONDAY) == REFERENCE_BMR_FEMALE
    assert MetabolicService.offset_category(Sex.OTHER) == Sex.FEMALE


def test_age_drops_until_birthday():
    """One day before the 31st birthday the profile is still 30"""
    profile = make_profile_input()
    before = MetabolicService.estimate_baseline(profile, as_of=date(2025, 6, 14))
    after = MetabolicService.estimate_baseline(profile, as_of=date(2025, 6, 15))

    assert before.age == 30
    assert after.age == 31
    assert before.bmr - after.bmr == 5


def test_estimate_baseline_applies_declared_multiplier():
    estimate = MetabolicService.estimate_baseline(make_profile_input(), as_of=MONDAY)

    assert estimate.bmr == REFERENCE_BMR_MALE
    assert estimate.activity_level == ActivityLevel.SEDENTARY
    assert estimate.activity_multiplier == 1.2
    assert estimate.tdee == REFERENCE_TDEE_SEDENTARY
    assert estimate.sex_offset == 5


@pytest.mark.parametrize(
    "level,multiplier",
    [
        (ActivityLevel.SEDENTARY, 1.2),
        (ActivityLevel.LIGHTLY_ACTIVE, 1.375),
        (ActivityLevel.MODERATELY_ACTIVE, 1.55),
        (ActivityLevel.VERY_ACTIVE, 1.725),
        (ActivityLevel.EXTRA_ACTIVE, 1.9),
    ],
)
def test_activity_multipliers(level, multiplier):
    assert MetabolicService.multiplier_for(level) == multiplier


def test_estimate_is_deterministic():
    profile = make_profile_input(**IMPERIAL_LOSS_PROFILE)
    first = MetabolicService.estimate_baseline(profile, as_of=MONDAY)
    second = MetabolicService.estimate_baseline(profile, as_of=MONDAY)
    assert first == second


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"weight": 0}, "weight"),
        ({"weight": -70}, "weight"),
        ({"height": 0}, "height"),
        ({"birth_date": MONDAY + timedelta(days=1)}, "birth_date"),
    ],
)
def test_invalid_measurements_rejected(overrides, field):
    profile = make_profile_input(**overrides)

    with pytest.raises(InvalidProfileInput) as exc_info:
        MetabolicService.basal_rate(profile, MONDAY)
    assert field in exc_info.value.details
    assert exc_info.value.code == "INVALID_PROFILE_INPUT"


# =============================================================================
# BUDGET SYNTHESIZER
# =============================================================================


def test_synthesize_without_measurement_uses_formula():
    budget = BudgetService.synthesize_budget(make_profile_input(), as_of=MONDAY)

    assert budget.formula_tdee == REFERENCE_TDEE_SEDENTARY
    assert budget.blended_tdee == REFERENCE_TDEE_SEDENTARY
    assert budget.goal_adjustment == 0
    assert budget.daily_target == REFERENCE_TDEE_SEDENTARY
    assert budget.weekly_budget == REFERENCE_TDEE_SEDENTARY * 7
    assert budget.estimated_goal_date is None


def test_synthesize_blends_measured_average_with_tier_override():
    """
    Measured tier 2 replaces the declared sedentary level.

    Verifies:
    - Formula TDEE uses 1.375 (2447.5 rounds up to 2448)
    - Blend is the plain average with the measured 2100
    """
    budget = BudgetService.synthesize_budget(
        make_profile_input(), measured_average=2100, activity_tier_override=2, as_of=MONDAY
    )

    assert budget.activity_level == ActivityLevel.LIGHTLY_ACTIVE
    assert budget.formula_tdee == REFERENCE_TDEE_LIGHT
    assert budget.blended_tdee == 2274
    assert budget.daily_target == 2274
    assert budget.weekly_budget == 15918


def test_safety_floor_boundary():
    """
    1500 is allowed, 1499 is refused.

    With goal maintain the target is the blend, so the measured average is
    picked to land exactly on each side of the floor.
    """
    ok = BudgetService.synthesize_budget(
        make_profile_input(), measured_average=3000 - REFERENCE_TDEE_SEDENTARY, as_of=MONDAY
    )
    assert ok.daily_target == 1500

    with pytest.raises(UnsafeBudgetFloor) as exc_info:
        BudgetService.synthesize_budget(
            make_profile_input(), measured_average=2998 - REFERENCE_TDEE_SEDENTARY, as_of=MONDAY
        )
    assert exc_info.value.details == {"daily_target": 1499, "minimum_safe_calories": 1500}
    assert exc_info.value.http_status == 422


@pytest.mark.parametrize(
    "weight,target,deficit",
    [
        (220, 160, -750),
        (200, 160, -625),
        (200, 185, -500),
        (200, 190, -375),
        (200, None, -375),
    ],
)
def test_loss_deficit_by_pounds_to_lose(weight, target, deficit):
    profile = make_profile_input(
        goal="lose", weight=weight, weight_unit="lb", target_weight=target
    )
    assert BudgetService.goal_adjustment(profile) == deficit


def test_loss_deficit_with_metric_weight():
    """20 kg to lose is ~44 lb, which takes the 625 deficit"""
    profile = make_profile_input(goal="lose", weight=100, target_weight=80)
    assert BudgetService.goal_adjustment(profile) == -625


def test_gain_surplus():
    budget = BudgetService.synthesize_budget(
        make_profile_input(goal="gain", target_weight=90), as_of=MONDAY
    )
    assert budget.goal_adjustment == 500
    assert budget.daily_target == REFERENCE_TDEE_SEDENTARY + 500


def test_estimated_goal_date_one_pound_per_week():
    profile = make_profile_input(
        goal="lose", weight=200, weight_unit="lb", target_weight=160
    )
    assert BudgetService.estimated_goal_date(profile, MONDAY) == MONDAY + timedelta(weeks=40)


def test_macros_split():
    macros = BudgetService.macros(14000)
    assert macros.protein_g == 1050
    assert macros.carbs_g == 1400
    assert macros.fat_g == 467
