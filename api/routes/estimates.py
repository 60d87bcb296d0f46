"""Stateless estimate routes: maintenance estimate and budget synthesis"""

from fastapi import APIRouter
import logging

from api.responses import error_responses
from domain.schemas.budget_schemas import BudgetResponse, SynthesizeRequest
from domain.schemas.profile_schemas import EstimateRequest, EstimateResponse
from services.budget_service import BudgetService
from services.metabolic_service import MetabolicService

router = APIRouter(tags=["Estimates"])
logger = logging.getLogger("haven.api.estimates")


@router.post(
    "/estimates/baseline",
    response_model=EstimateResponse,
    responses=error_responses(400),
)
def estimate_baseline(request: EstimateRequest):
    """
    Formula estimate of basal and maintenance calories for a profile.

    Nothing is stored; the same input always yields the same numbers.

    Raises:
        400: Malformed measurements
    """
    return MetabolicService.estimate_baseline(request, as_of=request.as_of)


@router.post(
    "/budgets/synthesize",
    response_model=BudgetResponse,
    responses=error_responses(400, 422),
)
def synthesize_budget(request: SynthesizeRequest):
    """
    Daily target and weekly budget for a profile, optionally blended with a
    measured baseline average and a measured activity tier.

    Raises:
        400: Malformed measurements
        422: The daily target falls below the safety floor
    """
    budget = BudgetService.synthesize_budget(
        request.profile,
        measured_average=request.measured_average,
        activity_tier_override=request.activity_tier_override,
        as_of=request.as_of,
    )
    logger.info(
        f"budget_synthesized daily_target={budget.daily_target} "
        f"weekly_budget={budget.weekly_budget} measured={request.measured_average is not None}"
    )
    return budget
