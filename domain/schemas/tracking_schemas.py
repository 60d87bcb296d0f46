from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import datetime as dt
from datetime import date, datetime
from uuid import UUID

from domain.enums import (
    ActivityLevel,
    BaselineStatus,
    DayType,
    PeriodOutcome,
    PeriodStatus,
    PeriodType,
    RecalculationReason,
    TrackingState,
)
from domain.schemas.budget_schemas import (
    AdjustedBudgetResponse,
    BudgetResponse,
    ReservationEvaluation,
)


# ---------------------------------------------------------------------------
# Observations
# ---------------------------------------------------------------------------


class ObservationUpsertRequest(BaseModel):
    """Replace a day's totals"""

    calories_consumed: int = Field(..., ge=0)
    calories_burned: int = Field(default=0, ge=0)
    day_type: Optional[DayType] = None


class IntakeRequest(BaseModel):
    """One logged food event"""

    calories: int = Field(..., gt=0, description="Calories of the logged food")
    day_type: Optional[DayType] = None


class ExerciseRequest(BaseModel):
    """Exercise burn for the day"""

    calories_burned: int = Field(..., ge=0)


class ObservationResponse(BaseModel):
    observation_id: UUID
    user_id: UUID
    observed_on: date
    calories_consumed: int
    calories_burned: int
    day_type: Optional[DayType] = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------


class BaselineStartRequest(BaseModel):
    start_date: Optional[date] = Field(
        None, description="First day of the 7-day window (defaults to today)"
    )


class BaselineResponse(BaseModel):
    baseline_id: UUID
    user_id: UUID
    start_date: date
    end_date: date
    status: BaselineStatus
    qualifying_days: Optional[int] = None
    measured_average_daily: Optional[int] = None
    total_exercise: Optional[int] = None
    measured_activity_level: Optional[ActivityLevel] = None
    daily_target: Optional[int] = None
    weekly_budget: Optional[int] = None
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BaselineProgressResponse(BaseModel):
    baseline_id: UUID
    status: BaselineStatus
    start_date: date
    end_date: date
    days_elapsed: int
    days_logged: int
    qualifying_days: int
    required_days: int
    can_complete: bool


class BaselineAggregate(BaseModel):
    """Measured results of a baseline window"""

    qualifying_days: int
    total_consumed: int
    total_exercise: int
    measured_average: int
    activity_tier: int
    activity_level: ActivityLevel
    activity_multiplier: float


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------


class PeriodCreateRequest(BaseModel):
    as_of: Optional[date] = Field(None, description="Evaluation date (defaults to today)")


class PeriodResponse(BaseModel):
    period_id: UUID
    user_id: UUID
    week_start_date: date
    week_end_date: date
    tracking_start_date: date
    tracked_days: int
    baseline_average_daily: int
    weekly_budget: int
    effective_budget: int
    cumulative_overage: int
    overage_calculated_on: Optional[date] = None
    status: PeriodStatus
    period_type: PeriodType

    model_config = {"from_attributes": True}


class PeriodOperationResponse(BaseModel):
    outcome: PeriodOutcome
    period: PeriodResponse


class TrackingStateResponse(BaseModel):
    state: TrackingState
    period: Optional[PeriodResponse] = None
    baseline: Optional[BaselineResponse] = None


class BaselineCompletionResponse(BaseModel):
    baseline: BaselineResponse
    budget: BudgetResponse
    outcome: PeriodOutcome
    period: PeriodResponse


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------


class ReservationRequest(BaseModel):
    planned_calories: int = Field(..., gt=0, description="Calories set aside for the day")
    note: Optional[str] = Field(None, max_length=500)


class ReservationEvaluateRequest(BaseModel):
    date: dt.date
    planned_calories: Optional[int] = Field(None, gt=0)


class ReservationResponse(BaseModel):
    reservation_id: UUID
    user_id: UUID
    reserved_on: date
    planned_calories: int
    note: Optional[str] = None

    model_config = {"from_attributes": True}


class ReservationWriteResponse(BaseModel):
    reservation: ReservationResponse
    evaluation: ReservationEvaluation


# ---------------------------------------------------------------------------
# Metrics and recalculation
# ---------------------------------------------------------------------------


class MetricSnapshotResponse(BaseModel):
    snapshot_id: UUID
    user_id: UUID
    period_id: UUID
    calculated_date: date
    total_consumed: int
    total_burned: int
    net_consumed: int
    total_remaining: int
    calories_reserved: int
    balance_score: Optional[int] = None
    consistency_score: Optional[int] = None
    drift_score: Optional[int] = None

    model_config = {"from_attributes": True}


class RecalculateRequest(BaseModel):
    date: Optional[dt.date] = None


class RecalculationResponse(BaseModel):
    date: dt.date
    reason: RecalculationReason
    overage_recalculated: bool
    adjusted_budget: Optional[AdjustedBudgetResponse] = None
    metrics: Optional[MetricSnapshotResponse] = None


class ObservationRecalculationResponse(BaseModel):
    observation: ObservationResponse
    recalculation: RecalculationResponse


class JobRunResponse(BaseModel):
    job: str
    run_date: Optional[date] = None
    processed: int
    succeeded: int
    failed: int
    results: List[Dict[str, Any]] = Field(default_factory=list)
