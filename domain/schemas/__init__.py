"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    ProfileInput,
    ProfileResponse,
    EstimateRequest,
    EstimateResponse,
)
from domain.schemas.budget_schemas import (
    SynthesizeRequest,
    MacroTargets,
    BudgetResponse,
    AdjustedBudgetResponse,
    ReservationSuggestions,
    ReservationEvaluation,
)
from domain.schemas.tracking_schemas import (
    ObservationUpsertRequest,
    IntakeRequest,
    ExerciseRequest,
    ObservationResponse,
    BaselineStartRequest,
    BaselineResponse,
    BaselineProgressResponse,
    BaselineAggregate,
    BaselineCompletionResponse,
    PeriodCreateRequest,
    PeriodResponse,
    PeriodOperationResponse,
    TrackingStateResponse,
    ReservationRequest,
    ReservationEvaluateRequest,
    ReservationResponse,
    ReservationWriteResponse,
    MetricSnapshotResponse,
    RecalculateRequest,
    RecalculationResponse,
    ObservationRecalculationResponse,
    JobRunResponse,
)

__all__ = [
    # Profile schemas
    "ProfileInput",
    "ProfileResponse",
    "EstimateRequest",
    "EstimateResponse",
    # Budget schemas
    "SynthesizeRequest",
    "MacroTargets",
    "BudgetResponse",
    "AdjustedBudgetResponse",
    "ReservationSuggestions",
    "ReservationEvaluation",
    # Observation schemas
    "ObservationUpsertRequest",
    "IntakeRequest",
    "ExerciseRequest",
    "ObservationResponse",
    # Baseline schemas
    "BaselineStartRequest",
    "BaselineResponse",
    "BaselineProgressResponse",
    "BaselineAggregate",
    "BaselineCompletionResponse",
    # Period schemas
    "PeriodCreateRequest",
    "PeriodResponse",
    "PeriodOperationResponse",
    "TrackingStateResponse",
    # Reservation schemas
    "ReservationRequest",
    "ReservationEvaluateRequest",
    "ReservationResponse",
    "ReservationWriteResponse",
    # Metric schemas
    "MetricSnapshotResponse",
    "RecalculateRequest",
    "RecalculationResponse",
    "ObservationRecalculationResponse",
    "JobRunResponse",
]
