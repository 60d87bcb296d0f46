"""Services package - Business logic layer"""

from services.metabolic_service import MetabolicService
from services.budget_service import BudgetService
from services.profile_service import ProfileService
from services.period_service import PeriodService
from services.baseline_service import BaselineService
from services.reservation_service import ReservationService
from services.adherence_service import AdherenceService
from services.recalculation_service import RecalculationService
from services.observation_service import ObservationService
from services.job_service import JobService

__all__ = [
    "MetabolicService",
    "BudgetService",
    "ProfileService",
    "PeriodService",
    "BaselineService",
    "ReservationService",
    "AdherenceService",
    "RecalculationService",
    "ObservationService",
    "JobService",
]
