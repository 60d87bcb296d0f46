"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.profile_repository import ProfileRepository
from repositories.observation_repository import ObservationRepository
from repositories.baseline_repository import BaselineRepository
from repositories.period_repository import PeriodRepository
from repositories.reservation_repository import ReservationRepository
from repositories.metric_repository import MetricRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "ObservationRepository",
    "BaselineRepository",
    "PeriodRepository",
    "ReservationRepository",
    "MetricRepository",
]
