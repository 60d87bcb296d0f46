"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import MetabolicProfile
from domain.models.tracking import (
    DailyObservation,
    BaselinePeriod,
    WeeklyPeriod,
    Reservation,
    WeeklyMetricSnapshot,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Profile
    "MetabolicProfile",
    # Tracking models
    "DailyObservation",
    "BaselinePeriod",
    "WeeklyPeriod",
    "Reservation",
    "WeeklyMetricSnapshot",
]
