"""
Domain enums for the Haven budget engine.
Contains all enumeration types used across the domain models.
"""

import enum


class Sex(str, enum.Enum):
    """Sex category used at calculation time.

    OTHER is mapped to the female Mifflin-St Jeor offset (-161), the more
    conservative of the two.
    """

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class WeightUnit(str, enum.Enum):
    LB = "lb"
    KG = "kg"


class HeightUnit(str, enum.Enum):
    INCH = "in"
    CM = "cm"


class ActivityLevel(str, enum.Enum):
    """Physical activity levels, ordered from least to most active"""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


class GoalType(str, enum.Enum):
    """Weight goal"""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class DayType(str, enum.Enum):
    """Subjective tag a user can put on a logged day"""

    NORMAL = "normal"
    SPECIAL_OCCASION = "special_occasion"
    OFF_DAY = "off_day"


class BaselineStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class PeriodStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class PeriodType(str, enum.Enum):
    """BASELINE: first window derived from baseline completion. STEADY: rotated windows."""

    BASELINE = "baseline"
    STEADY = "steady"


class TrackingState(str, enum.Enum):
    """Per-user lifecycle as seen by the period manager"""

    NONE = "none"
    BASELINE_PENDING = "baseline_pending"
    BASELINE_ACTIVE = "baseline_active"
    ACTIVE = "active"
    ACTIVE_ROTATED = "active_rotated"


class RecalculationReason(str, enum.Enum):
    """Call site that triggered a recalculation"""

    INTERACTIVE = "interactive"
    SCHEDULED = "scheduled"
    OBSERVATION = "observation"


class ReservationSafety(str, enum.Enum):
    SAFE = "safe"
    CHALLENGING = "challenging"
    UNSAFE = "unsafe"


class PeriodOutcome(str, enum.Enum):
    """Result of an idempotent period create/rotate call"""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    ROTATED = "rotated"
