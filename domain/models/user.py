"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    Date,
    Numeric,
    Uuid,
    Enum as SQLEnum,
    CheckConstraint,
)
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.enums import Sex, WeightUnit, HeightUnit, ActivityLevel, GoalType


def enum_column(enum_cls, name: str) -> SQLEnum:
    """Enum column persisted by value ('lose'), not by member name ('LOSE')"""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class MetabolicProfile(Base):
    """Physical profile used to estimate energy expenditure.

    Edited only during onboarding or an explicit profile edit. Periods copy
    the numbers they need, so an edit never changes an active period.
    """

    __tablename__ = "metabolic_profile"

    user_id = Column(Uuid(as_uuid=True), primary_key=True)
    sex = Column(enum_column(Sex, "sex_category"), nullable=False)
    weight = Column(Numeric(6, 2), nullable=False)
    weight_unit = Column(
        enum_column(WeightUnit, "weight_unit"), nullable=False, default=WeightUnit.LB
    )
    height = Column(Numeric(6, 2), nullable=False)
    height_unit = Column(
        enum_column(HeightUnit, "height_unit"), nullable=False, default=HeightUnit.INCH
    )
    birth_date = Column(Date, nullable=False)
    activity_level = Column(
        enum_column(ActivityLevel, "activity_level"),
        nullable=False,
        default=ActivityLevel.SEDENTARY,
    )
    goal = Column(enum_column(GoalType, "goal_type"), nullable=False, default=GoalType.MAINTAIN)
    target_weight = Column(Numeric(6, 2))
    timezone = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("weight > 0", name="ck_profile_weight_positive"),
        CheckConstraint("height > 0", name="ck_profile_height_positive"),
    )
