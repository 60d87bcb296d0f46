"""
Observation, period, reservation and metric models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Integer,
    Date,
    Uuid,
    CheckConstraint,
    UniqueConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.models.user import enum_column
from domain.enums import DayType, BaselineStatus, PeriodStatus, PeriodType, ActivityLevel
from core.utils import days_inclusive, round_half_up


class DailyObservation(Base):
    """One row per (user, calendar date) with the day's intake and exercise"""

    __tablename__ = "daily_observation"

    observation_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    observed_on = Column(Date, nullable=False)
    calories_consumed = Column(Integer, nullable=False, default=0)
    calories_burned = Column(Integer, nullable=False, default=0)
    day_type = Column(enum_column(DayType, "day_type"))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "observed_on", name="uq_observation_user_date"),
        CheckConstraint("calories_consumed >= 0", name="ck_observation_consumed_nonneg"),
        CheckConstraint("calories_burned >= 0", name="ck_observation_burned_nonneg"),
    )

    @property
    def net_calories(self) -> int:
        return (self.calories_consumed or 0) - (self.calories_burned or 0)


class BaselinePeriod(Base):
    """The 7-day measurement window used once per user (restarted by re-baselining)"""

    __tablename__ = "baseline_period"

    baseline_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, unique=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(
        enum_column(BaselineStatus, "baseline_status"),
        nullable=False,
        default=BaselineStatus.PENDING,
    )
    qualifying_days = Column(Integer)
    measured_average_daily = Column(Integer)
    total_exercise = Column(Integer)
    measured_activity_level = Column(enum_column(ActivityLevel, "activity_level"))
    daily_target = Column(Integer)
    weekly_budget = Column(Integer)
    # first period that received this baseline's budget; None until applied
    applied_period_id = Column(Uuid(as_uuid=True))
    completed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class WeeklyPeriod(Base):
    """Monday-Sunday tracking window with its budget"""

    __tablename__ = "weekly_period"

    period_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)
    tracking_start_date = Column(Date, nullable=False)
    baseline_average_daily = Column(Integer, nullable=False)
    weekly_budget = Column(Integer, nullable=False)
    cumulative_overage = Column(Integer, nullable=False, default=0)
    overage_calculated_on = Column(Date)
    status = Column(
        enum_column(PeriodStatus, "period_status"),
        nullable=False,
        default=PeriodStatus.ACTIVE,
    )
    period_type = Column(
        enum_column(PeriodType, "period_type"),
        nullable=False,
        default=PeriodType.STEADY,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    snapshots = relationship(
        "WeeklyMetricSnapshot", back_populates="period", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "week_start_date", name="uq_period_user_week"),
        Index(
            "uq_period_single_active",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        CheckConstraint("week_end_date >= week_start_date", name="ck_period_range"),
        CheckConstraint(
            "tracking_start_date >= week_start_date AND tracking_start_date <= week_end_date",
            name="ck_period_tracking_start",
        ),
    )

    @property
    def daily_base(self) -> float:
        return self.weekly_budget / 7

    @property
    def tracked_days(self) -> int:
        return days_inclusive(self.tracking_start_date, self.week_end_date)

    @property
    def effective_budget(self) -> int:
        """Budget for the days actually tracked (prorated for a partial first week)"""
        if self.tracked_days >= 7:
            return self.weekly_budget
        return round_half_up(self.weekly_budget * self.tracked_days / 7)

    def covers(self, day) -> bool:
        return self.tracking_start_date <= day <= self.week_end_date


class Reservation(Base):
    """A planned exception day with a pre-committed calorie allowance"""

    __tablename__ = "reservation"

    reservation_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    reserved_on = Column(Date, nullable=False)
    planned_calories = Column(Integer, nullable=False)
    note = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "reserved_on", name="uq_reservation_user_date"),
        CheckConstraint("planned_calories > 0", name="ck_reservation_calories_positive"),
    )


class WeeklyMetricSnapshot(Base):
    """Per-day totals and adherence scores for a period, keyed by (user, period, date)"""

    __tablename__ = "weekly_metric_snapshot"

    snapshot_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    period_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("weekly_period.period_id", ondelete="CASCADE"),
        nullable=False,
    )
    calculated_date = Column(Date, nullable=False)
    total_consumed = Column(Integer, nullable=False, default=0)
    total_burned = Column(Integer, nullable=False, default=0)
    net_consumed = Column(Integer, nullable=False, default=0)
    total_remaining = Column(Integer, nullable=False, default=0)
    calories_reserved = Column(Integer, nullable=False, default=0)
    balance_score = Column(Integer)
    consistency_score = Column(Integer)
    drift_score = Column(Integer)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    period = relationship("WeeklyPeriod", back_populates="snapshots")

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "period_id",
            "calculated_date",
            name="uq_snapshot_user_period_date",
        ),
    )
