"""
Single recalculation entry point shared by the interactive client, the
scheduled job and observation writes.
"""

from datetime import date
from sqlalchemy.orm import Session
import logging
import uuid

from domain.enums import RecalculationReason
from domain.schemas.tracking_schemas import RecalculationResponse
from services.adherence_service import AdherenceService
from services.period_service import PeriodService
from services.reservation_service import ReservationService

logger = logging.getLogger("haven.recalculation")


class RecalculationService:
    @staticmethod
    def recalculate(
        db: Session, user_id: uuid.UUID, day: date, reason: RecalculationReason
    ) -> RecalculationResponse:
        """
        Bring the user's derived numbers up to date for ``day``.

        Order: overage distribution (guarded by the previous day's intake),
        adherence snapshot, then the adjusted budget read. Every step is keyed
        by (user, date), so re-running with the same date is a no-op in effect.

        A user without a period covering ``day`` gets an empty result rather
        than an error.
        """
        reason = RecalculationReason(reason)
        period = PeriodService.find_current_period(db, user_id, day)
        if not period:
            logger.info(
                f"recalculation_skipped user_id={user_id} date={day} "
                f"reason={reason.value} cause=no_period"
            )
            return RecalculationResponse(date=day, reason=reason, overage_recalculated=False)

        recomputed = ReservationService.recalculate_and_distribute(db, user_id, day)
        metrics = AdherenceService.recalculate_metrics(db, user_id, day, period=period)
        adjusted = ReservationService.get_adjusted_budget(db, user_id, day)

        logger.info(
            f"recalculated user_id={user_id} date={day} reason={reason.value} "
            f"overage_recalculated={recomputed} adjusted_budget={adjusted.adjusted_budget}"
        )
        return RecalculationResponse(
            date=day,
            reason=reason,
            overage_recalculated=recomputed,
            adjusted_budget=adjusted,
            metrics=metrics,
        )
