"""
Reservation Repository - Data access layer for planned exception days
"""

from typing import List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Reservation


class ReservationRepository(BaseRepository[Reservation]):
    """Repository for reservations, unique per (user, date)"""

    def __init__(self, db: Session):
        super().__init__(db, Reservation)

    def get_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.reservation_id == reservation_id)
            .first()
        )

    def get_for_date(self, user_id: UUID, day: date) -> Optional[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.user_id == user_id, Reservation.reserved_on == day)
            .execution_options(populate_existing=True)
            .first()
        )

    def get_between(self, user_id: UUID, start: date, end: date) -> List[Reservation]:
        """Reservations with start <= reserved_on <= end, ordered by date"""
        return (
            self.db.query(Reservation)
            .filter(
                Reservation.user_id == user_id,
                Reservation.reserved_on >= start,
                Reservation.reserved_on <= end,
            )
            .order_by(Reservation.reserved_on)
            .execution_options(populate_existing=True)
            .all()
        )

    def upsert_reservation(
        self, user_id: UUID, day: date, planned_calories: int, note: Optional[str] = None
    ) -> Reservation:
        """Create the reservation or overwrite the one already on that date"""
        values = {
            "user_id": user_id,
            "reserved_on": day,
            "planned_calories": planned_calories,
            "note": note,
        }
        self.upsert(
            values,
            ("user_id", "reserved_on"),
            update_columns=("planned_calories", "note"),
        )
        return self.get_for_date(user_id, day)

    def delete_for_date(self, user_id: UUID, day: date) -> bool:
        deleted = (
            self.db.query(Reservation)
            .filter(Reservation.user_id == user_id, Reservation.reserved_on == day)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0
