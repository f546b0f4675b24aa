# backend/roombook/repositories/booking_repository.py
"""
Booking data access.

Holds the interval overlap query used by the availability check and the
filtered listing query. Every predicate is built from SQLAlchemy column
expressions, so values always travel as bound parameters.
"""

from dataclasses import dataclass
from datetime import datetime
import operator
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from .base_repository import BaseRepository

COMPARISON_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


@dataclass(frozen=True)
class TimeBound:
    """A comparison against a timestamp column, e.g. ``start_time >= value``."""

    op: str
    value: datetime


@dataclass(frozen=True)
class BookingFilters:
    user_id: Optional[str] = None
    room_id: Optional[str] = None
    start: Optional[TimeBound] = None
    end: Optional[TimeBound] = None
    limit: Optional[int] = None


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Booking.room), joinedload(Booking.user))

    def add(self, **kwargs: Any) -> Booking:
        """
        Insert a booking and flush.

        Unlike ``create`` this does not wrap driver errors: an exclusion
        violation or serialization failure must reach the scheduler intact so
        it can be reported as a slot conflict.
        """
        booking = Booking(**kwargs)
        self.db.add(booking)
        self.db.flush()
        return booking

    def _overlap_query(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> Query:
        query = self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.start_time < end_time,
            Booking.end_time > start_time,
        )
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return query

    def find_conflicting(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings in ``room_id`` whose interval overlaps [start_time, end_time)."""
        query = self._overlap_query(room_id, start_time, end_time, exclude_booking_id)
        return self._execute_query(query.order_by(Booking.start_time.asc()))

    def has_conflict(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        try:
            query = self._overlap_query(room_id, start_time, end_time, exclude_booking_id)
            return bool(self.db.query(query.exists()).scalar())
        except SQLAlchemyError as e:
            self.logger.error("Error checking conflicts for room %s: %s", room_id, e)
            raise RepositoryException("Failed to check booking conflicts") from e

    def list_filtered(self, filters: BookingFilters) -> List[Booking]:
        query = self._apply_eager_loading(self.db.query(Booking))

        if filters.user_id is not None:
            query = query.filter(Booking.user_id == filters.user_id)
        if filters.room_id is not None:
            query = query.filter(Booking.room_id == filters.room_id)
        if filters.start is not None:
            compare = COMPARISON_OPERATORS[filters.start.op]
            query = query.filter(compare(Booking.start_time, filters.start.value))
        if filters.end is not None:
            compare = COMPARISON_OPERATORS[filters.end.op]
            query = query.filter(compare(Booking.end_time, filters.end.value))

        query = query.order_by(Booking.start_time.asc(), Booking.id.asc())
        if filters.limit is not None:
            query = query.limit(filters.limit)
        return self._execute_query(query)

    def list_for_user(self, user_id: str) -> List[Booking]:
        return self.list_filtered(BookingFilters(user_id=user_id))
