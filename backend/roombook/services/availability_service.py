# backend/roombook/services/availability_service.py
"""
Availability checks for rooms.

Read-only: answers whether [start, end) is free in a room. Used directly by
the check-availability endpoint and as the in-transaction pre-check of the
booking scheduler.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, UnavailableException, ValidationException
from ..models.booking import Booking
from ..models.types import ensure_utc
from ..repositories.factory import RepositoryFactory
from .base import BaseService


def parse_instant(field: str, raw: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing ``Z`` or no offset means UTC."""
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationException(
            f"{field} must be an ISO-8601 timestamp", details={"field": field, "value": raw}
        ) from e
    return ensure_utc(parsed)


def validate_window(start_time: datetime, end_time: datetime) -> tuple[datetime, datetime]:
    """Normalize both instants to UTC and require start < end."""
    start_utc = ensure_utc(start_time)
    end_utc = ensure_utc(end_time)
    if start_utc >= end_utc:
        raise ValidationException(
            "start_time must be before end_time",
            details={"start_time": start_utc.isoformat(), "end_time": end_utc.isoformat()},
        )
    return start_utc, end_utc


class AvailabilityService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("is_available")
    def is_available(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """
        True iff no booking in ``room_id`` overlaps [start_time, end_time).

        Room existence is not checked; an unknown room has no bookings.
        """
        start_utc, end_utc = validate_window(start_time, end_time)
        try:
            return not self.booking_repository.has_conflict(
                room_id, start_utc, end_utc, exclude_booking_id=exclude_booking_id
            )
        except RepositoryException as e:
            raise UnavailableException() from e

    @BaseService.measure_operation("find_conflicts")
    def find_conflicts(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        start_utc, end_utc = validate_window(start_time, end_time)
        try:
            return self.booking_repository.find_conflicting(
                room_id, start_utc, end_utc, exclude_booking_id=exclude_booking_id
            )
        except RepositoryException as e:
            raise UnavailableException() from e
