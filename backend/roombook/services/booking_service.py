# backend/roombook/services/booking_service.py
"""
Booking scheduler.

Creates and deletes bookings while keeping the no-overlap rule for each
room. Creation locks the room, re-checks the window and inserts inside one
transaction; on PostgreSQL the exclusion constraint catches anything that
slips past the check. Whichever writer commits first wins and the other
gets ``SlotTakenException``.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.authorization import require_ownership
from ..core.constants import (
    BOOKING_OVERLAP_CONSTRAINT,
    PG_DEADLOCK_DETECTED,
    PG_EXCLUSION_VIOLATION,
    PG_SERIALIZATION_FAILURE,
)
from ..core.exceptions import (
    DomainException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    SlotTakenException,
    UnavailableException,
)
from ..models.booking import Booking
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .availability_service import AvailabilityService, validate_window
from .base import BaseService


def _pg_error_code(exc: DBAPIError) -> Optional[str]:
    return getattr(getattr(exc, "orig", None), "pgcode", None)


def _constraint_name(exc: DBAPIError) -> Optional[str]:
    diag = getattr(getattr(exc, "orig", None), "diag", None)
    return getattr(diag, "constraint_name", None)


def is_overlap_violation(exc: IntegrityError) -> bool:
    if _constraint_name(exc) == BOOKING_OVERLAP_CONSTRAINT:
        return True
    if _pg_error_code(exc) == PG_EXCLUSION_VIOLATION:
        return True
    return BOOKING_OVERLAP_CONSTRAINT in str(getattr(exc, "orig", exc))


def is_write_race(exc: OperationalError) -> bool:
    return _pg_error_code(exc) in {PG_SERIALIZATION_FAILURE, PG_DEADLOCK_DETECTED}


class BookingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.room_repository = RepositoryFactory.create_room_repository(db)
        self.availability_service = AvailabilityService(db)

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        user: User,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        notes: Optional[str] = None,
    ) -> Booking:
        start_utc, end_utc = validate_window(start_time, end_time)

        try:
            room = self.room_repository.lock_for_update(room_id)
            if room is None:
                raise NotFoundException("Room not found", details={"room_id": room_id})

            conflicts = self.availability_service.find_conflicts(room_id, start_utc, end_utc)
            if conflicts:
                prometheus_metrics.record_booking_conflict("precheck")
                raise SlotTakenException(room_id, start_utc, end_utc, conflicts[0].id)

            booking = self.booking_repository.add(
                room_id=room_id,
                user_id=user.id,
                start_time=start_utc,
                end_time=end_utc,
                notes=notes,
            )
            self.db.commit()
        except DomainException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            if is_overlap_violation(e):
                prometheus_metrics.record_booking_conflict("constraint")
                self.logger.info(
                    "Booking rejected by overlap constraint",
                    extra={"event": "booking_conflict", "room_id": room_id},
                )
                raise SlotTakenException(room_id, start_utc, end_utc) from e
            self.logger.error("Integrity error creating booking: %s", e)
            raise UnavailableException() from e
        except OperationalError as e:
            self.db.rollback()
            if is_write_race(e):
                prometheus_metrics.record_booking_conflict("serialization")
                self.logger.info(
                    "Booking lost a write race",
                    extra={"event": "booking_conflict", "room_id": room_id},
                )
                raise SlotTakenException(room_id, start_utc, end_utc) from e
            self.logger.error("Database error creating booking: %s", e)
            raise UnavailableException() from e
        except (SQLAlchemyError, RepositoryException) as e:
            self.db.rollback()
            self.logger.error("Database error creating booking: %s", e)
            raise UnavailableException() from e

        self.log_operation(
            "create_booking",
            booking_id=booking.id,
            room_id=room_id,
            user_id=user.id,
        )
        return booking

    @BaseService.measure_operation("delete_booking")
    def delete_booking(self, user: User, booking_id: str) -> None:
        """Delete ``booking_id`` if ``user`` owns it. NotFound is checked before ownership."""
        with self.transaction():
            booking = self.booking_repository.get_by_id(booking_id, load_relationships=False)
            if booking is None:
                raise NotFoundException("Booking not found", details={"booking_id": booking_id})
            require_ownership(user, booking.user_id, resource="booking", resource_id=booking_id)
            self.booking_repository.delete(booking)

        self.log_operation("delete_booking", booking_id=booking_id, user_id=user.id)

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str) -> Booking:
        try:
            booking = self.booking_repository.get_by_id(booking_id)
        except RepositoryException as e:
            raise UnavailableException() from e
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    @BaseService.measure_operation("list_bookings_for_user")
    def list_bookings_for_user(self, requesting_user: User, user_id: str) -> List[Booking]:
        if requesting_user.id != user_id:
            raise ForbiddenException(
                "You can only view your own bookings",
                details={"resource": "user_bookings", "resource_id": user_id},
            )
        try:
            return self.booking_repository.list_for_user(user_id)
        except RepositoryException as e:
            raise UnavailableException() from e
