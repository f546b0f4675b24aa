# backend/tests/unit/test_booking_service.py
"""
Booking scheduler behaviour against a real SQLite database, plus the
mapping of driver errors onto domain errors.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from roombook.core.constants import BOOKING_OVERLAP_CONSTRAINT
from roombook.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    SlotTakenException,
    UnavailableException,
    ValidationException,
)
from roombook.models.booking import Booking
from roombook.services.availability_service import AvailabilityService
from roombook.services.booking_service import BookingService, is_overlap_violation, is_write_race
from tests.conftest import utc

TEN = utc(2030, 5, 6, 10)


def _slot(start_offset_min: int, length_min: int):
    start = TEN + timedelta(minutes=start_offset_min)
    return start, start + timedelta(minutes=length_min)


class TestCreateBooking:
    def test_adjacent_bookings_both_succeed(self, db, make_user, phone_room):
        user = make_user()
        service = BookingService(db)
        first = service.create_booking(user, phone_room.id, *_slot(0, 30))
        second = service.create_booking(user, phone_room.id, *_slot(30, 30))
        assert first.id != second.id
        assert first.end_time == second.start_time

    def test_overlap_is_rejected(self, db, make_user, phone_room):
        user = make_user()
        service = BookingService(db)
        first = service.create_booking(user, phone_room.id, *_slot(0, 30))

        with pytest.raises(SlotTakenException) as exc_info:
            service.create_booking(user, phone_room.id, *_slot(15, 30))

        error = exc_info.value
        assert error.code == "SLOT_TAKEN"
        assert error.details["room_id"] == phone_room.id
        assert error.details["conflicting_booking_id"] == first.id
        assert db.query(Booking).count() == 1

    @pytest.mark.parametrize(
        "offset,length",
        [(0, 30), (-10, 20), (20, 30), (5, 10), (-30, 120)],
    )
    def test_any_overlap_shape_is_rejected(self, db, make_user, phone_room, offset, length):
        user = make_user()
        service = BookingService(db)
        service.create_booking(user, phone_room.id, *_slot(0, 30))
        with pytest.raises(SlotTakenException):
            service.create_booking(user, phone_room.id, *_slot(offset, length))

    def test_same_window_in_different_rooms(self, db, make_user, phone_room, lovelace):
        user = make_user()
        service = BookingService(db)
        service.create_booking(user, phone_room.id, *_slot(0, 60))
        service.create_booking(user, lovelace.id, *_slot(0, 60))
        assert db.query(Booking).count() == 2

    def test_read_your_writes(self, db, make_user, phone_room):
        user = make_user()
        BookingService(db).create_booking(user, phone_room.id, *_slot(0, 30))
        assert AvailabilityService(db).is_available(phone_room.id, *_slot(10, 5)) is False

    def test_persists_fields(self, db, make_user, phone_room):
        user = make_user()
        booking = BookingService(db).create_booking(
            user, phone_room.id, *_slot(0, 30), notes="standup"
        )
        db.expire_all()
        stored = db.get(Booking, booking.id)
        assert stored.user_id == user.id
        assert stored.notes == "standup"
        assert stored.start_time == TEN
        assert stored.start_time.tzinfo is not None

    def test_unknown_room(self, db, make_user):
        user = make_user()
        with pytest.raises(NotFoundException):
            BookingService(db).create_booking(user, "01HZZZZZZZZZZZZZZZZZZZZZZZ", *_slot(0, 30))

    @pytest.mark.parametrize("length", [0, -30])
    def test_empty_or_reversed_window(self, db, make_user, phone_room, length):
        user = make_user()
        start = TEN
        with pytest.raises(ValidationException):
            BookingService(db).create_booking(
                user, phone_room.id, start, start + timedelta(minutes=length)
            )
        assert db.query(Booking).count() == 0


class TestDeleteBooking:
    def test_ownership_gated_delete(self, db, make_user, phone_room):
        owner = make_user("a@example.com", "A")
        other = make_user("b@example.com", "B")
        service = BookingService(db)
        booking = service.create_booking(owner, phone_room.id, *_slot(0, 30))

        with pytest.raises(ForbiddenException):
            service.delete_booking(other, booking.id)
        assert db.get(Booking, booking.id) is not None

        service.delete_booking(owner, booking.id)
        assert db.get(Booking, booking.id) is None

        with pytest.raises(NotFoundException):
            service.delete_booking(owner, booking.id)

    def test_not_found_wins_over_forbidden(self, db, make_user):
        stranger = make_user("c@example.com", "C")
        with pytest.raises(NotFoundException):
            BookingService(db).delete_booking(stranger, "does-not-exist")

    def test_freed_slot_can_be_rebooked(self, db, make_user, phone_room):
        user = make_user()
        service = BookingService(db)
        booking = service.create_booking(user, phone_room.id, *_slot(0, 30))
        service.delete_booking(user, booking.id)
        service.create_booking(user, phone_room.id, *_slot(0, 30))


class TestUserBookings:
    def test_only_own_bookings(self, db, make_user, phone_room):
        owner = make_user("a@example.com", "A")
        other = make_user("b@example.com", "B")
        service = BookingService(db)
        service.create_booking(owner, phone_room.id, *_slot(0, 30))

        assert len(service.list_bookings_for_user(owner, owner.id)) == 1
        with pytest.raises(ForbiddenException):
            service.list_bookings_for_user(other, owner.id)

    def test_get_booking(self, db, make_user, phone_room):
        user = make_user()
        service = BookingService(db)
        booking = service.create_booking(user, phone_room.id, *_slot(0, 30))
        assert service.get_booking(booking.id).room.name == "Green Phone Room"
        with pytest.raises(NotFoundException):
            service.get_booking("missing")


def _driver_error(cls, *, pgcode=None, constraint=None, message="boom"):
    orig = Exception(message)
    orig.pgcode = pgcode
    orig.diag = SimpleNamespace(constraint_name=constraint)
    return cls("INSERT INTO bookings ...", {}, orig)


class TestDriverErrorMapping:
    @pytest.fixture
    def service(self):
        db = Mock()
        service = BookingService(db)
        service.room_repository = Mock()
        service.room_repository.lock_for_update.return_value = SimpleNamespace(id="room")
        service.availability_service = Mock()
        service.availability_service.find_conflicts.return_value = []
        service.booking_repository = Mock()
        return service

    def _create(self, service):
        user = SimpleNamespace(id="user")
        return service.create_booking(user, "room", *_slot(0, 30))

    def test_exclusion_constraint_becomes_slot_taken(self, service):
        service.booking_repository.add.side_effect = _driver_error(
            IntegrityError, pgcode="23P01", constraint=BOOKING_OVERLAP_CONSTRAINT
        )
        with pytest.raises(SlotTakenException):
            self._create(service)
        service.db.rollback.assert_called()

    def test_commit_time_serialization_failure_becomes_slot_taken(self, service):
        service.db.commit.side_effect = _driver_error(OperationalError, pgcode="40001")
        with pytest.raises(SlotTakenException):
            self._create(service)

    def test_deadlock_becomes_slot_taken(self, service):
        service.booking_repository.add.side_effect = _driver_error(OperationalError, pgcode="40P01")
        with pytest.raises(SlotTakenException):
            self._create(service)

    def test_other_integrity_error_is_unavailable(self, service):
        service.booking_repository.add.side_effect = _driver_error(
            IntegrityError, pgcode="23503", constraint="bookings_user_id_fkey"
        )
        with pytest.raises(UnavailableException) as exc_info:
            self._create(service)
        # Driver text never reaches the client payload
        payload = exc_info.value.to_http_exception().detail
        assert "bookings_user_id_fkey" not in str(payload)

    def test_connection_loss_is_unavailable(self, service):
        service.room_repository.lock_for_update.side_effect = _driver_error(
            OperationalError, message="server closed the connection unexpectedly"
        )
        with pytest.raises(UnavailableException):
            self._create(service)

    def test_precheck_conflict_does_not_insert(self, service):
        service.availability_service.find_conflicts.return_value = [SimpleNamespace(id="other")]
        with pytest.raises(SlotTakenException):
            self._create(service)
        service.booking_repository.add.assert_not_called()


def test_overlap_violation_detection_by_message():
    error = _driver_error(
        IntegrityError,
        message=f'conflicting key value violates exclusion constraint "{BOOKING_OVERLAP_CONSTRAINT}"',
    )
    assert is_overlap_violation(error)
    assert not is_write_race(_driver_error(OperationalError, pgcode="08006"))
