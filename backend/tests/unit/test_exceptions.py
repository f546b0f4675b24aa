# backend/tests/unit/test_exceptions.py
from fastapi import status
import pytest

from roombook.core.exceptions import (
    ForbiddenException,
    InvalidFilterException,
    NotFoundException,
    SlotTakenException,
    UnauthorizedException,
    UnavailableException,
    ValidationException,
)
from tests.conftest import utc


@pytest.mark.parametrize(
    "exc,status_code,code,error",
    [
        (UnauthorizedException(), status.HTTP_401_UNAUTHORIZED, "UNAUTHENTICATED", "Authentication required"),
        (ForbiddenException("no"), status.HTTP_403_FORBIDDEN, "FORBIDDEN", "not authorized"),
        (NotFoundException("gone"), status.HTTP_404_NOT_FOUND, "NOT_FOUND", "not found"),
        (
            SlotTakenException("room", utc(2030, 1, 1, 10), utc(2030, 1, 1, 11)),
            status.HTTP_409_CONFLICT,
            "SLOT_TAKEN",
            "already booked",
        ),
        (ValidationException("bad"), status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", "invalid input"),
        (
            InvalidFilterException("start_time", "bad"),
            status.HTTP_400_BAD_REQUEST,
            "INVALID_FILTER",
            "invalid filter",
        ),
        (UnavailableException(), status.HTTP_500_INTERNAL_SERVER_ERROR, "UNAVAILABLE", "service unavailable"),
    ],
)
def test_http_mapping(exc, status_code, code, error):
    http_exc = exc.to_http_exception()
    assert http_exc.status_code == status_code
    assert http_exc.detail["code"] == code
    assert http_exc.detail["error"] == error


def test_slot_taken_names_room_and_window():
    exc = SlotTakenException("room-1", utc(2030, 1, 1, 10), utc(2030, 1, 1, 11), "b-1")
    assert exc.details == {
        "room_id": "room-1",
        "start_time": "2030-01-01T10:00:00+00:00",
        "end_time": "2030-01-01T11:00:00+00:00",
        "conflicting_booking_id": "b-1",
    }


def test_unavailable_hides_internal_message():
    exc = UnavailableException("psycopg2.OperationalError: password authentication failed")
    detail = exc.to_http_exception().detail
    assert "psycopg2" not in detail["message"]
    assert detail["details"] == {}
