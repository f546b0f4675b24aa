# backend/tests/unit/test_booking_query_service.py
"""
Filter parsing and filtered listing of bookings.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from roombook.core.exceptions import (
    InvalidFilterException,
    RepositoryException,
    UnavailableException,
    ValidationException,
)
from roombook.repositories.booking_repository import BookingFilters, TimeBound
from roombook.services.availability_service import parse_instant
from roombook.services.booking_query_service import BookingQueryService, parse_filters
from roombook.services.booking_service import BookingService
from tests.conftest import utc


class TestParseFilters:
    def test_empty_query_has_no_predicates(self):
        assert parse_filters({}) == BookingFilters()

    def test_default_operators(self):
        filters = parse_filters(
            {"start_time": "2030-01-01T09:00:00Z", "end_time": "2030-01-01T17:00:00Z"}
        )
        assert filters.start == TimeBound(op=">=", value=utc(2030, 1, 1, 9))
        assert filters.end == TimeBound(op="<=", value=utc(2030, 1, 1, 17))

    def test_explicit_operators_and_offsets(self):
        filters = parse_filters(
            {
                "start_time": "2030-01-01T11:00:00+02:00",
                "start_time_op": ">",
                "end_time": "2030-01-02T00:00:00",
                "end_time_op": "<",
            }
        )
        assert filters.start == TimeBound(op=">", value=utc(2030, 1, 1, 9))
        assert filters.end == TimeBound(op="<", value=utc(2030, 1, 2))

    @pytest.mark.parametrize(
        "raw,microsecond",
        [
            ("2030-01-01T09:00:00.5Z", 500000),
            ("2030-01-01T09:00:00.25Z", 250000),
            ("2030-01-01T09:00:00.123Z", 123000),
            ("2030-01-01T09:00:00.1234+00:00", 123400),
            ("2030-01-01T09:00:00.12345Z", 123450),
        ],
    )
    def test_any_fraction_length(self, raw, microsecond):
        filters = parse_filters({"start_time": raw})
        assert filters.start.value == utc(2030, 1, 1, 9).replace(microsecond=microsecond)

    def test_blank_values_are_ignored(self):
        filters = parse_filters({"user_id": "", "room_id": "  ", "start_time": None, "limit": ""})
        assert filters == BookingFilters()

    @pytest.mark.parametrize("field", ["start_time_op", "end_time_op"])
    def test_unknown_operator_fails_fast(self, field):
        with pytest.raises(InvalidFilterException) as exc_info:
            parse_filters({field: "XX"})
        assert exc_info.value.field == field
        assert exc_info.value.code == "INVALID_FILTER"

    def test_operator_checked_even_without_value(self):
        with pytest.raises(InvalidFilterException):
            parse_filters({"end_time_op": "=="})

    @pytest.mark.parametrize("field", ["start_time", "end_time"])
    def test_non_iso_timestamp_names_field(self, field):
        with pytest.raises(InvalidFilterException) as exc_info:
            parse_filters({field: "next tuesday"})
        assert exc_info.value.field == field
        assert exc_info.value.details == {"field": field}

    @pytest.mark.parametrize("raw", ["-1", "abc", "1.5", "²"])
    def test_bad_limit_is_invalid_input(self, raw):
        with pytest.raises(ValidationException) as exc_info:
            parse_filters({"limit": raw})
        assert not isinstance(exc_info.value, InvalidFilterException)
        assert exc_info.value.code == "INVALID_INPUT"

    def test_zero_limit_allowed(self):
        assert parse_filters({"limit": "0"}).limit == 0


class TestListBookings:
    @pytest.fixture
    def seeded(self, db, make_user, phone_room, lovelace):
        ada = make_user("ada@example.com", "Ada")
        alan = make_user("alan@example.com", "Alan")
        service = BookingService(db)
        base = utc(2030, 3, 1, 9)
        # Created out of order to prove ordering comes from the query
        service.create_booking(ada, lovelace.id, base + timedelta(hours=3), base + timedelta(hours=4))
        service.create_booking(alan, phone_room.id, base, base + timedelta(hours=1))
        service.create_booking(ada, phone_room.id, base + timedelta(hours=1), base + timedelta(hours=2))
        service.create_booking(alan, lovelace.id, base + timedelta(hours=6), base + timedelta(hours=7))
        return {"ada": ada, "alan": alan, "base": base}

    def test_ordered_by_start_time(self, db, seeded):
        bookings = BookingQueryService(db).list_bookings({})
        starts = [b.start_time for b in bookings]
        assert starts == sorted(starts)
        assert len(bookings) == 4

    def test_exact_match_filters(self, db, seeded, lovelace):
        bookings = BookingQueryService(db).list_bookings(
            {"user_id": seeded["ada"].id, "room_id": lovelace.id}
        )
        assert [(b.user_id, b.room_id) for b in bookings] == [(seeded["ada"].id, lovelace.id)]

    def test_time_bounds_with_operators(self, db, seeded):
        base = seeded["base"]
        inclusive = BookingQueryService(db).list_bookings(
            {"start_time": (base + timedelta(hours=1)).isoformat()}
        )
        exclusive = BookingQueryService(db).list_bookings(
            {"start_time": (base + timedelta(hours=1)).isoformat(), "start_time_op": ">"}
        )
        assert len(inclusive) == 3
        assert len(exclusive) == 2

        ended_by_noon = BookingQueryService(db).list_bookings(
            {"end_time": (base + timedelta(hours=2)).isoformat()}
        )
        assert len(ended_by_noon) == 2

    def test_limit_applies_after_ordering(self, db, seeded):
        bookings = BookingQueryService(db).list_bookings({"limit": "2"})
        assert [b.start_time for b in bookings] == [
            seeded["base"],
            seeded["base"] + timedelta(hours=1),
        ]

    def test_listing_includes_room_and_user(self, db, seeded):
        booking = BookingQueryService(db).list_bookings({"limit": "1"})[0]
        assert booking.room.name == "Green Phone Room"
        assert booking.user.email == "alan@example.com"

    def test_injection_attempt_is_just_a_value(self, db, seeded):
        bookings = BookingQueryService(db).list_bookings({"room_id": "x' OR '1'='1"})
        assert bookings == []

    def test_invalid_filter_never_queries(self):
        service = BookingQueryService(Mock())
        service.booking_repository = Mock()
        with pytest.raises(InvalidFilterException):
            service.list_bookings({"start_time": "yesterday"})
        service.booking_repository.list_filtered.assert_not_called()

    def test_store_failure_is_unavailable(self):
        service = BookingQueryService(Mock())
        service.booking_repository = Mock()
        service.booking_repository.list_filtered.side_effect = RepositoryException("down")
        with pytest.raises(UnavailableException):
            service.list_bookings({})


def test_parse_instant_reports_field_as_invalid_input():
    with pytest.raises(ValidationException) as exc_info:
        parse_instant("end_time", "tomorrow-ish")
    assert not isinstance(exc_info.value, InvalidFilterException)
    assert exc_info.value.code == "INVALID_INPUT"
    assert exc_info.value.details["field"] == "end_time"
