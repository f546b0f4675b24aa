# backend/roombook/services/booking_query_service.py
"""
Booking listing with validated filters.

Recognized query parameters:

    user_id, room_id            exact match
    start_time, start_time_op   compare bookings.start_time (op default ">=")
    end_time, end_time_op       compare bookings.end_time   (op default "<=")
    limit                       non-negative integer, applied after ordering

Operators are limited to ``>``, ``<``, ``>=`` and ``<=``. Any other
operator, an unparseable timestamp or a bad limit fails the whole request
before the database is touched. Other query keys are ignored.
"""

from datetime import datetime
from typing import List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    InvalidFilterException,
    RepositoryException,
    UnavailableException,
    ValidationException,
)
from ..models.booking import Booking
from ..repositories.booking_repository import COMPARISON_OPERATORS, BookingFilters, TimeBound
from ..repositories.factory import RepositoryFactory
from .availability_service import parse_instant
from .base import BaseService

DEFAULT_START_OP = ">="
DEFAULT_END_OP = "<="


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def parse_timestamp(field: str, raw: str) -> datetime:
    try:
        return parse_instant(field, raw)
    except ValidationException as e:
        raise InvalidFilterException(field, e.message) from e


def parse_operator(field: str, raw: Optional[str], default: str) -> str:
    if raw is None:
        return default
    op = raw.strip()
    if op not in COMPARISON_OPERATORS:
        allowed = ", ".join(COMPARISON_OPERATORS)
        raise InvalidFilterException(field, f"{field} must be one of: {allowed}")
    return op


def parse_limit(raw: Optional[str]) -> Optional[int]:
    if _blank(raw):
        return None
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationException(
            "limit must be a non-negative integer",
            details={"field": "limit", "value": text},
        )
    return int(text)


def _parse_bound(
    raw: Mapping[str, Optional[str]], field: str, default_op: str
) -> Optional[TimeBound]:
    op_field = f"{field}_op"
    op = parse_operator(op_field, raw.get(op_field), default_op)
    value = raw.get(field)
    if _blank(value):
        return None
    return TimeBound(op=op, value=parse_timestamp(field, str(value)))


def parse_filters(raw: Mapping[str, Optional[str]]) -> BookingFilters:
    """Validate raw query parameters into ``BookingFilters``."""
    user_id = raw.get("user_id")
    room_id = raw.get("room_id")
    return BookingFilters(
        user_id=None if _blank(user_id) else str(user_id).strip(),
        room_id=None if _blank(room_id) else str(room_id).strip(),
        start=_parse_bound(raw, "start_time", DEFAULT_START_OP),
        end=_parse_bound(raw, "end_time", DEFAULT_END_OP),
        limit=parse_limit(raw.get("limit")),
    )


class BookingQueryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(self, raw_filters: Mapping[str, Optional[str]]) -> List[Booking]:
        filters = parse_filters(raw_filters)
        try:
            return self.booking_repository.list_filtered(filters)
        except RepositoryException as e:
            raise UnavailableException() from e
