# backend/roombook/schemas/booking.py
"""Booking request and response DTOs."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.booking import Booking
from ._strict_base import StrictModel, StrictRequestModel


class BookingCreate(StrictRequestModel):
    room_id: str = Field(..., min_length=1, max_length=26, description="Room to book")
    start_time: datetime = Field(..., description="Start instant (ISO-8601)")
    end_time: datetime = Field(..., description="End instant (ISO-8601), exclusive")
    notes: Optional[str] = Field(default=None, max_length=2000)


class BookingResponse(StrictModel):
    id: str
    room_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None
    created_at: datetime
    room_name: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        room = booking.room
        user = booking.user
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            user_id=booking.user_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            notes=booking.notes,
            created_at=booking.created_at,
            room_name=room.name if room is not None else None,
            user_name=user.name if user is not None else None,
            user_email=user.email if user is not None else None,
        )


class AvailabilityResponse(StrictModel):
    available: bool
