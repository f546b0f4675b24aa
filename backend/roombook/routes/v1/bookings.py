# backend/roombook/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to the booking services.

Endpoints:
    GET / - List bookings with validated filters
    POST / - Create a booking
    GET /check-availability - Is a window free in a room
    GET /{booking_id} - Single booking
    DELETE /{booking_id} - Delete own booking
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import (
    get_availability_service,
    get_booking_query_service,
    get_booking_service,
)
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.booking import AvailabilityResponse, BookingCreate, BookingResponse
from ...services.availability_service import AvailabilityService, parse_instant
from ...services.booking_query_service import BookingQueryService
from ...services.booking_service import BookingService
from .common import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    user_id: Optional[str] = Query(None),
    room_id: Optional[str] = Query(None),
    start_time: Optional[str] = Query(None, description="ISO-8601 instant"),
    start_time_op: Optional[str] = Query(None, description="One of >, <, >=, <= (default >=)"),
    end_time: Optional[str] = Query(None, description="ISO-8601 instant"),
    end_time_op: Optional[str] = Query(None, description="One of >, <, >=, <= (default <=)"),
    limit: Optional[str] = Query(None, description="Non-negative integer"),
    current_user: User = Depends(get_current_user),
    query_service: BookingQueryService = Depends(get_booking_query_service),
) -> List[BookingResponse]:
    """List bookings ordered by start time. Raw strings are validated by the service."""
    raw_filters = {
        "user_id": user_id,
        "room_id": room_id,
        "start_time": start_time,
        "start_time_op": start_time_op,
        "end_time": end_time,
        "end_time_op": end_time_op,
        "limit": limit,
    }
    try:
        bookings = await asyncio.to_thread(query_service.list_bookings, raw_filters)
        return [BookingResponse.from_booking(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            current_user,
            booking_data.room_id,
            booking_data.start_time,
            booking_data.end_time,
            booking_data.notes,
        )
        return await asyncio.to_thread(BookingResponse.from_booking, booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    room_id: str = Query(..., min_length=1),
    start_time: str = Query(..., description="ISO-8601 instant"),
    end_time: str = Query(..., description="ISO-8601 instant"),
    current_user: User = Depends(get_current_user),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        start = parse_instant("start_time", start_time)
        end = parse_instant("end_time", end_time)
        available = await asyncio.to_thread(availability_service.is_available, room_id, start, end)
        return AvailabilityResponse(available=available)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Response:
    try:
        await asyncio.to_thread(booking_service.delete_booking, current_user, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
