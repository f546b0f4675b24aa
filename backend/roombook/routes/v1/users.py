"""Per-user views."""

import asyncio
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import get_booking_service
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.booking import BookingResponse
from ...services.booking_service import BookingService
from .common import handle_domain_exception

router = APIRouter(tags=["users"])


@router.get("/{user_id}/bookings", response_model=List[BookingResponse])
async def list_user_bookings(
    user_id: str,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """A user's own bookings; other users get 403."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings_for_user, current_user, user_id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return [BookingResponse.from_booking(booking) for booking in bookings]
