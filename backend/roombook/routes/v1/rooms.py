"""Public room listing."""

import asyncio
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_room_service
from ...core.exceptions import DomainException
from ...schemas.room import RoomResponse
from ...services.room_service import RoomService
from .common import handle_domain_exception

router = APIRouter(tags=["rooms"])


@router.get("", response_model=List[RoomResponse])
async def list_rooms(room_service: RoomService = Depends(get_room_service)) -> List[RoomResponse]:
    """All rooms ordered by name."""
    try:
        rooms = await asyncio.to_thread(room_service.list_rooms)
    except DomainException as e:
        handle_domain_exception(e)
    return [RoomResponse.model_validate(room) for room in rooms]
