"""Repository layer: data access only, no business rules."""

from .api_key_repository import ApiKeyRepository
from .base_repository import BaseRepository
from .booking_repository import BookingFilters, BookingRepository, TimeBound
from .factory import RepositoryFactory
from .room_repository import RoomRepository
from .user_repository import UserRepository

__all__ = [
    "ApiKeyRepository",
    "BaseRepository",
    "BookingFilters",
    "BookingRepository",
    "RepositoryFactory",
    "RoomRepository",
    "TimeBound",
    "UserRepository",
]
