# backend/roombook/repositories/factory.py
"""
Repository Factory.

Central place to construct repositories so services never instantiate
them directly.
"""

from sqlalchemy.orm import Session

from .api_key_repository import ApiKeyRepository
from .booking_repository import BookingRepository
from .room_repository import RoomRepository
from .user_repository import UserRepository


class RepositoryFactory:
    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        return BookingRepository(db)

    @staticmethod
    def create_room_repository(db: Session) -> RoomRepository:
        return RoomRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> UserRepository:
        return UserRepository(db)

    @staticmethod
    def create_api_key_repository(db: Session) -> ApiKeyRepository:
        return ApiKeyRepository(db)
