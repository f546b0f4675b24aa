# backend/roombook/services/room_service.py
"""Room listing and default-room seeding."""

from typing import Iterable, List, Mapping

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_ROOMS
from ..core.exceptions import RepositoryException, UnavailableException
from ..models.room import Room
from ..repositories.factory import RepositoryFactory
from .base import BaseService


class RoomService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.room_repository = RepositoryFactory.create_room_repository(db)

    @BaseService.measure_operation("list_rooms")
    def list_rooms(self) -> List[Room]:
        try:
            return self.room_repository.list_ordered()
        except RepositoryException as e:
            raise UnavailableException() from e

    def seed_rooms(self, rooms: Iterable[Mapping[str, object]] = DEFAULT_ROOMS) -> int:
        """Create any missing rooms by name. Returns how many were inserted."""
        inserted = 0
        with self.transaction():
            for fields in rooms:
                if self.room_repository.get_by_name(str(fields["name"])) is None:
                    self.room_repository.create(**fields)
                    inserted += 1
        if inserted:
            self.log_operation("seed_rooms", inserted=inserted)
        return inserted
