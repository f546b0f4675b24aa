# backend/roombook/repositories/room_repository.py
"""Data access for rooms."""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.room import Room
from .base_repository import BaseRepository


class RoomRepository(BaseRepository[Room]):
    def __init__(self, db: Session):
        super().__init__(db, Room)

    def list_ordered(self) -> List[Room]:
        return self._execute_query(self.db.query(Room).order_by(Room.name.asc()))

    def get_by_name(self, name: str) -> Optional[Room]:
        return self.find_one_by(name=name)

    def lock_for_update(self, room_id: str) -> Optional[Room]:
        """
        Fetch the room row and hold a write lock on it until the transaction ends.

        Serializes booking writers per room on PostgreSQL. SQLite has no row
        locks (the clause is dropped when compiled); there the transaction
        already holds the database write lock from BEGIN IMMEDIATE.
        """
        try:
            return self.db.query(Room).filter(Room.id == room_id).with_for_update().first()
        except SQLAlchemyError as e:
            self.logger.error("Error locking room %s: %s", room_id, e)
            raise RepositoryException("Failed to lock room") from e
