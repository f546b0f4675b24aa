# backend/roombook/models/room.py
"""Room model: a bookable physical space."""

from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class Room(Base):
    """
    A shared room. Rooms are created by seeding only and are treated as
    immutable by the booking core.
    """

    __tablename__ = "rooms"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False, default=1)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    bookings = relationship("Booking", back_populates="room")

    __table_args__ = (CheckConstraint("capacity > 0", name="check_room_capacity_positive"),)

    def __repr__(self) -> str:
        return f"<Room {self.name} capacity={self.capacity}>"
