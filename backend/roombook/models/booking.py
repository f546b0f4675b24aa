# backend/roombook/models/booking.py
"""
Booking model.

A booking reserves the half-open interval [start_time, end_time) in one
room for one user. Overlapping bookings in the same room are rejected by
the scheduler and, on PostgreSQL, by an exclusion constraint.
"""

from sqlalchemy import DDL, CheckConstraint, Column, ForeignKey, Index, String, Text, event
from sqlalchemy.orm import relationship

from ..core.constants import BOOKING_OVERLAP_CONSTRAINT
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    room_id = Column(String(26), ForeignKey("rooms.id"), nullable=False)
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    room = relationship("Room", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="check_booking_time_order"),
        Index("ix_bookings_room_window", "room_id", "start_time", "end_time"),
        Index("ix_bookings_user_id", "user_id"),
        Index("ix_bookings_start_time", "start_time"),
    )

    def overlaps(self, start_time, end_time) -> bool:
        """Half-open overlap test; touching endpoints do not overlap."""
        return self.start_time < end_time and self.end_time > start_time

    def __repr__(self) -> str:
        return f"<Booking {self.id} room={self.room_id} {self.start_time}-{self.end_time}>"


# Store-level guard for PostgreSQL: no two bookings of a room may share any instant.
event.listen(
    Booking.__table__,
    "after_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE bookings ADD CONSTRAINT {BOOKING_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist (room_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&)"
    ).execute_if(dialect="postgresql"),
)
