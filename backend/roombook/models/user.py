# backend/roombook/models/user.py
"""User model for people who sign in through the identity provider."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class User(Base):
    """
    A person known to the identity provider.

    ``external_id`` is the provider's subject and the upsert key.
    ``session_token`` is the opaque cookie credential; it is replaced on
    every successful login and on logout.
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    external_id = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    session_token = Column(String(128), nullable=True, unique=True, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    api_keys = relationship(
        "ApiKey", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    bookings = relationship("Booking", back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.email}>"
