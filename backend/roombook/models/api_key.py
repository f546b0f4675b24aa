# backend/roombook/models/api_key.py
"""API key model. Only a one-way hash of the secret is stored."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime, utc_now


class ApiKey(Base):
    __tablename__ = "api_keys"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    key_hash = Column(String(64), nullable=False, unique=True, index=True)
    key_prefix = Column(String(16), nullable=False)
    name = Column(String(255), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    last_used_at = Column(UTCDateTime, nullable=True)

    user = relationship("User", back_populates="api_keys")

    def __repr__(self) -> str:
        return f"<ApiKey {self.key_prefix}... user={self.user_id}>"
