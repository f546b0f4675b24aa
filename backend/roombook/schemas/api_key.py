# backend/roombook/schemas/api_key.py
"""API key DTOs. Only the create response ever carries the secret."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from ._strict_base import StrictModel, StrictRequestModel


class ApiKeyCreate(StrictRequestModel):
    name: Optional[str] = Field(default=None, max_length=255)


class ApiKeyCreatedResponse(StrictModel):
    id: str
    key: str = Field(..., description="Plaintext secret; shown once and never again")
    prefix: str
    name: Optional[str] = None
    created_at: datetime


class ApiKeyResponse(StrictModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: str
    key_prefix: str
    name: Optional[str] = None
    last_used_at: Optional[datetime] = None
    created_at: datetime
