"""Authentication DTOs."""

from pydantic import ConfigDict, EmailStr, Field

from ._strict_base import StrictModel, StrictRequestModel


class OAuthCallbackRequest(StrictRequestModel):
    code: str = Field(..., min_length=1, max_length=2048)


class TestLoginRequest(StrictRequestModel):
    email: EmailStr
    name: str | None = Field(default=None, max_length=255)


class UserResponse(StrictModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: str
    email: str
    name: str
