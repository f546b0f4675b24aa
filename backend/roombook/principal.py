"""Credential and identity types used by the credential resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from .models.user import User

AuthChannel = Literal["api_key", "session"]


@dataclass(frozen=True)
class ApiKeyCredential:
    """Secret presented as ``Authorization: Bearer <secret>``."""

    secret: str = field(repr=False)

    @property
    def channel(self) -> AuthChannel:
        return "api_key"


@dataclass(frozen=True)
class SessionCredential:
    """Opaque session token read from the session cookie."""

    token: str = field(repr=False)

    @property
    def channel(self) -> AuthChannel:
        return "session"


Credential = Union[ApiKeyCredential, SessionCredential]


@dataclass(frozen=True)
class ResolvedIdentity:
    """A user plus the channel that authenticated them."""

    user: User
    channel: AuthChannel

    @property
    def user_id(self) -> str:
        return str(self.user.id)
