# backend/roombook/core/authorization.py
"""Ownership guard shared by every service that mutates user-owned rows."""

import logging
from typing import Optional

from ..models.user import User
from .exceptions import ForbiddenException, UnauthorizedException

logger = logging.getLogger(__name__)


def require_authenticated(user: Optional[User]) -> User:
    if user is None:
        raise UnauthorizedException()
    return user


def require_ownership(user: User, owner_id: str, *, resource: str, resource_id: str) -> None:
    """
    Allow the action only when ``user`` owns the resource.

    ``owner_id`` must come from the stored row, never from the request.
    """
    if owner_id != user.id:
        logger.info(
            "Ownership check failed",
            extra={
                "event": "ownership_denied",
                "resource": resource,
                "resource_id": resource_id,
                "user_id": user.id,
            },
        )
        raise ForbiddenException(
            f"You are not authorized to modify this {resource}",
            details={"resource": resource, "resource_id": resource_id},
        )
