# backend/roombook/core/exceptions.py
"""
Domain-specific exceptions for the room booking service.

Services raise these; the API layer converts them with
``to_http_exception()`` so every failure carries a stable machine-readable
code plus a short human-readable reason.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .constants import (
    ERROR_ALREADY_BOOKED,
    ERROR_AUTH_REQUIRED,
    ERROR_INVALID_FILTER,
    ERROR_INVALID_INPUT,
    ERROR_NOT_AUTHORIZED,
    ERROR_NOT_FOUND,
    ERROR_UNAVAILABLE,
)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = ERROR_UNAVAILABLE

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "error": self.reason,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when request input fails business validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    reason = ERROR_INVALID_INPUT

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code or "INVALID_INPUT", details=details)


class InvalidFilterException(ValidationException):
    """Raised when a booking list filter cannot be parsed."""

    reason = ERROR_INVALID_FILTER

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, code="INVALID_FILTER", details={"field": field})
        self.field = field


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    reason = ERROR_NOT_FOUND

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="NOT_FOUND", details=details)


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT
    reason = "conflict"


class SlotTakenException(ConflictException):
    """Raised when a booking overlaps an existing booking in the same room."""

    reason = ERROR_ALREADY_BOOKED

    def __init__(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        conflicting_booking_id: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {
            "room_id": room_id,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
        }
        if conflicting_booking_id:
            details["conflicting_booking_id"] = conflicting_booking_id
        super().__init__(
            "This time slot is already booked",
            code="SLOT_TAKEN",
            details=details,
        )
        self.room_id = room_id
        self.start_time = start_time
        self.end_time = end_time


class UnauthorizedException(DomainException):
    """Raised when no valid credential accompanies the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    reason = ERROR_AUTH_REQUIRED

    def __init__(self, message: str = ERROR_AUTH_REQUIRED) -> None:
        super().__init__(message, code="UNAUTHENTICATED")


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN
    reason = ERROR_NOT_AUTHORIZED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="FORBIDDEN", details=details)


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        # Internal detail stays in the logs
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "error": self.reason,
                "details": {},
            },
        )


class UnavailableException(ServiceException):
    """Raised when the store or another dependency cannot serve the request."""

    def __init__(self, message: str = "Storage backend unavailable") -> None:
        super().__init__(message, code="UNAVAILABLE")


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Wraps SQLAlchemy failures (connection loss, query errors) so services
    can translate them into ``UnavailableException`` without importing
    driver-specific types.
    """
