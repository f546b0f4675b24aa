# backend/roombook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each factory builds a service bound to the request's session.
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ...core.config import Settings
from ...services.api_key_service import ApiKeyService
from ...services.availability_service import AvailabilityService
from ...services.booking_query_service import BookingQueryService
from ...services.booking_service import BookingService
from ...services.credential_resolver import CredentialResolver
from ...services.identity_service import IdentityProvider, IdentityService
from ...services.room_service import RoomService
from .database import get_db
from .settings import get_settings


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_query_service(db: Session = Depends(get_db)) -> BookingQueryService:
    return BookingQueryService(db)


def get_credential_resolver(db: Session = Depends(get_db)) -> CredentialResolver:
    return CredentialResolver(db)


def get_api_key_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApiKeyService:
    return ApiKeyService(db, prefix_length=settings.api_key_prefix_length)


def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    return IdentityService(db)


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(db)


def get_identity_provider(request: Request) -> IdentityProvider:
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "No identity provider is configured",
                "code": "UNAVAILABLE",
                "error": "identity provider unavailable",
            },
        )
    return provider
