# backend/roombook/routes/v1/auth.py
"""
Authentication routes - API v1

    POST /callback - Finish the OAuth flow and start a session
    POST /test-login - Start a session without OAuth (non-production, opt-in)
    GET /me - Current user
    POST /logout - End the current session
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import get_identity_provider, get_identity_service
from ...api.dependencies.settings import get_settings
from ...core.config import Settings
from ...core.exceptions import DomainException, NotFoundException
from ...models.user import User
from ...schemas.auth import OAuthCallbackRequest, TestLoginRequest, UserResponse
from ...services.identity_service import IdentityProvider, IdentityService
from ...utils.cookies import clear_session_cookie, set_session_cookie
from .common import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/callback", response_model=UserResponse)
async def oauth_callback(
    payload: OAuthCallbackRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    provider: IdentityProvider = Depends(get_identity_provider),
    identity_service: IdentityService = Depends(get_identity_service),
) -> UserResponse:
    try:
        identity = await asyncio.to_thread(provider.exchange_code, payload.code)
        user = await asyncio.to_thread(identity_service.upsert_from_provider, identity)
    except DomainException as e:
        handle_domain_exception(e)
    set_session_cookie(response, settings, user.session_token)
    logger.info("User signed in", extra={"event": "login", "user_id": user.id})
    return UserResponse.model_validate(user)


@router.post("/test-login", response_model=UserResponse)
async def test_login(
    payload: TestLoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    identity_service: IdentityService = Depends(get_identity_service),
) -> UserResponse:
    try:
        if not settings.test_login_allowed:
            raise NotFoundException("Not found")
        user = await asyncio.to_thread(identity_service.test_login, payload.email, payload.name)
    except DomainException as e:
        handle_domain_exception(e)
    set_session_cookie(response, settings, user.session_token)
    logger.info("Test login", extra={"event": "test_login", "user_id": user.id})
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(get_current_user),
    identity_service: IdentityService = Depends(get_identity_service),
) -> Response:
    try:
        await asyncio.to_thread(identity_service.logout, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response, settings)
    return response
