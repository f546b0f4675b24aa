# backend/roombook/api/dependencies/auth.py
"""
Authentication dependencies.

``get_current_identity_optional`` resolves whatever credential the request
carries; ``get_current_user`` additionally requires one.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from ...auth_session import credential_from_request
from ...core.authorization import require_authenticated
from ...core.config import Settings
from ...core.exceptions import DomainException
from ...models.user import User
from ...principal import ResolvedIdentity
from ...services.credential_resolver import CredentialResolver
from .services import get_credential_resolver
from .settings import get_settings

logger = logging.getLogger(__name__)


def get_current_identity_optional(
    request: Request,
    settings: Settings = Depends(get_settings),
    resolver: CredentialResolver = Depends(get_credential_resolver),
) -> Optional[ResolvedIdentity]:
    credential = credential_from_request(request, settings.session_cookie_name)
    try:
        identity = resolver.resolve(credential)
    except DomainException as e:
        raise e.to_http_exception()
    if identity is not None:
        request.state.auth_channel = identity.channel
    return identity


def get_current_user(
    identity: Optional[ResolvedIdentity] = Depends(get_current_identity_optional),
) -> User:
    try:
        return require_authenticated(identity.user if identity else None)
    except DomainException as e:
        raise e.to_http_exception()
