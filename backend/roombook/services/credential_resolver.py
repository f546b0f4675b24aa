# backend/roombook/services/credential_resolver.py
"""
Credential resolution.

Turns an ``ApiKeyCredential`` or ``SessionCredential`` into a
``ResolvedIdentity`` so authorization code never cares which channel was
used. Outcomes:

- no credential, or an unknown session token: ``None`` (anonymous)
- unknown or malformed API key: ``UnauthorizedException`` (no cookie fallback)
- store failure: ``UnavailableException``
"""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.crypto import hash_api_key, looks_like_api_key
from ..core.exceptions import RepositoryException, UnauthorizedException, UnavailableException
from ..models.api_key import ApiKey
from ..models.types import utc_now
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import ApiKeyCredential, Credential, ResolvedIdentity, SessionCredential
from ..repositories.factory import RepositoryFactory
from .base import BaseService


class CredentialResolver(BaseService):
    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        super().__init__(db)
        self.api_key_repository = RepositoryFactory.create_api_key_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self._clock = clock

    @BaseService.measure_operation("resolve_identity")
    def resolve(self, credential: Optional[Credential]) -> Optional[ResolvedIdentity]:
        if credential is None:
            prometheus_metrics.record_auth_attempt("none", "anonymous")
            return None
        if isinstance(credential, ApiKeyCredential):
            return self._resolve_api_key(credential)
        return self._resolve_session(credential)

    def _resolve_api_key(self, credential: ApiKeyCredential) -> ResolvedIdentity:
        if not looks_like_api_key(credential.secret):
            prometheus_metrics.record_auth_attempt("api_key", "rejected")
            self.logger.info("Rejected malformed bearer credential", extra={"event": "auth_failed"})
            raise UnauthorizedException("Invalid API key")

        try:
            api_key = self.api_key_repository.get_by_hash(hash_api_key(credential.secret))
        except RepositoryException as e:
            raise UnavailableException() from e

        if api_key is None:
            prometheus_metrics.record_auth_attempt("api_key", "rejected")
            self.logger.info("Rejected unknown API key", extra={"event": "auth_failed"})
            raise UnauthorizedException("Invalid API key")

        user = api_key.user
        self._record_usage(api_key)
        prometheus_metrics.record_auth_attempt("api_key", "success")
        return ResolvedIdentity(user=user, channel="api_key")

    def _resolve_session(self, credential: SessionCredential) -> Optional[ResolvedIdentity]:
        try:
            user = self.user_repository.get_by_session_token(credential.token)
        except RepositoryException as e:
            raise UnavailableException() from e

        if user is None:
            prometheus_metrics.record_auth_attempt("session", "anonymous")
            return None
        prometheus_metrics.record_auth_attempt("session", "success")
        return ResolvedIdentity(user=user, channel="session")

    def _record_usage(self, api_key: ApiKey) -> None:
        """
        Best effort: a failed ``last_used_at`` write never fails authentication.

        Committed right away so a later rollback of the request (404, 409, ...)
        does not discard it.
        """
        api_key_id = api_key.id
        try:
            self.api_key_repository.touch_last_used(api_key, self._clock())
            self.db.commit()
        except (RepositoryException, SQLAlchemyError) as e:
            self.db.rollback()
            self.logger.warning(
                "Could not record API key usage",
                extra={"event": "api_key_touch_failed", "api_key_id": api_key_id, "error": str(e)},
            )
