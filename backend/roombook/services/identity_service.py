# backend/roombook/services/identity_service.py
"""
User identity lifecycle.

After the external OAuth exchange completes, the verified identity is
upserted by provider subject and a fresh session token is minted. The
OAuth client itself lives outside this package behind ``IdentityProvider``.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy.orm import Session

from ..core.crypto import generate_session_token
from ..core.exceptions import ConflictException, NotFoundException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService


@dataclass(frozen=True)
class ProviderIdentity:
    """Identity verified by the external provider."""

    external_id: str
    email: str
    name: str


@runtime_checkable
class IdentityProvider(Protocol):
    """Exchanges an OAuth authorization code for a verified identity.

    Implementations raise ``UnauthorizedException`` for a rejected code and
    ``UnavailableException`` when the provider cannot be reached.
    """

    def exchange_code(self, code: str) -> ProviderIdentity:
        ...


class IdentityService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("upsert_from_provider")
    def upsert_from_provider(self, identity: ProviderIdentity) -> User:
        """Insert or refresh the user for ``identity`` and rotate its session token."""
        with self.transaction():
            user = self.user_repository.get_by_external_id(identity.external_id)
            holder = self.user_repository.get_by_email(identity.email)
            if holder is not None and holder.external_id != identity.external_id:
                raise ConflictException(
                    "This email is already linked to another account",
                    code="EMAIL_TAKEN",
                )
            if user is None:
                user = self.user_repository.create(
                    external_id=identity.external_id,
                    email=identity.email,
                    name=identity.name,
                    session_token=generate_session_token(),
                )
                created = True
            else:
                user.email = identity.email
                user.name = identity.name
                user.session_token = generate_session_token()
                self.user_repository.db.flush()
                created = False
        self.log_operation("upsert_user", user_id=user.id, created=created)
        return user

    @BaseService.measure_operation("test_login")
    def test_login(self, email: str, name: Optional[str] = None) -> User:
        """Sign in as ``email`` without the provider. Only wired up outside production."""
        existing = self.user_repository.get_by_email(email)
        external_id = existing.external_id if existing else f"test:{email}"
        return self.upsert_from_provider(
            ProviderIdentity(
                external_id=external_id,
                email=email,
                name=name or (existing.name if existing else email.split("@", 1)[0]),
            )
        )

    @BaseService.measure_operation("logout")
    def logout(self, user: User) -> None:
        """Invalidate the current session cookie by rotating the stored token."""
        with self.transaction():
            current = self.user_repository.get_by_id(user.id, load_relationships=False)
            if current is None:
                raise NotFoundException("User not found", details={"user_id": user.id})
            current.session_token = generate_session_token()
            self.user_repository.db.flush()
        self.log_operation("logout", user_id=user.id)
