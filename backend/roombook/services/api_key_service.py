# backend/roombook/services/api_key_service.py
"""
API key lifecycle for the owning user.

The plaintext secret exists only in the return value of ``create_key``;
the database keeps its SHA-256 digest and a short display prefix.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.authorization import require_ownership
from ..core.constants import DEFAULT_API_KEY_PREFIX_LENGTH
from ..core.crypto import generate_api_key_secret, hash_api_key
from ..core.exceptions import NotFoundException, RepositoryException, UnavailableException
from ..models.api_key import ApiKey
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService


class ApiKeyService(BaseService):
    def __init__(self, db: Session, prefix_length: int = DEFAULT_API_KEY_PREFIX_LENGTH):
        super().__init__(db)
        self.api_key_repository = RepositoryFactory.create_api_key_repository(db)
        self.prefix_length = prefix_length

    @BaseService.measure_operation("create_api_key")
    def create_key(self, user: User, name: Optional[str] = None) -> Tuple[ApiKey, str]:
        """Create a key for ``user``; returns the row and the one-time plaintext secret."""
        secret = generate_api_key_secret()
        with self.transaction():
            api_key = self.api_key_repository.create(
                user_id=user.id,
                key_hash=hash_api_key(secret),
                key_prefix=secret[: self.prefix_length],
                name=name,
            )
        self.log_operation(
            "create_api_key", api_key_id=api_key.id, key_prefix=api_key.key_prefix, user_id=user.id
        )
        return api_key, secret

    @BaseService.measure_operation("list_api_keys")
    def list_keys(self, user: User) -> List[ApiKey]:
        try:
            return self.api_key_repository.list_for_user(user.id)
        except RepositoryException as e:
            raise UnavailableException() from e

    @BaseService.measure_operation("delete_api_key")
    def delete_key(self, user: User, key_id: str) -> None:
        with self.transaction():
            api_key = self.api_key_repository.get_by_id(key_id, load_relationships=False)
            if api_key is None:
                raise NotFoundException("API key not found", details={"key_id": key_id})
            require_ownership(user, api_key.user_id, resource="api_key", resource_id=key_id)
            self.api_key_repository.delete(api_key)
        self.log_operation("delete_api_key", api_key_id=key_id, user_id=user.id)
