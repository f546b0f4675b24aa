# backend/roombook/repositories/api_key_repository.py
"""Data access for API keys."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.api_key import ApiKey
from .base_repository import BaseRepository


class ApiKeyRepository(BaseRepository[ApiKey]):
    def __init__(self, db: Session):
        super().__init__(db, ApiKey)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(ApiKey.user))

    def get_by_hash(self, key_hash: str) -> Optional[ApiKey]:
        try:
            return (
                self._apply_eager_loading(self.db.query(ApiKey))
                .filter(ApiKey.key_hash == key_hash)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error("Error looking up API key by hash: %s", e)
            raise RepositoryException("Failed to look up API key") from e

    def list_for_user(self, user_id: str) -> List[ApiKey]:
        query = (
            self.db.query(ApiKey)
            .filter(ApiKey.user_id == user_id)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        )
        return self._execute_query(query)

    def touch_last_used(self, api_key: ApiKey, when: datetime) -> None:
        try:
            api_key.last_used_at = when
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error("Error updating last_used_at for key %s: %s", api_key.id, e)
            raise RepositoryException("Failed to update API key usage") from e
