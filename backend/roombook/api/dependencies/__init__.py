"""FastAPI dependency providers."""

from .auth import get_current_identity_optional, get_current_user
from .database import get_db
from .settings import get_settings

__all__ = ["get_current_identity_optional", "get_current_user", "get_db", "get_settings"]
