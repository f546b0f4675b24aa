# backend/roombook/core/config.py
"""
Runtime configuration.

``Settings`` is assembled once when the application is created and then
handed down explicitly (``app.state.settings``, constructor arguments).
Nothing below the HTTP layer reads the environment on its own.
"""

import json
import logging
from typing import Annotated, List, Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .constants import (
    DEFAULT_API_KEY_PREFIX_LENGTH,
    DEFAULT_SESSION_COOKIE_NAME,
    DEFAULT_SESSION_MAX_AGE_SECONDS,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    database_url: SecretStr = Field(
        default=SecretStr("sqlite:///./roombook.db"),
        description="SQLAlchemy database URL",
    )
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_timeout: int = Field(default=5, ge=1, description="Seconds to wait for a connection")
    db_statement_timeout_ms: int = Field(default=15000, ge=0)
    sqlite_busy_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How long a SQLite writer waits for the database lock",
    )

    session_cookie_name: str = Field(default=DEFAULT_SESSION_COOKIE_NAME)
    session_cookie_secure: bool = Field(
        default=False,
        description="Whether session cookies must be marked Secure",
    )
    session_cookie_samesite: Literal["lax", "strict"] = Field(
        default="strict",
        description="SameSite attribute applied to session cookies",
    )
    session_cookie_max_age_seconds: int = Field(default=DEFAULT_SESSION_MAX_AGE_SECONDS, ge=60)

    enable_test_login: bool = Field(
        default=False,
        description="Expose POST /auth/test-login (never honoured in production)",
    )
    seed_default_rooms: bool = Field(default=True)
    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"]
    )
    api_key_prefix_length: int = Field(default=DEFAULT_API_KEY_PREFIX_LENGTH, ge=4, le=16)
    metrics_enabled: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def test_login_allowed(self) -> bool:
        return self.enable_test_login and not self.is_production

    def get_database_url(self) -> str:
        return self.database_url.get_secret_value()

    @field_validator("session_cookie_samesite", mode="before")
    @classmethod
    def _normalize_samesite(cls, value: object) -> str:
        if value is None:
            return "strict"
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"lax", "strict"}:
                return normalized
        raise ValueError("SESSION_COOKIE_SAMESITE must be one of: lax, strict")

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                return json.loads(text)
            return [item.strip() for item in text.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _enforce_production_policy(self) -> "Settings":
        if self.is_production:
            if not self.session_cookie_secure:
                logger.info("Forcing Secure session cookies in production")
            self.session_cookie_secure = True
            if self.enable_test_login:
                logger.warning("ENABLE_TEST_LOGIN is set in production and will be ignored")
        return self


def load_settings(env_file: str | None = ".env") -> Settings:
    """Read ``.env`` (if present) into the process environment and build Settings."""
    if env_file:
        load_dotenv(env_file, override=False)
    return Settings()
