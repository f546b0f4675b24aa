"""Helpers for minting and hashing API keys and session tokens."""

from __future__ import annotations

import hashlib
import re
import secrets

from .constants import API_KEY_SECRET_BYTES, API_KEY_SECRET_LENGTH, SESSION_TOKEN_BYTES

_API_KEY_PATTERN = re.compile(rf"^[0-9a-f]{{{API_KEY_SECRET_LENGTH}}}$")


def generate_api_key_secret() -> str:
    """Return a fresh 64-character lowercase hex secret."""
    return secrets.token_hex(API_KEY_SECRET_BYTES)


def hash_api_key(secret: str) -> str:
    """One-way SHA-256 digest of an API key secret (hex encoded)."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def looks_like_api_key(secret: str) -> bool:
    return bool(_API_KEY_PATTERN.match(secret))


def generate_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
