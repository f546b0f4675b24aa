"""Cookie utilities for consistent session handling."""

from __future__ import annotations

from fastapi import Response

from roombook.core.config import Settings


def set_session_cookie(response: Response, settings: Settings, token: str) -> str:
    """Write the HTTP-only session cookie; returns the cookie name used."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_cookie_max_age_seconds,
        httponly=True,
        samesite=settings.session_cookie_samesite,
        secure=bool(settings.session_cookie_secure),
        path="/",
    )
    return settings.session_cookie_name


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite=settings.session_cookie_samesite,
        secure=bool(settings.session_cookie_secure),
    )
