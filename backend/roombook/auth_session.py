"""Helpers for pulling a credential out of an inbound request."""

from __future__ import annotations

from typing import Mapping, Optional

from fastapi import Request

from .principal import ApiKeyCredential, Credential, SessionCredential


def extract_credential(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    cookie_name: str,
) -> Optional[Credential]:
    """
    Pick the credential to resolve, bearer header first.

    Any ``Authorization`` header selects the API key channel, even a malformed
    one (which yields an empty secret and is rejected). The cookie is only
    consulted when no ``Authorization`` header was sent.
    """
    auth_header = headers.get("authorization")
    if auth_header is not None:
        scheme, _, token = auth_header.strip().partition(" ")
        if scheme.lower() != "bearer":
            return ApiKeyCredential(secret="")
        return ApiKeyCredential(secret=token.strip())

    token = cookies.get(cookie_name)
    if token:
        return SessionCredential(token=token)
    return None


def credential_from_request(request: Request, cookie_name: str) -> Optional[Credential]:
    return extract_credential(request.headers, request.cookies, cookie_name)
