"""Access to the Settings object assembled by the application factory."""

from fastapi import Request

from ...core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
