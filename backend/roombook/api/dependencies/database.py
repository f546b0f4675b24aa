# backend/roombook/api/dependencies/database.py
"""
Database-related dependencies.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from ...database import session_scope


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Get database session dependency.

    One session per request, committed when the handler succeeds and rolled
    back when it raises.
    """
    yield from session_scope(request.app.state.session_factory)
