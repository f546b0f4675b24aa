# backend/roombook/main.py
"""Application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, load_settings
from .core.constants import API_PREFIX, API_VERSION, BRAND_NAME
from .database import build_engine, build_session_factory, init_db
from .errors import register_error_handlers
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import api_keys as api_keys_v1
from .routes.v1 import auth as auth_v1
from .routes.v1 import bookings as bookings_v1
from .routes.v1 import health as health_v1
from .routes.v1 import rooms as rooms_v1
from .routes.v1 import users as users_v1
from .services.identity_service import IdentityProvider
from .services.room_service import RoomService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    settings: Settings = app.state.settings
    logger.info(f"{BRAND_NAME} API starting up (environment={settings.environment})")
    yield
    logger.info(f"{BRAND_NAME} API shutting down")
    app.state.engine.dispose()


def _seed_rooms(app: FastAPI) -> None:
    db = app.state.session_factory()
    try:
        RoomService(db).seed_rooms()
    finally:
        db.close()


def create_app(
    settings: Optional[Settings] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """
    Build the API.

    ``settings`` defaults to the environment (plus ``.env``). The identity
    provider performs the OAuth code exchange; without one, /auth/callback
    answers 500.
    """
    settings = settings or load_settings()
    configure_logging(settings)

    app = FastAPI(
        title=f"{BRAND_NAME} API",
        version=API_VERSION,
        lifespan=app_lifespan,
    )
    app.state.settings = settings
    app.state.identity_provider = identity_provider
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    init_db(app.state.engine)
    if settings.seed_default_rooms:
        _seed_rooms(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    register_error_handlers(app)

    api_v1 = APIRouter(prefix=API_PREFIX)
    api_v1.include_router(health_v1.router)
    api_v1.include_router(rooms_v1.router, prefix="/rooms")
    api_v1.include_router(auth_v1.router, prefix="/auth")
    api_v1.include_router(bookings_v1.router, prefix="/bookings")
    api_v1.include_router(users_v1.router, prefix="/users")
    api_v1.include_router(api_keys_v1.router, prefix="/api-keys")
    app.include_router(api_v1)

    if settings.metrics_enabled:

        @app.get("/metrics", include_in_schema=False)
        async def metrics() -> Response:
            return Response(
                content=prometheus_metrics.get_metrics(),
                media_type=prometheus_metrics.get_content_type(),
            )

    return app
