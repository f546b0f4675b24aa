# backend/tests/conftest.py
"""
Shared fixtures.

Every test gets its own SQLite database file under ``tmp_path`` and an
explicit ``Settings`` object; nothing is read from the developer's
environment or ``.env``.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, ContextManager, Dict, Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker

from roombook.core.config import Settings
from roombook.core.exceptions import UnauthorizedException
from roombook.database import build_engine, build_session_factory, init_db
from roombook.main import create_app
from roombook.models.room import Room
from roombook.models.user import User
from roombook.services.identity_service import IdentityService, ProviderIdentity
from roombook.services.room_service import RoomService

VALID_CODE = "good-code"


class FakeIdentityProvider:
    """Accepts a single authorization code and returns a fixed identity."""

    def __init__(self, identity: ProviderIdentity):
        self.identity = identity
        self.calls: list[str] = []

    def exchange_code(self, code: str) -> ProviderIdentity:
        self.calls.append(code)
        if code != VALID_CODE:
            raise UnauthorizedException("Authorization code rejected")
        return self.identity


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite:///{tmp_path / 'roombook.db'}",
        enable_test_login=True,
        seed_default_rooms=True,
        sqlite_busy_timeout_seconds=30,
    )


@pytest.fixture
def engine(settings: Settings):
    engine = build_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def rooms(db: Session) -> Dict[str, Room]:
    RoomService(db).seed_rooms()
    result = {room.name: room for room in RoomService(db).list_rooms()}
    db.commit()
    return result


@pytest.fixture
def phone_room(rooms: Dict[str, Room]) -> Room:
    return rooms["Green Phone Room"]


@pytest.fixture
def lovelace(rooms: Dict[str, Room]) -> Room:
    return rooms["Lovelace"]


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(email: str = "ada@example.com", name: str = "Ada") -> User:
        user = IdentityService(db).upsert_from_provider(
            ProviderIdentity(external_id=f"ext-{email}", email=email, name=name)
        )
        db.commit()
        return user

    return _make


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider(
        ProviderIdentity(external_id="rc-1001", email="grace@example.com", name="Grace")
    )


@pytest.fixture
def app(settings: Settings, identity_provider: FakeIdentityProvider):
    application = create_app(settings, identity_provider=identity_provider)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login(app) -> Callable[[str], TestClient]:
    """Return a factory producing a TestClient signed in as the given email."""

    def _login(email: str) -> TestClient:
        signed_in = TestClient(app)
        response = signed_in.post("/api/v1/auth/test-login", json={"email": email})
        assert response.status_code == 200, response.text
        return signed_in

    return _login


@pytest.fixture
def app_session(app) -> Callable[[], ContextManager[Session]]:
    """Short-lived session on the app's engine; closed before the next request."""

    @contextmanager
    def _open() -> Iterator[Session]:
        session = app.state.session_factory()
        try:
            yield session
        finally:
            session.rollback()
            session.close()

    return _open
