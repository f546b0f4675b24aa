# backend/roombook/database/__init__.py
"""
Engine and session construction.

Engines are built from an explicit ``Settings`` object rather than at import
time so the application factory (and each test) owns its own connection pool.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from roombook.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _build_engine_kwargs(db_url: str, settings: Settings) -> dict[str, Any]:
    backend = make_url(db_url).get_backend_name()
    if backend == "sqlite":
        kwargs: dict[str, Any] = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.sqlite_busy_timeout_seconds,
            },
        }
        if _is_memory_sqlite(db_url):
            kwargs["poolclass"] = StaticPool
        return kwargs

    connect_args: dict[str, Any] = {"application_name": "roombook"}
    if backend == "postgresql" and settings.db_statement_timeout_ms:
        connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "connect_args": connect_args,
    }


def _install_sqlite_locking(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock up front.

    pysqlite defers BEGIN until the first write, which lets two writers both
    read "no conflict" before either inserts. Issuing BEGIN IMMEDIATE ourselves
    serializes writers for the whole check-then-insert.
    """

    @event.listens_for(engine, "connect")
    def _sqlite_on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        connection_record.info["connect_time"] = datetime.now()

    @event.listens_for(engine, "begin")
    def _sqlite_on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine described by ``settings``."""
    db_url = settings.get_database_url()
    engine = create_engine(db_url, **_build_engine_kwargs(db_url, settings))

    if engine.dialect.name == "sqlite":
        _install_sqlite_locking(engine)
    else:

        @event.listens_for(engine, "connect")
        def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
            connection_record.info["connect_time"] = datetime.now()
            logger.debug("Database connection established")

    logger.info("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on error."""
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """Create all tables (and dialect-specific constraints) if missing."""
    # Import models so they register with Base.metadata
    from roombook import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
