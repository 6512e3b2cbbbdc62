import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import get_database_url, is_create_all_enabled


logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_engine_url: Optional[str] = None


def _sql_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()
    # built-in lower() only folds ASCII
    dbapi_connection.create_function("lower", 1, _sql_lower, deterministic=True)


def configure_sqlite(engine: Engine) -> None:
    """Install the per-connection SQLite hooks on ``engine`` (no-op elsewhere)."""
    if engine.url.get_backend_name() != "sqlite":
        return
    if not event.contains(engine, "connect", _configure_sqlite_connection):
        event.listen(engine, "connect", _configure_sqlite_connection)


def get_engine() -> Engine:
    """Return a SQLModel engine, creating it if needed."""
    global _engine, _engine_url
    database_url = get_database_url()
    if _engine is None or database_url != _engine_url:
        connect_args = {}
        engine_kwargs = {"echo": False}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            if database_url == "sqlite://":
                engine_kwargs["poolclass"] = StaticPool
        if _engine is not None:
            _engine.dispose()
        _engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)
        configure_sqlite(_engine)
        _engine_url = database_url
        logger.debug("Created database engine backend=%s", _engine.url.get_backend_name())
    return _engine


def init_db() -> None:
    """Optionally create all tables in dev environments.

    In production, rely on Alembic migrations. Enable this dev helper by setting
    SQLMODEL_CREATE_ALL=1 (or 'true').
    """
    # Register table metadata before create_all.
    from . import models  # noqa: F401

    database_url = get_database_url()
    engine = get_engine()
    if database_url == "sqlite://":
        # In-memory sqlite for tests/dev: reset schema each init for isolation
        SQLModel.metadata.drop_all(engine)
        SQLModel.metadata.create_all(engine)
        return
    if is_create_all_enabled():
        SQLModel.metadata.create_all(engine)


@contextmanager
def get_session_ctx(engine: Optional[Engine] = None) -> Iterator[Session]:
    with Session(engine if engine is not None else get_engine()) as session:
        yield session
