"""Database infrastructure: engine, schema and session factories."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


def _apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    """Run the configured PRAGMA statements on every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record):  # pragma: no cover - driver callback
        cursor = dbapi_connection.cursor()
        try:
            for key, value in pragmas.items():
                cursor.execute(f"PRAGMA {key}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        _apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def init_database(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register with SQLModel metadata
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready", extra={"url": str(engine.url)})


def create_session_factory(engine: Engine):
    """Create a session factory returning transactional context managers."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, object]:
    """Build engine and session factory and make sure the schema exists.

    Used by the CLI and tests to share engine options and session setup.
    Returns (engine, session_factory).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
