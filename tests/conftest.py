"""Pytest configuration and shared fixtures for HabitLog tests.

Provides an isolated SQLite database per test, a session factory matching
what repositories expect, habit/entry factories and an in-memory repository
fake for service tests that should not touch SQL at all.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from factories import make_entry, make_habit
from habitlog.models import Habit, HabitEntry

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep config, logs and databases inside the test's temp directory."""
    monkeypatch.setenv("HABITLOG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("HABITLOG_DEV_MODE", "0")
    monkeypatch.delenv("HABITLOG_DATABASE_URL", raising=False)
    yield
    # Drop handlers bound to this test's streams and log files.
    root = logging.getLogger("habitlog")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session for arranging test data directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory returning transactional context managers."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(db_session):
    """Factory persisting habits through the test session."""

    def _create(name: str = "Exercise", **kwargs) -> Habit:
        habit = make_habit(name, **kwargs)
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create


@pytest.fixture
def entry_factory(db_session):
    """Factory persisting entries through the test session."""

    def _create(habit: Habit, day: date, completed: bool = True) -> HabitEntry:
        entry = make_entry(habit, day, completed)
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _create
