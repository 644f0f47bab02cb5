"""Tests for configuration and database bootstrap."""

from __future__ import annotations

from sqlalchemy import text

from habitlog.config import BaseConfig, TestConfig
from habitlog.infra.database import bootstrap_database
from habitlog.infra.repositories import SQLModelHabitRepository
from habitlog.models import Habit


def test_defaults_use_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLOG_DATA_DIR", str(tmp_path / "store"))

    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "store").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'habitlog.db'}"
    assert config.DEV_MODE is False  # set by the test fixture


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLOG_DATABASE_URL", "sqlite:///custom.db")
    monkeypatch.setenv("HABITLOG_DEV_MODE", "yes")
    monkeypatch.setenv("HABITLOG_LOG_LEVEL", "debug")

    config = BaseConfig()

    assert config.DATABASE_URL == "sqlite:///custom.db"
    assert config.DEV_MODE is True
    assert config.LOG_LEVEL == "DEBUG"


def test_explicit_url_wins_over_environment(monkeypatch):
    monkeypatch.setenv("HABITLOG_DATABASE_URL", "sqlite:///env.db")
    assert BaseConfig(database_url="sqlite:///arg.db").DATABASE_URL == "sqlite:///arg.db"


def test_sqlite_engine_options():
    options = BaseConfig(database_url="sqlite:///x.db").sqlalchemy_engine_options()
    assert options["connect_args"] == {"check_same_thread": False}
    assert BaseConfig(database_url="postgresql://localhost/db").sqlalchemy_engine_options() == {}


def test_bootstrap_in_memory_database_enables_foreign_keys():
    engine, session_factory = bootstrap_database(TestConfig())

    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    repo = SQLModelHabitRepository(session_factory)
    saved = repo.save_habit(Habit(name="Read"))
    assert repo.get_habit(saved.id) is not None
    engine.dispose()
