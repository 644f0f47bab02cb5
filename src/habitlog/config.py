"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitLog"
    DB_FILENAME = "habitlog.db"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self, database_url: str | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITLOG_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("HABITLOG_LOG_LEVEL", "INFO").upper()
        self.DATABASE_URL = database_url or os.getenv(
            "HABITLOG_DATABASE_URL", self._build_sqlite_url()
        )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITLOG_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to the user's home directory.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class TestConfig(BaseConfig):
    """In-memory configuration used by the test-suite."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, database_url: str | None = None) -> None:
        super().__init__(database_url=database_url or "sqlite://")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        options = super().sqlalchemy_engine_options()
        if self.DATABASE_URL == "sqlite://":
            # One shared connection so every session sees the same memory DB.
            options["poolclass"] = StaticPool
        return options
