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


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Habitoid"
    DB_FILENAME = "habitoid.db"
    TESTING = False

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.SECRET_KEY = os.getenv("HABITOID_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("HABITOID_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DATABASE_URL = os.getenv("HABITOID_DATABASE_URL", self._build_sqlite_url())

        # Rewards
        self.BASE_POINTS = _env_int("HABITOID_BASE_POINTS", 10)
        self.SYMMETRIC_POINTS = _env_bool("HABITOID_SYMMETRIC_POINTS", default=False)

        # Day-close job
        self.SCHEDULER_ENABLED = _env_bool("HABITOID_SCHEDULER_ENABLED", default=False)
        self.DAY_CLOSE_HOUR = _env_int("HABITOID_DAY_CLOSE_HOUR", 0)
        self.DAY_CLOSE_MINUTE = _env_int("HABITOID_DAY_CLOSE_MINUTE", 5)

        # Insight generation
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or None
        self.OPENAI_MODEL = os.getenv("HABITOID_OPENAI_MODEL", "gpt-4o-mini")
        self.OPENAI_TIMEOUT = _env_int("HABITOID_OPENAI_TIMEOUT", 20)

        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITOID_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self, data_dir: Path | str | None) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = data_dir or os.getenv("HABITOID_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration for the test suite; callers point DATA_DIR at a temp dir."""

    TESTING = True

    def __init__(self, data_dir: Path | str | None = None) -> None:
        super().__init__(data_dir)
        self.DATABASE_URL = self._build_sqlite_url()
        self.DEV_MODE = True
        self.SECRET_KEY = "test-secret"
        self.SYMMETRIC_POINTS = False
        self.OPENAI_API_KEY = None
        self.SCHEDULER_ENABLED = False
