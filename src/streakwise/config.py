"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .domain.recurrence import EmptyWeekdaySetPolicy

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

    APP_NAME = "Streakwise"
    DB_FILENAME = "streakwise.db"
    LOG_FILENAME = "streakwise.log"

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("STREAKWISE_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("STREAKWISE_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_OWNER = os.getenv("STREAKWISE_DEFAULT_OWNER", "local")
        self.SUMMARY_WINDOW_DAYS = _env_int("STREAKWISE_SUMMARY_WINDOW_DAYS", 90)
        if self.SUMMARY_WINDOW_DAYS <= 0:
            raise ValueError("STREAKWISE_SUMMARY_WINDOW_DAYS must be positive.")
        raw_policy = os.getenv("STREAKWISE_EMPTY_WEEKDAYS", EmptyWeekdaySetPolicy.EVERY_DAY.value)
        try:
            self.EMPTY_WEEKDAY_POLICY = EmptyWeekdaySetPolicy(raw_policy.strip().lower())
        except ValueError as exc:
            raise ValueError(
                f"STREAKWISE_EMPTY_WEEKDAYS must be one of "
                f"{[p.value for p in EmptyWeekdaySetPolicy]}, got {raw_policy!r}"
            ) from exc

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("STREAKWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class TestConfig(BaseConfig):
    """In-memory database, no dev console noise."""

    __test__ = False  # not a pytest class
    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        # One shared connection so every session sees the same in-memory DB
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
