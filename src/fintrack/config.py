"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import timedelta
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

    APP_NAME = "FinTrack"
    DB_FILENAME = "fintrack.db"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("FINTRACK_SECRET_KEY", "replace-me")
        self.JWT_SECRET_KEY = os.getenv("FINTRACK_JWT_SECRET_KEY", self.SECRET_KEY)
        self.TOKEN_TTL_HOURS = int(os.getenv("FINTRACK_TOKEN_TTL_HOURS", "24"))
        self.JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=self.TOKEN_TTL_HOURS)
        self.JWT_TOKEN_LOCATION = ["headers"]
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("FINTRACK_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("FINTRACK_DATABASE_URL", self._build_sqlite_url())
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("FINTRACK_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("FINTRACK_DATA_DIR", "instance")
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
    """Configuration used by the test-suite; never touches the dev database."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        # Keep hashing and token handling real but make the database explicit.
        self.DATABASE_URL = os.getenv(
            "FINTRACK_DATABASE_URL", f"sqlite:///{self.DATA_DIR / 'fintrack-test.db'}"
        )
