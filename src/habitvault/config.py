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

    APP_NAME = "HabitVault"
    DB_FILENAME = "habitvault.db"
    SNAPSHOT_VERSION = "1.0.0"
    DEFAULT_BATCH_SIZE = 100

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITVAULT_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITVAULT_DATABASE_URL", self._build_sqlite_url())
        self.EXPORT_DIR = Path(
            os.getenv("HABITVAULT_EXPORT_DIR", str(self.DATA_DIR / "exports"))
        ).expanduser()
        self.IMPORT_BATCH_SIZE = _env_int("HABITVAULT_IMPORT_BATCH_SIZE", self.DEFAULT_BATCH_SIZE)
        if self.IMPORT_BATCH_SIZE < 1:
            raise ValueError("HABITVAULT_IMPORT_BATCH_SIZE must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file, logs and exports live."""

        data_root = os.getenv("HABITVAULT_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to per-user storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False
