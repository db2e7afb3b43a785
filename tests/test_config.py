"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from habitvault.config import BaseConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "HABITVAULT_DATABASE_URL",
        "HABITVAULT_DEV_MODE",
        "HABITVAULT_EXPORT_DIR",
        "HABITVAULT_IMPORT_BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_live_under_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITVAULT_DATA_DIR", str(tmp_path / "vault"))
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "vault").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'habitvault.db'}"
    assert config.EXPORT_DIR == config.DATA_DIR / "exports"
    assert config.IMPORT_BATCH_SIZE == 100
    assert config.DEV_MODE is True
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITVAULT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITVAULT_DATABASE_URL", "postgresql://localhost/habits")
    monkeypatch.setenv("HABITVAULT_DEV_MODE", "off")
    monkeypatch.setenv("HABITVAULT_EXPORT_DIR", str(tmp_path / "backups"))
    monkeypatch.setenv("HABITVAULT_IMPORT_BATCH_SIZE", "250")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://localhost/habits"
    assert config.DEV_MODE is False
    assert config.EXPORT_DIR == Path(tmp_path / "backups")
    assert config.IMPORT_BATCH_SIZE == 250
    assert config.sqlalchemy_engine_options() == {}


@pytest.mark.parametrize("value", ["0", "-5", "many"])
def test_bad_batch_size_is_rejected(tmp_path, monkeypatch, value):
    monkeypatch.setenv("HABITVAULT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITVAULT_IMPORT_BATCH_SIZE", value)
    with pytest.raises(ValueError, match="HABITVAULT_IMPORT_BATCH_SIZE"):
        BaseConfig()
