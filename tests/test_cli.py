"""Tests for the click command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from habitvault.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITVAULT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("HABITVAULT_DATABASE_URL", raising=False)
    monkeypatch.delenv("HABITVAULT_EXPORT_DIR", raising=False)
    monkeypatch.setenv("HABITVAULT_DEV_MODE", "false")
    return CliRunner()


def _invoke(runner, *args):
    return runner.invoke(main, list(args), catch_exceptions=False)


def test_create_user_and_duplicate(runner):
    first = _invoke(runner, "create-user", "cli@example.com", "--display-name", "Cli")
    assert first.exit_code == 0
    assert "Created account cli@example.com" in first.output

    again = _invoke(runner, "create-user", "cli@example.com")
    assert again.exit_code != 0
    assert "already exists" in again.output


def test_export_and_import_between_accounts(runner, tmp_path):
    _invoke(runner, "create-user", "src@example.com")
    _invoke(runner, "create-user", "dst@example.com")

    out_dir = tmp_path / "exports"
    exported = _invoke(runner, "export", "--email", "src@example.com", "--output", str(out_dir))
    assert exported.exit_code == 0
    assert "Export Successful" in exported.output
    backup = next(out_dir.glob("habit-tracker-backup-*.json"))
    assert json.loads(backup.read_text())["version"] == "1.0.0"

    imported = _invoke(runner, "import", str(backup), "--email", "dst@example.com")
    assert imported.exit_code == 0
    assert "Import Successful" in imported.output
    assert "habits: 0/0 imported" in imported.output


def test_csv_export(runner, tmp_path):
    _invoke(runner, "create-user", "csv@example.com")
    result = _invoke(runner, "export", "--email", "csv@example.com", "--format", "csv", "--output", str(tmp_path))
    assert result.exit_code == 0
    assert sorted(p.name.split("-")[0] for p in tmp_path.glob("*.csv")) == ["completions", "habits"]


def test_unknown_account_is_refused(runner, tmp_path):
    result = _invoke(runner, "export", "--email", "ghost@example.com", "--output", str(tmp_path))
    assert result.exit_code == 1
    assert "You must be logged in to export data." in result.output


def test_import_of_unsupported_version_fails(runner, tmp_path):
    _invoke(runner, "create-user", "dst@example.com")
    backup = tmp_path / "old.json"
    backup.write_text(json.dumps({"version": "2.0.0", "habits": [], "completions": []}))

    result = _invoke(runner, "import", str(backup), "--email", "dst@example.com")

    assert result.exit_code == 1
    assert "Import Failed" in result.output


def test_stats_reports_last_backup(runner, tmp_path):
    _invoke(runner, "create-user", "stats@example.com")
    before = _invoke(runner, "stats", "--email", "stats@example.com")
    assert "Last backup: never" in before.output

    _invoke(runner, "export", "--email", "stats@example.com", "--output", str(tmp_path))
    after = _invoke(runner, "stats", "--email", "stats@example.com")
    assert "Habits: 0" in after.output
    assert "Last backup: never" not in after.output
