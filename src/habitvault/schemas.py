"""Validation models for backup documents read back during import."""

from __future__ import annotations

import json
import re
from datetime import date, datetime
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidBackupError

SUPPORTED_MAJOR_VERSION = 1
_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def _coerce_id(value: Any) -> Any:
    """Accept numeric identities from older exports; ids are compared as strings."""

    if isinstance(value, bool):
        raise ValueError("identity must be a string or integer")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and not value.strip():
        raise ValueError("identity must not be empty")
    return value


RecordId = Annotated[str, BeforeValidator(_coerce_id)]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)


class HabitRecord(_Record):
    id: RecordId
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[RecordId] = None
    frequency: str = "daily"
    target_days: list[int] = Field(default_factory=list)
    reminder_time: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @field_validator("frequency", mode="before")
    @classmethod
    def default_frequency(cls, value: Any) -> Any:
        return value or "daily"

    @field_validator("target_days", mode="before")
    @classmethod
    def default_target_days(cls, value: Any) -> Any:
        return [] if value is None else value


class CompletionRecord(_Record):
    id: Optional[RecordId] = None
    habit_id: RecordId
    completed_date: date
    notes: Optional[str] = None


class StreakRecord(_Record):
    habit_id: RecordId
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[date] = None


class CategoryRecord(_Record):
    id: RecordId
    name: str = Field(min_length=1)
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    is_default: bool = False


class SettingsRecord(_Record):
    # Entries stay loose; anything without a usable habitId is dropped on import.
    habitReminders: list[Any] = Field(default_factory=list)
    theme: Optional[str] = None
    language: Optional[str] = None

    @field_validator("habitReminders", mode="before")
    @classmethod
    def default_reminders(cls, value: Any) -> Any:
        return [] if value is None else value


class SnapshotDocument(_Record):
    """Parsed backup file. ``habits`` and ``completions`` must be present."""

    version: str
    exportDate: Optional[str] = None
    user: Optional[dict[str, Any]] = None
    profile: Optional[dict[str, Any]] = None
    habits: list[HabitRecord]
    completions: list[CompletionRecord]
    streaks: list[StreakRecord] = Field(default_factory=list)
    categories: list[CategoryRecord] = Field(default_factory=list)
    settings: Optional[SettingsRecord] = None

    @field_validator("streaks", "categories", mode="before")
    @classmethod
    def default_lists(cls, value: Any) -> Any:
        return [] if value is None else value


def check_version(version: Any) -> str:
    """Reject unversioned files and versions from an unknown major release."""

    if not isinstance(version, str) or not version.strip():
        raise InvalidBackupError("Invalid backup file format: missing version.")
    match = _VERSION_PATTERN.match(version.strip())
    if match is None or int(match.group(1)) != SUPPORTED_MAJOR_VERSION:
        raise InvalidBackupError(f"Unsupported backup version: {version!r}.")
    return version.strip()


def _describe(exc: ValidationError) -> str:
    first = exc.errors(include_url=False)[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "document"
    return f"{location}: {first.get('msg', 'invalid value')}"


def parse_snapshot(raw: Union[str, bytes]) -> SnapshotDocument:
    """Decode and validate a backup file's contents before anything is written."""

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise InvalidBackupError("Backup file is not valid JSON.") from exc

    if not isinstance(data, dict):
        raise InvalidBackupError("Invalid backup file format.")

    # The version gates how everything else is read.
    check_version(data.get("version"))

    try:
        return SnapshotDocument.model_validate(data)
    except ValidationError as exc:
        raise InvalidBackupError(f"Invalid backup file format ({_describe(exc)}).") from exc


__all__ = [
    "CategoryRecord",
    "CompletionRecord",
    "HabitRecord",
    "SUPPORTED_MAJOR_VERSION",
    "SettingsRecord",
    "SnapshotDocument",
    "StreakRecord",
    "check_version",
    "parse_snapshot",
]
