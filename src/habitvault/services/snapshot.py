"""Point-in-time snapshot of one user's habit data."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from ..config import BaseConfig
from ..domain.store import AccountStore
from ..errors import AuthenticationRequired, ExportFailedError
from ..models.user import User
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = BaseConfig.SNAPSHOT_VERSION
DEFAULT_THEME = "system"
DEFAULT_LANGUAGE = "en"


@dataclass
class Snapshot:
    """Everything an account holds at export time, as JSON-ready records."""

    version: str
    export_date: str
    user: dict[str, Any]
    profile: dict[str, Any]
    habits: list[dict[str, Any]] = field(default_factory=list)
    completions: list[dict[str, Any]] = field(default_factory=list)
    streaks: list[dict[str, Any]] = field(default_factory=list)
    categories: list[dict[str, Any]] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)

    @property
    def export_day(self) -> str:
        """Calendar date of the export, used to name files."""
        return self.export_date.split("T", 1)[0]

    def counts(self) -> dict[str, int]:
        return {
            "habits": len(self.habits),
            "completions": len(self.completions),
            "streaks": len(self.streaks),
            "categories": len(self.categories),
        }

    def to_document(self) -> dict[str, Any]:
        """Return the versioned document layout written to backup files."""
        return {
            "version": self.version,
            "exportDate": self.export_date,
            "user": self.user,
            "profile": self.profile,
            "habits": self.habits,
            "completions": self.completions,
            "streaks": self.streaks,
            "categories": self.categories,
            "settings": self.settings,
        }


def _profile_of(user: User) -> dict[str, Any]:
    return {
        "display_name": user.display_name or None,
        "timezone": user.timezone or None,
        "reminder_enabled": bool(user.reminder_enabled),
        "reminder_time": user.reminder_time or None,
    }


def _local_settings(blob: Optional[dict[str, Any]]) -> dict[str, Any]:
    blob = blob or {}
    return {
        "habitReminders": list(blob.get("habitReminders") or []),
        "theme": blob.get("theme") or DEFAULT_THEME,
        "language": blob.get("language") or DEFAULT_LANGUAGE,
    }


def build_snapshot(
    user: Optional[User],
    store: AccountStore,
    *,
    tracker: Optional[ProgressTracker] = None,
    version: str = SNAPSHOT_VERSION,
    now: Optional[datetime] = None,
) -> Snapshot:
    """Read every collection the user owns and assemble a snapshot.

    Reads run habits, completions, streaks, categories, then local settings;
    progress moves through 10/30/50/70/90/100. Any failed read raises
    ``ExportFailedError`` and nothing partial is returned.
    """

    if user is None or not user.id:
        raise AuthenticationRequired("You must be logged in to export data.")

    tracker = tracker or ProgressTracker()
    user_id = user.id
    tracker.advance(10)

    try:
        habits = [h.model_dump(mode="json") for h in store.habits.list_all(user_id=user_id)]
        tracker.advance(30)

        completions = [c.model_dump(mode="json") for c in store.completions.list_all(user_id=user_id)]
        tracker.advance(50)

        streaks = [s.model_dump(mode="json") for s in store.streaks.list_all(user_id=user_id)]
        tracker.advance(70)

        categories = [c.model_dump(mode="json") for c in store.categories.list_all(user_id=user_id)]
        tracker.advance(90)

        settings = _local_settings(store.settings.get(user_id))
    except Exception as exc:
        logger.exception("Snapshot read failed", extra={"user_id": user_id})
        raise ExportFailedError(f"Could not read your data: {exc}") from exc

    stamp = now or datetime.now(timezone.utc)
    snapshot = Snapshot(
        version=version,
        export_date=stamp.isoformat(),
        user={"id": user_id, "email": user.email or ""},
        profile=_profile_of(user),
        habits=habits,
        completions=completions,
        streaks=streaks,
        categories=categories,
        settings=settings,
    )
    tracker.advance(100)
    logger.info("Snapshot built", extra={"user_id": user_id, **snapshot.counts()})
    return snapshot


__all__ = ["Snapshot", "SNAPSHOT_VERSION", "build_snapshot"]
