"""User-facing export/import operations built on the snapshot engine.

Every operation returns an ``OperationResult`` carrying a ``Notification``
for the caller to show. Errors from reading the account, parsing the backup
file or touching the filesystem end here as a single failure notification;
partial write failures during import are counted in the summary instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from ..config import BaseConfig
from ..domain.store import AccountStore
from ..errors import BackupError
from ..models.user import User
from ..schemas import parse_snapshot
from .progress import ProgressTracker
from .restore import ImportSummary, import_snapshot
from .serializers import encode_csv, encode_json
from .snapshot import build_snapshot
from .snapshot_writer import write_artifact, write_artifacts

logger = logging.getLogger(__name__)

LAST_BACKUP_KEY = "lastBackup"


@dataclass(frozen=True)
class Notification:
    """Toast-style message for the user."""

    title: str
    description: str
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


@dataclass
class OperationResult:
    ok: bool
    notification: Notification
    paths: list[Path] = field(default_factory=list)
    summary: Optional[ImportSummary] = None


@dataclass(frozen=True)
class BackupStats:
    habits: int
    completions: int
    last_backup: Optional[str]


def _failure(title: str, description: str) -> OperationResult:
    return OperationResult(ok=False, notification=Notification(title, description, "destructive"))


def _refuse(action: str) -> OperationResult:
    return _failure("Error", f"You must be logged in to {action} data.")


_PHASE_LABELS = {"settings": "reminders"}


def _skip_note(summary: ImportSummary) -> str:
    parts = []
    for phase in summary.phases():
        if phase.skipped:
            parts.append(f"{len(phase.skipped)} {_PHASE_LABELS.get(phase.name, phase.name)}")
    if not parts:
        return ""
    return f" Skipped {', '.join(parts)}."


class BackupService:
    """Export, import and backup bookkeeping for the signed-in user.

    ``export_progress`` and ``import_progress`` are side channels the caller
    can watch; ``is_exporting``/``is_importing`` are true while a run is in
    flight. Starting a second run concurrently is the caller's to prevent.
    """

    def __init__(
        self,
        store: AccountStore,
        *,
        config: Optional[BaseConfig] = None,
        batch_size: Optional[int] = None,
    ) -> None:
        self.store = store
        self.config = config or BaseConfig()
        self.batch_size = self.config.IMPORT_BATCH_SIZE if batch_size is None else batch_size
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.export_progress = ProgressTracker()
        self.import_progress = ProgressTracker()
        self.is_exporting = False
        self.is_importing = False

    def _export_dir(self, output_dir: Optional[Path]) -> Path:
        if output_dir is None:
            return Path(self.config.EXPORT_DIR)
        return output_dir if isinstance(output_dir, Path) else Path(output_dir)

    def export_json(self, user: Optional[User], output_dir: Optional[Path] = None) -> OperationResult:
        """Write the full backup document for ``user``."""

        if user is None:
            return _refuse("export")

        self.is_exporting = True
        self.export_progress.reset()
        try:
            snapshot = build_snapshot(
                user,
                self.store,
                tracker=self.export_progress,
                version=self.config.SNAPSHOT_VERSION,
            )
            path = write_artifact(encode_json(snapshot), self._export_dir(output_dir))
        except (BackupError, OSError) as exc:
            logger.exception("JSON export failed", extra={"user_id": user.id})
            return _failure("Export Failed", f"Failed to export your data: {exc}")
        finally:
            self.is_exporting = False

        self.record_backup(user)
        counts = snapshot.counts()
        return OperationResult(
            ok=True,
            notification=Notification(
                "Export Successful",
                f"Exported {counts['habits']} habits, {counts['completions']} completions, "
                "and all settings.",
            ),
            paths=[path],
        )

    def export_csv(self, user: Optional[User], output_dir: Optional[Path] = None) -> OperationResult:
        """Write habits and completions as two spreadsheet files."""

        if user is None:
            return _refuse("export")

        self.is_exporting = True
        self.export_progress.reset()
        try:
            snapshot = build_snapshot(
                user,
                self.store,
                tracker=self.export_progress,
                version=self.config.SNAPSHOT_VERSION,
            )
            report = write_artifacts(encode_csv(snapshot), self._export_dir(output_dir))
        except BackupError as exc:
            logger.exception("CSV export failed", extra={"user_id": user.id})
            return _failure("Export Failed", f"Failed to export your data: {exc}")
        finally:
            self.is_exporting = False

        if not report.written:
            reasons = "; ".join(f"{name}: {reason}" for name, reason in report.failed)
            return _failure("Export Failed", f"Failed to write export files ({reasons}).")

        self.record_backup(user)
        names = " and ".join(path.name for path in report.written)
        if report.failed:
            missing = ", ".join(name for name, _ in report.failed)
            return OperationResult(
                ok=True,
                notification=Notification(
                    "Export Incomplete", f"Saved {names}; could not write {missing}.", "destructive"
                ),
                paths=report.written,
            )
        return OperationResult(
            ok=True,
            notification=Notification("Export Successful", f"Saved {names}."),
            paths=report.written,
        )

    def import_json(self, user: Optional[User], source: Union[Path, str]) -> OperationResult:
        """Read a JSON backup from ``source`` and rebuild it in ``user``'s account."""

        if user is None:
            return _refuse("import")

        self.is_importing = True
        self.import_progress.reset()
        try:
            raw = Path(source).read_bytes()
            document = parse_snapshot(raw)
            summary = import_snapshot(
                document,
                user,
                self.store,
                tracker=self.import_progress,
                batch_size=self.batch_size,
            )
        except (BackupError, OSError) as exc:
            logger.exception("Import failed", extra={"user_id": user.id, "source": str(source)})
            return _failure("Import Failed", str(exc) or "Failed to import data. Please check the file format.")
        finally:
            self.is_importing = False

        return OperationResult(
            ok=True,
            notification=Notification(
                "Import Successful",
                f"Imported {summary.habits_imported} habits and "
                f"{summary.completions_imported} completions.{_skip_note(summary)}",
            ),
            summary=summary,
        )

    def backup_stats(self, user: Optional[User]) -> Optional[BackupStats]:
        """Counts shown next to the backup controls; ``None`` when unavailable."""

        if user is None:
            return None
        try:
            blob = self.store.settings.get(user.id) or {}
            return BackupStats(
                habits=self.store.habits.count(user_id=user.id),
                completions=self.store.completions.count(user_id=user.id),
                last_backup=blob.get(LAST_BACKUP_KEY),
            )
        except Exception:
            logger.exception("Could not load backup stats", extra={"user_id": user.id})
            return None

    def record_backup(self, user: Optional[User], when: Optional[datetime] = None) -> None:
        """Remember when the user last exported. Failures are logged, not raised."""

        if user is None:
            return
        stamp = (when or datetime.now(timezone.utc)).isoformat()
        try:
            blob = dict(self.store.settings.get(user.id) or {})
            blob[LAST_BACKUP_KEY] = stamp
            self.store.settings.put(user.id, blob)
        except Exception:
            logger.exception("Could not record backup time", extra={"user_id": user.id})


__all__ = [
    "BackupService",
    "BackupStats",
    "LAST_BACKUP_KEY",
    "Notification",
    "OperationResult",
]
