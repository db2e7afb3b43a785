"""Rebuild a backup into the current account with freshly issued identities.

The import runs phase by phase (categories, habits, completions, streaks,
local settings) against repositories that offer no cross-entity transaction.
Nothing is rolled back: a record that fails to write is skipped and reported
in its phase's ``PhaseResult`` while the remaining records carry on. References
to a habit that did not make it across are dropped rather than left dangling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence, TypeVar

from ..config import BaseConfig
from ..domain.store import AccountStore
from ..errors import AuthenticationRequired
from ..models.base import utcnow
from ..models.category import Category
from ..models.habit import Completion, Habit
from ..models.streak import Streak
from ..models.user import User
from ..schemas import CompletionRecord, SnapshotDocument
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = BaseConfig.DEFAULT_BATCH_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class SkippedItem:
    """A record left out of the import and why."""

    ref: str
    reason: str


@dataclass
class PhaseResult:
    """Outcome of one import phase: how many records went in, which did not."""

    name: str
    attempted: int = 0
    imported: int = 0
    skipped: list[SkippedItem] = field(default_factory=list)

    def skip(self, ref: str, reason: str) -> None:
        self.skipped.append(SkippedItem(ref=ref, reason=reason))

    @property
    def complete(self) -> bool:
        return not self.skipped


class IdMap:
    """Old (backup) identity to newly issued identity, for one entity kind.

    Filled while the owning phase creates records, then frozen so later
    phases can only read it.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._mapping: dict[str, str] = {}
        self._frozen = False

    def record(self, old_id: str, new_id: str) -> None:
        if self._frozen:
            raise RuntimeError(f"{self.kind} id map is frozen")
        if old_id in self._mapping:
            raise ValueError(f"{self.kind} {old_id} already mapped")
        self._mapping[old_id] = new_id

    def resolve(self, old_id: Optional[str]) -> Optional[str]:
        if old_id is None:
            return None
        return self._mapping.get(old_id)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def new_ids(self) -> set[str]:
        return set(self._mapping.values())

    def items(self):
        return self._mapping.items()

    def __contains__(self, old_id: object) -> bool:
        return old_id in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)


@dataclass
class ImportSummary:
    """Per-phase results plus the habit id map the import built."""

    categories: PhaseResult
    habits: PhaseResult
    completions: PhaseResult
    streaks: PhaseResult
    settings: PhaseResult
    habit_ids: IdMap

    @property
    def habits_imported(self) -> int:
        return self.habits.imported

    @property
    def completions_imported(self) -> int:
        return self.completions.imported

    @property
    def streaks_imported(self) -> int:
        return self.streaks.imported

    def phases(self) -> list[PhaseResult]:
        return [self.categories, self.habits, self.completions, self.streaks, self.settings]

    @property
    def complete(self) -> bool:
        return all(phase.complete for phase in self.phases())


@dataclass(frozen=True)
class PendingCompletion:
    """A completion on its way in, still carrying the habit id from the backup."""

    source_habit_id: str
    completion: Completion
    ref: str


def _chunks(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _completion_ref(record: CompletionRecord) -> str:
    return record.id or f"{record.habit_id}@{record.completed_date.isoformat()}"


class SnapshotImporter:
    """Writes one parsed backup into one account.

    Progress: 10 once started, 20 after categories, 40 after habits, 40-80
    across completion batches, 90 after streaks, 100 after settings.
    """

    def __init__(
        self,
        store: AccountStore,
        *,
        tracker: Optional[ProgressTracker] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store = store
        self.tracker = tracker or ProgressTracker()
        self.batch_size = batch_size

    def run(self, document: SnapshotDocument, user: Optional[User]) -> ImportSummary:
        if user is None or not user.id:
            raise AuthenticationRequired("You must be logged in to import data.")

        user_id = user.id
        logger.info(
            "Import started",
            extra={
                "user_id": user_id,
                "version": document.version,
                "habits": len(document.habits),
                "completions": len(document.completions),
            },
        )
        self.tracker.advance(10)

        category_ids = IdMap("category")
        categories = self._import_categories(document, user_id, category_ids)
        self.tracker.advance(20)

        habit_ids = IdMap("habit")
        habits = self._import_habits(document, user_id, habit_ids, category_ids)
        self.tracker.advance(40)

        completions = self._import_completions(document, user_id, habit_ids)
        self.tracker.advance(80)

        streaks = self._import_streaks(document, user_id, habit_ids)
        self.tracker.advance(90)

        settings = self._merge_settings(document, user_id, habit_ids)
        self.tracker.advance(100)

        summary = ImportSummary(
            categories=categories,
            habits=habits,
            completions=completions,
            streaks=streaks,
            settings=settings,
            habit_ids=habit_ids,
        )
        logger.info(
            "Import finished",
            extra={
                "user_id": user_id,
                **{
                    f"{phase.name}_imported": phase.imported
                    for phase in summary.phases()
                },
                "skipped": sum(len(phase.skipped) for phase in summary.phases()),
            },
        )
        return summary

    def _import_categories(
        self, document: SnapshotDocument, user_id: str, category_ids: IdMap
    ) -> PhaseResult:
        """Create missing categories; a same-named one already in the account is reused."""

        result = PhaseResult("categories")
        for record in document.categories:
            result.attempted += 1
            if record.id in category_ids:
                result.skip(record.id, "duplicate category id in backup")
                continue
            try:
                target = self.store.categories.get_by_name(record.name, user_id=user_id)
                if target is None:
                    target = self.store.categories.create(
                        Category(
                            name=record.name,
                            color=record.color,
                            icon=record.icon,
                            description=record.description,
                            is_default=record.is_default,
                        ),
                        user_id=user_id,
                    )
            except Exception as exc:
                logger.warning(
                    "Category import failed",
                    extra={"category_id": record.id, "error": str(exc)},
                )
                result.skip(record.id, str(exc))
                continue
            category_ids.record(record.id, target.id)
            result.imported += 1
        category_ids.freeze()
        return result

    def _import_habits(
        self,
        document: SnapshotDocument,
        user_id: str,
        habit_ids: IdMap,
        category_ids: IdMap,
    ) -> PhaseResult:
        result = PhaseResult("habits")
        for record in document.habits:
            result.attempted += 1
            if record.id in habit_ids:
                result.skip(record.id, "duplicate habit id in backup")
                continue
            habit = Habit(
                name=record.name,
                description=record.description,
                category=record.category,
                category_id=category_ids.resolve(record.category_id),
                frequency=record.frequency,
                target_days=list(record.target_days),
                reminder_time=record.reminder_time,
                color=record.color,
                icon=record.icon,
                is_active=record.is_active,
                created_at=record.created_at or utcnow(),
            )
            try:
                created = self.store.habits.create(habit, user_id=user_id)
            except Exception as exc:
                # Not retried; everything that points at this habit is dropped later.
                logger.warning(
                    "Habit import failed",
                    extra={"habit_id": record.id, "habit_name": record.name, "error": str(exc)},
                )
                result.skip(record.id, str(exc))
                continue
            habit_ids.record(record.id, created.id)
            result.imported += 1
        habit_ids.freeze()
        return result

    def _import_completions(
        self, document: SnapshotDocument, user_id: str, habit_ids: IdMap
    ) -> PhaseResult:
        result = PhaseResult("completions")
        pending: list[PendingCompletion] = []
        for record in document.completions:
            result.attempted += 1
            ref = _completion_ref(record)
            new_habit_id = habit_ids.resolve(record.habit_id)
            if new_habit_id is None:
                result.skip(ref, f"habit {record.habit_id} was not imported")
                continue
            pending.append(
                PendingCompletion(
                    source_habit_id=record.habit_id,
                    completion=Completion(
                        habit_id=new_habit_id,
                        completed_date=record.completed_date,
                        notes=record.notes,
                    ),
                    ref=ref,
                )
            )

        batches = list(_chunks(pending, self.batch_size))
        for index, batch in enumerate(batches, start=1):
            try:
                self.store.completions.create_many(
                    [item.completion for item in batch], user_id=user_id
                )
            except Exception as exc:
                logger.warning(
                    "Completion batch failed",
                    extra={"batch": index, "batches": len(batches), "size": len(batch), "error": str(exc)},
                )
                for item in batch:
                    result.skip(item.ref, f"batch {index} failed: {exc}")
            else:
                result.imported += len(batch)
            self.tracker.interpolate(40, 80, index, len(batches))
        return result

    def _import_streaks(
        self, document: SnapshotDocument, user_id: str, habit_ids: IdMap
    ) -> PhaseResult:
        """Upsert streak values exactly as exported; they are not recomputed."""

        result = PhaseResult("streaks")
        seen: set[str] = set()
        for record in document.streaks:
            result.attempted += 1
            if record.habit_id in seen:
                result.skip(record.habit_id, "duplicate streak for habit in backup")
                continue
            seen.add(record.habit_id)
            new_habit_id = habit_ids.resolve(record.habit_id)
            if new_habit_id is None:
                result.skip(record.habit_id, f"habit {record.habit_id} was not imported")
                continue
            try:
                self.store.streaks.upsert(
                    Streak(
                        habit_id=new_habit_id,
                        current_streak=record.current_streak,
                        longest_streak=record.longest_streak,
                        last_completed_date=record.last_completed_date,
                    ),
                    user_id=user_id,
                )
            except Exception as exc:
                logger.warning(
                    "Streak import failed",
                    extra={"habit_id": record.habit_id, "error": str(exc)},
                )
                result.skip(record.habit_id, str(exc))
                continue
            result.imported += 1
        return result

    def _merge_settings(
        self, document: SnapshotDocument, user_id: str, habit_ids: IdMap
    ) -> PhaseResult:
        result = PhaseResult("settings")
        if document.settings is None:
            return result

        remapped: list[dict[str, Any]] = []
        for index, entry in enumerate(document.settings.habitReminders):
            result.attempted += 1
            if not isinstance(entry, dict):
                result.skip(f"reminder {index}", "reminder entry is not an object")
                continue
            old_id = entry.get("habitId")
            new_id = habit_ids.resolve(str(old_id)) if old_id is not None else None
            if new_id is None:
                result.skip(str(old_id), "reminder references a habit that was not imported")
                continue
            remapped.append({**entry, "habitId": new_id})

        try:
            blob = dict(self.store.settings.get(user_id) or {})
            fresh = {entry["habitId"] for entry in remapped}
            kept = [
                entry
                for entry in blob.get("habitReminders") or []
                if not (isinstance(entry, dict) and entry.get("habitId") in fresh)
            ]
            blob["habitReminders"] = kept + remapped
            if document.settings.theme and not blob.get("theme"):
                blob["theme"] = document.settings.theme
            if document.settings.language and not blob.get("language"):
                blob["language"] = document.settings.language
            self.store.settings.put(user_id, blob)
        except Exception as exc:
            logger.warning("Settings merge failed", extra={"user_id": user_id, "error": str(exc)})
            for entry in remapped:
                result.skip(str(entry["habitId"]), f"settings not saved: {exc}")
            return result

        result.imported = len(remapped)
        return result


def import_snapshot(
    document: SnapshotDocument,
    user: Optional[User],
    store: AccountStore,
    *,
    tracker: Optional[ProgressTracker] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> ImportSummary:
    """Import a validated backup into ``user``'s account and report what went in."""

    importer = SnapshotImporter(store, tracker=tracker, batch_size=batch_size)
    return importer.run(document, user)


__all__ = [
    "IdMap",
    "ImportSummary",
    "PendingCompletion",
    "PhaseResult",
    "SkippedItem",
    "SnapshotImporter",
    "import_snapshot",
]
