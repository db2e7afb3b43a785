"""Encode snapshots as a versioned JSON backup or as spreadsheet-friendly CSVs."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .snapshot import Snapshot

HABIT_COLUMNS = [
    "ID",
    "Name",
    "Description",
    "Category",
    "Frequency",
    "Color",
    "Created At",
    "Current Streak",
    "Longest Streak",
]
COMPLETION_COLUMNS = ["Habit ID", "Habit Name", "Completed Date", "Notes"]
UNKNOWN_HABIT = "Unknown"


@dataclass(frozen=True)
class EncodedArtifact:
    """Bytes ready to be written, plus the suggested file name."""

    filename: str
    content: bytes
    media_type: str


def _serialize_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _render_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_serialize_value(value) for value in row])
    return buffer.getvalue().encode("utf-8")


def encode_json(snapshot: Snapshot) -> EncodedArtifact:
    """Full-fidelity backup document; the only encoding import accepts."""

    payload = json.dumps(snapshot.to_document(), indent=2, ensure_ascii=False)
    return EncodedArtifact(
        filename=f"habit-tracker-backup-{snapshot.export_day}.json",
        content=payload.encode("utf-8"),
        media_type="application/json",
    )


def encode_habits_csv(snapshot: Snapshot) -> EncodedArtifact:
    streaks = {s.get("habit_id"): s for s in snapshot.streaks}
    rows = []
    for habit in snapshot.habits:
        streak = streaks.get(habit.get("id"), {})
        rows.append(
            [
                habit.get("id"),
                habit.get("name"),
                habit.get("description") or "",
                habit.get("category"),
                habit.get("frequency"),
                habit.get("color"),
                habit.get("created_at"),
                streak.get("current_streak") or 0,
                streak.get("longest_streak") or 0,
            ]
        )
    return EncodedArtifact(
        filename=f"habits-{snapshot.export_day}.csv",
        content=_render_csv(HABIT_COLUMNS, rows),
        media_type="text/csv",
    )


def encode_completions_csv(snapshot: Snapshot) -> EncodedArtifact:
    names = {h.get("id"): h.get("name") for h in snapshot.habits}
    rows = [
        [
            completion.get("habit_id"),
            names.get(completion.get("habit_id")) or UNKNOWN_HABIT,
            completion.get("completed_date"),
            completion.get("notes") or "",
        ]
        for completion in snapshot.completions
    ]
    return EncodedArtifact(
        filename=f"completions-{snapshot.export_day}.csv",
        content=_render_csv(COMPLETION_COLUMNS, rows),
        media_type="text/csv",
    )


def encode_csv(snapshot: Snapshot) -> list[EncodedArtifact]:
    """Flattened habits and completions tables. Export-only: these never re-import."""

    return [encode_habits_csv(snapshot), encode_completions_csv(snapshot)]


__all__ = [
    "COMPLETION_COLUMNS",
    "EncodedArtifact",
    "HABIT_COLUMNS",
    "encode_completions_csv",
    "encode_csv",
    "encode_habits_csv",
    "encode_json",
]
