"""Bundle of the per-entity repositories one account is read from or written to."""

from __future__ import annotations

from dataclasses import dataclass

from .repositories import (
    CategoryRepository,
    CompletionRepository,
    HabitRepository,
    SettingsRepository,
    StreakRepository,
)


@dataclass(frozen=True)
class AccountStore:
    """Remote-store contract used by the snapshot builder and the importer.

    Each repository is called individually; nothing here spans entities in a
    single transaction.
    """

    habits: HabitRepository
    completions: CompletionRepository
    streaks: StreakRepository
    categories: CategoryRepository
    settings: SettingsRepository


__all__ = ["AccountStore"]
