"""Streak repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.streak import Streak


class StreakRepository(Protocol):
    """Repository for per-habit streak aggregates."""

    def get(self, habit_id: str, *, user_id: str) -> Optional[Streak]:
        ...

    def list_all(self, *, user_id: str) -> list[Streak]:
        ...

    def upsert(self, streak: Streak, *, user_id: str) -> Streak:
        """Create or replace the streak for ``streak.habit_id``."""
        ...
