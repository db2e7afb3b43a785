"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def get_by_id(self, habit_id: str, *, user_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: str, include_inactive: bool = True) -> list[Habit]:
        """List the user's habits."""
        ...

    def create(self, habit: Habit, *, user_id: str) -> Habit:
        """Create a habit; the store issues its identity."""
        ...

    def count(self, *, user_id: str) -> int:
        """Count the user's habits, active or not."""
        ...
