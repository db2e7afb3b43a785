"""Completion repository protocol."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...models.habit import Completion


class CompletionRepository(Protocol):
    """Repository for habit completion records."""

    def list_all(self, *, user_id: str) -> list[Completion]:
        """List every completion the user has, newest first."""
        ...

    def list_for_habit(self, habit_id: str, *, user_id: str) -> list[Completion]:
        """List completions for one habit."""
        ...

    def create_many(self, completions: Sequence[Completion], *, user_id: str) -> list[Completion]:
        """Insert a batch of completions in one write; all or none are stored."""
        ...

    def count(self, *, user_id: str) -> int:
        """Count the user's completions."""
        ...
