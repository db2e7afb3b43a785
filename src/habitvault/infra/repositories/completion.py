"""SQLModel implementation of Completion repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.habit import Completion


class SQLModelCompletionRepository:
    """SQLModel-based completion repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def list_all(self, *, user_id: str) -> list[Completion]:
        """List every completion, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.user_id == user_id)
                .order_by(Completion.completed_date.desc(), Completion.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_habit(self, habit_id: str, *, user_id: str) -> list[Completion]:
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
                .order_by(Completion.completed_date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create_many(self, completions: Sequence[Completion], *, user_id: str) -> list[Completion]:
        """Insert a batch in a single commit; a failure rolls back the whole batch."""
        if not completions:
            return []
        with self.session_factory() as session:
            for completion in completions:
                completion.user_id = user_id
            session.add_all(completions)
            session.commit()
            for completion in completions:
                session.refresh(completion)
            session.expunge_all()
            return list(completions)

    def count(self, *, user_id: str) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count()).select_from(Completion).where(Completion.user_id == user_id)
            ).one()
