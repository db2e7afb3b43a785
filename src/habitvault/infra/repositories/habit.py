"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.habit import Habit


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str, *, user_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: str, include_inactive: bool = True) -> list[Habit]:
        """List the user's habits in creation order."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at, Habit.name)  # type: ignore
            )
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: str) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def count(self, *, user_id: str) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count()).select_from(Habit).where(Habit.user_id == user_id)
            ).one()
