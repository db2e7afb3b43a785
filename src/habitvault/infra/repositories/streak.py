"""SQLModel implementation of Streak repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.streak import Streak


class SQLModelStreakRepository:
    """SQLModel-based streak repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get(self, habit_id: str, *, user_id: str) -> Optional[Streak]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Streak).where(Streak.habit_id == habit_id, Streak.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: str) -> list[Streak]:
        with self.session_factory() as session:
            rows = list(session.exec(select(Streak).where(Streak.user_id == user_id)).all())
            session.expunge_all()
            return rows

    def upsert(self, streak: Streak, *, user_id: str) -> Streak:
        """Insert or replace the streak row for a habit."""
        with self.session_factory() as session:
            existing = session.get(Streak, streak.habit_id)
            if existing:
                existing.user_id = user_id
                existing.current_streak = streak.current_streak
                existing.longest_streak = streak.longest_streak
                existing.last_completed_date = streak.last_completed_date
                target = existing
            else:
                streak.user_id = user_id
                target = streak
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target
