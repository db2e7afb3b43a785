"""SQLModel implementation of User repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.user import User


class SQLModelUserRepository:
    """SQLModel-based account lookups."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_email(self, email: str) -> Optional[User]:
        """Fetch a user by email (case-insensitive)."""
        normalized = email.strip().lower()
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.email == normalized)).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            user.email = user.email.strip().lower()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
