"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_name(self, name: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by name."""
        with self.session_factory() as session:
            statement = select(Category).where(Category.name == name, Category.user_id == user_id)
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: str) -> list[Category]:
        """List all categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: str) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category
