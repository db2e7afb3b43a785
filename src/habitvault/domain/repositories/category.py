"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_name(self, name: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by its display name."""
        ...

    def list_all(self, *, user_id: str) -> list[Category]:
        """List all categories."""
        ...

    def create(self, category: Category, *, user_id: str) -> Category:
        """Create a new category."""
        ...
