"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .completion import SQLModelCompletionRepository
from .habit import SQLModelHabitRepository
from .settings import SQLModelSettingsRepository
from .streak import SQLModelStreakRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelCompletionRepository",
    "SQLModelHabitRepository",
    "SQLModelSettingsRepository",
    "SQLModelStreakRepository",
    "SQLModelUserRepository",
]
