"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .completion import CompletionRepository
from .habit import HabitRepository
from .settings import SettingsRepository
from .streak import StreakRepository
from .user import UserRepository

__all__ = [
    "CategoryRepository",
    "CompletionRepository",
    "HabitRepository",
    "SettingsRepository",
    "StreakRepository",
    "UserRepository",
]
