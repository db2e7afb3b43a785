"""SQLModel table exports."""

from .category import Category
from .habit import Completion, Habit
from .settings import AppSetting
from .streak import Streak
from .user import User

__all__ = [
    "AppSetting",
    "Category",
    "Completion",
    "Habit",
    "Streak",
    "User",
]
