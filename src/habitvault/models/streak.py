"""Per-habit streak aggregates."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Streak(SQLModel, table=True):
    """Current/longest run for one habit; keyed by habit so there is at most one."""

    __tablename__: ClassVar[str] = "streak"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_completed_date: Optional[date] = Field(default=None)
