"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import new_id, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Habit(SQLModel, table=True):
    """A user-defined habit the app tracks."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    category_id: Optional[str] = Field(default=None, foreign_key="category.id")
    frequency: str = Field(default="daily", max_length=32)
    # Weekday numbers (0=Sunday) used when frequency is not daily.
    target_days: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    reminder_time: Optional[str] = Field(default=None, max_length=8)
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    completions: list["Completion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship("Completion", back_populates="habit"),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class Completion(SQLModel, table=True):
    """Completion record for a habit on a calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    completed_date: date = Field(nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=500)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )
