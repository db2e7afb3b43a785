"""User account and profile fields."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import new_id, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit


class User(SQLModel, table=True):
    """Account that owns habits; profile settings live on the same row."""

    __tablename__: ClassVar[str] = "user"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    display_name: Optional[str] = Field(default=None, max_length=80)
    timezone: Optional[str] = Field(default=None, max_length=64)
    reminder_enabled: bool = Field(default=False, nullable=False)
    reminder_time: Optional[str] = Field(default=None, max_length=8)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    habits: list["Habit"] = Relationship(
        back_populates="user",
        sa_relationship=relationship("Habit", back_populates="user"),
    )
