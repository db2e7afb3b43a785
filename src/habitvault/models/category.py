"""Habit category definitions."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .base import new_id, utcnow


class Category(SQLModel, table=True):
    """User-defined label with color and icon that habits can point at."""

    __tablename__: ClassVar[str] = "category"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=255)
    is_default: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
