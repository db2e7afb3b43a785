"""Key/value storage for per-user local preferences."""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


class AppSetting(SQLModel, table=True):
    """Raw JSON value stored under a string key."""

    __tablename__: ClassVar[str] = "app_setting"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(sa_column=Column(Text, nullable=False))
