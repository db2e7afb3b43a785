"""Shared column helpers for HabitVault tables."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Issue an opaque identity for a freshly created row."""

    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
