"""Settings repository storing one JSON blob per user."""

from __future__ import annotations

import json
from typing import Any, Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.settings import AppSetting


def settings_key(user_id: str) -> str:
    return f"settings:{user_id}"


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get(self, user_id: str) -> Optional[dict[str, Any]]:
        with self.session_factory() as session:
            setting = session.exec(
                select(AppSetting).where(AppSetting.key == settings_key(user_id))
            ).first()
            if setting is None:
                return None
            return json.loads(setting.value)

    def put(self, user_id: str, blob: dict[str, Any]) -> None:
        value = json.dumps(blob)
        with self.session_factory() as session:
            key = settings_key(user_id)
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                setting.value = value
            else:
                setting = AppSetting(key=key, value=value)
            session.add(setting)
            session.commit()


__all__ = ["SQLModelSettingsRepository", "settings_key"]
