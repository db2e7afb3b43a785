"""Local settings repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol


class SettingsRepository(Protocol):
    """Per-user key/value store for local preferences (reminders, theme, language).

    The blob is a plain JSON-compatible mapping. ``get`` returns ``None`` when
    nothing has been stored for the user yet.
    """

    def get(self, user_id: str) -> Optional[dict[str, Any]]:
        ...

    def put(self, user_id: str, blob: dict[str, Any]) -> None:
        ...
