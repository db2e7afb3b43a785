"""Phase-based progress reporting for export and import runs."""

from __future__ import annotations

from typing import Callable

ProgressCallback = Callable[[int], None]


class ProgressTracker:
    """Observable percentage (0-100) that only moves forward within a run.

    Each phase of an operation claims a fixed slice of the range; values are
    set at phase boundaries rather than derived from record counts.
    """

    def __init__(self) -> None:
        self._value = 0
        self._history: list[int] = []
        self._subscribers: list[ProgressCallback] = []

    @property
    def value(self) -> int:
        return self._value

    @property
    def history(self) -> list[int]:
        """Values reported since the last reset, in order."""
        return list(self._history)

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""

        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def reset(self) -> None:
        self._value = 0
        self._history = [0]
        self._notify()

    def advance(self, percent: float) -> int:
        """Move to ``percent``; lower values than the current one are ignored."""

        target = max(0, min(100, int(round(percent))))
        if target < self._value:
            target = self._value
        self._value = target
        self._history.append(target)
        self._notify()
        return target

    def interpolate(self, start: int, end: int, done: int, total: int) -> int:
        """Advance to the point ``done/total`` of the way between ``start`` and ``end``."""

        if total <= 0:
            return self.advance(end)
        fraction = min(done, total) / total
        return self.advance(start + (end - start) * fraction)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._value)


__all__ = ["ProgressCallback", "ProgressTracker"]
