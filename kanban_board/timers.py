"""Cancellable one-shot countdowns."""
from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QTimer


class Countdown:
    """Interface for a one-shot timer that can be cancelled before it fires."""

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError

    def remaining_ms(self) -> int:
        raise NotImplementedError

    @property
    def active(self) -> bool:
        raise NotImplementedError


class QtCountdown(Countdown):
    """Countdown driven by the Qt event loop.

    Fires on the thread that owns the event loop, so callbacks never race
    with UI handlers.
    """

    def __init__(self) -> None:
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._callback: Optional[Callable[[], None]] = None
        self._timer.timeout.connect(self._fire)

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(max(0, int(interval_ms)))

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def remaining_ms(self) -> int:
        if not self._timer.isActive():
            return 0
        return max(0, self._timer.remainingTime())

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


def defer_to_event_loop(callback: Callable[[], None]) -> None:
    """Run ``callback`` on the next event loop iteration."""
    QTimer.singleShot(0, callback)
