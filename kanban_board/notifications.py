"""Transient toast notifications."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import AppConfig
from .events import NOTIFICATION_SHOW, EventBus
from .messages import message
from .models import generate_id
from .timers import Countdown, QtCountdown

logger = logging.getLogger(__name__)

KINDS = ("success", "error", "warning", "info")


@dataclass
class Notification:
    kind: str
    title: str
    message: str
    duration_ms: Optional[int] = None
    action_label: Optional[str] = None
    id: str = field(default_factory=lambda: generate_id("toast"))
    created_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {self.kind}")
        if not self.title or not self.message:
            raise ValueError("Notification needs both a title and a message")

    def to_payload(self) -> Dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
            "duration_ms": self.duration_ms,
            "action_label": self.action_label,
        }


def success(text: str, title: Optional[str] = None) -> Notification:
    return Notification("success", title or message("success.title"), text)


def error(text: str, title: Optional[str] = None, duration_ms: Optional[int] = None) -> Notification:
    return Notification("error", title or message("error.title"), text, duration_ms)


def warning(text: str, title: Optional[str] = None) -> Notification:
    return Notification("warning", title or message("warning.title"), text)


def info(text: str, title: Optional[str] = None, duration_ms: Optional[int] = None) -> Notification:
    return Notification("info", title or message("info.title"), text, duration_ms)


def publish(bus: EventBus, notification: Notification) -> None:
    bus.emit(NOTIFICATION_SHOW, notification.to_payload())


class ToastCenter:
    """Keeps the list of visible toasts and expires them on schedule."""

    def __init__(
        self,
        bus: EventBus,
        timer_factory: Callable[[], Countdown] = QtCountdown,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.bus = bus
        self.config = config or AppConfig()
        self._timer_factory = timer_factory
        self._toasts: List[Notification] = []
        self._timers: Dict[str, Countdown] = {}
        self._listeners: List[Callable[[List[Notification]], None]] = []
        bus.on(NOTIFICATION_SHOW, self._on_show)

    @property
    def toasts(self) -> List[Notification]:
        return list(self._toasts)

    def subscribe(self, listener: Callable[[List[Notification]], None]) -> None:
        self._listeners.append(listener)

    def add(self, notification: Notification) -> Notification:
        duration = notification.duration_ms
        if duration is None:
            duration = (
                self.config.error_toast_duration_ms
                if notification.kind == "error"
                else self.config.toast_duration_ms
            )
            notification.duration_ms = duration
        self._toasts.append(notification)
        if duration > 0:
            countdown = self._timer_factory()
            countdown.start(duration, lambda: self.dismiss(notification.id))
            self._timers[notification.id] = countdown
        logger.debug("Toast %s (%s): %s", notification.id, notification.kind, notification.message)
        self._changed()
        return notification

    def dismiss(self, toast_id: str) -> None:
        countdown = self._timers.pop(toast_id, None)
        if countdown is not None:
            countdown.cancel()
        remaining = [t for t in self._toasts if t.id != toast_id]
        if len(remaining) != len(self._toasts):
            self._toasts = remaining
            self._changed()

    def clear(self) -> None:
        for countdown in self._timers.values():
            countdown.cancel()
        self._timers.clear()
        self._toasts.clear()
        self._changed()

    def _on_show(self, payload: Dict) -> None:
        self.add(
            Notification(
                kind=payload.get("kind", "info"),
                title=payload.get("title") or message("info.title"),
                message=payload.get("message", ""),
                duration_ms=payload.get("duration_ms"),
                action_label=payload.get("action_label"),
                id=payload.get("id") or generate_id("toast"),
            )
        )

    def _changed(self) -> None:
        snapshot = self.toasts
        for listener in list(self._listeners):
            listener(snapshot)
