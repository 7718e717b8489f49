"""In-process publish/subscribe used to decouple the core from the UI."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

# Event names
UNDO_PENDING = "undo:pending"
UNDO_RESTORED = "undo:restored"
UNDO_NOTHING = "undo:nothing"
UNDO_CLOSED = "undo:closed"
NOTIFICATION_SHOW = "notification:show"
CARD_CREATED = "card:created"
CARD_MOVED = "card:moved"
CARD_DELETED = "card:deleted"
LIST_CREATED = "list:created"
LIST_DELETED = "list:deleted"
BOARD_CHANGED = "board:changed"


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._listeners.get(event)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._listeners[event]

    def once(self, event: str, handler: Handler) -> None:
        def wrapper(payload: Dict[str, Any]) -> None:
            self.off(event, wrapper)
            handler(payload)

        self.on(event, wrapper)

    def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        data = payload or {}
        for handler in list(self._listeners.get(event, [])):
            try:
                handler(data)
            except Exception:
                logger.exception("Event handler failed for %s", event)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def clear(self) -> None:
        self._listeners.clear()
