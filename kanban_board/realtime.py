"""Merge externally originated row changes into the board store."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .events import BOARD_CHANGED, EventBus
from .models import BoardList, Card
from .store import BoardStore

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


class RealtimeSync:
    """Apply change-feed payloads to a :class:`BoardStore`.

    A payload looks like ``{"table": "cards", "eventType": "UPDATE",
    "new": {...}, "old": {...}}``. Inserts and updates for an item currently
    waiting in the undo slot are skipped so it cannot reappear. A delete of
    that item (or of the list a pending card came from) is passed to
    ``forget`` so the undo slot lets go of it.
    """

    def __init__(
        self,
        store: BoardStore,
        is_pending: Callable[[str], bool] = lambda item_id: False,
        bus: Optional[EventBus] = None,
        forget: Callable[[str], bool] = lambda item_id: False,
    ) -> None:
        self.store = store
        self.is_pending = is_pending
        self.bus = bus
        self.forget = forget
        self._handlers: Dict[Tuple[str, str], Callable[[Payload], bool]] = {
            ("cards", "INSERT"): self._card_upsert,
            ("cards", "UPDATE"): self._card_upsert,
            ("cards", "DELETE"): self._card_delete,
            ("lists", "INSERT"): self._list_upsert,
            ("lists", "UPDATE"): self._list_upsert,
            ("lists", "DELETE"): self._list_delete,
        }

    def apply(self, payload: Payload) -> bool:
        """Apply one change. Returns True when the board was touched."""
        key = (payload.get("table"), payload.get("eventType"))
        handler = self._handlers.get(key)
        if handler is None:
            logger.info("Ignoring realtime change %s/%s", *key)
            return False
        try:
            applied = handler(payload)
        except ValueError as exc:
            logger.warning("Skipping malformed realtime change %s/%s: %s", key[0], key[1], exc)
            return False
        if applied and self.bus is not None:
            self.bus.emit(BOARD_CHANGED, {"source": "realtime", "table": key[0]})
        return bool(applied)

    def apply_many(self, payloads: Iterable[Payload]) -> int:
        return sum(1 for payload in payloads if self.apply(payload))

    def _card_upsert(self, payload: Payload) -> bool:
        card = Card.from_record(payload.get("new"))
        if self.is_pending(card.id) or self.is_pending(card.list_id):
            logger.debug("Realtime change for pending card %s ignored", card.id)
            return False
        if payload.get("eventType") == "INSERT":
            self.store.sync_add_card(card)
        else:
            self.store.sync_update_card(card)
        return True

    def _card_delete(self, payload: Payload) -> bool:
        card_id = str(_old_id(payload))
        if self.is_pending(card_id):
            self.forget(card_id)
            return True
        self.store.sync_remove_card(card_id)
        return True

    def _list_upsert(self, payload: Payload) -> bool:
        board_list = BoardList.from_record(payload.get("new"))
        if self.is_pending(board_list.id):
            logger.debug("Realtime change for pending list %s ignored", board_list.id)
            return False
        if payload.get("eventType") == "INSERT":
            self.store.sync_add_list(board_list)
        else:
            self.store.sync_update_list(board_list)
        return True

    def _list_delete(self, payload: Payload) -> bool:
        list_id = str(_old_id(payload))
        # also releases a pending card that came from this list
        self.forget(list_id)
        self.store.sync_remove_list(list_id)
        return True


def _old_id(payload: Payload) -> Any:
    old = payload.get("old")
    if not isinstance(old, Mapping) or not old.get("id"):
        raise ValueError(f"DELETE without an id: {old!r}")
    return old["id"]
