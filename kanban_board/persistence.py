"""Fire-and-forget writes to the board backend.

The in-memory board is always updated first. Writes are queued to run on
the next event loop tick; when one fails the user sees an error toast, but
the in-memory change stays in place.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterable, List, Tuple

from .errors import PersistenceError
from .events import EventBus
from .messages import message
from .models import BoardList, Card
from .notifications import error, publish
from .timers import defer_to_event_loop

logger = logging.getLogger(__name__)


class PersistenceQueue:
    def __init__(
        self,
        backend: Any,
        bus: EventBus,
        defer: Callable[[Callable[[], None]], None] = defer_to_event_loop,
    ) -> None:
        self.backend = backend
        self.bus = bus
        self._defer = defer
        self.failures = 0
        self._queue: Deque[Tuple[str, Callable[[], Any]]] = deque()

    def submit(self, description: str, operation: Callable[[], Any]) -> None:
        self._queue.append((description, operation))
        self._defer(self.drain)

    @property
    def queued(self) -> int:
        return len(self._queue)

    def drain(self) -> None:
        """Run every queued write now, in submission order."""
        while self._queue:
            description, operation = self._queue.popleft()
            try:
                operation()
            except (PersistenceError, OSError) as exc:
                self.failures += 1
                logger.error("Backend write failed (%s): %s", description, exc)
                publish(self.bus, error(message("sync.failed"), title=message("sync.failed_title")))
            else:
                logger.debug("Backend write ok: %s", description)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create_card(self, card: Card) -> None:
        record = card.to_record()
        self.submit(f"create card {card.id}", lambda: self.backend.create_card(record))

    def create_list(self, board_list: BoardList) -> None:
        record = board_list.to_record()
        self.submit(f"create list {board_list.id}", lambda: self.backend.create_list(record))

    def update_card(self, card_id: str, **fields: Any) -> None:
        self.submit(f"update card {card_id}", lambda: self.backend.update_card(card_id, **fields))

    def update_list(self, list_id: str, **fields: Any) -> None:
        self.submit(f"update list {list_id}", lambda: self.backend.update_list(list_id, **fields))

    def save_card_positions(self, lists: Iterable[BoardList]) -> None:
        """Persist the list membership and position of every card in ``lists``."""
        updates: List[dict] = [
            {"id": card.id, "list_id": board_list.id, "position": card.position}
            for board_list in lists
            for card in board_list.cards
        ]
        if updates:
            self.submit(
                f"reorder {len(updates)} cards",
                lambda: self.backend.update_card_positions(updates),
            )

    def save_list_positions(self, lists: Iterable[BoardList]) -> None:
        updates = [{"id": board_list.id, "position": board_list.position} for board_list in lists]
        if updates:
            self.submit(
                f"reorder {len(updates)} lists",
                lambda: self.backend.update_list_positions(updates),
            )

    def delete_card(self, card_id: str) -> None:
        self.submit(f"delete card {card_id}", lambda: self.backend.delete_card(card_id))

    def delete_list(self, list_id: str) -> None:
        self.submit(f"delete list {list_id}", lambda: self.backend.delete_list(list_id))
