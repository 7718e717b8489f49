"""Soft delete with a timed undo window."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from .errors import RestoreError
from .events import (
    CARD_DELETED,
    LIST_DELETED,
    UNDO_CLOSED,
    UNDO_NOTHING,
    UNDO_PENDING,
    UNDO_RESTORED,
    EventBus,
)
from .ledger import DEFAULT_TIMEOUT_MS, UndoLedger
from .messages import message
from .models import BoardList, Card, DeletionKind, PendingDeletion
from .notifications import Notification, info, publish
from .persistence import PersistenceQueue
from .store import BoardStore
from .timers import Countdown, QtCountdown

logger = logging.getLogger(__name__)

PendingListener = Callable[[Optional[PendingDeletion]], None]


class UndoCoordinator:
    """Entry point for deleting cards and lists with undo.

    Owns the session's :class:`UndoLedger`. Deleting takes the item out of
    the board immediately and parks it in the ledger; the backend only
    hears about the delete once the record is finalized (expiry, explicit
    discard, or a newer deletion taking the slot).
    """

    def __init__(
        self,
        store: BoardStore,
        bus: EventBus,
        persistence: Optional[PersistenceQueue] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        timer_factory: Callable[[], Countdown] = QtCountdown,
    ) -> None:
        self.store = store
        self.bus = bus
        self.persistence = persistence
        self.ledger = UndoLedger(
            timeout_ms=timeout_ms,
            timer_factory=timer_factory,
            on_expire=self.on_expire,
            on_discard=self._finalize,
        )
        self._listeners: List[PendingListener] = []

    # ------------------------------------------------------------------
    # Pending state
    # ------------------------------------------------------------------
    @property
    def pending(self) -> Optional[PendingDeletion]:
        return self.ledger.peek()

    def remaining_ms(self) -> int:
        return self.ledger.remaining_ms()

    def is_pending(self, item_id: str) -> bool:
        return self.ledger.is_pending(item_id)

    def subscribe(self, listener: PendingListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: PendingListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        record = self.ledger.peek()
        for listener in list(self._listeners):
            listener(record)

    # ------------------------------------------------------------------
    # Deleting
    # ------------------------------------------------------------------
    def delete_with_undo(self, card: Union[Card, str]) -> PendingDeletion:
        card_id = card if isinstance(card, str) else card.id
        removed, list_id, index = self.store.remove_card(card_id)
        logger.info("Soft-deleted card %s from list %s at %d", card_id, list_id, index)
        self.ledger.stash(removed, list_id, index, DeletionKind.CARD)
        if self.persistence is not None:
            self.persistence.save_card_positions([self.store.get_list(list_id)])
        return self._announce(message("card.deleted", title=removed.title))

    def delete_list_with_undo(self, board_list: Union[BoardList, str]) -> PendingDeletion:
        list_id = board_list if isinstance(board_list, str) else board_list.id
        removed, index = self.store.remove_list(list_id)
        logger.info("Soft-deleted list %s at %d with %d cards", list_id, index, len(removed.cards))
        self.ledger.stash(removed, self.store.board.id, index, DeletionKind.LIST)
        if self.persistence is not None:
            self.persistence.save_list_positions(self.store.lists)
        return self._announce(message("list.deleted", title=removed.title))

    def _announce(self, text: str) -> PendingDeletion:
        record = self.ledger.peek()
        self.bus.emit(
            UNDO_PENDING,
            {
                "title": record.title,
                "remaining_ms": self.ledger.remaining_ms() or record.timeout_ms,
                "kind": record.kind.value,
                "item_id": record.item_id,
            },
        )
        publish(
            self.bus,
            Notification(
                kind="info",
                title=message("info.title"),
                message=text,
                duration_ms=record.timeout_ms,
                action_label=message("undo.action"),
            ),
        )
        self._notify()
        return record

    # ------------------------------------------------------------------
    # Undo / discard
    # ------------------------------------------------------------------
    def undo_last_delete(self) -> Optional[Union[Card, BoardList]]:
        pending = self.ledger.peek()
        if pending is None:
            logger.info("Undo requested with nothing pending")
            self.bus.emit(UNDO_NOTHING, {})
            publish(self.bus, info(message("undo.nothing")))
            return None
        if pending.kind is DeletionKind.CARD and not self.store.has_list(pending.container_id):
            # the backend dropped the card together with its list
            self.ledger.forget()
            self.bus.emit(UNDO_CLOSED, {"item_id": pending.item_id})
            self._notify()
            raise RestoreError(
                f"List {pending.container_id} no longer exists; "
                f"card {pending.item_id} cannot be restored"
            )
        record = self.ledger.resolve_restore()
        if record.kind is DeletionKind.CARD:
            restored = self._restore_card(record)
            text = message("card.restored", title=record.title)
        else:
            restored = self._restore_list(record)
            text = message("list.restored", title=record.title)
        self.bus.emit(
            UNDO_RESTORED,
            {"title": record.title, "kind": record.kind.value, "item_id": record.item_id},
        )
        publish(self.bus, info(text))
        self._notify()
        return restored

    def _restore_card(self, record: PendingDeletion) -> Card:
        card = record.item
        landed = self.store.insert_card(record.container_id, record.position, card)
        logger.info("Restored card %s to list %s at %d", card.id, record.container_id, landed)
        if self.persistence is not None:
            self.persistence.save_card_positions([self.store.get_list(record.container_id)])
        return card

    def _restore_list(self, record: PendingDeletion) -> BoardList:
        board_list = record.item
        landed = self.store.insert_list(board_list, record.position)
        logger.info("Restored list %s at %d", board_list.id, landed)
        if self.persistence is not None:
            self.persistence.save_list_positions(self.store.lists)
        return board_list

    def discard_pending(self) -> None:
        if self.ledger.resolve_discard() is not None:
            self.bus.emit(UNDO_CLOSED, {})
            self._notify()

    def forget(self, item_id: str) -> bool:
        """Drop the pending record after the item was deleted remotely.

        Matches the pending item itself or, for a pending card, the list it
        came from. Nothing is sent to the backend.
        """
        record = self.ledger.peek()
        if record is None:
            return False
        if record.item_id != item_id and not (
            record.kind is DeletionKind.CARD and record.container_id == item_id
        ):
            return False
        self.ledger.forget()
        logger.info("Pending %s %s was deleted remotely", record.kind.value, record.item_id)
        self.bus.emit(UNDO_CLOSED, {"item_id": record.item_id})
        self._notify()
        return True

    def on_expire(self) -> None:
        record = self.ledger.resolve_discard()
        if record is None:
            return
        self.bus.emit(UNDO_CLOSED, {"item_id": record.item_id})
        self._notify()

    def shutdown(self) -> None:
        self.discard_pending()

    def _finalize(self, record: PendingDeletion) -> None:
        logger.info("Permanently deleting %s %s", record.kind.value, record.item_id)
        if record.kind is DeletionKind.CARD:
            self.bus.emit(CARD_DELETED, {"card_id": record.item_id, "list_id": record.container_id})
            if self.persistence is not None:
                self.persistence.delete_card(record.item_id)
        else:
            self.bus.emit(LIST_DELETED, {"list_id": record.item_id})
            if self.persistence is not None:
                self.persistence.delete_list(record.item_id)
