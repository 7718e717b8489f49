"""User-level board operations: validate, update the store, persist."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from . import validation
from .dialogs import DialogBroker, DialogResult
from .errors import KanbanError, ValidationError
from .events import CARD_CREATED, CARD_MOVED, LIST_CREATED, EventBus
from .messages import message
from .models import BoardList, Card, current_timestamp, generate_id
from .notifications import error, publish, success, warning
from .persistence import PersistenceQueue
from .store import BoardStore
from .undo import UndoCoordinator

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    success: int = 0
    failed: int = 0


class BoardActions:
    def __init__(
        self,
        store: BoardStore,
        bus: EventBus,
        coordinator: UndoCoordinator,
        persistence: Optional[PersistenceQueue] = None,
        broker: Optional[DialogBroker] = None,
    ) -> None:
        self.store = store
        self.bus = bus
        self.coordinator = coordinator
        self.persistence = persistence
        self.broker = broker or DialogBroker()

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    def add_list(self, title: str) -> BoardList:
        validation.require("list_title", title)
        board_list = self.store.append_list(BoardList(id=generate_id("list"), title=title.strip()))
        logger.info("Created list %s", board_list.id)
        if self.persistence is not None:
            self.persistence.create_list(board_list)
        self.bus.emit(LIST_CREATED, {"list_id": board_list.id, "title": board_list.title})
        return board_list

    def rename_list(self, list_id: str, title: str) -> None:
        validation.require("list_title", title)
        self.store.rename_list(list_id, title.strip())
        if self.persistence is not None:
            self.persistence.update_list(list_id, title=title.strip())

    def move_list(self, list_id: str, to_index: int) -> int:
        landed = self.store.move_list(list_id, to_index)
        if self.persistence is not None:
            self.persistence.save_list_positions(self.store.lists)
        return landed

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def add_card(self, list_id: str, title: str, description: str = "") -> Card:
        validation.require("card_title", title)
        self.store.get_list(list_id)
        card = self.store.append_card(
            Card(
                id=generate_id("card"),
                list_id=list_id,
                title=title.strip(),
                description=description or "",
                created_at=current_timestamp(),
            )
        )
        logger.info("Created card %s in list %s", card.id, list_id)
        if self.persistence is not None:
            self.persistence.create_card(card)
        self.bus.emit(CARD_CREATED, {"card_id": card.id, "list_id": list_id, "title": card.title})
        return card

    def rename_card(self, card_id: str, title: str) -> Card:
        validation.require("card_title", title)
        card = self.store.update_card(card_id, title=title.strip())
        if self.persistence is not None:
            self.persistence.update_card(card_id, title=card.title)
        return card

    def set_card_description(self, card_id: str, description: str) -> Card:
        card = self.store.update_card(card_id, description=description)
        if self.persistence is not None:
            self.persistence.update_card(card_id, description=description)
        return card

    def move_card(self, card_id: str, to_list_id: str, to_index: int) -> int:
        source, dest, landed = self.store.move_card(card_id, to_list_id, to_index)
        logger.debug("Moved card %s from %s to %s at %d", card_id, source.id, dest.id, landed)
        if self.persistence is not None:
            affected = [source] if source is dest else [source, dest]
            self.persistence.save_card_positions(affected)
        self.bus.emit(
            CARD_MOVED, {"card_id": card_id, "from_list_id": source.id, "to_list_id": dest.id}
        )
        return landed

    def add_generated_cards(
        self, list_id: str, cards: Iterable[Mapping[str, Any]]
    ) -> BatchResult:
        """Append a batch of suggested cards, skipping the ones that fail validation."""
        result = BatchResult()
        for suggestion in cards:
            try:
                self.add_card(list_id, suggestion.get("title", ""), suggestion.get("description", ""))
            except ValidationError as exc:
                logger.warning("Skipping generated card %r: %s", suggestion.get("title"), exc)
                result.failed += 1
            else:
                result.success += 1
        if result.success and not result.failed:
            publish(
                self.bus,
                success(message("batch.success", success=result.success), message("batch.success_title")),
            )
        elif result.failed:
            publish(
                self.bus,
                warning(
                    message("batch.partial", success=result.success, failed=result.failed),
                    message("batch.partial_title"),
                ),
            )
        return result

    # ------------------------------------------------------------------
    # Dialog driven flows
    # ------------------------------------------------------------------
    def prompt_new_list(self) -> str:
        def answered(result: DialogResult) -> None:
            if result.confirmed and result.value:
                self._report(lambda: self.add_list(result.value))

        return self.broker.ask_text(message("list.add_prompt"), answered)

    def prompt_new_card(self, list_id: str) -> str:
        def answered(result: DialogResult) -> None:
            if result.confirmed and result.value:
                self._report(lambda: self.add_card(list_id, result.value))

        return self.broker.ask_text(message("card.add_prompt"), answered)

    def confirm_and_delete_card(self, card_id: str) -> str:
        card = self.store.get_card(card_id)

        def answered(result: DialogResult) -> None:
            if result.confirmed:
                self._report(lambda: self.coordinator.delete_with_undo(card_id))
            else:
                logger.debug("Delete of card %s cancelled", card_id)

        return self.broker.confirm(
            message("card.delete_confirm", title=card.title),
            answered,
            title=message("card.delete_title"),
            danger=True,
        )

    def confirm_and_delete_list(self, list_id: str) -> str:
        board_list = self.store.get_list(list_id)

        def answered(result: DialogResult) -> None:
            if result.confirmed:
                self._report(lambda: self.coordinator.delete_list_with_undo(list_id))

        return self.broker.confirm(
            message("list.delete_confirm", title=board_list.title),
            answered,
            title=message("list.delete_title"),
            danger=True,
        )

    def _report(self, operation) -> Any:
        try:
            return operation()
        except KanbanError as exc:
            logger.warning("Board operation failed: %s", exc)
            publish(self.bus, error(str(exc)))
            return None
