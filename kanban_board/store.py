"""In-memory board tree.

Every structural change goes through :mod:`kanban_board.reindex`, so card
positions inside each list and list positions inside the board stay
contiguous whatever the origin of the change (local edit, undo, realtime).
The store performs no I/O; callers persist separately.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from . import reindex
from .errors import CardNotFoundError, ListNotFoundError
from .models import Board, BoardList, Card

logger = logging.getLogger(__name__)

EDITABLE_CARD_FIELDS = ("title", "description", "status", "priority")


class BoardStore:
    def __init__(self, board_id: str = "board-1", title: str = "My Board") -> None:
        self.board = Board(id=board_id, title=title)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, backend: Any) -> None:
        data = backend.fetch_board()
        self.load_records(data.get("lists", []), data.get("cards", []))

    def load_records(self, list_records: List[Dict], card_records: List[Dict]) -> None:
        lists = sorted(
            (BoardList.from_record(record) for record in list_records),
            key=lambda board_list: board_list.position,
        )
        by_id = {board_list.id: board_list for board_list in lists}
        for card in sorted(
            (Card.from_record(record) for record in card_records),
            key=lambda card: card.position,
        ):
            owner = by_id.get(card.list_id)
            if owner is None:
                logger.warning("Dropping card %s for unknown list %s", card.id, card.list_id)
                continue
            owner.cards.append(card)
        for board_list in lists:
            reindex.normalize(board_list.cards)
        reindex.normalize(lists)
        self.board.lists = lists
        logger.info("Loaded %d lists and %d cards", len(lists), sum(len(l.cards) for l in lists))

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    @property
    def lists(self) -> List[BoardList]:
        return self.board.lists

    def get_list(self, list_id: str) -> BoardList:
        for board_list in self.board.lists:
            if board_list.id == list_id:
                return board_list
        raise ListNotFoundError(list_id)

    def has_list(self, list_id: str) -> bool:
        return reindex.index_of(self.board.lists, list_id) != -1

    def list_index(self, list_id: str) -> int:
        index = reindex.index_of(self.board.lists, list_id)
        if index == -1:
            raise ListNotFoundError(list_id)
        return index

    def find_card(self, card_id: str) -> Tuple[BoardList, int]:
        for board_list in self.board.lists:
            index = reindex.index_of(board_list.cards, card_id)
            if index != -1:
                return board_list, index
        raise CardNotFoundError(card_id)

    def get_card(self, card_id: str) -> Card:
        board_list, index = self.find_card(card_id)
        return board_list.cards[index]

    def has_card(self, card_id: str) -> bool:
        try:
            self.find_card(card_id)
        except CardNotFoundError:
            return False
        return True

    def cards_for(self, list_id: str) -> List[Card]:
        return list(self.get_list(list_id).cards)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    def append_list(self, board_list: BoardList) -> BoardList:
        reindex.insert_at(self.board.lists, len(self.board.lists), board_list)
        return board_list

    def insert_list(self, board_list: BoardList, index: int) -> int:
        return reindex.insert_at(self.board.lists, index, board_list)

    def remove_list(self, list_id: str) -> Tuple[BoardList, int]:
        index = self.list_index(list_id)
        return reindex.remove_at(self.board.lists, index), index

    def move_list(self, list_id: str, new_index: int) -> int:
        index = self.list_index(list_id)
        return reindex.move_between(self.board.lists, index, self.board.lists, new_index)

    def rename_list(self, list_id: str, title: str) -> None:
        self.get_list(list_id).title = title

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def append_card(self, card: Card) -> Card:
        board_list = self.get_list(card.list_id)
        reindex.insert_at(board_list.cards, len(board_list.cards), card)
        return card

    def insert_card(self, list_id: str, index: int, card: Card) -> int:
        board_list = self.get_list(list_id)
        card.list_id = list_id
        return reindex.insert_at(board_list.cards, index, card)

    def remove_card_at(self, list_id: str, index: int) -> Card:
        return reindex.remove_at(self.get_list(list_id).cards, index)

    def remove_card(self, card_id: str) -> Tuple[Card, str, int]:
        board_list, index = self.find_card(card_id)
        return reindex.remove_at(board_list.cards, index), board_list.id, index

    def move_card(self, card_id: str, to_list_id: str, to_index: int) -> Tuple[BoardList, BoardList, int]:
        """Move a card within or across lists. Returns (source, dest, landed index)."""
        source, from_index = self.find_card(card_id)
        dest = self.get_list(to_list_id)
        card = source.cards[from_index]
        landed = reindex.move_between(source.cards, from_index, dest.cards, to_index)
        card.list_id = dest.id
        return source, dest, landed

    def update_card(self, card_id: str, **fields: Any) -> Card:
        card = self.get_card(card_id)
        unknown = set(fields) - set(EDITABLE_CARD_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit card fields: {', '.join(sorted(unknown))}")
        for name, value in fields.items():
            setattr(card, name, value)
        return card

    # ------------------------------------------------------------------
    # Realtime merges
    # ------------------------------------------------------------------
    def sync_add_card(self, card: Card) -> None:
        if self.has_card(card.id):
            self.sync_update_card(card)
            return
        if not self.has_list(card.list_id):
            logger.warning("Realtime card %s references unknown list %s", card.id, card.list_id)
            return
        self.insert_card(card.list_id, card.position, card)

    def sync_update_card(self, incoming: Card) -> None:
        if not self.has_card(incoming.id):
            self.sync_add_card(incoming)
            return
        if not self.has_list(incoming.list_id):
            logger.warning(
                "Realtime update moves card %s to unknown list %s", incoming.id, incoming.list_id
            )
            return
        card = self.get_card(incoming.id)
        for name in EDITABLE_CARD_FIELDS:
            setattr(card, name, getattr(incoming, name))
        card.updated_at = incoming.updated_at
        source, index = self.find_card(incoming.id)
        if source.id != incoming.list_id or index != incoming.position:
            self.move_card(incoming.id, incoming.list_id, incoming.position)

    def sync_remove_card(self, card_id: str) -> None:
        if self.has_card(card_id):
            self.remove_card(card_id)

    def sync_add_list(self, board_list: BoardList) -> None:
        if self.has_list(board_list.id):
            self.sync_update_list(board_list)
            return
        self.insert_list(board_list, board_list.position)

    def sync_update_list(self, incoming: BoardList) -> None:
        if not self.has_list(incoming.id):
            self.sync_add_list(incoming)
            return
        self.get_list(incoming.id).title = incoming.title
        if self.list_index(incoming.id) != incoming.position:
            self.move_list(incoming.id, incoming.position)

    def sync_remove_list(self, list_id: str) -> None:
        if self.has_list(list_id):
            self.remove_list(list_id)

    def snapshot(self) -> Dict[str, Any]:
        return self.board.to_dict()
