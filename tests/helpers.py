from typing import List

from kanban_board.store import BoardStore


def ids(items) -> List[str]:
    return [item.id for item in items]


def positions(items) -> List[int]:
    return [item.position for item in items]


def assert_contiguous(store: BoardStore) -> None:
    assert positions(store.lists) == list(range(len(store.lists)))
    for board_list in store.lists:
        assert positions(board_list.cards) == list(range(len(board_list.cards)))
        assert all(card.list_id == board_list.id for card in board_list.cards)
