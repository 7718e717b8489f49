import pytest

from kanban_board.errors import CardNotFoundError, ListNotFoundError
from kanban_board.models import BoardList, Card
from kanban_board.store import BoardStore

from helpers import assert_contiguous, ids


def test_load_sorts_and_normalizes():
    store = BoardStore()
    store.load_records(
        [
            {"id": "l2", "title": "Later", "position": 7},
            {"id": "l1", "title": "Now", "position": 3},
        ],
        [
            {"id": "c2", "list_id": "l1", "title": "Second", "position": 9},
            {"id": "c1", "list_id": "l1", "title": "First", "position": 2},
            {"id": "orphan", "list_id": "gone", "title": "Lost", "position": 0},
        ],
    )
    assert ids(store.lists) == ["l1", "l2"]
    assert ids(store.get_list("l1").cards) == ["c1", "c2"]
    assert not store.has_card("orphan")
    assert_contiguous(store)


def test_load_from_backend(store):
    assert ids(store.lists) == ["todo", "done"]
    assert ids(store.get_list("todo").cards) == ["a", "b", "c", "d"]
    assert store.get_card("x").title == "Card X"


def test_lookups_raise_typed_errors(store):
    with pytest.raises(ListNotFoundError):
        store.get_list("missing")
    with pytest.raises(CardNotFoundError) as excinfo:
        store.find_card("missing")
    assert "missing" in str(excinfo.value)
    assert store.has_list("todo")
    assert not store.has_card("missing")


def test_move_card_across_lists(store):
    source, dest, landed = store.move_card("c", "done", 0)

    assert (source.id, dest.id, landed) == ("todo", "done", 0)
    assert store.get_card("c").list_id == "done"
    assert ids(store.get_list("todo").cards) == ["a", "b", "d"]
    assert ids(store.get_list("done").cards) == ["c", "x", "y"]
    assert_contiguous(store)


def test_move_card_within_list(store):
    store.move_card("a", "todo", 3)
    assert ids(store.get_list("todo").cards) == ["b", "c", "d", "a"]
    assert_contiguous(store)


def test_move_card_to_unknown_list_changes_nothing(store):
    with pytest.raises(ListNotFoundError):
        store.move_card("a", "nowhere", 0)
    assert ids(store.get_list("todo").cards) == ["a", "b", "c", "d"]


def test_insert_card_adopts_list(store):
    card = Card(id="n", list_id="elsewhere", title="New")
    assert store.insert_card("done", 1, card) == 1
    assert card.list_id == "done"
    assert ids(store.get_list("done").cards) == ["x", "n", "y"]


def test_remove_card_reports_origin(store):
    card, list_id, index = store.remove_card("b")
    assert (card.id, list_id, index) == ("b", "todo", 1)
    assert_contiguous(store)


def test_lists_keep_contiguous_positions(store):
    store.append_list(BoardList(id="later", title="Later"))
    store.move_list("later", 0)
    assert ids(store.lists) == ["later", "todo", "done"]
    store.remove_list("todo")
    assert ids(store.lists) == ["later", "done"]
    assert_contiguous(store)


def test_update_card_rejects_structural_fields(store):
    store.update_card("a", title="Renamed", priority="high")
    assert store.get_card("a").title == "Renamed"
    with pytest.raises(ValueError):
        store.update_card("a", position=5)
    with pytest.raises(ValueError):
        store.update_card("a", list_id="done")


def test_snapshot_is_nested(store):
    snapshot = store.snapshot()
    assert [l["id"] for l in snapshot["lists"]] == ["todo", "done"]
    assert [c["id"] for c in snapshot["lists"][1]["cards"]] == ["x", "y"]
