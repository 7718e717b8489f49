import random
from dataclasses import dataclass

import pytest

from kanban_board import reindex
from kanban_board.errors import BoundsError

from helpers import ids, positions


@dataclass
class Row:
    id: str
    title: str = ""
    position: int = 0


def make(*names):
    rows = [Row(name, title=name.upper()) for name in names]
    reindex.normalize(rows)
    return rows


def test_insert_shifts_following_items():
    rows = make("a", "b", "c")
    landed = reindex.insert_at(rows, 1, Row("n"))
    assert landed == 1
    assert ids(rows) == ["a", "n", "b", "c"]
    assert positions(rows) == [0, 1, 2, 3]


@pytest.mark.parametrize("index, expected", [(-5, 0), (99, 3)])
def test_insert_clamps_index(index, expected):
    rows = make("a", "b", "c")
    assert reindex.insert_at(rows, index, Row("n")) == expected
    assert rows[expected].id == "n"
    assert positions(rows) == [0, 1, 2, 3]


def test_remove_renumbers_tail():
    rows = make("a", "b", "c", "d")
    removed = reindex.remove_at(rows, 1)
    assert removed.id == "b"
    assert ids(rows) == ["a", "c", "d"]
    assert positions(rows) == [0, 1, 2]


@pytest.mark.parametrize("index", [3, 10, -1])
def test_remove_out_of_bounds_leaves_sequence_untouched(index):
    rows = make("a", "b", "c")
    with pytest.raises(BoundsError) as excinfo:
        reindex.remove_at(rows, index)
    assert excinfo.value.length == 3
    assert ids(rows) == ["a", "b", "c"]
    assert positions(rows) == [0, 1, 2]


def test_move_across_containers():
    source = make("a", "b", "c", "d")
    dest = make("x", "y")
    landed = reindex.move_between(source, 2, dest, 0)
    assert landed == 0
    assert ids(source) == ["a", "b", "d"]
    assert positions(source) == [0, 1, 2]
    assert ids(dest) == ["c", "x", "y"]
    assert positions(dest) == [0, 1, 2]


def test_move_within_one_container_does_not_double_shift():
    rows = make("a", "b", "c", "d")
    reindex.move_between(rows, 0, rows, 2)
    assert ids(rows) == ["b", "c", "a", "d"]
    assert positions(rows) == [0, 1, 2, 3]

    reindex.move_between(rows, 3, rows, 0)
    assert ids(rows) == ["d", "b", "c", "a"]
    assert positions(rows) == [0, 1, 2, 3]


def test_move_with_bad_source_index_is_atomic():
    source = make("a", "b")
    dest = make("x")
    with pytest.raises(BoundsError):
        reindex.move_between(source, 2, dest, 0)
    assert ids(source) == ["a", "b"]
    assert ids(dest) == ["x"]


def test_move_clamps_destination():
    source = make("a", "b")
    dest = make("x")
    assert reindex.move_between(source, 0, dest, 42) == 1
    assert ids(dest) == ["x", "a"]


def test_only_positions_are_written():
    rows = make("a", "b", "c")
    reindex.move_between(rows, 2, rows, 0)
    assert [row.title for row in rows] == ["C", "A", "B"]


def test_index_of():
    rows = make("a", "b")
    assert reindex.index_of(rows, "b") == 1
    assert reindex.index_of(rows, "zzz") == -1


def test_random_operations_keep_every_container_contiguous():
    rng = random.Random(1234)
    containers = [make(*[f"{c}{i}" for i in range(5)]) for c in "pqr"]
    counter = 0
    for _ in range(300):
        op = rng.choice(["insert", "remove", "move"])
        target = rng.choice(containers)
        if op == "insert":
            counter += 1
            reindex.insert_at(target, rng.randint(-2, len(target) + 2), Row(f"n{counter}"))
        elif op == "remove":
            try:
                reindex.remove_at(target, rng.randint(-1, len(target)))
            except BoundsError:
                pass
        else:
            dest = rng.choice(containers)
            try:
                reindex.move_between(target, rng.randint(0, len(target)), dest, rng.randint(0, len(dest) + 1))
            except BoundsError:
                pass
        for container in containers:
            assert positions(container) == list(range(len(container)))
