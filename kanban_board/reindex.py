"""Keep ``position`` fields contiguous after structural changes.

Every helper works on a mutable sequence of objects exposing ``id`` and
``position`` (cards inside a list, lists inside a board). After any helper
returns, the positions of each touched sequence read ``0..n-1`` in sequence
order. Only ``position`` is ever written.
"""
from __future__ import annotations

from typing import Any, MutableSequence, TypeVar

from .errors import BoundsError

T = TypeVar("T")


def normalize(items: MutableSequence[Any]) -> None:
    for index, item in enumerate(items):
        if item.position != index:
            item.position = index


def index_of(items: MutableSequence[Any], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return -1


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length))


def insert_at(items: MutableSequence[T], index: int, item: T) -> int:
    """Insert ``item`` at ``index`` (clamped to ``[0, len]``) and renumber.

    Returns the index the item actually landed on.
    """
    index = _clamp(index, len(items))
    items.insert(index, item)
    normalize(items)
    return index


def remove_at(items: MutableSequence[T], index: int) -> T:
    if not 0 <= index < len(items):
        raise BoundsError(index, len(items))
    item = items.pop(index)
    normalize(items)
    return item


def move_between(
    source: MutableSequence[T],
    source_index: int,
    dest: MutableSequence[T],
    dest_index: int,
) -> int:
    """Move one item from ``source`` to ``dest``.

    When both arguments are the same sequence, ``dest_index`` addresses the
    sequence after the item was taken out, so nothing is shifted twice.
    The source index is checked before anything is touched.
    """
    if not 0 <= source_index < len(source):
        raise BoundsError(source_index, len(source))
    item = source.pop(source_index)
    landed = _clamp(dest_index, len(dest))
    dest.insert(landed, item)
    normalize(dest)
    if source is not dest:
        normalize(source)
    return landed
