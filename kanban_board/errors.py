"""Exceptions raised by the board core."""
from __future__ import annotations

from typing import List


class KanbanError(Exception):
    """Base class for errors reported to the caller of a board operation."""


class BoundsError(KanbanError, IndexError):
    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} out of range for sequence of length {length}")
        self.index = index
        self.length = length


class CardNotFoundError(KanbanError, KeyError):
    def __init__(self, card_id: str) -> None:
        super().__init__(card_id)
        self.card_id = card_id

    def __str__(self) -> str:
        return f"card not found: {self.card_id}"


class ListNotFoundError(KanbanError, KeyError):
    def __init__(self, list_id: str) -> None:
        super().__init__(list_id)
        self.list_id = list_id

    def __str__(self) -> str:
        return f"list not found: {self.list_id}"


class RestoreError(KanbanError):
    """A pending deletion could not be put back where it came from."""


class ValidationError(KanbanError, ValueError):
    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class PersistenceError(KanbanError):
    """The backing store rejected or failed a write."""
