from __future__ import annotations

from collections import defaultdict
from typing import Callable, Dict, List, Optional

import pytest

from kanban_board.events import EventBus
from kanban_board.persistence import PersistenceQueue
from kanban_board.storage import JsonBoardBackend
from kanban_board.store import BoardStore
from kanban_board.timers import Countdown
from kanban_board.undo import UndoCoordinator


class FakeCountdown(Countdown):
    def __init__(self, timers: "FakeTimers") -> None:
        self._timers = timers
        self._deadline = 0
        self._callback: Optional[Callable[[], None]] = None
        self._active = False

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._deadline = self._timers.now + interval_ms
        self._callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False
        self._callback = None

    def remaining_ms(self) -> int:
        return max(0, self._deadline - self._timers.now) if self._active else 0

    @property
    def active(self) -> bool:
        return self._active

    def fire(self) -> None:
        """Fire regardless of state, like a timer event already queued."""
        callback = self._callback
        self._active = False
        if callback is not None:
            callback()


class FakeTimers:
    """Timer factory driven by a manual clock (milliseconds)."""

    def __init__(self) -> None:
        self.now = 0
        self.created: List[FakeCountdown] = []

    def __call__(self) -> FakeCountdown:
        countdown = FakeCountdown(self)
        self.created.append(countdown)
        return countdown

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [t for t in self.created if t.active and t._deadline <= target]
            if not due:
                break
            countdown = min(due, key=lambda t: t._deadline)
            self.now = countdown._deadline
            countdown.fire()
        self.now = target

    @property
    def active(self) -> List[FakeCountdown]:
        return [t for t in self.created if t.active]


def immediate(callback: Callable[[], None]) -> None:
    callback()


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus: EventBus) -> Dict[str, List[dict]]:
    recorded: Dict[str, List[dict]] = defaultdict(list)
    original_emit = bus.emit

    def recording_emit(event, payload=None):
        recorded[event].append(payload or {})
        original_emit(event, payload)

    bus.emit = recording_emit  # type: ignore[assignment]
    return recorded


@pytest.fixture
def backend(tmp_path) -> JsonBoardBackend:
    backend = JsonBoardBackend(tmp_path / "board.json")
    backend.create_list({"id": "todo", "title": "To Do", "position": 0})
    backend.create_list({"id": "done", "title": "Done", "position": 1})
    for position, card_id in enumerate(["a", "b", "c", "d"]):
        backend.create_card(
            {"id": card_id, "list_id": "todo", "title": f"Card {card_id.upper()}", "position": position}
        )
    for position, card_id in enumerate(["x", "y"]):
        backend.create_card(
            {"id": card_id, "list_id": "done", "title": f"Card {card_id.upper()}", "position": position}
        )
    return backend


@pytest.fixture
def store(backend: JsonBoardBackend) -> BoardStore:
    store = BoardStore()
    store.load(backend)
    return store


@pytest.fixture
def persistence(backend: JsonBoardBackend, bus: EventBus) -> PersistenceQueue:
    return PersistenceQueue(backend, bus, defer=immediate)


@pytest.fixture
def coordinator(store, bus, persistence, timers) -> UndoCoordinator:
    return UndoCoordinator(store, bus, persistence, timeout_ms=10000, timer_factory=timers)

