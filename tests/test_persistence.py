from kanban_board.errors import PersistenceError
from kanban_board.events import NOTIFICATION_SHOW
from kanban_board.persistence import PersistenceQueue


class FlakyBackend:
    def __init__(self):
        self.calls = []

    def delete_card(self, card_id):
        self.calls.append(("delete_card", card_id))
        raise PersistenceError("connection reset")

    def update_card(self, card_id, **fields):
        self.calls.append(("update_card", card_id, fields))


def test_writes_wait_for_the_event_loop(bus):
    deferred = []
    backend = FlakyBackend()
    queue = PersistenceQueue(backend, bus, defer=deferred.append)

    queue.update_card("a", title="One")
    queue.update_card("b", title="Two")
    assert backend.calls == []
    assert queue.queued == 2

    deferred[0]()
    assert [call[1] for call in backend.calls] == ["a", "b"]
    assert queue.queued == 0

    deferred[1]()
    assert len(backend.calls) == 2


def test_failure_shows_error_toast_and_continues(bus, events):
    backend = FlakyBackend()
    queue = PersistenceQueue(backend, bus, defer=lambda cb: None)

    queue.delete_card("a")
    queue.update_card("b", title="Still runs")
    queue.drain()

    assert queue.failures == 1
    assert backend.calls[-1] == ("update_card", "b", {"title": "Still runs"})
    toast = events[NOTIFICATION_SHOW][0]
    assert toast["kind"] == "error"
    assert toast["title"] == "Sync failed"


def test_failed_write_does_not_roll_back_the_board(coordinator, store, persistence, backend, events):
    backend.delete_card("b")

    coordinator.delete_with_undo("a")
    assert persistence.failures == 1
    assert not store.has_card("a")
    assert events[NOTIFICATION_SHOW][0]["kind"] == "error"


def test_position_saves_skip_empty_lists(bus):
    calls = []
    queue = PersistenceQueue(FlakyBackend(), bus, defer=calls.append)
    queue.save_card_positions([])
    queue.save_list_positions([])
    assert calls == []
