from kanban_board.dialogs import DialogBroker, DialogKind, DialogStatus


def test_respond_resolves_once():
    broker = DialogBroker()
    results = []
    request_id = broker.confirm("Sure?", results.append, title="Delete", danger=True)

    assert broker.open_requests[0].options == {"danger": True}
    broker.respond(request_id)
    broker.respond(request_id)

    assert len(results) == 1
    assert results[0].confirmed
    assert broker.open_requests == []


def test_text_request_carries_value_and_default():
    broker = DialogBroker()
    shown = []
    results = []
    broker.add_presenter(shown.append)

    request_id = broker.ask_text("Name?", results.append, default="Backlog")
    assert shown[0].kind is DialogKind.TEXT
    assert shown[0].options["default"] == "Backlog"

    broker.respond(request_id, "Icebox")
    assert results[0].value == "Icebox"


def test_concurrent_requests_are_independent():
    broker = DialogBroker()
    first, second = [], []
    first_id = broker.confirm("one", first.append)
    second_id = broker.confirm("two", second.append)

    broker.cancel(second_id)
    broker.respond(first_id)

    assert first[0].status is DialogStatus.CONFIRMED
    assert second[0].status is DialogStatus.CANCELLED


def test_cancel_all_wakes_every_waiter():
    broker = DialogBroker()
    results = []
    broker.confirm("one", results.append)
    broker.ask_text("two", results.append)

    broker.cancel_all()

    assert [r.status for r in results] == [DialogStatus.CANCELLED] * 2
    assert not any(r.confirmed for r in results)


def test_unknown_id_is_ignored():
    DialogBroker().respond("dlg_missing")
