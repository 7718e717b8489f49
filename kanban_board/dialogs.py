"""Request/response channel for confirm and text-input dialogs.

Code that needs an answer from the user issues a request with a callback
and returns to the event loop. Whatever shows the dialog answers with
``respond`` or ``cancel``, quoting the request id. Every request is
resolved exactly once, so a closed window still wakes its waiter with a
cancelled result.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .models import generate_id

logger = logging.getLogger(__name__)


class DialogKind(enum.Enum):
    CONFIRM = "confirm"
    TEXT = "text"


class DialogStatus(enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class DialogResult:
    request_id: str
    status: DialogStatus
    value: Any = None

    @property
    def confirmed(self) -> bool:
        return self.status is DialogStatus.CONFIRMED


@dataclass
class DialogRequest:
    id: str
    kind: DialogKind
    message: str
    title: str = ""
    options: Dict[str, Any] = field(default_factory=dict)


Callback = Callable[[DialogResult], None]


class DialogBroker:
    def __init__(self) -> None:
        self._waiting: Dict[str, Callback] = {}
        self._requests: Dict[str, DialogRequest] = {}
        self._presenters: List[Callable[[DialogRequest], None]] = []

    def add_presenter(self, presenter: Callable[[DialogRequest], None]) -> None:
        self._presenters.append(presenter)

    @property
    def open_requests(self) -> List[DialogRequest]:
        return list(self._requests.values())

    def request(
        self,
        kind: DialogKind,
        message: str,
        callback: Callback,
        title: str = "",
        **options: Any,
    ) -> str:
        request = DialogRequest(generate_id("dlg"), kind, message, title, dict(options))
        self._waiting[request.id] = callback
        self._requests[request.id] = request
        logger.debug("Dialog %s requested: %s", request.id, message)
        for presenter in list(self._presenters):
            presenter(request)
        return request.id

    def confirm(self, message: str, callback: Callback, title: str = "", **options: Any) -> str:
        return self.request(DialogKind.CONFIRM, message, callback, title, **options)

    def ask_text(
        self, message: str, callback: Callback, title: str = "", default: str = ""
    ) -> str:
        return self.request(DialogKind.TEXT, message, callback, title, default=default)

    def respond(self, request_id: str, value: Any = True) -> None:
        self._resolve(DialogResult(request_id, DialogStatus.CONFIRMED, value))

    def cancel(self, request_id: str) -> None:
        self._resolve(DialogResult(request_id, DialogStatus.CANCELLED))

    def cancel_all(self) -> None:
        for request_id in list(self._waiting):
            self.cancel(request_id)

    def _resolve(self, result: DialogResult) -> None:
        callback: Optional[Callback] = self._waiting.pop(result.request_id, None)
        self._requests.pop(result.request_id, None)
        if callback is None:
            logger.debug("Ignoring answer for unknown dialog %s", result.request_id)
            return
        logger.debug("Dialog %s %s", result.request_id, result.status.value)
        callback(result)
