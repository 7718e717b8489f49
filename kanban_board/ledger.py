"""Single-slot holder for the most recent reversible deletion."""
from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Optional, Union

from .models import BoardList, Card, DeletionKind, PendingDeletion, generate_id
from .timers import Countdown, QtCountdown

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10000


class LedgerState(enum.Enum):
    EMPTY = "empty"
    PENDING = "pending"


class UndoLedger:
    """Holds at most one :class:`PendingDeletion` at a time.

    A new ``stash`` while a record is pending finalizes the older record
    first; only the latest deletion can ever be undone. Each record gets a
    countdown bound to its entry id. When the countdown fires for the
    record that is still pending, ``on_expire`` is called (or the ledger
    discards the record itself when no hook is set). Fires for records that
    were already resolved are ignored.

    ``on_discard`` receives every record that is finalized, whatever the
    reason: explicit discard, displacement by a newer deletion, or expiry.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        timer_factory: Callable[[], Countdown] = QtCountdown,
        on_expire: Optional[Callable[[], None]] = None,
        on_discard: Optional[Callable[[PendingDeletion], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms
        self.on_expire = on_expire
        self.on_discard = on_discard
        self._timer_factory = timer_factory
        self._clock = clock
        self._record: Optional[PendingDeletion] = None
        self._countdown: Optional[Countdown] = None

    @property
    def state(self) -> LedgerState:
        return LedgerState.PENDING if self._record is not None else LedgerState.EMPTY

    def peek(self) -> Optional[PendingDeletion]:
        return self._record

    def is_pending(self, item_id: str) -> bool:
        return self._record is not None and self._record.item_id == item_id

    def remaining_ms(self) -> int:
        if self._record is None or self._countdown is None:
            return 0
        return self._countdown.remaining_ms()

    def stash(
        self,
        item: Union[Card, BoardList],
        container_id: str,
        position: int,
        kind: DeletionKind,
    ) -> str:
        if self._record is not None:
            logger.info(
                "Finalizing %s %s to make room for a newer deletion",
                self._record.kind.value,
                self._record.item_id,
            )
            self.resolve_discard()
        entry_id = generate_id("undo")
        self._record = PendingDeletion(
            entry_id=entry_id,
            item=item,
            container_id=container_id,
            position=position,
            kind=kind,
            created_at=self._clock(),
            timeout_ms=self.timeout_ms,
        )
        self._countdown = self._timer_factory()
        self._countdown.start(self.timeout_ms, lambda: self._expire(entry_id))
        logger.debug("Stashed %s %s as %s", kind.value, item.id, entry_id)
        return entry_id

    def resolve_restore(self) -> Optional[PendingDeletion]:
        record = self._take()
        if record is not None:
            logger.debug("Releasing %s for restore", record.entry_id)
        return record

    def resolve_discard(self) -> Optional[PendingDeletion]:
        record = self._take()
        if record is None:
            return None
        logger.debug("Discarding %s permanently", record.entry_id)
        if self.on_discard is not None:
            self.on_discard(record)
        return record

    def forget(self) -> Optional[PendingDeletion]:
        """Drop the record without finalizing it; the item is already gone elsewhere."""
        record = self._take()
        if record is not None:
            logger.debug("Forgetting %s", record.entry_id)
        return record

    def clear(self) -> None:
        self.resolve_discard()

    def _take(self) -> Optional[PendingDeletion]:
        record, self._record = self._record, None
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None
        return record

    def _expire(self, entry_id: str) -> None:
        if self._record is None or self._record.entry_id != entry_id:
            logger.debug("Ignoring stale expiry for %s", entry_id)
            return
        logger.info("Undo window closed for %s", entry_id)
        if self.on_expire is not None:
            self.on_expire()
        else:
            self.resolve_discard()
