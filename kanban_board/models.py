"""Domain models for the Kanban board."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union
import uuid


def current_timestamp() -> str:
    """Return a timestamp string in UTC using the application format."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _require_record(record: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(record, Mapping) or not record.get("id"):
        raise ValueError(f"Invalid {kind} record: {record!r}")
    return record


def _position(data: Mapping[str, Any]) -> int:
    try:
        return int(data.get("position") or 0)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid position in record: {data.get('position')!r}") from None


@dataclass
class Card:
    id: str
    list_id: str
    title: str
    description: str = ""
    position: int = 0
    status: Optional[str] = None
    priority: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Any) -> "Card":
        """Build a card from a backend row (snake_case keys)."""
        data = _require_record(record, "card")
        return cls(
            id=str(data["id"]),
            list_id=str(data.get("list_id") or ""),
            title=data.get("title") or "",
            description=data.get("description") or "",
            position=_position(data),
            status=data.get("status"),
            priority=data.get("priority"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class BoardList:
    id: str
    title: str
    position: int = 0
    cards: List[Card] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "position": self.position}

    @classmethod
    def from_record(cls, record: Any) -> "BoardList":
        data = _require_record(record, "list")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            position=_position(data),
        )


@dataclass
class Board:
    id: str
    title: str
    lists: List[BoardList] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "lists": [
                {**board_list.to_record(), "cards": [c.to_record() for c in board_list.cards]}
                for board_list in self.lists
            ],
        }


class DeletionKind(enum.Enum):
    CARD = "card"
    LIST = "list"


@dataclass(frozen=True)
class PendingDeletion:
    """A soft-deleted card or list waiting to be restored or discarded."""

    entry_id: str
    item: Union[Card, BoardList]
    container_id: str
    position: int
    kind: DeletionKind
    created_at: float
    timeout_ms: int

    @property
    def item_id(self) -> str:
        return self.item.id

    @property
    def title(self) -> str:
        return self.item.title
