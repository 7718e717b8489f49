"""JSON file backend implementing the board persistence API."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .errors import PersistenceError
from .models import current_timestamp

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"
CARD_FIELDS = ("title", "description", "status", "priority", "list_id", "position")
LIST_FIELDS = ("title", "position")


class JsonBoardBackend:
    """Stores list and card rows keyed by id in a single JSON document."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.lists: Dict[str, Dict[str, Any]] = {}
        self.cards: Dict[str, Dict[str, Any]] = {}
        self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> None:
        if not self.path.exists():
            self._save()
            return
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt board file {self.path}: {exc}") from exc
        self._load_from_dict(data)

    def _save(self) -> None:
        data = {
            "lists": list(self.lists.values()),
            "cards": list(self.cards.values()),
            "schema_version": SCHEMA_VERSION,
        }
        try:
            self.path.write_text(json.dumps(data, indent=2))
        except OSError as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc

    def export_to(self, output_path: Path) -> None:
        self._save()
        output_path.write_text(self.path.read_text())

    def import_from(self, input_path: Path, merge: bool = False) -> None:
        data = json.loads(input_path.read_text())
        version = data.get("schema_version")
        if version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema version: {version}")
        if not merge:
            self.lists.clear()
            self.cards.clear()
        self._load_from_dict(data)
        self._save()

    def _load_from_dict(self, data: Mapping[str, Any]) -> None:
        for list_data in data.get("lists", []):
            self.lists.setdefault(str(list_data["id"]), dict(list_data))
        for card_data in data.get("cards", []):
            if card_data.get("list_id") not in self.lists:
                logger.warning("Skipping orphan card %s", card_data.get("id"))
                continue
            self.cards.setdefault(str(card_data["id"]), dict(card_data))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def fetch_board(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "lists": [dict(row) for row in self.lists.values()],
            "cards": [dict(row) for row in self.cards.values()],
        }

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    def create_list(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        list_id = str(record["id"])
        if list_id in self.lists:
            raise PersistenceError(f"List {list_id} already exists")
        row = {key: record.get(key) for key in ("id",) + LIST_FIELDS}
        row["created_at"] = current_timestamp()
        self.lists[list_id] = row
        self._save()
        return dict(row)

    def update_list(self, list_id: str, **fields: Any) -> None:
        row = self._list_row(list_id)
        row.update({k: v for k, v in fields.items() if k in LIST_FIELDS})
        self._save()

    def update_list_positions(self, updates: Iterable[Mapping[str, Any]]) -> None:
        checked = [(self._list_row(update["id"]), update) for update in updates]
        for row, update in checked:
            row["position"] = update["position"]
        self._save()

    def delete_list(self, list_id: str) -> None:
        self._list_row(list_id)
        for card_id, card in list(self.cards.items()):
            if card.get("list_id") == list_id:
                del self.cards[card_id]
        del self.lists[list_id]
        self._save()

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def create_card(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        card_id = str(record["id"])
        if card_id in self.cards:
            raise PersistenceError(f"Card {card_id} already exists")
        self._list_row(record["list_id"])
        row = {key: record.get(key) for key in ("id",) + CARD_FIELDS}
        row["created_at"] = row["updated_at"] = current_timestamp()
        self.cards[card_id] = row
        self._save()
        return dict(row)

    def update_card(self, card_id: str, **fields: Any) -> None:
        row = self._card_row(card_id)
        row.update({k: v for k, v in fields.items() if k in CARD_FIELDS})
        row["updated_at"] = current_timestamp()
        self._save()

    def update_card_positions(self, updates: Iterable[Mapping[str, Any]]) -> None:
        """Apply ``{id, list_id, position}`` updates in one write."""
        checked = []
        for update in updates:
            self._list_row(update["list_id"])
            checked.append((self._card_row(update["id"]), update))
        for row, update in checked:
            row["list_id"] = update["list_id"]
            row["position"] = update["position"]
        self._save()

    def delete_card(self, card_id: str) -> None:
        self._card_row(card_id)
        del self.cards[card_id]
        self._save()

    def _card_row(self, card_id: str) -> Dict[str, Any]:
        try:
            return self.cards[card_id]
        except KeyError:
            raise PersistenceError(f"Unknown card {card_id}") from None

    def _list_row(self, list_id: str) -> Dict[str, Any]:
        try:
            return self.lists[list_id]
        except KeyError:
            raise PersistenceError(f"Unknown list {list_id}") from None
