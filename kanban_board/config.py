"""Application configuration stored as JSON next to the board data."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".local_share"
CONFIG_PATH = DATA_DIR / "kanban_board_config.json"

_TIMEOUT_FIELDS = ("undo_timeout_ms", "toast_duration_ms", "error_toast_duration_ms")


@dataclass
class AppConfig:
    data_path: Path = field(default_factory=lambda: DATA_DIR / "kanban_board.json")
    log_path: Path = field(default_factory=lambda: DATA_DIR / "kanban_board.log")
    log_level: str = "INFO"
    undo_timeout_ms: int = 10000
    toast_duration_ms: int = 3000
    error_toast_duration_ms: int = 5000

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path).expanduser()
        self.log_path = Path(self.log_path).expanduser()
        self.log_level = str(self.log_level).upper()
        for name in _TIMEOUT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def load(cls, path: Path = CONFIG_PATH) -> "AppConfig":
        if not path.exists():
            return cls()
        try:
            stored = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed config file {path}: {exc}") from exc
        if not isinstance(stored, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        known = {f.name for f in fields(cls)}
        for key in sorted(set(stored) - known):
            logger.warning("Ignoring unknown config key %r in %s", key, path)
        return cls(**{key: value for key, value in stored.items() if key in known})

    def save(self, path: Path = CONFIG_PATH) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = asdict(self)
        data["data_path"] = str(self.data_path)
        data["log_path"] = str(self.log_path)
        path.write_text(json.dumps(data, indent=2))
