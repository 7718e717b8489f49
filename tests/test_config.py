import json
import logging
from pathlib import Path

import pytest

from kanban_board.config import AppConfig
from kanban_board.logging_utils import configure_logging


def test_missing_file_gives_defaults(tmp_path):
    config = AppConfig.load(tmp_path / "absent.json")
    assert config.undo_timeout_ms == 10000
    assert config.toast_duration_ms == 3000
    assert config.error_toast_duration_ms == 5000
    assert config.log_level == "INFO"


def test_save_and_load(tmp_path):
    path = tmp_path / "cfg" / "config.json"
    AppConfig(data_path=tmp_path / "b.json", log_level="debug", undo_timeout_ms=4000).save(path)

    loaded = AppConfig.load(path)
    assert loaded.data_path == tmp_path / "b.json"
    assert isinstance(loaded.log_path, Path)
    assert loaded.log_level == "DEBUG"
    assert loaded.undo_timeout_ms == 4000


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"undo_timeout_ms": 2000, "theme": "dark"}))
    with caplog.at_level(logging.WARNING):
        config = AppConfig.load(path)
    assert config.undo_timeout_ms == 2000
    assert "theme" in caplog.text


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_bad_files(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ValueError):
        AppConfig.load(path)


@pytest.mark.parametrize("value", [0, -5, "10", True])
def test_timeouts_must_be_positive_ints(value):
    with pytest.raises(ValueError):
        AppConfig(undo_timeout_ms=value)


def test_configure_logging_writes_to_file(tmp_path):
    log_path = tmp_path / "logs" / "board.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_path, "debug")
        logging.getLogger("kanban_board.test").debug("hello from test")
        for handler in root.handlers:
            handler.flush()
        text = log_path.read_text()
        assert "DEBUG kanban_board.test hello from test" in text
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
