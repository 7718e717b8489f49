"""Logging helpers."""
from __future__ import annotations

import logging
from logging import handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_path: Path, level: str = "INFO", console: bool = False) -> None:
    """Send application logs to a rotating file, optionally echoing to stderr."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    targets: list = [
        handlers.RotatingFileHandler(log_path, maxBytes=512000, backupCount=3)
    ]
    if console:
        targets.append(logging.StreamHandler())
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=targets,
        force=True,
    )
