from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any

from uvicorn.config import LOGGING_CONFIG

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_path: Path, level: int = logging.DEBUG) -> None:
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("scholarverse")
    root.setLevel(level)
    root.addHandler(handler)


def build_uvicorn_log_config(log_path: Path) -> dict[str, Any]:
    """Uvicorn's console logging, with server and access lines also kept in the app log."""
    config = deepcopy(LOGGING_CONFIG)
    config["formatters"]["file"] = {"format": LOG_FORMAT}
    config["handlers"]["file"] = {
        "class": "logging.FileHandler",
        "filename": str(log_path),
        "encoding": "utf-8",
        "formatter": "file",
    }
    for name in ("uvicorn", "uvicorn.access"):
        logger = config["loggers"].setdefault(name, {})
        logger["handlers"] = [*logger.get("handlers", []), "file"]
    return config
