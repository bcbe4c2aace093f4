from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import get_logs_dir, resolve_state_dir

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in ("path", "archive", "pattern"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = str(value)
        return json.dumps(payload, ensure_ascii=False)


def configure_console_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=CONSOLE_FORMAT)
    # Records propagated from the JSON file logger must not reach the console below *level*.
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)


def configure_json_logging(name: str = "zipadeedoodah", state_dir: Optional[Path] = None) -> logging.Logger:
    """Attach a JSON lines file handler to *name* once and return the logger."""

    logs_dir = get_logs_dir(state_dir or resolve_state_dir())
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / "zipadeedoodah.log.jsonl"
    logger = logging.getLogger(name)
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler) and getattr(handler, "baseFilename", None) == str(log_path):
            break
    else:
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
    return logger
