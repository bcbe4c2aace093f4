"""Structured JSONL event log for archive operations."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

LOGGER = logging.getLogger("zipadeedoodah.archive")


class ArchiveLogger:
    """Append one JSON object per archive event to ``logs/archive.jsonl``.

    Every line carries ``event``, ``ok`` and ``ts``; when the logger is created
    with a project root that root is stamped on each line as well so a
    single log can serve several projects.
    """

    def __init__(self, state_dir: Path, *, project: Optional[Path] = None) -> None:
        self._log_path = Path(state_dir) / "logs" / "archive.jsonl"
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._project = str(project) if project is not None else None
        self._lock = Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    # ------------------------------------------------------------------
    def _write(self, payload: Dict[str, Any], *, level: int) -> None:
        payload.setdefault("ts", datetime.now(timezone.utc).isoformat())
        if self._project is not None:
            payload.setdefault("project", self._project)
        line = json.dumps(payload, sort_keys=True, default=str)
        with self._lock:
            with self._log_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        LOGGER.log(level, "%s", line)

    def event(self, *, event: str, phase: str, ok: bool, **extra: Any) -> None:
        payload = {"event": event, "phase": phase, "ok": bool(ok), **extra}
        self._write(payload, level=logging.INFO if ok else logging.ERROR)

    def debug(self, event: str, **extra: Any) -> None:
        if LOGGER.isEnabledFor(logging.DEBUG):
            self._write({"event": event, **extra, "ok": True}, level=logging.DEBUG)

    def info(self, event: str, **extra: Any) -> None:
        self._write({"event": event, **extra, "ok": True}, level=logging.INFO)

    def warning(self, event: str, **extra: Any) -> None:
        self._write({"event": event, **extra, "ok": False}, level=logging.WARNING)

    def error(self, event: str, **extra: Any) -> None:
        self._write({"event": event, **extra, "ok": False}, level=logging.ERROR)


__all__ = ["ArchiveLogger", "LOGGER"]
