"""Common dataclasses shared across archive modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List


@dataclass(slots=True)
class ArchiveStats:
    """Running totals reported while an archive is written."""

    file_count: int = 0
    directory_count: int = 0
    total_bytes: int = 0
    content_bytes: int = 0


@dataclass(slots=True)
class ArchiveInfo:
    path: Path
    size_bytes: int
    modified: float

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def modified_utc(self) -> str:
        return datetime.fromtimestamp(self.modified, tz=timezone.utc).isoformat()


@dataclass(slots=True)
class RestoreResult:
    archive: Path
    deleted: List[str] = field(default_factory=list)
    extracted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


__all__ = ["ArchiveInfo", "ArchiveStats", "RestoreResult"]
