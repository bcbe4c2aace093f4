"""Output filename templating and archive discovery."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .create import ARCHIVE_SUFFIX
from .errors import FilesystemError, ValidationError
from .types import ArchiveInfo

PLACEHOLDER_CWD = "<cwd>"
PLACEHOLDER_TIMESTAMP = "<timestamp>"
PLACEHOLDER_VERSION = "<version>"


def format_timestamp(fmt: str, now: Optional[datetime] = None) -> str:
    if not fmt:
        raise ValidationError("Timestamp format must not be empty")
    moment = now or datetime.now()
    try:
        return moment.strftime(fmt)
    except ValueError as exc:
        raise ValidationError(f"Invalid timestamp format {fmt!r}: {exc}") from exc


def render_output_name(
    template: str,
    *,
    cwd_name: str,
    timestamp: str,
    version: str,
    comment: Optional[str] = None,
    suffix: str = ARCHIVE_SUFFIX,
) -> str:
    """Substitute placeholders in *template* and append comment and extension.

    ``../<cwd>_<timestamp>`` with cwd ``proj`` becomes
    ``../proj_2024-01-01_00-00-00.tar.gz``.
    """

    if not template or not template.strip():
        raise ValidationError("Please define an output file path")
    name = (
        template.replace(PLACEHOLDER_CWD, cwd_name)
        .replace(PLACEHOLDER_TIMESTAMP, timestamp)
        .replace(PLACEHOLDER_VERSION, version)
    )
    if comment and comment.strip():
        name += f" - {comment.strip()}"
    return name + suffix


def list_archives(directory: Path) -> List[ArchiveInfo]:
    """Return the archives found in *directory*, newest first."""

    base = Path(directory)
    if not base.is_dir():
        return []
    items: List[ArchiveInfo] = []
    try:
        for child in base.iterdir():
            if not child.is_file() or not child.name.endswith(ARCHIVE_SUFFIX):
                continue
            stat = child.stat()
            items.append(ArchiveInfo(path=child, size_bytes=stat.st_size, modified=stat.st_mtime))
    except OSError as exc:
        raise FilesystemError(f"Cannot list archives in {base}: {exc}") from exc
    items.sort(key=lambda info: info.name)
    items.sort(key=lambda info: info.modified, reverse=True)
    return items


__all__ = ["format_timestamp", "list_archives", "render_output_name"]
