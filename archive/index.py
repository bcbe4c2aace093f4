"""Read the entry index of an existing archive without extracting it."""
from __future__ import annotations

import tarfile
from pathlib import Path
from typing import Iterable, List, Optional, Set

from .errors import ArchiveReadError
from .patterns import normalize_path

COMMENT_HEADER = "comment"


def entry_name(member: tarfile.TarInfo) -> str:
    name = normalize_path(member.name).rstrip("/")
    return name + "/" if member.isdir() else name


def open_archive(archive_path: Path) -> tarfile.TarFile:
    path = Path(archive_path)
    if not path.is_file():
        raise ArchiveReadError(f"Archive not found: {path}")
    try:
        return tarfile.open(path, "r:*")
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveReadError(f"Cannot open archive {path}: {exc}") from exc


def list_entries(archive_path: Path) -> List[str]:
    """Return the normalized entry paths stored in *archive_path*, in archive order."""

    with open_archive(archive_path) as archive:
        try:
            members = archive.getmembers()
        except (OSError, tarfile.TarError, EOFError) as exc:
            raise ArchiveReadError(f"Cannot read archive {archive_path}: {exc}") from exc
    seen: Set[str] = set()
    entries: List[str] = []
    for member in members:
        name = entry_name(member)
        if not name or name == "/" or name in seen:
            continue
        seen.add(name)
        entries.append(name)
    return entries


def read_comment(archive_path: Path) -> Optional[str]:
    with open_archive(archive_path) as archive:
        return archive.pax_headers.get(COMMENT_HEADER) or None


def with_parents(entries: Iterable[str]) -> Set[str]:
    """Return *entries* plus every directory implied by their paths."""

    result: Set[str] = set()
    for entry in entries:
        result.add(entry)
        parts = entry.rstrip("/").split("/")
        for depth in range(1, len(parts)):
            result.add("/".join(parts[:depth]) + "/")
    return result


__all__ = ["COMMENT_HEADER", "entry_name", "list_entries", "open_archive", "read_comment", "with_parents"]
