"""Write new project archives."""
from __future__ import annotations

import os
import tarfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import ArchiveWriteError, ValidationError
from .index import COMMENT_HEADER
from .listing import filter_paths, list_all, traversal_key
from .logs import ArchiveLogger
from .types import ArchiveStats
from .verify import verify_archive

ARCHIVE_SUFFIX = ".tar.gz"

ProgressCallback = Callable[[str, ArchiveStats], None]


def archive_name(relative: str) -> str:
    """Return the name *relative* is stored under inside the archive."""

    name = relative.rstrip("/")
    # GNU tar reads a leading "@" as an archive-concatenation directive.
    if name.startswith("@"):
        name = "./" + name
    return name


def _relative_inside(path: Path, base_dir: Path) -> Optional[str]:
    try:
        return path.resolve().relative_to(base_dir.resolve()).as_posix()
    except ValueError:
        return None


def _with_parent_dirs(selected: Sequence[str]) -> List[str]:
    wanted = set(selected)
    for path in selected:
        parts = path.rstrip("/").split("/")
        for depth in range(1, len(parts)):
            wanted.add("/".join(parts[:depth]) + "/")
    return sorted(wanted, key=traversal_key)


def select_entries(
    base_dir: Path,
    include: Sequence[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool = False,
    skip: Sequence[str] = (),
) -> List[str]:
    """Return the paths an archive of *base_dir* would hold, in write order."""

    selected = [
        path
        for path in filter_paths(list_all(base_dir), include, exclude, match_dotfiles=match_dotfiles)
        if path not in skip
    ]
    return _with_parent_dirs(selected)


def create_archive(
    base_dir: Path,
    include: Sequence[str],
    exclude: Sequence[str],
    destination: Path,
    *,
    logger: ArchiveLogger,
    match_dotfiles: bool = False,
    level: int = 9,
    comment: Optional[str] = None,
    on_entry: Optional[ProgressCallback] = None,
    verify: bool = True,
) -> ArchiveStats:
    base = Path(base_dir)
    destination = Path(destination)
    if not include:
        raise ValidationError("At least one include pattern is required")
    if not 0 <= int(level) <= 9:
        raise ValidationError(f"Compression level must be between 0 and 9, got {level}")

    skip = []
    inside = _relative_inside(destination, base)
    if inside:
        skip.append(inside)
    entries = select_entries(base, include, exclude, match_dotfiles=match_dotfiles, skip=skip)

    logger.event(event="archive_start", phase="create", ok=True, path=str(destination), entries=len(entries))
    stats = ArchiveStats()
    written = 0
    pax_headers = {COMMENT_HEADER: comment} if comment else {}
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("xb") as raw:
            with tarfile.open(
                fileobj=raw,
                mode="w:gz",
                compresslevel=int(level),
                format=tarfile.PAX_FORMAT,
                pax_headers=pax_headers,
            ) as archive:
                for relative in entries:
                    source = base / relative.rstrip("/")
                    info = archive.gettarinfo(os.fspath(source), arcname=archive_name(relative))
                    if info is None:
                        logger.warning("archive_skip_unsupported", path=relative)
                        continue
                    if info.isreg():
                        with source.open("rb") as handle:
                            archive.addfile(info, handle)
                        stats.file_count += 1
                        stats.content_bytes += info.size
                    else:
                        archive.addfile(info)
                        if info.isdir():
                            stats.directory_count += 1
                        else:
                            stats.file_count += 1
                    written += 1
                    stats.total_bytes = raw.tell()
                    if on_entry is not None:
                        on_entry(relative, stats)
            stats.total_bytes = raw.tell()
    except FileExistsError as exc:
        raise ArchiveWriteError(f"Archive already exists: {destination}") from exc
    except (OSError, tarfile.TarError) as exc:
        logger.error("archive_failed", path=str(destination), error=str(exc))
        raise ArchiveWriteError(f"Failed to write archive {destination}: {exc}") from exc

    if verify:
        verify_archive(destination, expected=written, logger=logger)

    logger.event(
        event="archive_complete",
        phase="create",
        ok=True,
        path=str(destination),
        files=stats.file_count,
        directories=stats.directory_count,
        bytes=stats.total_bytes,
    )
    return stats


__all__ = ["ARCHIVE_SUFFIX", "archive_name", "create_archive", "select_entries"]
