"""Verify that an archive can be read back in full."""
from __future__ import annotations

import hashlib
import tarfile
from pathlib import Path
from typing import Dict, Optional

from .errors import ArchiveVerificationError
from .index import entry_name, open_archive
from .logs import ArchiveLogger


def _digest(archive: tarfile.TarFile, member: tarfile.TarInfo) -> str:
    handle = archive.extractfile(member)
    if handle is None:
        raise ArchiveVerificationError(f"unreadable entry {member.name}")
    digest = hashlib.sha256()
    size = 0
    with handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
            size += len(chunk)
    if size != member.size:
        raise ArchiveVerificationError(f"size mismatch for {member.name}: {size} != {member.size}")
    return digest.hexdigest()


def verify_archive(
    archive_path: Path,
    *,
    logger: ArchiveLogger,
    expected: Optional[int] = None,
) -> Dict[str, object]:
    """Read every member of *archive_path* and return a short report.

    Raises :class:`ArchiveVerificationError` when a member is truncated, the
    compressed stream is corrupt, or the entry count differs from *expected*.
    """

    checksums: Dict[str, str] = {}
    count = 0
    with open_archive(archive_path) as archive:
        try:
            for member in archive:
                count += 1
                if member.isreg():
                    checksums[entry_name(member)] = _digest(archive, member)
        except (OSError, EOFError, tarfile.TarError) as exc:
            logger.error("archive_verify_failed", path=str(archive_path), error=str(exc))
            raise ArchiveVerificationError(f"corrupt archive {archive_path}: {exc}") from exc
    if expected is not None and count != expected:
        logger.error("archive_verify_failed", path=str(archive_path), expected=expected, found=count)
        raise ArchiveVerificationError(f"{archive_path} holds {count} entries, expected {expected}")
    logger.event(event="archive_verified", phase="verify", ok=True, path=str(archive_path), entries=count)
    return {
        "path": str(archive_path),
        "entries": count,
        "files": len(checksums),
        "sha256": checksums,
    }


__all__ = ["verify_archive"]
