"""Extract archives and reconcile the live tree against them."""
from __future__ import annotations

import tarfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ArchiveReadError, ArchiveToolError, FilesystemError, ValidationError
from .index import entry_name, list_entries, open_archive
from .logs import ArchiveLogger
from .patterns import normalize_path
from .reconcile import plan_deletions, plan_scoped_deletions
from .types import RestoreResult


def resolve_selection(entries: Sequence[str], selection: Iterable[str]) -> List[str]:
    """Map user picks onto archive entries; every pick must resolve."""

    available = set(entries)
    resolved: List[str] = []
    unresolved: List[str] = []
    for raw in selection:
        name = normalize_path(raw)
        if not name:
            continue
        if name in available:
            resolved.append(name)
        elif name.rstrip("/") + "/" in available:
            resolved.append(name.rstrip("/") + "/")
        elif name.rstrip("/") in available:
            resolved.append(name.rstrip("/"))
        else:
            unresolved.append(raw)
    if unresolved:
        raise ValidationError(f"Not in archive: {', '.join(unresolved)}")
    if not resolved:
        raise ValidationError("Nothing selected")
    return list(dict.fromkeys(resolved))


def _selected(name: str, selection: Sequence[str]) -> bool:
    for item in selection:
        if name == item:
            return True
        if item.endswith("/") and name.startswith(item):
            return True
    return False


def _is_current(target: Path, member: tarfile.TarInfo) -> bool:
    try:
        return target.stat().st_mtime >= member.mtime
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise FilesystemError(f"Cannot stat {target}: {exc}") from exc


def _extract(
    archive_path: Path,
    target_dir: Path,
    *,
    logger: ArchiveLogger,
    newer_only: bool,
    selection: Optional[Sequence[str]] = None,
) -> Tuple[List[str], List[str]]:
    target = Path(target_dir)
    extracted: List[str] = []
    skipped: List[str] = []
    with open_archive(archive_path) as archive:
        try:
            members = archive.getmembers()
        except (OSError, EOFError, tarfile.TarError) as exc:
            raise ArchiveReadError(f"Cannot read archive {archive_path}: {exc}") from exc
        chosen: List[tarfile.TarInfo] = []
        for member in members:
            name = entry_name(member)
            if selection is not None and not _selected(name, selection):
                continue
            if newer_only and not member.isdir() and _is_current(target / name.rstrip("/"), member):
                skipped.append(name)
                continue
            chosen.append(member)
            extracted.append(name)
        try:
            archive.extractall(target, members=chosen, filter="data")
        except tarfile.FilterError as exc:
            raise ArchiveReadError(f"Refusing unsafe entry in {archive_path}: {exc}") from exc
        except (EOFError, tarfile.TarError) as exc:
            raise ArchiveReadError(f"Cannot extract {archive_path}: {exc}") from exc
        except OSError as exc:
            raise FilesystemError(f"Cannot extract {archive_path} into {target}: {exc}") from exc
    logger.info("extract_done", archive=str(archive_path), extracted=len(extracted), skipped=len(skipped))
    return extracted, skipped


def delete_paths(base_dir: Path, paths: Sequence[str], *, logger: ArchiveLogger) -> List[str]:
    """Delete *paths* in order; directories are only ever removed when empty."""

    base = Path(base_dir)
    deleted: List[str] = []
    for relative in paths:
        target = base / relative.rstrip("/")
        try:
            if relative.endswith("/") and not target.is_symlink():
                target.rmdir()
            else:
                target.unlink()
        except FileNotFoundError:
            logger.debug("delete_skip_missing", path=relative)
            continue
        except OSError as exc:
            logger.error("delete_failed", path=relative, error=str(exc))
            raise FilesystemError(f"Cannot delete {target}: {exc}") from exc
        deleted.append(relative)
    return deleted


def extract_archive(
    archive_path: Path,
    target_dir: Path,
    *,
    logger: ArchiveLogger,
    newer_only: bool = False,
) -> RestoreResult:
    extracted, skipped = _extract(archive_path, target_dir, logger=logger, newer_only=newer_only)
    logger.event(event="archive_extracted", phase="extract", ok=True, archive=str(archive_path), newer_only=newer_only)
    return RestoreResult(archive=Path(archive_path), extracted=extracted, skipped=skipped)


def extract_some(
    archive_path: Path,
    target_dir: Path,
    selection: Iterable[str],
    *,
    logger: ArchiveLogger,
    newer_only: bool = False,
) -> RestoreResult:
    resolved = resolve_selection(list_entries(archive_path), selection)
    extracted, skipped = _extract(
        archive_path,
        target_dir,
        logger=logger,
        newer_only=newer_only,
        selection=resolved,
    )
    logger.event(event="archive_extracted", phase="extract_some", ok=True, archive=str(archive_path), selected=resolved)
    return RestoreResult(archive=Path(archive_path), extracted=extracted, skipped=skipped)


def restore_archive(
    archive_path: Path,
    base_dir: Path,
    *,
    exclude: Sequence[str],
    logger: ArchiveLogger,
    newer_only: bool = False,
    match_dotfiles: bool = False,
    protected: Sequence[str] = (),
) -> RestoreResult:
    """Delete live paths the archive lacks, then extract the archive over *base_dir*."""

    logger.event(event="restore_start", phase="restore", ok=True, archive=str(archive_path), newer_only=newer_only)
    try:
        entries = list_entries(archive_path)
        plan = plan_deletions(
            base_dir,
            entries,
            exclude,
            match_dotfiles=match_dotfiles,
            protected=protected,
        )
        deleted = delete_paths(base_dir, plan, logger=logger)
        extracted, skipped = _extract(archive_path, base_dir, logger=logger, newer_only=newer_only)
    except ArchiveToolError as exc:
        logger.error("restore_failed", archive=str(archive_path), error=str(exc))
        raise
    logger.event(event="archive_restored", phase="restore", ok=True, archive=str(archive_path), deleted=len(deleted))
    return RestoreResult(archive=Path(archive_path), deleted=deleted, extracted=extracted, skipped=skipped)


def restore_some(
    archive_path: Path,
    base_dir: Path,
    selection: Iterable[str],
    *,
    exclude: Sequence[str],
    logger: ArchiveLogger,
    newer_only: bool = False,
    match_dotfiles: bool = False,
    protected: Sequence[str] = (),
) -> RestoreResult:
    """Restore only the selected entries, pruning extras inside selected directories."""

    logger.event(event="restore_start", phase="restore_some", ok=True, archive=str(archive_path))
    try:
        entries = list_entries(archive_path)
        resolved = resolve_selection(entries, selection)
        plan = plan_scoped_deletions(
            base_dir,
            resolved,
            entries,
            exclude,
            match_dotfiles=match_dotfiles,
            protected=protected,
        )
        deleted = delete_paths(base_dir, plan, logger=logger)
        extracted, skipped = _extract(
            archive_path,
            base_dir,
            logger=logger,
            newer_only=newer_only,
            selection=resolved,
        )
    except ArchiveToolError as exc:
        logger.error("restore_failed", archive=str(archive_path), error=str(exc))
        raise
    logger.event(event="archive_restored", phase="restore_some", ok=True, archive=str(archive_path), deleted=len(deleted))
    return RestoreResult(archive=Path(archive_path), deleted=deleted, extracted=extracted, skipped=skipped)


def delete_archive(archive_path: Path, *, logger: ArchiveLogger) -> bool:
    """Remove the archive file; returns ``False`` when it was already gone."""

    path = Path(archive_path)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("archive_delete_missing", path=str(path))
        return False
    except OSError as exc:
        logger.error("archive_delete_failed", path=str(path), error=str(exc))
        raise FilesystemError(f"Cannot delete archive {path}: {exc}") from exc
    logger.event(event="archive_deleted", phase="delete", ok=True, path=str(path))
    return True


__all__ = [
    "delete_archive",
    "delete_paths",
    "extract_archive",
    "extract_some",
    "resolve_selection",
    "restore_archive",
    "restore_some",
]
