"""Public API for archive operations."""
from __future__ import annotations

import contextlib
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from core.options import Options
from core.paths import get_locks_dir, lock_path_for, relative_to_root, resolve_state_dir
from core.versioning import get_app_version

from .create import ProgressCallback, create_archive
from .errors import FilesystemError
from .index import list_entries, read_comment
from .logs import ArchiveLogger
from .naming import format_timestamp, list_archives, render_output_name
from .restore import delete_archive, extract_archive, extract_some, restore_archive, restore_some
from .types import ArchiveInfo, ArchiveStats, RestoreResult
from .verify import verify_archive


class _OperationGuard(contextlib.AbstractContextManager):
    """Hold an exclusive lock file for one project root while an operation runs."""

    def __init__(self, lock_path: Path, logger: ArchiveLogger, phase: str) -> None:
        self._lock_path = lock_path
        self._logger = logger
        self._phase = phase
        self._fd: Optional[int] = None

    def __enter__(self) -> None:
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._fd = os.open(self._lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError as exc:
            self._logger.error("operation_locked", phase=self._phase, lock=str(self._lock_path))
            raise FilesystemError(
                f"Another operation is running on this project (lock {self._lock_path}). "
                "Remove the lock file if no other instance is active."
            ) from exc
        except OSError as exc:
            raise FilesystemError(f"Cannot create lock file {self._lock_path}: {exc}") from exc
        os.write(self._fd, json.dumps({"pid": os.getpid(), "phase": self._phase}).encode("utf-8"))
        return None

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        with contextlib.suppress(FileNotFoundError):
            self._lock_path.unlink()
        return False


class ArchiveService:
    """Coordinate archive creation, inspection, extraction and restore for one project."""

    def __init__(
        self,
        base_dir: Path,
        options: Options,
        *,
        state_dir: Optional[Path] = None,
        logger: Optional[ArchiveLogger] = None,
        match_dotfiles: bool = False,
        level: int = 9,
    ) -> None:
        self._base_dir = Path(base_dir).resolve()
        self._options = options
        self._state_dir = Path(state_dir) if state_dir is not None else resolve_state_dir()
        self._logger = logger or ArchiveLogger(self._state_dir, project=self._base_dir)
        self._match_dotfiles = match_dotfiles
        self._level = level

    # ------------------------------------------------------------------
    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def options(self) -> Options:
        return self._options

    @property
    def archive_dir(self) -> Path:
        directory = Path(self._options.archive_directory).expanduser()
        if not directory.is_absolute():
            directory = self._base_dir / directory
        return directory.resolve()

    def _guard(self, phase: str) -> _OperationGuard:
        get_locks_dir(self._state_dir).mkdir(parents=True, exist_ok=True)
        return _OperationGuard(lock_path_for(self._state_dir, self._base_dir), self._logger, phase)

    def _protected(self, archive: Path) -> List[str]:
        # Archives stored inside the project must survive a restore.
        protected: List[str] = []
        directory = relative_to_root(self.archive_dir, self._base_dir)
        if directory:
            protected.append(directory + "/")
        candidates = [Path(archive)] + [info.path for info in self.list_archives()]
        for candidate in candidates:
            relative = relative_to_root(candidate, self._base_dir)
            if relative and relative not in protected:
                protected.append(relative)
        return protected

    # ------------------------------------------------------------------
    def output_path(self, comment: Optional[str] = None, *, now: Optional[datetime] = None) -> Path:
        name = render_output_name(
            self._options.output,
            cwd_name=self._base_dir.name,
            timestamp=format_timestamp(self._options.timestamp_format, now),
            version=get_app_version(),
            comment=comment,
        )
        path = Path(name).expanduser()
        if not path.is_absolute():
            path = self._base_dir / path
        return path.resolve()

    def create(
        self,
        comment: Optional[str] = None,
        *,
        on_entry: Optional[ProgressCallback] = None,
        now: Optional[datetime] = None,
    ) -> tuple[Path, ArchiveStats]:
        destination = self.output_path(comment, now=now)
        with self._guard("create"):
            stats = create_archive(
                self._base_dir,
                self._options.include,
                self._options.exclude,
                destination,
                logger=self._logger,
                match_dotfiles=self._match_dotfiles,
                level=self._level,
                comment=comment,
                on_entry=on_entry,
            )
        return destination, stats

    # ------------------------------------------------------------------
    def list_archives(self) -> List[ArchiveInfo]:
        return list_archives(self.archive_dir)

    def list_entries(self, archive: Path) -> List[str]:
        return list_entries(archive)

    def read_comment(self, archive: Path) -> Optional[str]:
        return read_comment(archive)

    def verify(self, archive: Path) -> Dict[str, object]:
        return verify_archive(archive, logger=self._logger)

    # ------------------------------------------------------------------
    def extract(self, archive: Path, *, newer_only: bool = False) -> RestoreResult:
        with self._guard("extract"):
            return extract_archive(archive, self._base_dir, logger=self._logger, newer_only=newer_only)

    def extract_some(self, archive: Path, selection: Sequence[str], *, newer_only: bool = False) -> RestoreResult:
        with self._guard("extract_some"):
            return extract_some(archive, self._base_dir, selection, logger=self._logger, newer_only=newer_only)

    def restore(self, archive: Path, *, newer_only: bool = False) -> RestoreResult:
        with self._guard("restore"):
            return restore_archive(
                archive,
                self._base_dir,
                exclude=self._options.exclude,
                logger=self._logger,
                newer_only=newer_only,
                match_dotfiles=self._match_dotfiles,
                protected=self._protected(archive),
            )

    def restore_some(self, archive: Path, selection: Sequence[str], *, newer_only: bool = False) -> RestoreResult:
        with self._guard("restore_some"):
            return restore_some(
                archive,
                self._base_dir,
                selection,
                exclude=self._options.exclude,
                logger=self._logger,
                newer_only=newer_only,
                match_dotfiles=self._match_dotfiles,
                protected=self._protected(archive),
            )

    def delete(self, archive: Path) -> bool:
        with self._guard("delete"):
            return delete_archive(archive, logger=self._logger)


__all__ = ["ArchiveService"]
