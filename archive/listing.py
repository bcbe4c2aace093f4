"""Recursive, deterministic directory listing."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import FilesystemError
from .patterns import is_included


def _walk(root: Path, prefix: str, out: List[str]) -> None:
    try:
        with os.scandir(root) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise FilesystemError(f"Cannot list {root}: {exc}") from exc
    for entry in entries:
        relative = f"{prefix}{entry.name}"
        # Symlinked directories are recorded as links, never descended into.
        if entry.is_dir(follow_symlinks=False):
            out.append(relative + "/")
            _walk(Path(entry.path), relative + "/", out)
        else:
            out.append(relative)


def list_all(base_dir: Path) -> List[str]:
    """Return every path below *base_dir*, parents before children.

    Directory entries carry a trailing ``/``. Siblings are sorted by name so
    the output is stable across platforms and runs.
    """

    out: List[str] = []
    _walk(Path(base_dir), "", out)
    return out


def filter_paths(
    paths: Iterable[str],
    include: Sequence[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool = False,
) -> List[str]:
    return [path for path in paths if is_included(path, include, exclude, match_dotfiles=match_dotfiles)]


def traversal_key(path: str) -> tuple:
    """Sort key reproducing :func:`list_all` order for arbitrary paths."""

    return tuple(segment for segment in path.split("/") if segment)


__all__ = ["filter_paths", "list_all", "traversal_key"]
