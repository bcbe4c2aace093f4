"""Compute which live paths a restore has to delete."""
from __future__ import annotations

from pathlib import Path
from typing import Collection, Iterable, List, Sequence, Set

from .index import with_parents
from .listing import list_all, traversal_key
from .patterns import is_excluded, is_hidden, normalize_path


def deletion_order(paths: Iterable[str]) -> List[str]:
    """Deduplicate *paths* and order them children before parents."""

    return sorted(set(paths), key=traversal_key, reverse=True)


def diff(live: Sequence[str], archive_entries: Collection[str]) -> List[str]:
    """Return the paths of *live* missing from *archive_entries*.

    *live* is expected in :func:`~archive.listing.list_all` order; the result
    reverses it so a directory always follows everything beneath it.
    """

    present = archive_entries if isinstance(archive_entries, (set, frozenset)) else set(archive_entries)
    seen: Set[str] = set()
    missing: List[str] = []
    for path in live:
        if path in present or path in seen:
            continue
        seen.add(path)
        missing.append(path)
    missing.reverse()
    return missing


def _is_protected(path: str, protected: Sequence[str]) -> bool:
    for item in protected:
        if path == item or path.rstrip("/") == item.rstrip("/"):
            return True
        if item.endswith("/") and path.startswith(item):
            return True
    return False


def _holding_dirs(kept: Iterable[str]) -> Set[str]:
    holders: Set[str] = set()
    for path in kept:
        parts = path.rstrip("/").split("/")
        for depth in range(1, len(parts)):
            holders.add("/".join(parts[:depth]) + "/")
    return holders


def _plan(
    live: Sequence[str],
    archive_entries: Collection[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool,
    protected: Sequence[str],
) -> List[str]:
    candidates: List[str] = []
    kept: List[str] = []
    for path in live:
        if (
            is_excluded(path, exclude)
            or _is_protected(path, protected)
            or (not match_dotfiles and is_hidden(path))
        ):
            kept.append(path)
        else:
            candidates.append(path)
    planned = diff(candidates, with_parents(archive_entries))
    holders = _holding_dirs(kept)
    return [path for path in planned if path not in holders]


def plan_deletions(
    base_dir: Path,
    archive_entries: Collection[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool = False,
    protected: Sequence[str] = (),
) -> List[str]:
    """Deletion plan for a whole-tree restore.

    Include patterns play no part here: everything not excluded that the
    archive does not hold is planned. Excluded, protected and (unless
    *match_dotfiles*) hidden paths are kept, and so is every directory that
    still contains one of them.
    """

    return _plan(
        list_all(base_dir),
        archive_entries,
        exclude,
        match_dotfiles=match_dotfiles,
        protected=protected,
    )


def plan_scoped_deletions(
    base_dir: Path,
    selection: Iterable[str],
    archive_entries: Collection[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool = False,
    protected: Sequence[str] = (),
) -> List[str]:
    """Deletion plan limited to the subtrees of the selected directories."""

    base = Path(base_dir)
    planned: List[str] = []
    for raw in selection:
        selected = normalize_path(raw).rstrip("/")
        if not selected:
            continue
        target = base / selected
        if not target.is_dir() or target.is_symlink():
            continue
        prefix = selected + "/"
        subtree = [prefix] + [prefix + path for path in list_all(target)]
        planned.extend(
            _plan(
                subtree,
                archive_entries,
                exclude,
                match_dotfiles=match_dotfiles,
                protected=protected,
            )
        )
    return deletion_order(planned)


__all__ = ["deletion_order", "diff", "plan_deletions", "plan_scoped_deletions"]
