"""Include/exclude glob matching shared by archive creation and restore."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from wcmatch import glob as wcglob

# Plain globs: "*" stays inside one segment, "**" spans segments, and no
# pattern syntax beyond globstar is enabled ("!", "#" and braces are literal).
_FLAGS = wcglob.GLOBSTAR | wcglob.FORCEUNIX


def normalize_path(path: str) -> str:
    """Return *path* with forward slashes and no leading ``./``."""

    text = str(path).replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


def _dot_segments(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment.startswith(".") and segment not in {".", ".."}]


def _globmatch(name: str, rule: str, match_dotfiles: bool) -> bool:
    flags = _FLAGS | wcglob.DOTGLOB if match_dotfiles else _FLAGS
    return wcglob.globmatch(name, rule, flags=flags)


def matches(path: str, pattern: str, *, match_dotfiles: bool = False) -> bool:
    """Return ``True`` when *path* matches the glob *pattern*.

    Directories are expected with a trailing ``/``. Patterns are anchored at
    the project root: ``*`` never crosses a ``/``, ``**`` spans any number of
    segments and ``dir/**`` covers the directory entry itself as well as its
    contents. A pattern ending in ``/`` only matches directories. Unless
    *match_dotfiles* is set, wildcards skip segments starting with ``.``; a
    pattern has to name such a segment explicitly.
    """

    if not pattern:
        return False
    normalized = normalize_path(path)
    is_dir = normalized.endswith("/")
    name = normalized.rstrip("/")
    rule = normalize_path(pattern)
    if rule.endswith("/") and not rule.endswith("**/"):
        if not is_dir:
            return False
        rule = rule.rstrip("/")
    if not name or not rule:
        return False
    if _globmatch(name, rule, match_dotfiles):
        return True
    if is_dir and rule.endswith("/**"):
        return _globmatch(name, rule[:-3], match_dotfiles)
    return False


def is_excluded(path: str, exclude: Iterable[str]) -> bool:
    return any(matches(path, pattern, match_dotfiles=True) for pattern in exclude)


def is_included(
    path: str,
    include: Sequence[str],
    exclude: Sequence[str],
    *,
    match_dotfiles: bool = False,
) -> bool:
    """Include wins only when no exclude pattern matches."""

    if not any(matches(path, pattern, match_dotfiles=match_dotfiles) for pattern in include):
        return False
    return not is_excluded(path, exclude)


def is_hidden(path: str) -> bool:
    return bool(_dot_segments(normalize_path(path)))


__all__ = ["is_excluded", "is_hidden", "is_included", "matches", "normalize_path"]
