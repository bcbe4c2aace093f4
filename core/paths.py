from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Optional

__all__ = [
    "get_locks_dir",
    "get_logs_dir",
    "lock_path_for",
    "relative_to_root",
    "resolve_state_dir",
]

STATE_DIR_ENV = "ZIPADEEDOODAH_HOME"
_DEFAULT_STATE_DIRNAME = ".zipadeedoodah"


def _expand_path(value: str) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(value))
    return Path(expanded).resolve()


def _ensure_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    return os.access(path, os.W_OK)


def _local_appdata_dir() -> Path:
    local_appdata = os.environ.get("LOCALAPPDATA")
    if local_appdata:
        return _expand_path(local_appdata) / "zipadeedoodah"
    return Path.home() / _DEFAULT_STATE_DIRNAME


def resolve_state_dir() -> Path:
    """Resolve the per-user directory holding logs and operation locks.

    ``$ZIPADEEDOODAH_HOME`` wins when it is writable; otherwise
    ``%LOCALAPPDATA%\\zipadeedoodah`` on Windows or ``~/.zipadeedoodah``.
    The directory always lives outside the archived project so its contents
    never show up in an archive or a restore plan.
    """

    env_home = os.environ.get(STATE_DIR_ENV)
    if env_home:
        candidate = _expand_path(env_home)
        if _ensure_writable_dir(candidate):
            return candidate
    fallback = _local_appdata_dir()
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def get_logs_dir(state_dir: Path) -> Path:
    return state_dir / "logs"


def get_locks_dir(state_dir: Path) -> Path:
    return state_dir / "locks"


def lock_path_for(state_dir: Path, project_root: Path) -> Path:
    digest = hashlib.sha1(str(Path(project_root).resolve()).encode("utf-8")).hexdigest()[:16]
    return get_locks_dir(state_dir) / f"{digest}.lock"


def relative_to_root(path: Path, root: Path) -> Optional[str]:
    """Return *path* relative to *root* in ``/`` form, or ``None`` when outside."""

    try:
        relative = Path(path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        return None
    text = relative.as_posix()
    return None if text == "." else text
