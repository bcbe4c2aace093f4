"""Helpers for resolving the running zipadeedoodah version."""
from __future__ import annotations

from functools import lru_cache
from importlib import metadata

DISTRIBUTION = "zipadeedoodah"
FALLBACK_VERSION = "0.0.0"


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the installed distribution version.

    Source checkouts that were never installed fall back to the in-tree
    ``archive.__version__`` and ultimately to ``0.0.0``.
    """

    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        pass
    from archive import __version__

    return __version__ or FALLBACK_VERSION


__all__ = ["get_app_version"]
