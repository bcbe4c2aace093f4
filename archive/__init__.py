"""Archive creation, inspection and restore for zipadeedoodah.

:class:`archive.api.ArchiveService` is the entry point used by the CLI and the
menu; it is not re-exported here because it depends on :mod:`core`, which in
turn imports the error types below.
"""
from __future__ import annotations

from .errors import (
    ArchiveReadError,
    ArchiveToolError,
    ArchiveVerificationError,
    ArchiveWriteError,
    ConfigSchemaError,
    FilesystemError,
    ValidationError,
)
from .types import ArchiveInfo, ArchiveStats, RestoreResult

__version__ = "1.0.0"

__all__ = [
    "ArchiveInfo",
    "ArchiveReadError",
    "ArchiveStats",
    "ArchiveToolError",
    "ArchiveVerificationError",
    "ArchiveWriteError",
    "ConfigSchemaError",
    "FilesystemError",
    "RestoreResult",
    "ValidationError",
    "__version__",
]
