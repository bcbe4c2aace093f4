"""Error hierarchy for archive and restore operations."""
from __future__ import annotations


class ArchiveToolError(RuntimeError):
    """Base exception for archive related failures."""


class ValidationError(ArchiveToolError):
    """Raised when CLI or config input is missing or malformed."""


class ConfigSchemaError(ValidationError):
    """Raised when a loaded options document does not match the canonical key set."""


class ArchiveReadError(ArchiveToolError):
    """Raised when an archive cannot be opened, listed or extracted."""


class ArchiveVerificationError(ArchiveReadError):
    """Raised when an archive fails a read-back check."""


class ArchiveWriteError(ArchiveToolError):
    """Raised when writing a new archive fails."""


class FilesystemError(ArchiveToolError):
    """Raised when traversing or deleting live files fails."""


__all__ = [
    "ArchiveReadError",
    "ArchiveToolError",
    "ArchiveVerificationError",
    "ArchiveWriteError",
    "ConfigSchemaError",
    "FilesystemError",
    "ValidationError",
]
