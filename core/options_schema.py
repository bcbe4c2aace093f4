from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from archive.errors import ConfigSchemaError, ValidationError

OPTION_KEYS = frozenset(
    {
        "output",
        "include",
        "exclude",
        "archive_directory",
        "timestamp_format",
        "comment",
        "prompt",
    }
)

_SCHEMA_ERROR_TYPES = {"missing", "extra_forbidden"}


class OptionsDocument(BaseModel):
    """Persisted options file. Every key is required and no other key is allowed."""

    model_config = ConfigDict(extra="forbid")

    output: str = Field(..., description="Output path template, without extension.")
    include: List[str] = Field(..., description="Glob patterns selecting archived paths.")
    exclude: List[str] = Field(..., description="Glob patterns that always win over include.")
    archive_directory: str = Field(..., description="Directory scanned for archives by the menu.")
    timestamp_format: str = Field(..., min_length=1, description="strftime format for <timestamp>.")
    comment: bool = Field(..., description="Ask for a comment before archiving.")
    prompt: bool = Field(..., description="Open the option editor before archiving.")

    @field_validator("include", "exclude")
    @classmethod
    def _no_empty_patterns(cls, value: List[str]) -> List[str]:
        if any(not item or not item.strip() for item in value):
            raise ValueError("patterns must not be empty strings")
        return value


def key_mismatch(payload: Mapping[str, Any]) -> tuple[List[str], List[str]]:
    keys = set(payload.keys())
    return sorted(OPTION_KEYS - keys), sorted(keys - OPTION_KEYS)


def validate_document(payload: Any, *, source: str = "<options>") -> Dict[str, Any]:
    """Validate a decoded options document and return it as a plain dict."""

    if not isinstance(payload, Mapping):
        raise ConfigSchemaError(f"{source}: expected a JSON object, got {type(payload).__name__}")
    missing, extra = key_mismatch(payload)
    if missing or extra:
        details = []
        if missing:
            details.append(f"missing {', '.join(missing)}")
        if extra:
            details.append(f"unexpected {', '.join(extra)}")
        raise ConfigSchemaError(f"{source}: key set does not match ({'; '.join(details)})")
    try:
        document = OptionsDocument.model_validate(dict(payload))
    except PydanticValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        ]
        if any(error["type"] in _SCHEMA_ERROR_TYPES for error in exc.errors()):
            raise ConfigSchemaError(f"{source}: {'; '.join(problems)}") from exc
        raise ValidationError(f"{source}: {'; '.join(problems)}") from exc
    return document.model_dump()


__all__ = ["OPTION_KEYS", "OptionsDocument", "key_mismatch", "validate_document"]
