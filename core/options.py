from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

from archive.errors import FilesystemError, ValidationError

from .options_schema import validate_document

__all__ = [
    "DEFAULT_OPTIONS",
    "DEFAULT_OPTIONS_FILENAME",
    "Options",
    "apply_overrides",
    "load_options",
    "save_options",
]

DEFAULT_OPTIONS_FILENAME = "zipadeedoodah.json"

DEFAULT_OPTIONS: Dict[str, Any] = {
    "output": "../<cwd>_<timestamp>",
    "include": ["**/*"],
    "exclude": ["node_modules/**", ".git/**"],
    "archive_directory": "..",
    "timestamp_format": "%Y-%m-%d_%H-%M-%S",
    "comment": False,
    "prompt": False,
}


def _patterns(values: Iterable[str], key: str) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    items = tuple(values)
    for item in items:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError(f"{key} patterns must be non-empty strings, got {item!r}")
    return items


@dataclass(slots=True, frozen=True)
class Options:
    """Effective archive options. Edits produce a new value via :meth:`replace`."""

    output: str = DEFAULT_OPTIONS["output"]
    include: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_OPTIONS["include"]))
    exclude: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_OPTIONS["exclude"]))
    archive_directory: str = DEFAULT_OPTIONS["archive_directory"]
    timestamp_format: str = DEFAULT_OPTIONS["timestamp_format"]
    comment: bool = DEFAULT_OPTIONS["comment"]
    prompt: bool = DEFAULT_OPTIONS["prompt"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "include", _patterns(self.include, "include"))
        object.__setattr__(self, "exclude", _patterns(self.exclude, "exclude"))
        object.__setattr__(self, "comment", bool(self.comment))
        object.__setattr__(self, "prompt", bool(self.prompt))

    def replace(self, **changes: Any) -> "Options":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["include"] = list(self.include)
        data["exclude"] = list(self.exclude)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Options":
        return cls(**validate_document(data))


def apply_overrides(options: Options, **values: Any) -> Options:
    """Return *options* with every non-``None`` value in *values* applied."""

    changes = {key: value for key, value in values.items() if value is not None}
    if not changes:
        return options
    return options.replace(**changes)


def load_options(path: Path) -> Options:
    """Load a persisted options document.

    Raises :class:`ConfigSchemaError` when the key set differs from
    :data:`DEFAULT_OPTIONS` and :class:`ValidationError` for unreadable files,
    invalid JSON or bad values. Callers keep their current options on error.
    """

    source = Path(path)
    try:
        with open(source, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ValidationError(f"Options file not found: {source}") from exc
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Options file {source} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ValidationError(f"Cannot read options file {source}: {exc}") from exc
    return Options(**validate_document(payload, source=str(source)))


def save_options(options: Options, path: Path) -> Path:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as handle:
            json.dump(options.to_dict(), handle, ensure_ascii=False, indent=2)
            handle.write("\n")
    except OSError as exc:
        raise FilesystemError(f"Cannot write options file {target}: {exc}") from exc
    return target
