"""Editor session owning the options value between session start and save/exit."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from archive.errors import ValidationError
from core.options import DEFAULT_OPTIONS_FILENAME, Options, load_options, save_options

from .console import Console
from .fields import OPTION_FIELDS, FlagField, ListField, TextField, field_for

LOGGER = logging.getLogger("zipadeedoodah.menu")


class EditorSession:
    def __init__(self, options: Optional[Options] = None, *, path: Optional[Path] = None) -> None:
        self._options = options or Options()
        self._path = Path(path) if path is not None else None
        self._dirty = False

    # ------------------------------------------------------------------
    @property
    def options(self) -> Options:
        return self._options

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _apply(self, options: Options) -> Options:
        if options != self._options:
            self._options = options
            self._dirty = True
        return self._options

    # ------------------------------------------------------------------
    def set_text(self, key: str, value: str) -> Options:
        field = field_for(key)
        if not isinstance(field, TextField):
            raise TypeError(f"{key} is not a text option")
        return self._apply(field.set(self._options, value))

    def toggle(self, key: str) -> Options:
        field = field_for(key)
        if not isinstance(field, FlagField):
            raise TypeError(f"{key} is not a flag option")
        return self._apply(field.toggle(self._options))

    def add_item(self, key: str, item: str) -> Options:
        return self._apply(self._list_field(key).add_item(self._options, item))

    def remove_item(self, key: str, index: int) -> Options:
        return self._apply(self._list_field(key).remove_item(self._options, index))

    def replace_items(self, key: str, items: List[str]) -> Options:
        return self._apply(self._list_field(key).replace_items(self._options, items))

    @staticmethod
    def _list_field(key: str) -> ListField:
        field = field_for(key)
        if not isinstance(field, ListField):
            raise TypeError(f"{key} is not a list option")
        return field

    # ------------------------------------------------------------------
    def load(self, path: Path) -> Options:
        """Replace the options with the document at *path*; unchanged on error."""

        loaded = load_options(path)
        self._options = loaded
        self._path = Path(path)
        self._dirty = False
        LOGGER.info("Loaded options from %s", path)
        return loaded

    def save(self, path: Optional[Path] = None) -> Path:
        target = Path(path) if path is not None else (self._path or Path(DEFAULT_OPTIONS_FILENAME))
        written = save_options(self._options, target)
        self._path = written
        self._dirty = False
        LOGGER.info("Saved options to %s", written)
        return written

    # ------------------------------------------------------------------
    def edit_interactively(self, console: Console) -> Options:
        while True:
            labels = [f"{field.label}: {field.render(self._options)}" for field in OPTION_FIELDS]
            choice = console.choose("Options", labels, back_label="Done")
            if choice is None:
                return self._options
            field = OPTION_FIELDS[choice]
            try:
                self._apply(field.edit(self._options, console))
            except ValidationError as exc:
                console.say(str(exc))


__all__ = ["EditorSession"]
