"""Option fields as tagged variants, each with its own edit operations."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from archive.errors import ValidationError
from core.options import Options

from .console import Console

_QUOTED = re.compile(r'"(.*?)"')


def parse_pattern_list(text: str) -> List[str]:
    """Split ``"a b" "c"`` style input; unquoted input splits on whitespace."""

    quoted = _QUOTED.findall(text)
    items = quoted if quoted else text.split()
    return [item.strip() for item in items if item.strip()]


def render_pattern_list(items: Tuple[str, ...]) -> str:
    return " ".join(f'"{item}"' for item in items)


@dataclass(frozen=True)
class TextField:
    key: str
    label: str
    kind: str = "text"

    def render(self, options: Options) -> str:
        return str(getattr(options, self.key))

    def set(self, options: Options, value: str) -> Options:
        return options.replace(**{self.key: value})

    def edit(self, options: Options, console: Console) -> Options:
        return self.set(options, console.ask(self.label, default=self.render(options)))


@dataclass(frozen=True)
class FlagField:
    key: str
    label: str
    kind: str = "flag"

    def render(self, options: Options) -> str:
        return "Yes" if getattr(options, self.key) else "No"

    def toggle(self, options: Options) -> Options:
        return options.replace(**{self.key: not getattr(options, self.key)})

    def edit(self, options: Options, console: Console) -> Options:
        return self.toggle(options)


@dataclass(frozen=True)
class ListField:
    key: str
    label: str
    kind: str = "list"

    def items(self, options: Options) -> Tuple[str, ...]:
        return tuple(getattr(options, self.key))

    def render(self, options: Options) -> str:
        return render_pattern_list(self.items(options)) or "(none)"

    def add_item(self, options: Options, item: str) -> Options:
        if not item or not item.strip():
            raise ValidationError(f"{self.label}: empty pattern")
        return options.replace(**{self.key: self.items(options) + (item.strip(),)})

    def remove_item(self, options: Options, index: int) -> Options:
        items = list(self.items(options))
        if not 0 <= index < len(items):
            raise ValidationError(f"{self.label}: no item #{index + 1}")
        del items[index]
        return options.replace(**{self.key: tuple(items)})

    def replace_items(self, options: Options, items: List[str]) -> Options:
        return options.replace(**{self.key: tuple(items)})

    def edit(self, options: Options, console: Console) -> Options:
        while True:
            console.say(f"{self.label}: {self.render(options)}")
            choice = console.choose(self.label, ["Add pattern", "Remove pattern", "Replace all"], back_label="Done")
            if choice is None:
                return options
            if choice == 0:
                pattern = console.ask("Pattern")
                if pattern:
                    options = self.add_item(options, pattern)
            elif choice == 1:
                picked = console.choose("Remove which pattern?", list(self.items(options)))
                if picked is not None:
                    options = self.remove_item(options, picked)
            else:
                text = console.ask("Patterns", default=render_pattern_list(self.items(options)))
                options = self.replace_items(options, parse_pattern_list(text))


OPTION_FIELDS = (
    TextField("output", "Output path"),
    ListField("include", "Include patterns"),
    ListField("exclude", "Exclude patterns"),
    TextField("archive_directory", "Archive directory"),
    TextField("timestamp_format", "Timestamp format"),
    FlagField("comment", "Prompt for comment"),
    FlagField("prompt", "Prompt for options"),
)


def field_for(key: str):
    for field in OPTION_FIELDS:
        if field.key == key:
            return field
    raise KeyError(key)


__all__ = [
    "FlagField",
    "ListField",
    "OPTION_FIELDS",
    "TextField",
    "field_for",
    "parse_pattern_list",
    "render_pattern_list",
]
