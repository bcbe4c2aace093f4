"""Line-oriented prompts used by the interactive menu and the CLI."""
from __future__ import annotations

import sys
from typing import Callable, List, Optional, Sequence, TextIO

from archive.errors import ValidationError
from archive.types import ArchiveStats

_UNITS = ("B", "KB", "MB", "GB", "TB")


class MenuCancelled(Exception):
    """Raised when input ends (EOF or Ctrl+C) while a prompt is waiting."""


def format_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in _UNITS:
        if size < 1024 or unit == _UNITS[-1]:
            return f"{int(size)}{unit}" if unit == "B" else f"{size:.2f}{unit}"
        size /= 1024
    return f"{num_bytes}B"


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    word = singular if count == 1 else (plural_form or singular + "s")
    return f"{count} {word}"


def describe_stats(stats: ArchiveStats) -> str:
    return (
        f"Archived {plural(stats.file_count, 'file')} and "
        f"{plural(stats.directory_count, 'directory', 'directories')}"
    )


def parse_selection(text: str, count: int) -> List[int]:
    """Parse ``"1 3 5-7"`` (1-based, commas allowed) into sorted 0-based indexes."""

    indexes: List[int] = []
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            if not start_text.isdigit() or not end_text.isdigit():
                raise ValidationError(f"Invalid range {token!r}")
            start, end = int(start_text), int(end_text)
            if start > end:
                start, end = end, start
            numbers = range(start, end + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            raise ValidationError(f"Invalid selection {token!r}")
        for number in numbers:
            if not 1 <= number <= count:
                raise ValidationError(f"Selection {number} is out of range 1-{count}")
            indexes.append(number - 1)
    return sorted(set(indexes))


class Console:
    def __init__(
        self,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self._input = input_func
        self._output = output

    def say(self, message: str = "") -> None:
        print(message, file=self._output or sys.stdout, flush=True)

    def ask(self, message: str, default: Optional[str] = None) -> str:
        suffix = f" [{default}]" if default not in (None, "") else ""
        try:
            answer = (self._input or input)(f"{message}{suffix}: ")
        except (EOFError, KeyboardInterrupt) as exc:
            raise MenuCancelled() from exc
        answer = answer.strip()
        if not answer and default is not None:
            return default
        return answer

    def confirm(self, message: str, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        answer = self.ask(f"{message} ({hint})").lower()
        if not answer:
            return default
        return answer in {"y", "yes"}

    def choose(self, title: str, choices: Sequence[str], *, back_label: str = "Back") -> Optional[int]:
        """Show a numbered list and return the chosen index, or ``None`` for back."""

        while True:
            self.say(title)
            for position, label in enumerate(choices, start=1):
                self.say(f"  {position}) {label}")
            self.say(f"  0) {back_label}")
            answer = self.ask("Choice")
            if answer in {"", "0"}:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return int(answer) - 1
            self.say(f"Please enter a number between 0 and {len(choices)}.")

    def choose_many(self, title: str, choices: Sequence[str]) -> List[int]:
        """Return the picked indexes; an empty answer means nothing was picked."""

        self.say(title)
        for position, label in enumerate(choices, start=1):
            self.say(f"  {position}) {label}")
        while True:
            answer = self.ask("Select (e.g. 1 3 5-7, empty to cancel)")
            if not answer:
                return []
            try:
                return parse_selection(answer, len(choices))
            except ValidationError as exc:
                self.say(str(exc))


__all__ = [
    "Console",
    "MenuCancelled",
    "describe_stats",
    "format_size",
    "parse_selection",
    "plural",
]
