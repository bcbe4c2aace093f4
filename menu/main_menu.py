"""Interactive menu for creating, inspecting and restoring archives."""
from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from archive.api import ArchiveService
from archive.errors import ArchiveToolError, ConfigSchemaError
from archive.types import ArchiveInfo, ArchiveStats, RestoreResult
from core.options import DEFAULT_OPTIONS_FILENAME, Options

from .console import Console, MenuCancelled, describe_stats, format_size, plural
from .session import EditorSession

LOGGER = logging.getLogger("zipadeedoodah.menu")

ServiceFactory = Callable[[Options], ArchiveService]

MAIN_CHOICES = ["Create archive", "Edit options", "Archives", "Load options", "Save options"]
ARCHIVE_ACTIONS = [
    "Extract all",
    "Extract newer",
    "Extract some",
    "Restore all",
    "Restore newer",
    "Restore some",
    "Verify",
    "Delete archive",
]


def create_with_progress(service: ArchiveService, console: Console, *, comment: Optional[str] = None) -> Path:
    started = time.monotonic()
    now = datetime.now()
    destination = service.output_path(comment, now=now)
    console.say(f"Archiving {destination}...")

    def _progress(path: str, stats: ArchiveStats) -> None:
        LOGGER.debug("added %s (%s)", path, format_size(stats.total_bytes))

    destination, stats = service.create(comment, on_entry=_progress, now=now)
    elapsed_ms = int((time.monotonic() - started) * 1000)
    console.say(describe_stats(stats))
    console.say(f"Wrote {format_size(stats.total_bytes)} in {elapsed_ms}ms")
    return destination


def ask_comment(console: Console) -> Optional[str]:
    comment = console.ask("Comment")
    return comment or None


def report_result(console: Console, result: RestoreResult) -> None:
    parts = [f"extracted {plural(len(result.extracted), 'entry', 'entries')}"]
    if result.skipped:
        parts.append(f"skipped {len(result.skipped)} up to date")
    if result.deleted:
        parts.append(f"deleted {plural(len(result.deleted), 'path')}")
    console.say(", ".join(parts).capitalize())


def _pick_entries(service: ArchiveService, console: Console, archive: Path) -> List[str]:
    entries = service.list_entries(archive)
    if not entries:
        console.say("Archive is empty.")
        return []
    picked = console.choose_many(f"Entries in {archive.name}", entries)
    return [entries[index] for index in picked]


def _run_archive_action(service: ArchiveService, console: Console, archive: Path, action: int) -> bool:
    """Run one action on *archive*; returns ``False`` once the archive is gone."""

    if action == 0:
        report_result(console, service.extract(archive))
    elif action == 1:
        report_result(console, service.extract(archive, newer_only=True))
    elif action == 2:
        selection = _pick_entries(service, console, archive)
        if not selection:
            console.say("Nothing selected, no changes made.")
            return True
        report_result(console, service.extract_some(archive, selection))
    elif action in (3, 4):
        if console.confirm(f"Delete files in {service.base_dir} that {archive.name} does not contain?"):
            report_result(console, service.restore(archive, newer_only=action == 4))
    elif action == 5:
        selection = _pick_entries(service, console, archive)
        if not selection:
            console.say("Nothing selected, no changes made.")
            return True
        if console.confirm("Delete extra files inside the selected directories?"):
            report_result(console, service.restore_some(archive, selection))
    elif action == 6:
        report = service.verify(archive)
        console.say(f"{archive.name}: {report['entries']} entries OK")
    elif action == 7:
        if console.confirm(f"Delete {archive}?"):
            service.delete(archive)
            console.say(f"Deleted {archive.name}")
            return False
    return True


def _describe_archive(info: ArchiveInfo) -> str:
    return f"{info.name} ({format_size(info.size_bytes)}, {info.modified_utc})"


def archives_menu(service: ArchiveService, console: Console) -> None:
    while True:
        archives = service.list_archives()
        if not archives:
            console.say(f"No archives found in {service.archive_dir}")
            return
        choice = console.choose(f"Archives in {service.archive_dir}", [_describe_archive(info) for info in archives])
        if choice is None:
            return
        archive = archives[choice].path
        comment = service.read_comment(archive)
        while True:
            title = archive.name if not comment else f"{archive.name} ({comment})"
            action = console.choose(title, ARCHIVE_ACTIONS)
            if action is None:
                break
            try:
                if not _run_archive_action(service, console, archive, action):
                    break
            except ArchiveToolError as exc:
                LOGGER.error("%s", exc)
                console.say(f"Error: {exc}")


def run_menu(session: EditorSession, console: Console, *, service_factory: ServiceFactory) -> EditorSession:
    """Loop over the main menu until the user quits; returns the session."""

    try:
        while True:
            choice = console.choose("zipadeedoodah", MAIN_CHOICES, back_label="Quit")
            if choice is None:
                return session
            try:
                if choice == 0:
                    if session.options.prompt:
                        session.edit_interactively(console)
                    comment = ask_comment(console) if session.options.comment else None
                    create_with_progress(service_factory(session.options), console, comment=comment)
                elif choice == 1:
                    session.edit_interactively(console)
                elif choice == 2:
                    archives_menu(service_factory(session.options), console)
                elif choice == 3:
                    default = str(session.path or DEFAULT_OPTIONS_FILENAME)
                    session.load(Path(console.ask("Options file", default=default)))
                    console.say("Options loaded.")
                else:
                    default = str(session.path or DEFAULT_OPTIONS_FILENAME)
                    written = session.save(Path(console.ask("Save to", default=default)))
                    console.say(f"Options saved to {written}")
            except ConfigSchemaError as exc:
                console.say(f"Options not loaded, keeping current options: {exc}")
            except ArchiveToolError as exc:
                LOGGER.error("%s", exc)
                console.say(f"Error: {exc}")
    except MenuCancelled:
        console.say()
        return session


__all__ = ["archives_menu", "ask_comment", "create_with_progress", "report_result", "run_menu"]
