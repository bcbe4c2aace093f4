"""CLI entry-point to archive a project directory or open the archive menu."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from archive.api import ArchiveService
from archive.errors import ArchiveToolError, ConfigSchemaError, ValidationError
from core.logging_utils import configure_console_logging, configure_json_logging
from core.options import DEFAULT_OPTIONS_FILENAME, Options, apply_overrides
from core.paths import resolve_state_dir
from core.versioning import get_app_version
from menu.console import Console, MenuCancelled
from menu.main_menu import ask_comment, create_with_progress, run_menu
from menu.session import EditorSession

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

_COMMENT_PROMPT = object()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="zipadeedoodah",
        description="Create timestamped archives of the current directory and restore from them.",
    )
    parser.add_argument("-o", "--output", default=None, help="Output path template without extension (<cwd>, <timestamp>, <version>)")
    parser.add_argument("-i", "--include", nargs="+", default=None, metavar="PATTERN", help="Glob patterns to include")
    parser.add_argument("-x", "--exclude", nargs="+", default=None, metavar="PATTERN", help="Glob patterns to exclude")
    parser.add_argument("-t", "--timestamp-format", dest="timestamp_format", default=None, help="strftime format for <timestamp>")
    parser.add_argument("-a", "--archive-dir", dest="archive_directory", default=None, help="Directory holding archives for the menu")
    parser.add_argument(
        "-c",
        "--comment",
        nargs="?",
        const=_COMMENT_PROMPT,
        default=None,
        metavar="TEXT",
        help="Comment appended to the archive name; without TEXT you are asked for one",
    )
    parser.add_argument("-p", "--prompt", action="store_true", help="Edit options interactively before archiving")
    parser.add_argument("-f", "--config", type=Path, default=None, metavar="FILE", help="Load options from a JSON file")
    parser.add_argument(
        "-s",
        "--save",
        nargs="?",
        const=Path(DEFAULT_OPTIONS_FILENAME),
        type=Path,
        default=None,
        metavar="FILE",
        help=f"Save the effective options and exit (default {DEFAULT_OPTIONS_FILENAME})",
    )
    parser.add_argument("-m", "--menu", action="store_true", help="Open the interactive archive menu")
    parser.add_argument("-d", "--dot", action="store_true", help="Include dotfiles matched by wildcards")
    parser.add_argument("-l", "--level", type=int, default=9, help="Compression level (0-9, default 9)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every archived entry")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace, base: Optional[Options] = None) -> Options:
    options = base or Options()
    return apply_overrides(
        options,
        output=args.output,
        include=args.include,
        exclude=args.exclude,
        timestamp_format=args.timestamp_format,
        archive_directory=args.archive_directory,
        comment=True if args.comment is _COMMENT_PROMPT else None,
        prompt=True if args.prompt else None,
    )


def validate_for_archive(options: Options, level: int) -> None:
    errors: List[str] = []
    if not options.output.strip():
        errors.append("Please define an output file path!")
    if not options.include:
        errors.append("Please define at least one include pattern!")
    if not 0 <= level <= 9:
        errors.append(f"Compression level must be between 0 and 9 (got {level})")
    if errors:
        raise ValidationError(" ".join(errors))


def _exit_code(exc: ArchiveToolError) -> int:
    return EXIT_USAGE if isinstance(exc, ValidationError) else EXIT_ERROR


def main(argv: Optional[Sequence[str]] = None) -> int:
    raw_args = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(raw_args)
    configure_console_logging(args.verbose)
    state_dir = resolve_state_dir()
    configure_json_logging("zipadeedoodah", state_dir)
    console = Console()
    base_dir = Path.cwd()
    menu_mode = args.menu or not raw_args

    session = EditorSession()
    if args.config is not None:
        try:
            session.load(args.config)
        except ValidationError as exc:
            logging.error("%s", exc)
            if not menu_mode:
                return EXIT_USAGE
            if isinstance(exc, ConfigSchemaError):
                console.say("Continuing with default options.")
    try:
        options = build_options(args, session.options)
    except ValidationError as exc:
        logging.error("%s", exc)
        return EXIT_USAGE
    session = EditorSession(options, path=session.path)

    def service_factory(current: Options) -> ArchiveService:
        return ArchiveService(base_dir, current, state_dir=state_dir, match_dotfiles=args.dot, level=args.level)

    try:
        if args.save is not None:
            written = session.save(args.save)
            console.say(f"Options saved to {written}")
            return EXIT_OK

        if menu_mode:
            run_menu(session, console, service_factory=service_factory)
            return EXIT_OK

        if session.options.prompt:
            session.edit_interactively(console)
        options = session.options
        validate_for_archive(options, args.level)

        comment: Optional[str] = None
        if isinstance(args.comment, str):
            comment = args.comment
        elif options.comment:
            comment = ask_comment(console)
        create_with_progress(service_factory(options), console, comment=comment)
    except MenuCancelled:
        console.say("Cancelled.")
        return EXIT_ERROR
    except ArchiveToolError as exc:
        logging.error("%s", exc)
        return _exit_code(exc)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
