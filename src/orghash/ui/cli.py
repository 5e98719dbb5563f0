from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from orghash.adapters.org import EntryNotFoundError
from orghash.app import (
    EntrySelector,
    archive_file_entry,
    check_entry,
    confirm_entry,
    hash_entry,
    reconcile_entry,
    reconcile_file,
    unhash_entry,
    visit_file_entry,
)
from orghash.config import ConfigurationError, configure_logging
from orghash.domain.model import Algorithm, HashStatus, OrgHashError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

ENTRY_COMMANDS = ("update", "remove", "confirm", "update-or-confirm", "archive", "visit")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", type=Path, help="Org file to operate on")
    parser.add_argument(
        "--algorithm",
        "-a",
        type=str,
        help="Hash algorithm (defaults to ORGHASH_ALGORITHM or sha256); one of: "
        + ", ".join(algorithm.value for algorithm in Algorithm),
    )


def _add_selector_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", dest="entry_id", type=str, help="Entry ID property")
    group.add_argument("--title", type=str, help="Exact heading title")
    group.add_argument("--line", type=int, help="Any line number inside the entry (1-based)")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hash, verify and archive org entries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    helps = {
        "update": "Record the current hash of an entry (overwrites)",
        "remove": "Remove the recorded hash of an entry",
        "confirm": "Verify an entry against its recorded hash",
        "update-or-confirm": "Hash an unhashed entry, otherwise verify it",
        "archive": "Move an entry body into the content store",
        "visit": "Open the archived body of an entry",
    }
    for command in ENTRY_COMMANDS:
        sub = subparsers.add_parser(command, help=helps[command])
        _add_common_arguments(sub)
        _add_selector_arguments(sub)

    every = subparsers.add_parser(
        "update-or-confirm-all",
        help="Hash or verify every entry of the file, stopping at the first mismatch",
    )
    _add_common_arguments(every)

    return parser.parse_args(list(argv))


def _selector(args: argparse.Namespace) -> EntrySelector:
    if args.line is not None and args.line < 1:
        raise ValueError("Line numbers start at 1")
    return EntrySelector(entry_id=args.entry_id, title=args.title, line=args.line)


def _run(args: argparse.Namespace, algorithm: Algorithm | None) -> None:
    path: Path = args.file
    if args.command == "update-or-confirm-all":
        result = reconcile_file(path, algorithm=algorithm)
        log.info(
            "All entries verified: updated=%s, confirmed=%s",
            result.updated,
            result.confirmed,
        )
        return

    selector = _selector(args)
    if args.command == "update":
        digest = hash_entry(path, selector, algorithm=algorithm)
        log.info("Recorded hash %s", digest)
    elif args.command == "remove":
        removed = unhash_entry(path, selector, algorithm=algorithm)
        log.info("Removed hash" if removed else "No hash recorded")
    elif args.command == "confirm":
        if check_entry(path, selector, algorithm=algorithm) is HashStatus.ABSENT:
            log.info("No hash recorded")
        else:
            confirm_entry(path, selector, algorithm=algorithm, strict=True)
            log.info("Hash confirmed")
    elif args.command == "update-or-confirm":
        action = reconcile_entry(path, selector, algorithm=algorithm)
        log.info("Hash %s", action)
    elif args.command == "archive":
        handle = archive_file_entry(path, selector, algorithm=algorithm)
        log.info("Archived as %s", handle)
    elif args.command == "visit":
        location = visit_file_entry(path, selector, algorithm=algorithm)
        if location is None:
            log.info("Entry has not been archived")
        else:
            log.info("Archived content opened at %s", location)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        algorithm = Algorithm.parse(parsed_args.algorithm) if parsed_args.algorithm else None
        if not parsed_args.file.is_file():
            raise ValueError(f"No such file: {parsed_args.file}")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args, algorithm)
    except (EntryNotFoundError, ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)
    except OrgHashError:
        log.exception("Verification failed")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
