#!/usr/bin/env python3
"""CLI entry point for hunkstage.

Usage:
    python -m hunkstage [--repo PATH] [--verbose] <command> [options]

Commands:
    status        Show staged and unstaged files
    diff          Show the hunks of a file
    stage-hunk    Stage one hunk of a file
    unstage-hunk  Unstage one hunk of a file
    discard-hunk  Discard one unstaged hunk of a file
    stage         Stage a whole file
    unstage       Unstage a whole file
    discard       Discard all changes to a file
    stage-all     Stage every change
    unstage-all   Unstage everything
    watch         Re-render the staging view whenever the repository changes
"""

from __future__ import annotations

import argparse
import os
import sys

from hunkstage.commands.diff import cmd_diff
from hunkstage.commands.file import cmd_file
from hunkstage.commands.hunk import cmd_hunk
from hunkstage.commands.status import cmd_status
from hunkstage.commands.watch import cmd_watch
from hunkstage.services.staging_controller import ActionKind

REPO_ENV_VAR = "HUNKSTAGE_REPO"

_HUNK_COMMANDS = {
    "stage-hunk": ActionKind.STAGE_HUNK,
    "unstage-hunk": ActionKind.UNSTAGE_HUNK,
    "discard-hunk": ActionKind.DISCARD_HUNK,
}

_HUNK_HELP = {
    "stage-hunk": "Stage one hunk of a file",
    "unstage-hunk": "Unstage one hunk of a file",
    "discard-hunk": "Discard one unstaged hunk of a file",
}

_FILE_COMMANDS = {
    "stage": ActionKind.STAGE_FILE,
    "unstage": ActionKind.UNSTAGE_FILE,
    "discard": ActionKind.DISCARD_FILE,
    "stage-all": ActionKind.STAGE_ALL,
    "unstage-all": ActionKind.UNSTAGE_ALL,
}


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default=None,
        help="Output format (default: output_format from .hunkstage.yml, else text)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hunkstage",
        description="Stage, unstage and discard git changes one hunk at a time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hunkstage status
  hunkstage diff src/app.py
  hunkstage stage-hunk src/app.py 1
  hunkstage diff --staged src/app.py
  hunkstage unstage-hunk src/app.py 0
  hunkstage discard src/old.py --yes
  hunkstage watch --interval 1 --file src/app.py
        """,
    )
    parser.add_argument(
        "--repo",
        default=os.environ.get(REPO_ENV_VAR, "."),
        help=f"Path inside the git repository (default: ${REPO_ENV_VAR} or current directory)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo git commands and their failures to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # status command
    parser_status = subparsers.add_parser("status", help="Show staged and unstaged files")
    _add_format_argument(parser_status)

    # diff command
    parser_diff = subparsers.add_parser("diff", help="Show the hunks of a file")
    parser_diff.add_argument("path", help="File to show")
    parser_diff.add_argument(
        "--staged",
        action="store_true",
        help="Show staged changes (index vs HEAD) instead of unstaged ones",
    )
    _add_format_argument(parser_diff)

    # hunk commands
    for name in _HUNK_COMMANDS:
        parser_hunk = subparsers.add_parser(name, help=_HUNK_HELP[name])
        parser_hunk.add_argument("path", help="File the hunk belongs to")
        parser_hunk.add_argument("index", type=int, help="Hunk index as shown by the diff command")

    # file commands
    for name in ("stage", "unstage", "discard"):
        parser_file = subparsers.add_parser(name, help=f"{name.capitalize()} a whole file")
        parser_file.add_argument("path", help="File to act on")
        if name == "discard":
            parser_file.add_argument(
                "--yes",
                action="store_true",
                help="Do not ask for confirmation",
            )
    subparsers.add_parser("stage-all", help="Stage every change, untracked files included")
    subparsers.add_parser("unstage-all", help="Unstage everything")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Re-render the view whenever the repository changes")
    parser_watch.add_argument(
        "--interval",
        type=_positive_float,
        default=None,
        help="Seconds between status polls (default: watch_interval from .hunkstage.yml, else 2)",
    )
    parser_watch.add_argument("--file", dest="file_path", help="Also show the diff of this file")
    parser_watch.add_argument("--staged", action="store_true", help="Show the staged side of --file")
    _add_format_argument(parser_watch)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Route to command implementations with explicit parameters
    if args.command == "status":
        return cmd_status(repo_path=args.repo, output_format=args.format, verbose=args.verbose)

    elif args.command == "diff":
        return cmd_diff(
            file_path=args.path,
            staged=args.staged,
            repo_path=args.repo,
            output_format=args.format,
            verbose=args.verbose,
        )

    elif args.command in _HUNK_COMMANDS:
        return cmd_hunk(
            kind=_HUNK_COMMANDS[args.command],
            file_path=args.path,
            hunk_index=args.index,
            repo_path=args.repo,
            verbose=args.verbose,
        )

    elif args.command in _FILE_COMMANDS:
        return cmd_file(
            kind=_FILE_COMMANDS[args.command],
            file_path=getattr(args, "path", None),
            repo_path=args.repo,
            assume_yes=getattr(args, "yes", False),
            verbose=args.verbose,
        )

    elif args.command == "watch":
        return cmd_watch(
            repo_path=args.repo,
            interval=args.interval,
            file_path=args.file_path,
            staged=args.staged,
            output_format=args.format,
            verbose=args.verbose,
        )

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
