"""Command-line front door for vercelx.

Parses CLI options, configures logging, and dispatches into the
``projects`` or ``search`` workflow. Expected failures are written to the
error log and reported on stderr with exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import httpx

from .commands import CommandOptions, projects_command, search_command
from .error_log import ERROR_LOG_PATH, clear_error_log, log_error
from .errors import VercelxError
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-t", "--token", default=None, help="Vercel API token (or use VERCEL_TOKEN env var).")
    parser.add_argument("--team", default=None, help="Team id, slug, or 'personal'. Prompts when omitted.")
    parser.add_argument("--page-size", type=_positive_int, default=None, help="Projects per page (default: 10).")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--icons",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show Nerd Font icons (auto-detected when omitted).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vercelx",
        description="Interactive CLI for browsing and managing Vercel projects.",
    )
    parser.add_argument("--clear-log", action="store_true", help="Delete the error log and exit.")
    subparsers = parser.add_subparsers(dest="command")

    projects = subparsers.add_parser("projects", help="Browse and manage projects with deployment metadata.")
    _add_common_options(projects)

    search = subparsers.add_parser("search", help="Search projects by name, deploy creator, or state.")
    search.add_argument("query", nargs="+", help="Search text.")
    search.add_argument("--print", action="store_true", help="Print matches without opening the interactive list.")
    _add_common_options(search)
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    if verbose:
        # Keep request lines, drop connection-level chatter.
        logging.getLogger("httpcore").setLevel(logging.INFO)


def options_from_args(args: argparse.Namespace) -> CommandOptions:
    return CommandOptions(
        token=args.token,
        team=args.team,
        page_size=args.page_size,
        theme=args.theme,
        no_color=args.no_color,
        icons=args.icons,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run the chosen subcommand.

    Exits with status 1 after logging a ``VercelxError`` or HTTP failure,
    and with 130 when interrupted outside the interactive list.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.clear_log:
        clear_error_log()
        sys.stdout.write(f"Cleared error log: {ERROR_LOG_PATH}\n")
        return
    if args.command is None:
        parser.print_help()
        raise SystemExit(2)

    configure_logging(args.verbose)
    options = options_from_args(args)
    try:
        if args.command == "projects":
            status = projects_command(options)
        else:
            status = search_command(" ".join(args.query), options, print_only=args.print)
    except (VercelxError, httpx.HTTPError) as exc:
        log_error(exc, command=args.command)
        sys.stderr.write(f"\nError: {exc}\nDetails were logged to {ERROR_LOG_PATH}\n")
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        raise SystemExit(130) from None
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
