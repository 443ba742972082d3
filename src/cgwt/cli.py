"""Command-line entry point for cgwt."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from pathlib import Path

from rich.markup import escape

from . import __version__
from .commands import COMMANDS
from .commands.common import err_console
from .config import Settings
from .errors import CgwtError
from .runner import CommandRunner

LOG = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^\d+(\.\d+)?$")
# Global options that consume the following argument.
_VALUE_OPTIONS = frozenset({"--repo"})


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure basic logging to stderr for the CLI."""

    if logging.getLogger().handlers:
        # Assume the application configured logging already.
        return

    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser with every subcommand registered."""

    def _default_repo() -> Path:
        env_value = os.environ.get("CGWT_REPO_ROOT")
        return Path(env_value) if env_value else Path(".")

    parser = argparse.ArgumentParser(
        prog="cgwt",
        description="Run one Claude session per git branch, each in its own tmux session",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cgwt {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=_default_repo(),
        help="Directory to work from (default: current directory or $CGWT_REPO_ROOT)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    for command in COMMANDS:
        command.register(subparsers)
    return parser


def expand_shorthand(argv: list[str]) -> list[str]:
    """Turn ``cgwt 2`` / ``cgwt 0.1`` into ``cgwt switch <address>``."""

    skip_next = False
    for position, arg in enumerate(argv):
        if skip_next:
            skip_next = False
            continue
        if arg.startswith("-"):
            skip_next = arg in _VALUE_OPTIONS
            continue
        if _ADDRESS_RE.match(arg):
            return [*argv[:position], "switch", *argv[position:]]
        break
    return argv


def _log_level(verbose: int, settings: Settings) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return settings.logging_level()


def main(argv: list[str] | None = None, *, runner: CommandRunner | None = None) -> int:
    """Parse CLI arguments and run the selected subcommand."""

    parser = build_parser()
    args = parser.parse_args(expand_shorthand(list(sys.argv[1:] if argv is None else argv)))

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(_log_level(args.verbose, settings))

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    args.settings = settings
    args.runner = runner
    try:
        return handler(args)
    except CgwtError as exc:
        LOG.debug("Command failed", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1


def run(argv: list[str] | None = None) -> None:
    """Execute the CLI and exit the current process."""

    sys.exit(main(argv))


if __name__ == "__main__":  # pragma: no cover
    run()
