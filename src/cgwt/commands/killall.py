"""`cgwt killall` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from rich.markup import escape

from ..lifecycle import kill_sessions
from .common import Environment, console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "killall",
        help="Kill every cgwt session (branch sessions first, supervisors last)",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    env = Environment.from_args(args)
    records = env.sessions()
    if not records:
        console.print("No cgwt sessions to kill")
        return 0

    console.print(f"Killing {len(records)} cgwt sessions...")
    for name in kill_sessions(env.tmux, records):
        console.print(f"  Killed: {escape(name)}")
    return 0
