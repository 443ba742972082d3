"""`cgwt sync` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..layouts import toggle_synchronized_panes
from .common import Environment, console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "sync",
        help="Toggle typing into every pane of the current window at once",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    env = Environment.from_args(args)
    current, _, _ = env.current_session()
    enabled = toggle_synchronized_panes(env.tmux, current)
    console.print(f"[green]Synchronized panes: {'ON' if enabled else 'OFF'}[/green]")
    return 0
