"""`cgwt layouts` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..layouts import PREDEFINED_LAYOUTS
from .common import console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "layouts",
        help="List the layouts accepted by `cgwt compare --layout`",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    console.print("[bold]Predefined tmux layouts:[/bold]")
    for layout in PREDEFINED_LAYOUTS:
        console.print(f"\n[cyan]{layout.name}[/cyan]")
        console.print(f"  {layout.description}")
        console.print(f"  Branches: {', '.join(layout.branches)}")
        console.print(f"  Layout: {layout.layout}")
    return 0
