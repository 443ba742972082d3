"""`cgwt compare` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from rich.markup import escape

from ..grouping import BranchEntry
from ..layouts import (
    MAX_COMPARE_PANES,
    ComparePane,
    create_comparison_layout,
    find_layout,
)
from ..resolver import resolve_grouped
from .common import Environment, console
from .switch import address_mode


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "compare",
        help="Show several branch sessions side by side in a 'compare' window",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help=(
            "Session addresses to show. One address is paired with the current "
            f"session; none shows up to {MAX_COMPARE_PANES} sessions of this project"
        ),
    )
    parser.add_argument(
        "--layout",
        default=None,
        help="Predefined layout name (see `cgwt layouts`)",
    )
    parser.set_defaults(handler=execute)


def _unique(entries: list[BranchEntry]) -> list[BranchEntry]:
    seen: set[str] = set()
    unique: list[BranchEntry] = []
    for entry in entries:
        if entry.session_name not in seen:
            seen.add(entry.session_name)
            unique.append(entry)
    return unique


def execute(args: Namespace) -> int:
    env = Environment.from_args(args)
    current, project, branch = env.current_session()
    layout = find_layout(args.layout).layout if args.layout else None
    groups = env.groups()

    if args.targets:
        entries = [
            resolve_grouped(
                target,
                groups,
                mode=address_mode(target, len(groups)),
                project=project,
            )
            for target in args.targets
        ]
        if len(entries) == 1:
            entries.insert(0, BranchEntry(project=project, branch=branch, session_name=current))
    else:
        own = [group for group in groups if group.project == project]
        entries = [entry for group in own for entry in group.branches if entry.has_session]
        entries = entries[:MAX_COMPARE_PANES]

    panes = [
        ComparePane(
            session_name=entry.session_name,
            branch=entry.branch,
            working_directory=env.config_for(entry).working_directory,
        )
        for entry in _unique(entries)
    ]
    names = ", ".join(pane.branch for pane in panes)
    console.print(f"Creating comparison layout for: {escape(names)}")
    create_comparison_layout(env.tmux, current, panes, layout=layout)

    console.print("[green]Comparison window created[/green]")
    console.print("[yellow]Tips:[/yellow]")
    console.print("- Use Ctrl+b followed by arrow keys to move between panes")
    console.print("- Use `cgwt sync` to type into every pane at once")
    console.print("- Close the comparison window with Ctrl+b &")
    return 0
