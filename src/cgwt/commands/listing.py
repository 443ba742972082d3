"""`cgwt list` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from rich.markup import escape

from ..grouping import BranchEntry, ProjectGroup
from .common import Environment, console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "list",
        aliases=["l"],
        help="List cgwt sessions grouped by project",
    )
    parser.set_defaults(handler=execute)


def index_labels(groups: list[ProjectGroup]) -> dict[str, str]:
    """Map session names to the address that selects them.

    A single project is numbered flat (``0`` for the supervisor, then
    ``1..n``); several projects use ``project.branch`` indexes.
    """

    labels: dict[str, str] = {}
    if len(groups) == 1:
        position = 0
        for entry in groups[0].branches:
            if entry.is_supervisor:
                labels[entry.session_name] = "0"
            else:
                position += 1
                labels[entry.session_name] = str(position)
        return labels

    for project_index, group in enumerate(groups):
        for branch_index, entry in enumerate(group.branches):
            labels[entry.session_name] = f"{project_index}.{branch_index}"
    return labels


def _format_entry(label: str, entry: BranchEntry) -> str:
    name = "[magenta]SUPERVISOR[/magenta]" if entry.is_supervisor else f"[cyan]{escape(entry.branch)}[/cyan]"
    line = f"  [yellow]{escape(label)}:[/yellow] {name}"
    if entry.is_active:
        line += " [green]\\[current][/green]"
    if not entry.has_session:
        line += " [dim](no session)[/dim]"
    return line


def execute(args: Namespace) -> int:
    """Print every project's sessions with the addresses that select them."""

    env = Environment.from_args(args)
    groups = env.groups()
    if not groups:
        console.print("No cgwt sessions found")
        return 0

    labels = index_labels(groups)
    console.print("[bold]cgwt sessions:[/bold]")
    for group in groups:
        console.print(f"\n[bold blue]{escape(group.project)}[/bold blue]")
        for entry in group.branches:
            console.print(_format_entry(labels[entry.session_name], entry))
    return 0
