"""`cgwt status` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from rich.markup import escape

from ..naming import decode
from ..snapshot import current_session_name
from .common import Environment, console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "status",
        aliases=["?"],
        help="Show the cgwt session this terminal is in",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    env = Environment.from_args(args)
    current = current_session_name(env.tmux)
    if current is None:
        console.print("Not in a tmux session")
        return 0

    decoded = decode(current)
    if decoded is None:
        console.print(f"Current session: [cyan]{escape(current)}[/cyan] (not managed by cgwt)")
        return 0

    project, branch = decoded
    role = env.tmux.get_option(current, "@cgwt-role") or "unknown"
    siblings = [record for record in env.sessions() if record.project == project]

    console.print("\n[bold]cgwt status[/bold]\n")
    console.print("[cyan]Current session:[/cyan]")
    console.print(f"  Project: {escape(project)}")
    console.print(f"  Branch: {escape(branch)}")
    console.print(f"  Role: {escape(role)}")
    console.print(f"  Directory: {escape(str(env.context.path))}")

    console.print("\n[cyan]Project sessions:[/cyan]")
    for record in siblings:
        marker = " [green]\\[current][/green]" if record.name == current else ""
        agent = "agent running" if record.has_agent_running else "agent stopped"
        console.print(
            f"  {escape(record.branch)}: {record.window_count} window(s), {agent}{marker}"
        )
    return 0
