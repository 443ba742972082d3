"""`cgwt new` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from rich.markup import escape

from ..errors import RepoStateError
from ..lifecycle import SessionConfig, launch_session
from ..naming import encode
from ..repo_state import Action, SessionRole, require_action
from ..worktrees import add_worktree
from .common import Environment, console


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "new",
        help="Create a worktree for a branch and launch its session",
    )
    parser.add_argument("branch", help="Branch to check out (created when missing)")
    parser.add_argument(
        "--base",
        default=None,
        help="Start point for a new branch (default: git's choice)",
    )
    parser.add_argument(
        "--no-launch",
        action="store_true",
        help="Only create the worktree; do not start a session",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    env = Environment.from_args(args)
    context = env.context
    require_action(context, Action.CREATE_WORKTREE)
    if context.project_root is None or context.project_name is None:
        raise RepoStateError(context.state.value, Action.CREATE_WORKTREE.value)

    path = add_worktree(
        env.runner,
        context.project_root,
        args.branch,
        base_branch=args.base,
        git=env.settings.git_path,
    )
    console.print(f"[green]Worktree ready:[/green] {escape(str(path))}")
    if args.no_launch:
        return 0

    config = SessionConfig(
        session_name=encode(context.project_name, args.branch),
        working_directory=path,
        project=context.project_name,
        branch=args.branch,
        role=SessionRole.CHILD,
    )
    return launch_session(env.tmux, config, settings=env.settings)
