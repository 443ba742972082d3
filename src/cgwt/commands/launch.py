"""`cgwt launch` implementation."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..errors import RepoStateError
from ..lifecycle import SessionConfig, launch_session
from ..repo_state import Action, require_action
from .common import Environment


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "launch",
        help="Start or attach the session for the current directory",
    )
    parser.set_defaults(handler=execute)


def execute(args: Namespace) -> int:
    """Launch the supervisor in a worktree parent, or the branch session in a worktree."""

    env = Environment.from_args(args)
    context = env.context
    require_action(context, Action.LAUNCH)
    if (
        context.session_name is None
        or context.project_name is None
        or context.session_branch is None
        or context.role is None
    ):
        raise RepoStateError(context.state.value, Action.LAUNCH.value)

    config = SessionConfig(
        session_name=context.session_name,
        working_directory=context.path,
        project=context.project_name,
        branch=context.session_branch,
        role=context.role,
    )
    return launch_session(env.tmux, config, settings=env.settings)
