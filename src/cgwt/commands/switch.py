"""`cgwt switch` implementation."""

from __future__ import annotations

import logging
from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..lifecycle import launch_session
from ..resolver import AddressMode, resolve_grouped
from ..repo_state import Action, require_action
from .common import Environment

LOG = logging.getLogger(__name__)


def register(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "switch",
        aliases=["s"],
        help="Switch to a session by index, project.branch index or branch name",
    )
    parser.add_argument(
        "target",
        help="Session address: 2, 0.1, a branch name, or 'sup' for the supervisor",
    )
    parser.set_defaults(handler=execute)


def address_mode(target: str, project_count: int) -> AddressMode:
    if "." in target or project_count > 1:
        return AddressMode.MULTI_PROJECT
    return AddressMode.FLAT


def execute(args: Namespace) -> int:
    """Resolve the address and attach to (or switch into) its session."""

    env = Environment.from_args(args)
    require_action(env.context, Action.SWITCH)
    groups = env.groups()
    mode = address_mode(args.target, len(groups))
    entry = resolve_grouped(args.target, groups, mode=mode, project=env.project_key)
    LOG.info("Resolved %s to %s", args.target, entry.session_name)
    return launch_session(env.tmux, env.config_for(entry), settings=env.settings)
