"""State shared by the cgwt subcommands."""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from ..config import Settings
from ..errors import NotInSessionError
from ..grouping import BranchEntry, ProjectGroup, group_sessions
from ..lifecycle import SessionConfig
from ..naming import decode, sanitize_component
from ..parsers import WorktreeEntry
from ..repo_state import RepoContext, RepoState, SessionRole, detect_context
from ..runner import CommandRunner, SubprocessRunner
from ..snapshot import SessionRecord, current_session_name, list_sessions
from ..tmux import TmuxClient
from ..worktrees import WorktreeError, list_worktrees

LOG = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


@dataclass(slots=True)
class Environment:
    """Settings, tmux access and directory context for one invocation."""

    settings: Settings
    runner: CommandRunner
    tmux: TmuxClient
    context: RepoContext

    @classmethod
    def from_args(cls, args: Namespace) -> Environment:
        settings: Settings = getattr(args, "settings", None) or Settings.from_env()
        runner: CommandRunner = getattr(args, "runner", None) or SubprocessRunner()
        repo = Path(args.repo)
        return cls(
            settings=settings,
            runner=runner,
            tmux=TmuxClient(runner, settings.tmux_path),
            context=detect_context(repo),
        )

    @property
    def project_key(self) -> str | None:
        """The current project as it appears in session names."""

        if self.context.project_name is None:
            return None
        return sanitize_component(self.context.project_name)

    def sessions(self) -> list[SessionRecord]:
        return list_sessions(self.tmux, agent_command=self.settings.agent_executable)

    def current_session(self) -> tuple[str, str, str]:
        """Return ``(name, project, branch)`` of the cgwt session this terminal is in.

        Raises:
            NotInSessionError: outside tmux or inside a session cgwt did not name.
        """

        current = current_session_name(self.tmux)
        if current is None:
            raise NotInSessionError()
        decoded = decode(current)
        if decoded is None:
            raise NotInSessionError(current)
        project, branch = decoded
        return current, project, branch

    def worktrees(self) -> list[WorktreeEntry]:
        if self.context.state not in (RepoState.WORKTREE, RepoState.WORKTREE_PARENT):
            return []
        if self.context.project_root is None:
            return []
        try:
            return list_worktrees(self.runner, self.context.project_root, git=self.settings.git_path)
        except WorktreeError as exc:
            LOG.warning("Could not list worktrees: %s", exc)
            return []

    def groups(self) -> list[ProjectGroup]:
        return group_sessions(
            self.sessions(),
            current_session=current_session_name(self.tmux),
            worktrees=self.worktrees(),
            project=self.context.project_name,
        )

    def config_for(self, entry: BranchEntry) -> SessionConfig:
        """Build the launch configuration for a resolved entry."""

        directory = entry.path
        if directory is None and entry.has_session:
            directory = self.tmux.session_path(entry.session_name)
        if directory is None:
            directory = self.context.path
        role = SessionRole.SUPERVISOR if entry.is_supervisor else SessionRole.CHILD
        return SessionConfig(
            session_name=entry.session_name,
            working_directory=directory,
            project=entry.project,
            branch=entry.branch,
            role=role,
        )


__all__ = ["Environment", "console", "err_console"]
