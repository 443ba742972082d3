"""Classify a directory by its git layout using filesystem checks only."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import RepoStateError
from .grouping import SUPERVISOR_BRANCH
from .naming import encode
from .worktrees import BARE_DIR

LOG = logging.getLogger(__name__)

_GITDIR_RE = re.compile(r"^gitdir:\s*(.+)$", re.MULTILINE)
_BARE_WORKTREES_RE = re.compile(r"^(.+)/" + re.escape(BARE_DIR) + r"/worktrees(?:/|$)")


class RepoState(str, Enum):
    EMPTY = "empty"
    NON_GIT = "non-git"
    PLAIN_REPO = "git-repo"
    WORKTREE = "git-worktree"
    WORKTREE_PARENT = "worktree-parent"


class SessionRole(str, Enum):
    SUPERVISOR = "supervisor"
    CHILD = "child"


class Action(str, Enum):
    LIST = "list sessions"
    SWITCH = "switch sessions"
    LAUNCH = "launch a session"
    CREATE_WORKTREE = "create a worktree"


_ALLOWED: dict[RepoState, frozenset[Action]] = {
    RepoState.EMPTY: frozenset({Action.LIST, Action.SWITCH}),
    RepoState.NON_GIT: frozenset({Action.LIST, Action.SWITCH}),
    RepoState.PLAIN_REPO: frozenset({Action.LIST, Action.SWITCH, Action.LAUNCH}),
    RepoState.WORKTREE: frozenset(Action),
    RepoState.WORKTREE_PARENT: frozenset(Action),
}


@dataclass(frozen=True, slots=True)
class RepoContext:
    """What cgwt knows about the directory it was started in."""

    state: RepoState
    path: Path
    project_root: Path | None = None
    project_name: str | None = None
    branch: str | None = None

    @property
    def role(self) -> SessionRole | None:
        return role_for_state(self.state)

    @property
    def session_branch(self) -> str | None:
        if self.role is SessionRole.SUPERVISOR:
            return SUPERVISOR_BRANCH
        if self.role is None:
            return None
        return self.branch or self.path.name

    @property
    def session_name(self) -> str | None:
        branch = self.session_branch
        if self.project_name is None or branch is None:
            return None
        return encode(self.project_name, branch)


def role_for_state(state: RepoState) -> SessionRole | None:
    if state is RepoState.WORKTREE_PARENT:
        return SessionRole.SUPERVISOR
    if state in (RepoState.WORKTREE, RepoState.PLAIN_REPO):
        return SessionRole.CHILD
    return None


def detect_repo_state(path: Path) -> RepoState:
    """Return the :class:`RepoState` of ``path``.

    A directory that does not exist yet counts as empty.
    """

    if not path.exists():
        return RepoState.EMPTY
    if not path.is_dir():
        return RepoState.NON_GIT
    if not any(path.iterdir()):
        return RepoState.EMPTY
    if (path / BARE_DIR).is_dir():
        return RepoState.WORKTREE_PARENT

    git_path = path / ".git"
    if git_path.is_dir():
        return RepoState.PLAIN_REPO
    if git_path.is_file() and _read_gitdir(git_path) is not None:
        return RepoState.WORKTREE
    return RepoState.NON_GIT


def detect_context(path: Path) -> RepoContext:
    """Classify ``path`` and work out its project, branch and session role."""

    path = path.resolve()
    state = detect_repo_state(path)

    if state is RepoState.WORKTREE_PARENT:
        return RepoContext(
            state=state,
            path=path,
            project_root=path,
            project_name=path.name,
            branch=_read_head_branch(path / BARE_DIR),
        )

    if state is RepoState.WORKTREE:
        gitdir = _read_gitdir(path / ".git")
        project_root = path.parent
        branch = None
        if gitdir is not None:
            if not gitdir.is_absolute():
                gitdir = (path / gitdir).resolve()
            match = _BARE_WORKTREES_RE.match(gitdir.as_posix())
            if match:
                project_root = Path(match.group(1))
            branch = _read_head_branch(gitdir)
        return RepoContext(
            state=state,
            path=path,
            project_root=project_root,
            project_name=project_root.name,
            branch=branch,
        )

    if state is RepoState.PLAIN_REPO:
        return RepoContext(
            state=state,
            path=path,
            project_root=path,
            project_name=path.name,
            branch=_read_head_branch(path / ".git"),
        )

    return RepoContext(state=state, path=path)


def allowed_actions(state: RepoState) -> frozenset[Action]:
    return _ALLOWED[state]


def require_action(context: RepoContext, action: Action) -> None:
    if action not in allowed_actions(context.state):
        raise RepoStateError(context.state.value, action.value)


def _read_gitdir(git_file: Path) -> Path | None:
    try:
        content = git_file.read_text(encoding="utf-8")
    except OSError as exc:
        LOG.debug("Could not read %s: %s", git_file, exc)
        return None
    match = _GITDIR_RE.search(content)
    if not match:
        return None
    return Path(match.group(1).strip())


def _read_head_branch(git_dir: Path) -> str | None:
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
    except OSError:
        return None
    prefix = "ref: refs/heads/"
    if head.startswith(prefix):
        return head[len(prefix):]
    return None


__all__ = [
    "Action",
    "RepoContext",
    "RepoState",
    "SessionRole",
    "allowed_actions",
    "detect_context",
    "detect_repo_state",
    "require_action",
    "role_for_state",
]
