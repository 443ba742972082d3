"""Helpers for the per-branch git worktrees cgwt sessions run in.

A cgwt project keeps its repository in a ``.bare`` directory and checks out
each branch into ``<project>/<branch>``. The helpers here list and add those
worktrees; they do not touch tmux.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import CgwtError
from .parsers import WorktreeEntry, parse_worktrees
from .runner import CommandResult, CommandRunner

LOG = logging.getLogger(__name__)

BARE_DIR = ".bare"


class WorktreeError(CgwtError):
    """Raised when a git worktree operation fails."""


def git_dir_for(project_root: Path) -> Path:
    """Return the directory git commands should run in for ``project_root``."""

    bare = project_root / BARE_DIR
    return bare if bare.is_dir() else project_root


def list_worktrees(
    runner: CommandRunner,
    project_root: Path,
    *,
    git: str = "git",
) -> list[WorktreeEntry]:
    """Return the worktrees of ``project_root``, root entry first.

    Raises:
        WorktreeError: if ``git worktree list`` fails.
    """

    result = _run_git(runner, git, ["worktree", "list", "--porcelain"], cwd=git_dir_for(project_root))
    if not result.ok:
        raise WorktreeError(
            f"Failed to list worktrees in {project_root}: {result.stderr.strip()}"
        )
    return parse_worktrees(result.stdout)


def add_worktree(
    runner: CommandRunner,
    project_root: Path,
    branch: str,
    *,
    base_branch: Optional[str] = None,
    git: str = "git",
) -> Path:
    """Create or reuse the worktree for ``branch`` under ``project_root``.

    Args:
        runner: Command runner used to invoke git.
        project_root: Directory holding ``.bare`` and the branch checkouts.
        branch: Branch to check out; created if it does not exist yet.
        base_branch: Optional start point for a new branch.

    Returns:
        Path of the worktree directory.

    Raises:
        WorktreeError: if the worktree cannot be created.
    """

    project_root = project_root.resolve()
    target_dir = project_root / branch
    cwd = git_dir_for(project_root)

    # An existing directory is taken to be the worktree already.
    if target_dir.exists():
        LOG.info("Reusing existing worktree %s", target_dir)
        return target_dir

    target_dir.parent.mkdir(parents=True, exist_ok=True)

    args = ["worktree", "add"]
    if base_branch:
        args += ["-b", branch, str(target_dir), base_branch]
    else:
        branches = _branch_names(runner, git, cwd)
        if branch in branches:
            args += [str(target_dir), branch]
        elif f"remotes/origin/{branch}" in branches:
            args += ["-b", branch, str(target_dir), f"origin/{branch}"]
        else:
            args += ["-b", branch, str(target_dir)]

    result = _run_git(runner, git, args, cwd=cwd)
    if not result.ok:
        raise WorktreeError(
            f"Failed to create worktree for branch '{branch}' in {target_dir}: "
            f"{result.stderr.strip()}"
        )
    LOG.info("Created worktree %s for branch %s", target_dir, branch)
    return target_dir


def _branch_names(runner: CommandRunner, git: str, cwd: Path) -> set[str]:
    result = _run_git(runner, git, ["branch", "-a", "--format=%(refname:short)"], cwd=cwd)
    if not result.ok:
        return set()
    names: set[str] = set()
    for line in result.stdout.splitlines():
        name = line.strip()
        if not name:
            continue
        names.add(name)
        if name.startswith("origin/"):
            names.add(f"remotes/{name}")
    return names


def _run_git(runner: CommandRunner, git: str, args: list[str], *, cwd: Path) -> CommandResult:
    return runner.run([git, *args], cwd=cwd)


__all__ = ["BARE_DIR", "WorktreeError", "add_worktree", "git_dir_for", "list_worktrees"]
