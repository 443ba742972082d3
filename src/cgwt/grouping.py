"""Group a flat session snapshot by project."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from .naming import decode, encode, sanitize_component
from .parsers import WorktreeEntry
from .snapshot import SessionRecord
from .worktrees import BARE_DIR

SUPERVISOR_BRANCH = "supervisor"


@dataclass(frozen=True, slots=True)
class BranchEntry:
    """One addressable branch inside a project."""

    project: str
    branch: str
    session_name: str
    is_active: bool = False
    # False for a worktree with no tmux session yet.
    has_session: bool = True
    path: Path | None = None

    @property
    def is_supervisor(self) -> bool:
        return self.branch == SUPERVISOR_BRANCH


@dataclass(slots=True)
class ProjectGroup:
    """All branches of one project, supervisor first."""

    project: str
    branches: list[BranchEntry] = field(default_factory=list)

    @property
    def supervisor(self) -> BranchEntry | None:
        for entry in self.branches:
            if entry.is_supervisor:
                return entry
        return None


def branch_sort_key(branch: str) -> tuple[bool, str]:
    return (branch != SUPERVISOR_BRANCH, branch)


def group_sessions(
    records: Iterable[SessionRecord],
    *,
    current_session: str | None = None,
    worktrees: Sequence[WorktreeEntry] | None = None,
    project: str | None = None,
) -> list[ProjectGroup]:
    """Partition ``records`` into sorted :class:`ProjectGroup` objects.

    ``current_session`` is the name of the session this process is attached
    to; the caller looks it up once. When ``worktrees`` and ``project`` are
    given, worktrees of that project that have no session yet are added so
    they can be addressed before their session exists.
    """

    by_project: dict[str, dict[str, BranchEntry]] = {}
    for record in records:
        decoded = decode(record.name)
        if decoded is None:
            continue
        name_project, branch = decoded
        by_project.setdefault(name_project, {})[branch] = BranchEntry(
            project=name_project,
            branch=branch,
            session_name=record.name,
            is_active=record.name == current_session,
        )

    if worktrees and project:
        _merge_worktrees(by_project, worktrees, project)

    groups: list[ProjectGroup] = []
    for name in sorted(by_project):
        entries = by_project[name]
        ordered = [entries[branch] for branch in sorted(entries, key=branch_sort_key)]
        groups.append(ProjectGroup(project=name, branches=ordered))
    return groups


def _merge_worktrees(
    by_project: dict[str, dict[str, BranchEntry]],
    worktrees: Sequence[WorktreeEntry],
    project: str,
) -> None:
    key = sanitize_component(project)
    entries = by_project.setdefault(key, {})
    for worktree in worktrees:
        if worktree.is_root:
            branch = SUPERVISOR_BRANCH
            path = Path(worktree.path)
            # The bare directory itself is not a checkout; run the supervisor in its parent.
            if path.name == BARE_DIR:
                path = path.parent
        elif worktree.branch:
            branch = worktree.branch
            path = Path(worktree.path)
        else:
            continue
        session_name = encode(project, branch)
        decoded = decode(session_name)
        if decoded is None:
            continue
        _, session_branch = decoded
        existing = entries.get(session_branch)
        if existing is not None:
            if existing.path is None:
                entries[session_branch] = replace(existing, path=path)
            continue
        entries[session_branch] = BranchEntry(
            project=key,
            branch=session_branch,
            session_name=session_name,
            has_session=False,
            path=path,
        )


def flatten(groups: Iterable[ProjectGroup]) -> list[BranchEntry]:
    """Return every entry in display order."""

    return [entry for group in groups for entry in group.branches]


__all__ = [
    "BranchEntry",
    "ProjectGroup",
    "SUPERVISOR_BRANCH",
    "branch_sort_key",
    "flatten",
    "group_sessions",
]
