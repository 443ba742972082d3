"""Resolve user-facing addresses (``2``, ``0.1``, ``feature-x``, ``sup``) to sessions.

Flat mode numbers sessions inside a single list: ``0`` is the supervisor and
``1..n`` are the other branches in sorted order. Multi-project mode uses
``project.branch`` indexes, both 0-based, over the grouped listing, where the
supervisor is branch ``0`` of its project when it exists.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from .errors import (
    AmbiguousAddressError,
    IndexOutOfRangeError,
    InvalidAddressError,
    NotFoundError,
)
from .grouping import SUPERVISOR_BRANCH, BranchEntry, ProjectGroup, flatten
from .naming import sanitize_component
from .parsers import WorktreeEntry, strip_ref
from .snapshot import SessionRecord

LOG = logging.getLogger(__name__)

SUPERVISOR_ALIASES = frozenset({"supervisor", "sup"})

_FLAT_RE = re.compile(r"^\d+$")
_COMPOUND_RE = re.compile(r"^(\d+)\.(\d+)$")

T = TypeVar("T")


class AddressMode(str, Enum):
    FLAT = "flat"
    MULTI_PROJECT = "multi-project"


@dataclass(frozen=True, slots=True)
class FlatIndex:
    index: int


@dataclass(frozen=True, slots=True)
class CompoundIndex:
    project: int
    branch: int


@dataclass(frozen=True, slots=True)
class BranchName:
    name: str


@dataclass(frozen=True, slots=True)
class SupervisorAlias:
    pass


Address = Union[FlatIndex, CompoundIndex, BranchName, SupervisorAlias]


def parse_address(raw: str) -> Address:
    """Classify ``raw`` into one of the accepted address forms."""

    text = raw.strip()
    if not text:
        raise InvalidAddressError(raw, "address is empty")
    if _FLAT_RE.match(text):
        return FlatIndex(int(text))
    compound = _COMPOUND_RE.match(text)
    if compound:
        return CompoundIndex(int(compound.group(1)), int(compound.group(2)))
    if text in SUPERVISOR_ALIASES:
        return SupervisorAlias()
    return BranchName(text)


@dataclass(frozen=True, slots=True)
class _Candidate(Generic[T]):
    branch: str
    is_root: bool
    label: str
    item: T


# ----------------------------------------------------------------------
# Public entry points
# ----------------------------------------------------------------------
def resolve_flat(raw: str, records: Sequence[SessionRecord]) -> SessionRecord:
    """Resolve ``raw`` against a flat snapshot of sessions."""

    ordered = sorted(records, key=lambda r: (r.branch != SUPERVISOR_BRANCH, r.project, r.branch))
    candidates = [
        _Candidate(r.branch, r.branch == SUPERVISOR_BRANCH, r.name, r) for r in ordered
    ]
    return _resolve_single_list(raw, parse_address(raw), candidates)


def resolve_worktree(raw: str, entries: Sequence[WorktreeEntry]) -> WorktreeEntry:
    """Resolve ``raw`` against a worktree listing; the root entry is ``0``."""

    candidates = [
        _Candidate(entry.branch or "", entry.is_root, entry.path, entry) for entry in entries
    ]
    return _resolve_single_list(raw, parse_address(raw), candidates)


def resolve_grouped(
    raw: str,
    groups: Sequence[ProjectGroup],
    *,
    mode: AddressMode = AddressMode.MULTI_PROJECT,
    project: str | None = None,
) -> BranchEntry:
    """Resolve ``raw`` against grouped sessions.

    ``project`` names the caller's own project; bare indexes, aliases and
    branch names look there first.
    """

    address = parse_address(raw)
    scoped = [group for group in groups if project is not None and group.project == project]
    scope = scoped or list(groups)

    if isinstance(address, CompoundIndex):
        if mode is AddressMode.FLAT:
            raise InvalidAddressError(raw, "project.branch indexes need multi-project mode")
        return _resolve_compound(raw, address, groups)

    if isinstance(address, FlatIndex) and mode is AddressMode.MULTI_PROJECT and len(scope) > 1:
        raise InvalidAddressError(
            raw, "several projects are listed; use a project.branch index such as 0.1"
        )

    if isinstance(address, BranchName) and scoped and len(scoped) < len(groups):
        try:
            return _resolve_single_list(raw, address, _entry_candidates(scope))
        except NotFoundError:
            LOG.debug("Branch %s not in project %s, searching all projects", raw, project)
            return _resolve_single_list(raw, address, _entry_candidates(groups))

    return _resolve_single_list(raw, address, _entry_candidates(scope))


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _entry_candidates(groups: Sequence[ProjectGroup]) -> list[_Candidate[BranchEntry]]:
    return [
        _Candidate(entry.branch, entry.is_supervisor, entry.session_name, entry)
        for entry in flatten(groups)
    ]


def _available(candidates: Sequence[_Candidate[T]]) -> list[str]:
    seen: list[str] = []
    for candidate in candidates:
        name = SUPERVISOR_BRANCH if candidate.is_root else candidate.branch
        if name and name not in seen:
            seen.append(name)
    return seen


def _resolve_single_list(raw: str, address: Address, candidates: Sequence[_Candidate[T]]) -> T:
    if isinstance(address, FlatIndex):
        return _resolve_flat_index(raw, address.index, candidates)
    if isinstance(address, SupervisorAlias):
        return _resolve_supervisor(raw, candidates)
    if isinstance(address, BranchName):
        return _resolve_branch(raw, address.name, candidates)
    raise InvalidAddressError(raw, "project.branch indexes need multi-project mode")


def _resolve_flat_index(raw: str, index: int, candidates: Sequence[_Candidate[T]]) -> T:
    if index == 0:
        return _resolve_supervisor(raw, candidates)
    others = [candidate for candidate in candidates if not candidate.is_root]
    if index > len(others):
        raise IndexOutOfRangeError(raw, "session", 0, len(others))
    return others[index - 1].item


def _resolve_supervisor(raw: str, candidates: Sequence[_Candidate[T]]) -> T:
    for candidate in candidates:
        if candidate.is_root:
            return candidate.item
    raise NotFoundError(raw, _available(candidates))


def _resolve_branch(raw: str, name: str, candidates: Sequence[_Candidate[T]]) -> T:
    wanted = strip_ref(name)
    accepted = {wanted, sanitize_component(wanted)}
    matches = [
        candidate
        for candidate in candidates
        if candidate.branch and strip_ref(candidate.branch) in accepted
    ]
    if not matches:
        raise NotFoundError(raw, _available(candidates))
    if len(matches) > 1:
        raise AmbiguousAddressError(raw, [candidate.label for candidate in matches])
    return matches[0].item


def _resolve_compound(raw: str, address: CompoundIndex, groups: Sequence[ProjectGroup]) -> BranchEntry:
    if not groups:
        raise NotFoundError(raw)
    if address.project >= len(groups):
        raise IndexOutOfRangeError(raw, "project", 0, len(groups) - 1)
    group = groups[address.project]
    if address.branch >= len(group.branches):
        raise IndexOutOfRangeError(raw, "branch", 0, len(group.branches) - 1)
    return group.branches[address.branch]


__all__ = [
    "Address",
    "AddressMode",
    "BranchName",
    "CompoundIndex",
    "FlatIndex",
    "SUPERVISOR_ALIASES",
    "SupervisorAlias",
    "parse_address",
    "resolve_flat",
    "resolve_grouped",
    "resolve_worktree",
]
