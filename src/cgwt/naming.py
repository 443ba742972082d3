"""Encode and decode tmux session names for (project, branch) pairs.

Names look like ``cgwt-<project>--<branch>``. Each component is sanitized on
its own, so a double dash can only appear as the separator. Names written by
older releases used a single dash (``cgwt-<project>-<branch>``); those are
still decoded by splitting on the last dash, which is lossy when either
component contained a dash.
"""

from __future__ import annotations

import re

SESSION_PREFIX = "cgwt"
SEPARATOR = "--"

_DISALLOWED = re.compile(r"[^A-Za-z0-9_-]")
_DASH_RUNS = re.compile(r"-{2,}")


def sanitize_component(value: str) -> str:
    """Reduce ``value`` to ``[A-Za-z0-9_-]`` with no repeated or edge dashes."""

    cleaned = _DISALLOWED.sub("-", value)
    cleaned = _DASH_RUNS.sub("-", cleaned)
    return cleaned.strip("-")


def encode(project: str, branch: str) -> str:
    """Return the session name for ``project`` and ``branch``.

    >>> encode("my-repo", "feature/test")
    'cgwt-my-repo--feature-test'
    """

    return f"{SESSION_PREFIX}-{sanitize_component(project)}{SEPARATOR}{sanitize_component(branch)}"


def decode(name: str) -> tuple[str, str] | None:
    """Split a session name back into ``(project, branch)``.

    Returns ``None`` for names that were not produced by cgwt.
    """

    prefix = f"{SESSION_PREFIX}-"
    if not name.startswith(prefix):
        return None

    remainder = name[len(prefix):]
    parts = remainder.split(SEPARATOR)
    if len(parts) == 2:
        project, branch = parts
        if project and branch:
            return project, branch
        return None

    # Legacy single-dash names: everything before the last dash is the project.
    project, dash, branch = remainder.rpartition("-")
    if not dash or not branch:
        return None
    return project, branch


def is_session_name(name: str) -> bool:
    return decode(name) is not None


__all__ = [
    "SEPARATOR",
    "SESSION_PREFIX",
    "decode",
    "encode",
    "is_session_name",
    "sanitize_component",
]
