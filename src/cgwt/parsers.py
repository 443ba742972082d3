"""Parsers for tmux ``-F`` listings and ``git worktree list --porcelain``.

Nothing in here raises on malformed input: bad numbers become ``0``, blank
lines are skipped and partial rows still produce a record.
"""

from __future__ import annotations

from dataclasses import dataclass

FIELD_SEPARATOR = "|"
REF_PREFIX = "refs/heads/"

SESSION_FORMAT = FIELD_SEPARATOR.join(
    [
        "#{session_name}",
        "#{session_windows}",
        "#{session_created}",
        "#{session_attached}",
        "#{?session_grouped,#{session_group},}",
    ]
)
PANE_FORMAT = FIELD_SEPARATOR.join(
    [
        "#{pane_id}",
        "#{session_name}",
        "#{window_index}",
        "#{pane_index}",
        "#{pane_current_command}",
        "#{pane_title}",
    ]
)


@dataclass(frozen=True, slots=True)
class TmuxSession:
    """One row of ``tmux list-sessions``."""

    name: str
    windows: int = 0
    created: int = 0
    attached: bool = False
    group: str | None = None


@dataclass(frozen=True, slots=True)
class TmuxPane:
    """One row of ``tmux list-panes -s``."""

    pane_id: str
    session_name: str = ""
    window_index: int = 0
    pane_index: int = 0
    command: str = ""
    title: str | None = None


@dataclass(frozen=True, slots=True)
class WorktreeEntry:
    """One block of ``git worktree list --porcelain``."""

    path: str
    head_commit: str = ""
    branch_ref: str | None = None
    is_root: bool = False

    @property
    def branch(self) -> str | None:
        if self.branch_ref is None:
            return None
        return strip_ref(self.branch_ref)


def strip_ref(ref: str) -> str:
    return ref[len(REF_PREFIX):] if ref.startswith(REF_PREFIX) else ref


def parse_number(value: str | None, default: int = 0) -> int:
    """Parse a leading integer like ``parseInt`` would, or return ``default``."""

    if value is None:
        return default
    text = value.strip()
    digits = ""
    for index, char in enumerate(text):
        if char.isdigit() or (index == 0 and char in "+-"):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return default


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _rows(text: str) -> list[list[str]]:
    if not text or not text.strip():
        return []
    return [line.split(FIELD_SEPARATOR) for line in text.strip().splitlines() if line]


def _field(fields: list[str], index: int) -> str | None:
    return fields[index] if index < len(fields) else None


def parse_sessions(text: str) -> list[TmuxSession]:
    """Parse ``name|windows|created|attached|group`` rows."""

    sessions: list[TmuxSession] = []
    for fields in _rows(text):
        sessions.append(
            TmuxSession(
                name=fields[0],
                windows=parse_number(_field(fields, 1)),
                created=parse_number(_field(fields, 2)),
                attached=_field(fields, 3) == "1",
                group=_optional(_field(fields, 4)),
            )
        )
    return sessions


def parse_panes(text: str) -> list[TmuxPane]:
    """Parse ``id|session|window|pane|command|title`` rows."""

    panes: list[TmuxPane] = []
    for fields in _rows(text):
        panes.append(
            TmuxPane(
                pane_id=fields[0],
                session_name=_field(fields, 1) or "",
                window_index=parse_number(_field(fields, 2)),
                pane_index=parse_number(_field(fields, 3)),
                command=_field(fields, 4) or "",
                title=_optional(_field(fields, 5)),
            )
        )
    return panes


def parse_worktrees(text: str) -> list[WorktreeEntry]:
    """Parse porcelain worktree blocks, bare/root entries first then by branch."""

    entries: list[WorktreeEntry] = []
    current: dict[str, object] = {}

    def flush() -> None:
        if current.get("path"):
            entries.append(WorktreeEntry(**current))  # type: ignore[arg-type]
        current.clear()

    for raw_line in (text or "").splitlines():
        line = raw_line.rstrip("\r")
        if not line.strip():
            flush()
        elif line.startswith("worktree "):
            flush()
            current["path"] = line[len("worktree "):]
        elif line.startswith("HEAD "):
            current["head_commit"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            current["branch_ref"] = line[len("branch "):]
        elif line.strip() == "bare":
            current["is_root"] = True
    flush()

    return sort_worktrees(entries)


def sort_worktrees(entries: list[WorktreeEntry]) -> list[WorktreeEntry]:
    return sorted(entries, key=lambda entry: (not entry.is_root, entry.branch or ""))


__all__ = [
    "PANE_FORMAT",
    "SESSION_FORMAT",
    "TmuxPane",
    "TmuxSession",
    "WorktreeEntry",
    "parse_number",
    "parse_panes",
    "parse_sessions",
    "parse_worktrees",
    "sort_worktrees",
    "strip_ref",
]
