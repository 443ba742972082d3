"""Build the live set of cgwt sessions from tmux."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from .errors import CgwtError
from .naming import decode
from .parsers import TmuxSession
from .tmux import TmuxClient, is_inside_tmux

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """A live tmux session owned by cgwt."""

    name: str
    project: str
    branch: str
    window_count: int
    created_at: datetime
    attached: bool
    has_agent_running: bool


def _to_record(session: TmuxSession, tmux: TmuxClient, agent_command: str) -> SessionRecord | None:
    decoded = decode(session.name)
    if decoded is None:
        return None
    project, branch = decoded
    return SessionRecord(
        name=session.name,
        project=project,
        branch=branch,
        window_count=session.windows,
        created_at=datetime.fromtimestamp(session.created, tz=timezone.utc),
        attached=session.attached,
        has_agent_running=tmux.is_pane_running(session.name, agent_command),
    )


def list_sessions(tmux: TmuxClient, *, agent_command: str = "claude") -> list[SessionRecord]:
    """Return every cgwt session tmux knows about.

    Never raises: a missing tmux binary or a failing listing yields ``[]``.
    """

    try:
        sessions = tmux.list_sessions()
        records = [_to_record(session, tmux, agent_command) for session in sessions]
    except CgwtError as exc:
        LOG.debug("Listing tmux sessions failed: %s", exc)
        return []
    return [record for record in records if record is not None]


def get_session(
    tmux: TmuxClient,
    name: str,
    *,
    agent_command: str = "claude",
) -> SessionRecord | None:
    try:
        for session in tmux.list_sessions():
            if session.name == name:
                return _to_record(session, tmux, agent_command)
    except CgwtError as exc:
        LOG.debug("Looking up tmux session %s failed: %s", name, exc)
    return None


def current_session_name(tmux: TmuxClient) -> str | None:
    """Return the tmux session this process runs in, if any."""

    if not is_inside_tmux():
        return None
    try:
        return tmux.display("#S")
    except CgwtError as exc:
        LOG.debug("Could not read current tmux session: %s", exc)
        return None


__all__ = ["SessionRecord", "current_session_name", "get_session", "list_sessions"]
