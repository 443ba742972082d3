"""Create, reuse, attach to or switch into a cgwt tmux session.

For a target session the controller looks at two things: whether the session
exists, and whether the agent is already running in one of its panes. It
creates the session, adds an agent window, or does neither, and then hands
the terminal over (``attach-session``) or, from inside tmux, moves the
client (``switch-client``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import Settings
from .errors import ExternalCommandError, ToolUnavailableError
from .grouping import SUPERVISOR_BRANCH
from .repo_state import SessionRole
from .snapshot import SessionRecord, get_session
from .tmux import DUPLICATE_SESSION_MARKER, TmuxClient, is_inside_tmux
from .worktrees import BARE_DIR

LOG = logging.getLogger(__name__)

CONTEXT_FILENAME = ".claude-context.md"
AGENT_WINDOW = "claude"


class SessionState(str, Enum):
    NOT_EXIST = "not-exist"
    EXISTS_DORMANT = "exists-dormant"
    EXISTS_ACTIVE = "exists-active"


class CreateOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTED = "already-existed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CreateResult:
    outcome: CreateOutcome
    reason: str = ""


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Everything needed to start the agent for one branch."""

    session_name: str
    working_directory: Path
    project: str
    branch: str
    role: SessionRole = SessionRole.CHILD


def session_state(tmux: TmuxClient, session_name: str, *, agent_command: str = "claude") -> SessionState:
    record = get_session(tmux, session_name, agent_command=agent_command)
    if record is None:
        return SessionState.NOT_EXIST
    if record.has_agent_running:
        return SessionState.EXISTS_ACTIVE
    return SessionState.EXISTS_DORMANT


def create_session(tmux: TmuxClient, config: SessionConfig, agent_command: str) -> CreateResult:
    """Create ``config.session_name`` detached and start the agent in it.

    Losing a creation race to another cgwt process is reported as
    ``ALREADY_EXISTED`` rather than as a failure.
    """

    result = tmux.new_session(
        config.session_name,
        working_directory=config.working_directory,
        window_name=AGENT_WINDOW,
    )
    if not result.ok:
        if DUPLICATE_SESSION_MARKER in result.stderr:
            LOG.info("Session %s already exists", config.session_name)
            return CreateResult(CreateOutcome.ALREADY_EXISTED)
        return CreateResult(CreateOutcome.FAILED, result.stderr)

    name = config.session_name
    tmux.set_option(name, "mouse", "on")
    tmux.set_option(name, "mode-keys", "vi")
    tmux.set_option(name, "@cgwt-project", config.project)
    tmux.set_option(name, "@cgwt-branch", config.branch)
    tmux.set_option(name, "@cgwt-role", config.role.value)
    tmux.send_keys(name, [agent_command])
    LOG.info("Created session %s in %s", name, config.working_directory)
    return CreateResult(CreateOutcome.CREATED)


def launch_session(
    tmux: TmuxClient,
    config: SessionConfig,
    *,
    settings: Settings | None = None,
    inside_tmux: bool | None = None,
) -> int:
    """Bring ``config.session_name`` up and put the user's terminal on it.

    Returns the exit status to leave with: ``0`` after a ``switch-client``,
    or the status of ``attach-session`` once the user detaches.

    Raises:
        ToolUnavailableError: if tmux cannot be run.
        ExternalCommandError: if tmux refuses to create or attach the session.
    """

    settings = settings or Settings()
    if inside_tmux is None:
        inside_tmux = is_inside_tmux()
    if not tmux.is_available():
        raise ToolUnavailableError(tmux.binary)

    LOG.info(
        "Launching session %s (%s, branch %s)",
        config.session_name,
        config.role.value,
        config.branch,
    )
    write_context_file(config)

    state = session_state(tmux, config.session_name, agent_command=settings.agent_executable)
    if state is SessionState.NOT_EXIST:
        agent = agent_command_for(config.working_directory, settings)
        created = create_session(tmux, config, agent)
        if created.outcome is CreateOutcome.FAILED:
            raise ExternalCommandError(
                [tmux.binary, "new-session", "-s", config.session_name], 1, created.reason
            )
        if created.outcome is CreateOutcome.ALREADY_EXISTED:
            state = session_state(tmux, config.session_name, agent_command=settings.agent_executable)
        else:
            state = SessionState.EXISTS_ACTIVE

    if state is SessionState.EXISTS_DORMANT:
        LOG.info("Starting agent in existing session %s", config.session_name)
        tmux.new_window(
            config.session_name,
            working_directory=config.working_directory,
            window_name=AGENT_WINDOW,
            command=agent_command_for(config.working_directory, settings),
        )

    if inside_tmux:
        tmux.switch_client(config.session_name)
        return 0

    status = tmux.attach(config.session_name)
    LOG.info("Detached from session %s with status %s", config.session_name, status)
    return status


def kill_sessions(tmux: TmuxClient, records: Iterable[SessionRecord]) -> list[str]:
    """Kill branch sessions first and supervisors last; return the killed names."""

    ordered = sorted(records, key=lambda record: record.branch == SUPERVISOR_BRANCH)
    killed: list[str] = []
    for record in ordered:
        if tmux.kill_session(record.name):
            LOG.info("Killed session %s", record.name)
            killed.append(record.name)
    return killed


# ----------------------------------------------------------------------
# Agent command and context file
# ----------------------------------------------------------------------
def conversation_dir(directory: Path, settings: Settings) -> Path:
    """Return the directory where the agent keeps conversations for ``directory``.

    Worktrees share the conversation history of their project root.
    """

    base = directory
    parts = directory.parts
    if BARE_DIR in parts:
        base = Path(*parts[: parts.index(BARE_DIR)])
    else:
        git_file = directory / ".git"
        if git_file.is_file():
            try:
                content = git_file.read_text(encoding="utf-8")
            except OSError as exc:
                LOG.debug("Could not read %s: %s", git_file, exc)
                content = ""
            marker = f"/{BARE_DIR}/worktrees"
            for line in content.splitlines():
                if line.startswith("gitdir:") and marker in line:
                    base = Path(line[len("gitdir:"):].strip().split(marker)[0])
                    break
    return settings.agent_home.expanduser() / "projects" / str(base).replace("/", "-")


def agent_command_for(directory: Path, settings: Settings) -> str:
    """Return the agent command, resuming the last conversation when there is one."""

    project_dir = conversation_dir(directory, settings)
    try:
        has_history = any(path.suffix == ".jsonl" for path in project_dir.iterdir())
    except OSError:
        has_history = False
    if has_history:
        LOG.info("Found existing conversation in %s, continuing it", project_dir)
        return f"{settings.agent_command} --continue"
    return settings.agent_command


def render_context(config: SessionConfig) -> str:
    if config.role is SessionRole.SUPERVISOR:
        role_text = (
            f"### You are the SUPERVISOR for {config.project}\n\n"
            "You coordinate work across every branch of this project:\n"
            "- Oversee development on the feature branches\n"
            "- Plan merging and integration\n"
            "- Keep project-wide standards and architecture consistent\n"
            "- Review and guide the branch sessions\n"
        )
    else:
        role_text = (
            f"### You are a BRANCH WORKER on {config.branch}\n\n"
            f"You focus on the {config.branch} branch of {config.project}:\n"
            "- Implement the features and fixes for this branch\n"
            "- Follow the standards set by the supervisor\n"
            "- Report progress and problems back to the supervisor\n"
        )

    return (
        "# Claude GWT Context\n\n"
        f"## Role: {config.role.value.upper()}\n"
        f"## Branch: {config.branch}\n"
        f"## Session: {config.session_name}\n"
        f"## Project: {config.project}\n\n"
        f"{role_text}\n"
        "### Session Management Commands:\n"
        "- `!cgwt l` - List all sessions\n"
        "- `!cgwt s <branch>` - Switch to a branch session\n"
        "- `!cgwt 0` - Return to the supervisor\n"
        "- `!cgwt ?` - Show the current status\n\n"
        "### Current Context:\n"
        f"Working directory: {config.working_directory}\n"
    )


def write_context_file(config: SessionConfig) -> Path | None:
    """Write the context file for ``config``; failures are logged, not raised."""

    path = config.working_directory / CONTEXT_FILENAME
    try:
        path.write_text(render_context(config), encoding="utf-8")
    except OSError as exc:
        LOG.warning("Could not write context file %s: %s", path, exc)
        return None
    LOG.debug("Wrote context file %s", path)
    return path


__all__ = [
    "AGENT_WINDOW",
    "CONTEXT_FILENAME",
    "CreateOutcome",
    "CreateResult",
    "SessionConfig",
    "SessionState",
    "agent_command_for",
    "conversation_dir",
    "create_session",
    "kill_sessions",
    "launch_session",
    "render_context",
    "session_state",
    "write_context_file",
]
