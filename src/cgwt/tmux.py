"""Thin wrapper over the tmux commands cgwt issues."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from .errors import ExternalCommandError, ToolUnavailableError
from .parsers import PANE_FORMAT, SESSION_FORMAT, TmuxPane, TmuxSession, parse_panes, parse_sessions
from .runner import CommandResult, CommandRunner

LOG = logging.getLogger(__name__)

DUPLICATE_SESSION_MARKER = "duplicate session"


def is_inside_tmux(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get("TMUX"))


class TmuxClient:
    """Issues tmux commands through an injected :class:`CommandRunner`."""

    def __init__(self, runner: CommandRunner, binary: str = "tmux") -> None:
        self.runner = runner
        self.binary = binary

    def _run(self, *args: str) -> CommandResult:
        return self.runner.run([self.binary, *args])

    def _check(self, *args: str) -> CommandResult:
        result = self._run(*args)
        if not result.ok:
            raise ExternalCommandError(result.args, result.returncode, result.stderr)
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_available(self) -> bool:
        try:
            result = self._run("-V")
        except ToolUnavailableError:
            return False
        return result.ok

    def list_sessions(self) -> list[TmuxSession]:
        """Return all tmux sessions; a failing ``list-sessions`` means none."""

        result = self._run("list-sessions", "-F", SESSION_FORMAT)
        if not result.ok:
            return []
        return parse_sessions(result.stdout)

    def list_panes(self, session_name: str) -> list[TmuxPane]:
        result = self._run("list-panes", "-s", "-t", session_name, "-F", PANE_FORMAT)
        if not result.ok:
            return []
        return parse_panes(result.stdout)

    def is_pane_running(self, session_name: str, command: str) -> bool:
        return any(command in pane.command for pane in self.list_panes(session_name))

    def has_session(self, session_name: str) -> bool:
        return self._run("has-session", "-t", f"={session_name}").ok

    def display(self, fmt: str, target: str | None = None) -> str | None:
        args = ["display-message", "-p"]
        if target is not None:
            args += ["-t", target]
        result = self._run(*args, fmt)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def session_path(self, session_name: str) -> Path | None:
        value = self.display("#{session_path}", target=session_name)
        return Path(value) if value else None

    def get_option(self, target: str, option: str) -> str | None:
        result = self._run("show-options", "-t", target, "-v", option)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def get_window_option(self, target: str, option: str) -> str | None:
        result = self._run("show-window-options", "-t", target, "-v", option)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def new_session(
        self,
        session_name: str,
        *,
        working_directory: Path,
        window_name: str,
    ) -> CommandResult:
        """Create a detached session; the caller interprets the result."""

        return self._run(
            "new-session",
            "-d",
            "-s",
            session_name,
            "-c",
            str(working_directory),
            "-n",
            window_name,
        )

    def new_window(
        self,
        session_name: str,
        *,
        working_directory: Path,
        window_name: str,
        command: str,
    ) -> None:
        self._check(
            "new-window",
            "-t",
            session_name,
            "-n",
            window_name,
            "-c",
            str(working_directory),
            command,
        )

    def split_window(self, target: str, *, working_directory: Path, command: str) -> None:
        self._check("split-window", "-t", target, "-c", str(working_directory), command)

    def select_layout(self, target: str, layout: str) -> None:
        self._check("select-layout", "-t", target, layout)

    def select_window(self, target: str) -> None:
        self._check("select-window", "-t", target)

    def set_option(self, target: str, option: str, value: str) -> None:
        self._check("set-option", "-t", target, option, value)

    def set_window_option(self, target: str, option: str, value: str) -> None:
        self._check("set-window-option", "-t", target, option, value)

    def send_keys(self, target: str, keys: Sequence[str], *, enter: bool = True) -> None:
        args = ["send-keys", "-t", target, *keys]
        if enter:
            args.append("Enter")
        self._check(*args)

    def switch_client(self, session_name: str) -> None:
        self._check("switch-client", "-t", session_name)

    def attach(self, session_name: str) -> int:
        """Attach this terminal to the session and block until it detaches."""

        return self.runner.run_interactive([self.binary, "attach-session", "-t", session_name])

    def kill_session(self, session_name: str) -> bool:
        result = self._run("kill-session", "-t", session_name)
        if not result.ok:
            LOG.debug("kill-session %s failed: %s", session_name, result.stderr.strip())
        return result.ok


__all__ = ["DUPLICATE_SESSION_MARKER", "TmuxClient", "is_inside_tmux"]
