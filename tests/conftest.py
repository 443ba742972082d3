from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from cgwt.errors import ToolUnavailableError
from cgwt.runner import CommandResult
from cgwt.tmux import TmuxClient


@dataclass
class FakeSession:
    name: str
    path: str
    windows: int = 1
    created: int = 1642500000
    attached: bool = False
    commands: list[str] = field(default_factory=lambda: ["zsh"])
    options: dict[str, str] = field(default_factory=dict)
    window_options: dict[str, str] = field(default_factory=dict)
    layout: str | None = None


class FakeTmuxServer:
    """In-memory stand-in for the tmux and git commands cgwt issues.

    Implements the :class:`cgwt.runner.CommandRunner` interface; every call is
    recorded in ``calls`` (and ``interactive`` for attach).
    """

    def __init__(self) -> None:
        self.sessions: dict[str, FakeSession] = {}
        self.calls: list[tuple[str, ...]] = []
        self.interactive: list[tuple[str, ...]] = []
        self.git_responses: dict[tuple[str, ...], CommandResult] = {}
        self.available = True
        self.list_fails = False
        self.new_session_error: str | None = None
        self.current: str | None = None
        self.attach_status = 0

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------
    def add_session(self, name: str, *, path: str = "/tmp", agent: bool = False, **kwargs) -> FakeSession:
        session = FakeSession(name=name, path=path, **kwargs)
        if agent:
            session.commands.append("claude")
        self.sessions[name] = session
        return session

    def commands_named(self, subcommand: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if len(call) > 1 and call[1] == subcommand]

    # ------------------------------------------------------------------
    # CommandRunner interface
    # ------------------------------------------------------------------
    def run(self, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        call = tuple(str(arg) for arg in args)
        self.calls.append(call)
        if call[0] == "git":
            return self.git_responses.get(call[1:], CommandResult(call, 0, "", ""))
        if not self.available:
            raise ToolUnavailableError(call[0])
        handler = getattr(self, "_" + call[1].lstrip("-").replace("-", "_"), None)
        if handler is None:
            return CommandResult(call, 0, "", "")
        return handler(call, list(call[2:]))

    def run_interactive(self, args: Sequence[str], *, cwd: Path | None = None) -> int:
        call = tuple(str(arg) for arg in args)
        self.interactive.append(call)
        if not self.available:
            raise ToolUnavailableError(call[0])
        return self.attach_status

    # ------------------------------------------------------------------
    # tmux subcommands
    # ------------------------------------------------------------------
    @staticmethod
    def _flag(rest: list[str], flag: str) -> str | None:
        if flag in rest:
            return rest[rest.index(flag) + 1]
        return None

    def _ok(self, call: tuple[str, ...], stdout: str = "") -> CommandResult:
        return CommandResult(call, 0, stdout, "")

    def _fail(self, call: tuple[str, ...], stderr: str) -> CommandResult:
        return CommandResult(call, 1, "", stderr)

    def _lookup(self, target: str | None) -> FakeSession | None:
        if target is None:
            return None
        return self.sessions.get(target.lstrip("=").split(":")[0])

    def _V(self, call, rest):  # noqa: N802
        return self._ok(call, "tmux 3.4\n")

    def _list_sessions(self, call, rest):
        if self.list_fails or not self.sessions:
            return self._fail(call, "no server running on /tmp/tmux-1000/default")
        lines = [
            f"{s.name}|{s.windows}|{s.created}|{1 if s.attached else 0}|"
            for s in self.sessions.values()
        ]
        return self._ok(call, "\n".join(lines) + "\n")

    def _list_panes(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find session")
        lines = [
            f"%{index}|{session.name}|{index}|0|{command}|host"
            for index, command in enumerate(session.commands)
        ]
        return self._ok(call, "\n".join(lines) + "\n")

    def _has_session(self, call, rest):
        if self._lookup(self._flag(rest, "-t")) is None:
            return self._fail(call, "can't find session")
        return self._ok(call)

    def _display_message(self, call, rest):
        fmt = rest[-1]
        target = self._flag(rest, "-t")
        if fmt == "#S":
            return self._ok(call, f"{self.current}\n") if self.current else self._fail(call, "no client")
        session = self._lookup(target)
        if fmt == "#{session_path}" and session is not None:
            return self._ok(call, session.path + "\n")
        return self._fail(call, "can't find session")

    def _new_session(self, call, rest):
        if self.new_session_error is not None:
            return self._fail(call, self.new_session_error)
        name = self._flag(rest, "-s") or ""
        if name in self.sessions:
            return self._fail(call, f"duplicate session: {name}")
        self.add_session(name, path=self._flag(rest, "-c") or "/tmp")
        return self._ok(call)

    def _new_window(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find session")
        session.windows += 1
        session.commands.append(rest[-1].split()[0])
        return self._ok(call)

    def _set_option(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "no such session")
        session.options[rest[-2]] = rest[-1]
        return self._ok(call)

    def _set_window_option(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "no such window")
        session.window_options[rest[-2]] = rest[-1]
        return self._ok(call)

    def _show_window_options(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None or rest[-1] not in session.window_options:
            return self._fail(call, "invalid option")
        return self._ok(call, session.window_options[rest[-1]] + "\n")

    def _split_window(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find window")
        session.commands.append(rest[-1].split()[0])
        return self._ok(call)

    def _select_layout(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find window")
        session.layout = rest[-1]
        return self._ok(call)

    def _select_window(self, call, rest):
        if self._lookup(self._flag(rest, "-t")) is None:
            return self._fail(call, "can't find window")
        return self._ok(call)

    def _show_options(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None or rest[-1] not in session.options:
            return self._fail(call, "invalid option")
        return self._ok(call, session.options[rest[-1]] + "\n")

    def _send_keys(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find pane")
        keys = [key for key in rest[2:] if key != "Enter"]
        if keys:
            session.commands[0] = keys[0].split()[0]
        return self._ok(call)

    def _switch_client(self, call, rest):
        name = self._flag(rest, "-t")
        if self._lookup(name) is None:
            return self._fail(call, "can't find session")
        self.current = name
        return self._ok(call)

    def _kill_session(self, call, rest):
        session = self._lookup(self._flag(rest, "-t"))
        if session is None:
            return self._fail(call, "can't find session")
        del self.sessions[session.name]
        return self._ok(call)


@pytest.fixture()
def fake_tmux() -> FakeTmuxServer:
    return FakeTmuxServer()


@pytest.fixture()
def tmux(fake_tmux: FakeTmuxServer) -> TmuxClient:
    return TmuxClient(fake_tmux)


@pytest.fixture()
def outside_tmux(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TMUX", raising=False)
