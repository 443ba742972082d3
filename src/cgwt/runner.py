"""Command runner used for every tmux and git invocation.

The rest of the package never calls :mod:`subprocess` directly; it receives a
:class:`CommandRunner` so tests can script tmux/git output with a fake.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ToolUnavailableError

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    """Holds the outcome of an external command invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Interface for running external commands."""

    def run(self, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        """Run ``args`` to completion, capturing stdout and stderr."""

    def run_interactive(self, args: Sequence[str], *, cwd: Path | None = None) -> int:
        """Run ``args`` attached to the current terminal and return its exit status."""


class SubprocessRunner:
    """Runs commands with :func:`subprocess.run`.

    A missing executable surfaces as :class:`ToolUnavailableError`; non-zero
    exits are returned to the caller, which decides whether they are fatal.
    Output is decoded as UTF-8 with undecodable bytes replaced.
    """

    def run(self, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        cmd = [str(arg) for arg in args]
        LOG.debug("Running %s", cmd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ToolUnavailableError(cmd[0]) from exc
        if completed.returncode != 0:
            LOG.debug("%s exited with %s: %s", cmd[0], completed.returncode, completed.stderr.strip())
        return CommandResult(
            args=tuple(cmd),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def run_interactive(self, args: Sequence[str], *, cwd: Path | None = None) -> int:
        cmd = [str(arg) for arg in args]
        LOG.debug("Running interactively %s", cmd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                check=False,
                env=dict(os.environ),
            )
        except FileNotFoundError as exc:
            raise ToolUnavailableError(cmd[0]) from exc
        return completed.returncode


__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner"]
