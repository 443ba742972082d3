"""Exception hierarchy shared by the cgwt modules."""

from __future__ import annotations

from collections.abc import Sequence


class CgwtError(RuntimeError):
    """Base class for errors that end a cgwt command with a message."""


class ToolUnavailableError(CgwtError):
    """Raised when a required external binary (tmux, git) cannot be executed."""

    def __init__(self, tool: str) -> None:
        super().__init__(
            f"The '{tool}' command was not found on PATH. "
            f"Install {tool} to use cgwt."
        )
        self.tool = tool


class ExternalCommandError(CgwtError):
    """Raised when tmux or git exits non-zero and the failure is not recoverable."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"`{' '.join(args)}` failed: {detail}")
        self.args_list = tuple(args)
        self.returncode = returncode
        self.stderr = stderr


class RepoStateError(CgwtError):
    """Raised when an action is not legal for the current directory."""

    def __init__(self, state: str, action: str) -> None:
        super().__init__(f"Cannot {action} here: directory state is '{state}'")
        self.state = state
        self.action = action


class NotInSessionError(CgwtError):
    """Raised when a command must run from inside a cgwt tmux session."""

    def __init__(self, current: str | None = None) -> None:
        if current is None:
            message = "Not in a tmux session. Run this from inside a cgwt session."
        else:
            message = f"Session '{current}' is not a cgwt session."
        super().__init__(message)
        self.current = current


class AddressResolutionError(CgwtError):
    """Base class for addresses that do not resolve to exactly one session."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__(message)
        self.target = target


class NotFoundError(AddressResolutionError):
    def __init__(self, target: str, available: Sequence[str] = ()) -> None:
        self.available = tuple(available)
        if self.available:
            message = (
                f"No session found for '{target}'. "
                f"Available branches: {', '.join(self.available)}"
            )
        else:
            message = f"No session found for '{target}'. No sessions are available."
        super().__init__(target, message)


class IndexOutOfRangeError(AddressResolutionError):
    def __init__(self, target: str, dimension: str, low: int, high: int) -> None:
        self.dimension = dimension
        self.low = low
        self.high = high
        super().__init__(
            target,
            f"Index {target} is out of range for {dimension}. "
            f"Valid range: {low}-{high}",
        )

    @property
    def valid_range(self) -> tuple[int, int]:
        return (self.low, self.high)


class InvalidAddressError(AddressResolutionError):
    def __init__(self, target: str, reason: str) -> None:
        super().__init__(target, f"Invalid address '{target}': {reason}")


class AmbiguousAddressError(AddressResolutionError):
    def __init__(self, target: str, candidates: Sequence[str]) -> None:
        self.candidates = tuple(candidates)
        super().__init__(
            target,
            f"Branch '{target}' matches several sessions: {', '.join(self.candidates)}. "
            "Use a project.branch index instead.",
        )


__all__ = [
    "AddressResolutionError",
    "AmbiguousAddressError",
    "CgwtError",
    "ExternalCommandError",
    "IndexOutOfRangeError",
    "InvalidAddressError",
    "NotFoundError",
    "NotInSessionError",
    "RepoStateError",
    "ToolUnavailableError",
]
