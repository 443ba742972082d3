"""Runtime settings sourced from ``CGWT_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(slots=True)
class Settings:
    """Paths and commands cgwt needs to drive tmux, git and the agent."""

    tmux_path: str = "tmux"
    git_path: str = "git"
    agent_command: str = "claude"
    agent_home: Path = Path("~/.claude")
    log_level: str | None = None
    repo_root: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        log_level = env.get("CGWT_LOG_LEVEL")
        if log_level:
            log_level = log_level.strip().upper()
            if log_level not in _LOG_LEVELS:
                raise ValueError(
                    "CGWT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
                )
        else:
            log_level = None

        repo_root = env.get("CGWT_REPO_ROOT")
        return cls(
            tmux_path=env.get("CGWT_TMUX_PATH") or "tmux",
            git_path=env.get("CGWT_GIT_PATH") or "git",
            agent_command=env.get("CGWT_AGENT_COMMAND") or "claude",
            agent_home=Path(env.get("CGWT_AGENT_HOME") or "~/.claude").expanduser(),
            log_level=log_level,
            repo_root=Path(repo_root) if repo_root else None,
        )

    @property
    def agent_executable(self) -> str:
        """Return the bare executable name of the agent command (``claude``)."""

        parts = self.agent_command.split()
        return os.path.basename(parts[0]) if parts else "claude"

    def logging_level(self, default: int = logging.WARNING) -> int:
        if self.log_level is None:
            return default
        return logging.getLevelName(self.log_level)


__all__ = ["Settings"]
