from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cgwt.config import Settings


def test_defaults_without_environment() -> None:
    settings = Settings.from_env({})

    assert settings.tmux_path == "tmux"
    assert settings.git_path == "git"
    assert settings.agent_command == "claude"
    assert settings.repo_root is None
    assert settings.logging_level() == logging.WARNING


def test_environment_overrides() -> None:
    settings = Settings.from_env(
        {
            "CGWT_TMUX_PATH": "/opt/bin/tmux",
            "CGWT_AGENT_COMMAND": "/usr/local/bin/claude --model opus",
            "CGWT_AGENT_HOME": "/data/agent",
            "CGWT_LOG_LEVEL": "debug",
            "CGWT_REPO_ROOT": "/src/proj",
        }
    )

    assert settings.tmux_path == "/opt/bin/tmux"
    assert settings.agent_executable == "claude"
    assert settings.agent_home == Path("/data/agent")
    assert settings.repo_root == Path("/src/proj")
    assert settings.logging_level() == logging.DEBUG


def test_invalid_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="CGWT_LOG_LEVEL"):
        Settings.from_env({"CGWT_LOG_LEVEL": "loud"})
