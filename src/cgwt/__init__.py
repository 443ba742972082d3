"""Parallel Claude sessions, one tmux session per git branch."""

from __future__ import annotations

__version__ = "0.1.2"

__all__ = ["__version__"]
