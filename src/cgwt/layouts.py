"""Multi-pane tmux windows that show several branch sessions at once.

A comparison window lives inside the caller's own session. Each of its panes
runs a nested ``tmux attach-session`` to one branch session, so typing in a
pane talks to that branch's agent.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import CgwtError
from .tmux import TmuxClient

LOG = logging.getLogger(__name__)

COMPARE_WINDOW = "compare"
MAX_COMPARE_PANES = 4
SYNC_OPTION = "synchronize-panes"


class LayoutError(CgwtError):
    """Raised when a comparison window cannot be built."""


@dataclass(frozen=True, slots=True)
class PaneLayout:
    """A named pane arrangement for ``cgwt compare --layout``."""

    name: str
    description: str
    branches: tuple[str, ...]
    layout: str


PREDEFINED_LAYOUTS: tuple[PaneLayout, ...] = (
    PaneLayout(
        name="main-feature",
        description="Main branch and feature branch side by side",
        branches=("main", "feature/*"),
        layout="even-horizontal",
    ),
    PaneLayout(
        name="triple-review",
        description="Three branches for code review",
        branches=("main", "develop", "feature/*"),
        layout="even-horizontal",
    ),
    PaneLayout(
        name="quad-split",
        description="Four branches in grid layout",
        branches=("*", "*", "*", "*"),
        layout="tiled",
    ),
    PaneLayout(
        name="main-develop",
        description="Main branch with develop branch below",
        branches=("main", "develop"),
        layout="main-horizontal",
    ),
)


@dataclass(frozen=True, slots=True)
class ComparePane:
    session_name: str
    branch: str
    working_directory: Path


def find_layout(name: str) -> PaneLayout:
    for layout in PREDEFINED_LAYOUTS:
        if layout.name == name:
            return layout
    known = ", ".join(layout.name for layout in PREDEFINED_LAYOUTS)
    raise LayoutError(f"Unknown layout '{name}'. Known layouts: {known}")


def default_tmux_layout(pane_count: int) -> str:
    """Side by side for two panes, one over two for three, a grid beyond."""

    if pane_count == 2:
        return "even-horizontal"
    if pane_count == 3:
        return "main-horizontal"
    return "tiled"


def attach_command(binary: str, session_name: str) -> str:
    # TMUX is cleared so tmux agrees to nest the client inside a pane.
    return f"TMUX= {shlex.quote(binary)} attach-session -t {shlex.quote(session_name)}"


def create_comparison_layout(
    tmux: TmuxClient,
    session_name: str,
    panes: Sequence[ComparePane],
    *,
    layout: str | None = None,
) -> str:
    """Open a ``compare`` window in ``session_name`` with one pane per entry.

    Returns the tmux target of the new window.

    Raises:
        LayoutError: for fewer than two or more than four panes, or when a
            branch session does not exist.
    """

    if not 2 <= len(panes) <= MAX_COMPARE_PANES:
        raise LayoutError(
            f"Comparison needs between 2 and {MAX_COMPARE_PANES} sessions, got {len(panes)}"
        )
    missing = [pane.branch for pane in panes if not tmux.has_session(pane.session_name)]
    if missing:
        raise LayoutError(f"Sessions not found for branches: {', '.join(missing)}")

    window = f"{session_name}:{COMPARE_WINDOW}"
    first, *rest = panes
    tmux.new_window(
        session_name,
        working_directory=first.working_directory,
        window_name=COMPARE_WINDOW,
        command=attach_command(tmux.binary, first.session_name),
    )
    for pane in rest:
        tmux.split_window(
            window,
            working_directory=pane.working_directory,
            command=attach_command(tmux.binary, pane.session_name),
        )
    tmux.select_layout(window, layout or default_tmux_layout(len(panes)))
    tmux.set_window_option(window, "aggressive-resize", "on")
    tmux.select_window(window)
    LOG.info("Created comparison window %s for %s", window, [pane.branch for pane in panes])
    return window


def toggle_synchronized_panes(tmux: TmuxClient, target: str) -> bool:
    """Flip ``synchronize-panes`` on the current window of ``target``; return the new state."""

    enabled = tmux.get_window_option(target, SYNC_OPTION) != "on"
    tmux.set_window_option(target, SYNC_OPTION, "on" if enabled else "off")
    LOG.info("Synchronized panes for %s: %s", target, enabled)
    return enabled


__all__ = [
    "COMPARE_WINDOW",
    "ComparePane",
    "LayoutError",
    "MAX_COMPARE_PANES",
    "PREDEFINED_LAYOUTS",
    "PaneLayout",
    "attach_command",
    "create_comparison_layout",
    "default_tmux_layout",
    "find_layout",
    "toggle_synchronized_panes",
]
