from __future__ import annotations

from pathlib import Path

import pytest

from cgwt.layouts import (
    ComparePane,
    LayoutError,
    attach_command,
    create_comparison_layout,
    default_tmux_layout,
    find_layout,
    toggle_synchronized_panes,
)
from cgwt.tmux import TmuxClient

from .conftest import FakeTmuxServer

CURRENT = "cgwt-app--main"


def pane(branch: str) -> ComparePane:
    return ComparePane(
        session_name=f"cgwt-app--{branch}",
        branch=branch,
        working_directory=Path(f"/src/app/{branch}"),
    )


@pytest.fixture()
def three_sessions(fake_tmux: FakeTmuxServer) -> FakeTmuxServer:
    for branch in ("main", "dev", "feature"):
        fake_tmux.add_session(f"cgwt-app--{branch}", path=f"/src/app/{branch}")
    return fake_tmux


def test_attach_command_unsets_tmux_and_quotes() -> None:
    assert attach_command("tmux", "cgwt-app--main") == "TMUX= tmux attach-session -t cgwt-app--main"
    assert attach_command("/opt/my tmux", "x") == "TMUX= '/opt/my tmux' attach-session -t x"


@pytest.mark.parametrize(("count", "expected"), [(2, "even-horizontal"), (3, "main-horizontal"), (4, "tiled")])
def test_default_tmux_layout(count: int, expected: str) -> None:
    assert default_tmux_layout(count) == expected


def test_two_panes_side_by_side(three_sessions: FakeTmuxServer, tmux: TmuxClient) -> None:
    window = create_comparison_layout(tmux, CURRENT, [pane("main"), pane("dev")])

    assert window == "cgwt-app--main:compare"
    new_window = three_sessions.commands_named("new-window")
    assert len(new_window) == 1
    assert new_window[0][-1] == "TMUX= tmux attach-session -t cgwt-app--main"
    split = three_sessions.commands_named("split-window")
    assert [call[-1] for call in split] == ["TMUX= tmux attach-session -t cgwt-app--dev"]
    assert ("-c", "/src/app/dev") == split[0][4:6]
    session = three_sessions.sessions[CURRENT]
    assert session.layout == "even-horizontal"
    assert session.window_options["aggressive-resize"] == "on"
    assert len(three_sessions.commands_named("select-window")) == 1


def test_explicit_layout_wins(three_sessions: FakeTmuxServer, tmux: TmuxClient) -> None:
    create_comparison_layout(
        tmux, CURRENT, [pane("main"), pane("dev"), pane("feature")], layout="tiled"
    )

    assert len(three_sessions.commands_named("split-window")) == 2
    assert three_sessions.sessions[CURRENT].layout == "tiled"


@pytest.mark.parametrize("count", [1, 5])
def test_pane_count_is_bounded(fake_tmux: FakeTmuxServer, tmux: TmuxClient, count: int) -> None:
    with pytest.raises(LayoutError, match="between 2 and 4"):
        create_comparison_layout(tmux, CURRENT, [pane(f"b{i}") for i in range(count)])
    assert fake_tmux.calls == []


def test_missing_sessions_are_reported_before_any_window(
    three_sessions: FakeTmuxServer, tmux: TmuxClient
) -> None:
    with pytest.raises(LayoutError, match="ghost"):
        create_comparison_layout(tmux, CURRENT, [pane("main"), pane("ghost")])

    assert three_sessions.commands_named("new-window") == []
    assert len(three_sessions.commands_named("has-session")) == 2


def test_toggle_synchronized_panes(three_sessions: FakeTmuxServer, tmux: TmuxClient) -> None:
    assert toggle_synchronized_panes(tmux, CURRENT) is True
    assert three_sessions.sessions[CURRENT].window_options["synchronize-panes"] == "on"

    assert toggle_synchronized_panes(tmux, CURRENT) is False
    assert three_sessions.sessions[CURRENT].window_options["synchronize-panes"] == "off"


def test_find_layout() -> None:
    assert find_layout("quad-split").layout == "tiled"
    with pytest.raises(LayoutError, match="main-feature"):
        find_layout("nope")
