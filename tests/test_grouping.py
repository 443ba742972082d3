from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from cgwt.grouping import flatten, group_sessions
from cgwt.naming import encode
from cgwt.parsers import parse_worktrees
from cgwt.snapshot import SessionRecord


def make_record(name: str, project: str = "", branch: str = "") -> SessionRecord:
    return SessionRecord(
        name=name,
        project=project,
        branch=branch,
        window_count=1,
        created_at=datetime.fromtimestamp(0, tz=timezone.utc),
        attached=False,
        has_agent_running=False,
    )


def test_groups_are_sorted_with_supervisor_first() -> None:
    records = [
        make_record("cgwt-zeta--main"),
        make_record("cgwt-app--feature-b"),
        make_record("cgwt-app--supervisor"),
        make_record("cgwt-app--alpha"),
    ]

    groups = group_sessions(records)

    assert [g.project for g in groups] == ["app", "zeta"]
    assert [e.branch for e in groups[0].branches] == ["supervisor", "alpha", "feature-b"]
    assert groups[0].supervisor is not None
    assert groups[1].supervisor is None


def test_undecodable_records_are_dropped() -> None:
    groups = group_sessions([make_record("scratch"), make_record("cgwt-app--main")])

    assert [e.session_name for e in flatten(groups)] == ["cgwt-app--main"]


def test_active_entry_matches_current_session() -> None:
    records = [make_record("cgwt-app--main"), make_record("cgwt-app--dev")]

    groups = group_sessions(records, current_session="cgwt-app--main")

    active = {e.branch: e.is_active for e in groups[0].branches}
    assert active == {"dev": False, "main": True}


def test_worktrees_without_sessions_are_added() -> None:
    worktrees = parse_worktrees(
        "worktree /src/app/.bare\nbare\n\n"
        "worktree /src/app/feature/login\nHEAD 1\nbranch refs/heads/feature/login\n\n"
        "worktree /src/app/main\nHEAD 2\nbranch refs/heads/main\n"
    )
    records = [make_record("cgwt-app--main")]

    groups = group_sessions(records, worktrees=worktrees, project="app")

    entries = groups[0].branches
    assert [e.branch for e in entries] == ["supervisor", "feature-login", "main"]
    supervisor, login, main = entries
    assert supervisor.has_session is False
    assert supervisor.path == Path("/src/app")
    assert login.session_name == encode("app", "feature/login")
    assert login.path == Path("/src/app/feature/login")
    assert main.has_session is True
    assert main.path == Path("/src/app/main")
