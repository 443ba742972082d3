from __future__ import annotations

import random
import string

import pytest

from cgwt.naming import decode, encode, is_session_name, sanitize_component

ALPHABET = string.ascii_letters + string.digits + "_"


def random_components(seed: int, count: int) -> list[tuple[str, str]]:
    rng = random.Random(seed)

    def component() -> str:
        return "".join(rng.choice(ALPHABET) for _ in range(rng.randint(1, 12)))

    return [(component(), component()) for _ in range(count)]


def test_encode_sanitizes_both_components() -> None:
    assert encode("my-repo", "feature/test") == "cgwt-my-repo--feature-test"


def test_sanitize_component_collapses_and_trims_dashes() -> None:
    assert sanitize_component("--feat//x..y--") == "feat-x-y"
    assert sanitize_component("a b\tc") == "a-b-c"
    assert sanitize_component("ok_name-1") == "ok_name-1"


@pytest.mark.parametrize(("project", "branch"), random_components(seed=20240118, count=200))
def test_decode_inverts_encode_for_dash_free_components(project: str, branch: str) -> None:
    assert decode(encode(project, branch)) == (project, branch)


def test_decode_keeps_dashes_inside_project() -> None:
    assert decode("cgwt-my-repo--feature-test") == ("my-repo", "feature-test")


def test_decode_rejects_foreign_names() -> None:
    assert decode("main") is None
    assert decode("other-repo--main") is None
    assert not is_session_name("scratch")


def test_decode_rejects_empty_component_around_separator() -> None:
    assert decode("cgwt-repo--") is None
    assert decode("cgwt---") is None


def test_legacy_names_split_on_last_dash() -> None:
    assert decode("cgwt-repo-main") == ("repo", "main")


def test_legacy_decoding_is_ambiguous_for_dashed_components() -> None:
    """Documented limitation: legacy names cannot tell which dash separated the parts."""

    # Project "my-repo", branch "main"; and project "my", branch "repo-main"
    # would both have been written as "cgwt-my-repo-main".
    assert decode("cgwt-my-repo-main") == ("my-repo", "main")


def test_legacy_name_without_dash_is_rejected() -> None:
    assert decode("cgwt-repo") is None
