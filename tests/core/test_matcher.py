from __future__ import annotations

import pytest

from fastboot_archive.core.exceptions import InvalidArgumentError
from fastboot_archive.core.matcher import GlobPattern, compile_ignore


def test_absent_pattern_excludes_nothing() -> None:
    predicate = compile_ignore(None)
    assert predicate("deploy.txt") is False
    assert predicate("assets/app.map") is False
    assert compile_ignore([])("assets/app.map") is False


def test_globstar_matches_any_depth_including_top_level() -> None:
    predicate = compile_ignore("**/*.map")
    assert predicate("app.map")
    assert predicate("assets/app.map")
    assert predicate("assets/js/vendor/app.map")
    assert not predicate("assets/app.js")
    assert not predicate("assets/app.map.txt")


def test_single_star_does_not_cross_directories() -> None:
    predicate = compile_ignore("*.map")
    assert predicate("app.map")
    assert not predicate("assets/app.map")

    nested = compile_ignore("assets/*")
    assert nested("assets/app.js")
    assert not nested("assets/js/app.js")


def test_question_mark_and_character_classes() -> None:
    predicate = compile_ignore("assets/app?.[jt]s")
    assert predicate("assets/app1.js")
    assert predicate("assets/app2.ts")
    assert not predicate("assets/app.js")
    assert not predicate("assets/app1.css")

    negated = compile_ignore("[!a]*.txt")
    assert negated("deploy.txt")
    assert not negated("about.txt")


def test_directory_globstar_excludes_subtree() -> None:
    predicate = compile_ignore("tests/**")
    assert predicate("tests/index.html")
    assert predicate("tests/assets/test.js")
    assert not predicate("assets/tests.js")

    middle = compile_ignore("assets/**/*.gz")
    assert middle("assets/app.js.gz")
    assert middle("assets/fonts/a/b.gz")
    assert not middle("app.js.gz")


def test_any_pattern_in_list_excludes() -> None:
    predicate = compile_ignore(["**/*.map", "deploy.txt"])
    assert predicate("deploy.txt")
    assert predicate("assets/app.map")
    assert not predicate("assets/app.js")


def test_matching_is_case_sensitive_and_normalizes_separators() -> None:
    predicate = compile_ignore("**/*.map")
    assert not predicate("assets/APP.MAP")
    assert predicate("assets\\app.map")
    assert compile_ignore("./deploy.txt")("deploy.txt")


def test_consecutive_globstars_collapse() -> None:
    assert GlobPattern.parse("**/**/*.map").segments == ("**", "*.map")


@pytest.mark.parametrize("bad", ["", "   ", "/", ["ok", ""], [3], b"*.map", 42])
def test_invalid_patterns_raise(bad) -> None:
    with pytest.raises(InvalidArgumentError):
        compile_ignore(bad)


def test_compiling_twice_gives_identical_predicates() -> None:
    assert compile_ignore(["**/*.map", "a/*"]) == compile_ignore(["**/*.map", "a/*"])
