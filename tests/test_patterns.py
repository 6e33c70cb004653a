import pytest

from gluefile.core import InvalidPatternError
from gluefile.patterns import GluePattern, PatternSet


@pytest.mark.parametrize("raw", ["", "***", "a**", "**b/c", "src/x**/y", "[abc", "src/[!a"])
def test_invalid_patterns_raise(raw):
    with pytest.raises(InvalidPatternError) as exc:
        GluePattern(raw)
    assert exc.value.pattern == raw
    assert f"'{raw}'" in str(exc.value)


@pytest.mark.parametrize("raw", ["*.py", "**/*.rs", "src/**", "**", "[]]x", "[!a]b", "a/**/b"])
def test_valid_patterns_compile(raw):
    assert GluePattern(raw).raw == raw


def test_compile_stops_at_first_invalid():
    with pytest.raises(InvalidPatternError) as exc:
        PatternSet.compile(["*.py", "[oops", "***"])
    assert exc.value.pattern == "[oops"


def test_recursive_glob_spans_directories():
    pat = GluePattern("**/*.rs")
    assert pat.matches("main.rs")
    assert pat.matches("src/a/b.rs")
    assert not pat.matches("src/a/b.py")


def test_string_glob_star_crosses_separators():
    """`src/*.rs` reaches nested files through the whole-string glob only."""
    pat = GluePattern("src/*.rs")
    assert pat.matches_structured("src/main.rs")
    assert not pat.matches_structured("src/a/b.rs")
    assert pat.matches_string("src/a/b.rs")
    assert pat.matches("src/a/b.rs")
    assert not pat.matches("lib/main.rs")


def test_bare_basename_glob_matches_at_any_depth():
    pat = GluePattern("*.rs")
    assert pat.matches("src/main.rs")
    assert pat.matches("main.rs")


def test_leading_dot_slash_is_ignored():
    assert GluePattern("./src/*.rs").matches("src/main.rs")


def test_matching_is_case_sensitive():
    assert not GluePattern("*.RS").matches_string("main.rs")


def test_empty_pattern_set_matches_nothing():
    empty = PatternSet.compile([])
    assert not empty
    assert len(empty) == 0
    assert not empty.matches("a.txt")


def test_pattern_set_any_match():
    pats = PatternSet.compile(["*.py", "docs/*.md"])
    assert pats.matches("pkg/mod.py")
    assert pats.matches("docs/index.md")
    assert not pats.matches("README.txt")
    assert [p.raw for p in pats] == ["*.py", "docs/*.md"]


def test_plain_name_only_matches_at_the_root():
    pat = GluePattern("a.txt")
    assert pat.matches("a.txt")
    assert not pat.matches("sub/a.txt")


@pytest.mark.parametrize("raw", ["docs", "docs/", "src/"])
def test_directory_names_do_not_match_their_contents(raw):
    pat = GluePattern(raw)
    assert not pat.matches("docs/x.md")
    assert not pat.matches("src/x.py")


@pytest.mark.parametrize("raw", ["!a.txt", "#a.txt"])
def test_gitignore_operators_are_literal(raw):
    pat = GluePattern(raw)
    assert pat.matches(raw)
    assert not pat.matches("a.txt")


def test_star_stays_inside_one_segment_for_structured_matching():
    pat = GluePattern("src/*/mod.rs")
    assert pat.matches_structured("src/net/mod.rs")
    assert not pat.matches_structured("src/net/tcp/mod.rs")


def test_recursive_segment_matches_zero_or_more_directories():
    pat = GluePattern("src/**/mod.rs")
    assert pat.matches_structured("src/mod.rs")
    assert pat.matches_structured("src/a/b/mod.rs")
    assert not pat.matches_structured("lib/a/mod.rs")
