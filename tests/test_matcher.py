#!/usr/bin/env python3
"""
Tests for matching paths against compiled ignore patterns
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath

import pytest

from ctxignore.ignore import IgnoreMatcher, MatchVerdict


def test_last_match_wins():
    """A later negation re-includes what an earlier pattern excluded"""
    matcher = IgnoreMatcher(["*.log", "!keep.log"])

    assert not matcher.is_excluded("keep.log")
    assert matcher.is_excluded("other.log")

    # Order matters: the exclusion wins when it comes last
    matcher = IgnoreMatcher(["!keep.log", "*.log"])
    assert matcher.is_excluded("keep.log")


def test_directory_pattern_propagates_to_contents():
    """A directory-only pattern excludes the directory and everything in it"""
    matcher = IgnoreMatcher(["build/"])

    assert matcher.is_excluded("build", is_directory=True)
    assert matcher.is_excluded("build/output/a.o")
    assert matcher.is_excluded("src/build/a.o")
    assert not matcher.is_excluded("build", is_directory=False)
    assert not matcher.is_excluded("rebuild/a.o")


def test_plain_pattern_matches_directories_and_files():
    """Without a trailing slash a pattern matches both kinds"""
    matcher = IgnoreMatcher(["node_modules"])

    assert matcher.is_excluded("node_modules", is_directory=True)
    assert matcher.is_excluded("node_modules")
    assert matcher.is_excluded("web/node_modules/react/index.js")


def test_anchoring():
    """A leading slash roots the pattern, a bare name floats"""
    anchored = IgnoreMatcher(["/secret"])
    assert anchored.is_excluded("secret")
    assert anchored.is_excluded("secret/key.pem")
    assert not anchored.is_excluded("nested/secret")

    floating = IgnoreMatcher(["secret"])
    assert floating.is_excluded("secret")
    assert floating.is_excluded("nested/secret")


def test_embedded_slash_anchors():
    """'doc/*.txt' only matches directly below the top-level doc"""
    matcher = IgnoreMatcher(["doc/*.txt"])

    assert matcher.is_excluded("doc/notes.txt")
    assert not matcher.is_excluded("doc/sub/notes.txt")
    assert not matcher.is_excluded("x/doc/notes.txt")


def test_double_star_prefix():
    """'**/.idea' matches at any depth but only whole names"""
    matcher = IgnoreMatcher(["**/.idea"])

    assert matcher.is_excluded(".idea", is_directory=True)
    assert matcher.is_excluded("a/.idea", is_directory=True)
    assert matcher.is_excluded("a/b/.idea", is_directory=True)
    assert matcher.is_excluded("a/b/.idea/workspace.xml")
    assert not matcher.is_excluded(".idea.bak")


def test_double_star_in_the_middle():
    """'a/**/b' matches zero or more directories between a and b"""
    matcher = IgnoreMatcher(["a/**/b"])

    assert matcher.is_excluded("a/b")
    assert matcher.is_excluded("a/x/b")
    assert matcher.is_excluded("a/x/y/z/b")
    assert matcher.is_excluded("a/x/b/c.txt")
    assert not matcher.is_excluded("b")
    assert not matcher.is_excluded("x/a/b")
    assert not matcher.is_excluded("a/bb")


def test_trailing_double_star_matches_contents_only():
    """'build/**' leaves the directory itself in place"""
    matcher = IgnoreMatcher(["build/**"])

    assert not matcher.is_excluded("build", is_directory=True)
    assert matcher.is_excluded("build/a.o")
    assert matcher.is_excluded("build/sub/a.o")


def test_bare_double_star_matches_everything():
    """'**' excludes every path below the root"""
    matcher = IgnoreMatcher(["**"])

    assert matcher.is_excluded("a")
    assert matcher.is_excluded("a/b/c")
    assert matcher.is_excluded("dir", is_directory=True)


def test_star_does_not_cross_slash():
    """'*' and '?' stay within one path component"""
    matcher = IgnoreMatcher(["src/*.py", "/?"])

    assert matcher.is_excluded("src/main.py")
    assert not matcher.is_excluded("src/pkg/main.py")
    assert matcher.is_excluded("x")
    assert not matcher.is_excluded("xy")


def test_mixed_double_star_within_segment():
    """'a**b' stays within one component"""
    matcher = IgnoreMatcher(["/a**b"])

    assert matcher.is_excluded("ab")
    assert matcher.is_excluded("a-long-b")
    assert not matcher.is_excluded("a/b")


def test_negation_without_prior_exclusion_is_harmless():
    """A negation only re-includes, it never excludes"""
    matcher = IgnoreMatcher(["!only.txt"])

    assert not matcher.is_excluded("only.txt")
    assert not matcher.is_excluded("other.txt")


def test_reinclude_file_inside_excluded_directory():
    """Directory propagation still lets a later negation win"""
    matcher = IgnoreMatcher(["build/", "!build/keep.txt"])

    assert matcher.is_excluded("build", is_directory=True)
    assert matcher.is_excluded("build/other.txt")
    assert not matcher.is_excluded("build/keep.txt")


def test_star_with_reinclusion_by_extension():
    """Exclude everything, then bring back Python files"""
    matcher = IgnoreMatcher(["*", "!*.py"])

    assert matcher.is_excluded("README.md")
    assert matcher.is_excluded("src/notes.txt")
    assert not matcher.is_excluded("setup.py")
    assert not matcher.is_excluded("src/main.py")


def test_empty_pattern_list_excludes_nothing():
    """No patterns means everything is included"""
    matcher = IgnoreMatcher([])

    assert len(matcher) == 0
    assert not matcher.is_excluded("anything")
    assert not matcher.is_excluded("deep/path/file", is_directory=True)


def test_comments_and_blank_lines_are_ignored():
    """Raw lines can be passed straight from a file"""
    matcher = IgnoreMatcher(["# build output", "", "*.o"])

    assert len(matcher) == 1
    assert matcher.is_excluded("main.o")


def test_root_is_never_excluded():
    """The base directory itself cannot be excluded"""
    matcher = IgnoreMatcher(["**", "*"])

    assert not matcher.is_excluded("", is_directory=True)
    assert not matcher.is_excluded(".", is_directory=True)


def test_path_normalization():
    """Leading './' and '/', doubled and trailing slashes are tolerated"""
    matcher = IgnoreMatcher(["/docs/*.md"])

    assert matcher.is_excluded("./docs/a.md")
    assert matcher.is_excluded("/docs/a.md")
    assert matcher.is_excluded("docs//a.md")
    assert matcher.is_excluded(PurePosixPath("docs/a.md"))


def test_none_pattern_source_is_rejected():
    """A missing pattern source is the caller's error"""
    with pytest.raises(TypeError):
        IgnoreMatcher(None)


def test_match_reports_deciding_pattern():
    """match() returns the last pattern that matched"""
    matcher = IgnoreMatcher(["*.tmp", "!important.tmp", "cache/"])

    result = matcher.match("a.tmp")
    assert result.verdict is MatchVerdict.EXCLUDED
    assert result.should_ignore
    assert result.matched_pattern.raw == "*.tmp"

    result = matcher.match("important.tmp")
    assert result.verdict is MatchVerdict.INCLUDED
    assert result.matched_pattern.raw == "!important.tmp"

    result = matcher.match("README.md")
    assert result.verdict is MatchVerdict.INCLUDED
    assert result.matched_pattern is None

    assert matcher.verdict("cache", is_directory=True) is MatchVerdict.EXCLUDED


def test_end_to_end_pattern_list():
    """Built-ins, file patterns and necessary re-inclusions together"""
    raw = ["**/.idea", "**/.vs", "*.tmp", "!important.tmp", ".dockerignore", "Dockerfile"]
    matcher = IgnoreMatcher(raw + ["!.dockerignore", "!Dockerfile"])

    assert matcher.is_excluded(".idea", is_directory=True)
    assert matcher.is_excluded("a.tmp")
    assert not matcher.is_excluded("important.tmp")
    assert not matcher.is_excluded("Dockerfile")
    assert not matcher.is_excluded(".dockerignore")
    assert not matcher.is_excluded("README.md")


def test_identical_patterns_behave_identically():
    """Two matchers built from the same text agree on every path"""
    raw = ["**/.idea", "/out/**", "*.py[cod]", "!keep/*.pyc", "logs/"]
    first, second = IgnoreMatcher(raw), IgnoreMatcher(raw)
    paths = [
        ("a.pyc", False), ("keep/a.pyc", False), ("out", True), ("out/x", False),
        ("logs", True), ("logs", False), ("x/.idea/y", False), ("src/a.py", False),
    ]

    for path, is_directory in paths:
        assert first.is_excluded(path, is_directory) == second.is_excluded(path, is_directory)


def test_filter():
    """filter() yields only included paths"""
    matcher = IgnoreMatcher(["*.log", "tmp/"])

    kept = list(matcher.filter(["a.py", "b.log", ("tmp", True), ("src", True)]))

    assert kept == ["a.py", "src"]


def test_may_reinclude_under():
    """Pruning is only unsafe where a negation can reach below a directory"""
    matcher = IgnoreMatcher(["build/", "docs", "!/build/keep.txt", "!/docs"])

    assert matcher.may_reinclude_under("build")
    assert not matcher.may_reinclude_under("dist")
    assert not matcher.may_reinclude_under("docs")

    floating = IgnoreMatcher(["build/", "!*.keep"])
    assert floating.may_reinclude_under("build")

    assert not IgnoreMatcher(["build/"]).may_reinclude_under("build")


def test_deep_paths_do_not_recurse():
    """Matching very deep paths works without recursion limits"""
    matcher = IgnoreMatcher(["a/**/b/**/c"])
    deep = "/".join(["a"] + ["x"] * 3000 + ["b"] + ["y"] * 3000 + ["c"])

    assert matcher.is_excluded(deep)
    assert not matcher.is_excluded(deep + "d")


def test_concurrent_use():
    """A matcher can be shared between threads"""
    matcher = IgnoreMatcher(["*.tmp", "!important.tmp", "**/cache/**"])
    paths = [f"dir{i}/file{i}.tmp" for i in range(200)] + ["important.tmp", "x/cache/y"]
    expected = [matcher.is_excluded(p) for p in paths]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(matcher.is_excluded, paths))

    assert results == expected
