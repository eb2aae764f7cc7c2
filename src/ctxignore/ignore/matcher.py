"""
Path matcher: evaluates relative paths against a compiled pattern set
"""

import os
from typing import Iterable, Iterator, List, Tuple, Union

from ..utils import get_logger
from ..utils.logging_setup import TRACE_LEVEL
from .compiler import compile_patterns
from .pattern import CompiledPattern, MatchResult, MatchVerdict

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


class IgnoreMatcher:
    """
    Decides whether paths are excluded by an ordered list of ignore patterns

    Patterns are compiled once. The last matching pattern wins, a negated
    pattern re-includes what earlier patterns excluded. A pattern that matches
    a directory also matches everything below it.

    Instances are immutable after construction and can be shared between
    threads.
    """

    def __init__(self, patterns: Iterable[str]):
        """
        Compile the pattern set

        Args:
            patterns: Raw ignore-file lines in precedence order (later wins)
        """
        if patterns is None:
            raise TypeError("patterns must be an iterable of strings, not None")

        self._patterns: Tuple[CompiledPattern, ...] = compile_patterns(patterns)
        self._has_negations = any(p.negated for p in self._patterns)

        logger.debug(
            f"Compiled {len(self._patterns)} patterns "
            f"({sum(p.negated for p in self._patterns)} negated)"
        )

    @property
    def patterns(self) -> Tuple[CompiledPattern, ...]:
        return self._patterns

    @property
    def has_negations(self) -> bool:
        """True if any pattern can re-include a previously excluded path"""
        return self._has_negations

    def __len__(self) -> int:
        return len(self._patterns)

    def match(self, path: PathLike, is_directory: bool = False) -> MatchResult:
        """
        Evaluate a path against every pattern

        Args:
            path: POSIX-style path relative to the base directory
            is_directory: Whether the path names a directory

        Returns:
            MatchResult with the verdict and the deciding pattern, if any
        """
        parts = split_path(path)
        verdict = MatchVerdict.INCLUDED
        matched = None

        # The base directory itself is never excluded
        if parts:
            for pattern in self._patterns:
                if pattern_matches(pattern, parts, is_directory):
                    verdict = MatchVerdict.INCLUDED if pattern.negated else MatchVerdict.EXCLUDED
                    matched = pattern

        if logger.isEnabledFor(TRACE_LEVEL):
            logger.trace(f"{path}: {verdict.value} (pattern: {matched})")

        return MatchResult(verdict=verdict, matched_pattern=matched)

    def verdict(self, path: PathLike, is_directory: bool = False) -> MatchVerdict:
        return self.match(path, is_directory).verdict

    def is_excluded(self, path: PathLike, is_directory: bool = False) -> bool:
        """
        Check if a path is excluded

        Args:
            path: POSIX-style path relative to the base directory
            is_directory: Whether the path names a directory

        Returns:
            True if the path should be left out of the package
        """
        return self.match(path, is_directory).should_ignore

    def may_reinclude_under(self, directory: PathLike) -> bool:
        """
        Check if a negated pattern could re-include something below an
        excluded directory

        A tree walk may skip an excluded directory only when this is False.
        Negated patterns that match the directory itself or one of its
        ancestors cannot re-include its contents: the exclusion that decided
        the directory comes later and also covers everything below it.

        Args:
            directory: POSIX-style directory path relative to the base directory
        """
        if not self._has_negations:
            return False
        parts = split_path(directory)
        return any(
            pattern.negated and _may_match_below(pattern, parts)
            for pattern in self._patterns
        )

    def filter(self, paths: Iterable[Union[PathLike, Tuple[PathLike, bool]]]) -> Iterator[PathLike]:
        """
        Yield the paths that are not excluded

        Args:
            paths: Plain paths (taken as files) or (path, is_directory) pairs
        """
        for entry in paths:
            if isinstance(entry, tuple):
                path, is_directory = entry
            else:
                path, is_directory = entry, False
            if not self.is_excluded(path, is_directory):
                yield path


def split_path(path: PathLike) -> List[str]:
    """Split a relative POSIX path into components, dropping '' and '.'"""
    return [part for part in os.fspath(path).split('/') if part not in ('', '.')]


def pattern_matches(pattern: CompiledPattern, parts: List[str], is_directory: bool) -> bool:
    """
    Check one compiled pattern against a split path

    Matches the path itself or any of its ancestor directories. Ancestors are
    directories by definition, so directory-only patterns always apply to
    them.
    """
    if pattern.is_simple:
        segment = pattern.segments[0]
        last = len(parts) - 1
        for index, name in enumerate(parts):
            if segment.matches(name):
                if index < last or is_directory or not pattern.directory_only:
                    return True
        return False

    return _match_segments(pattern, parts, is_directory)


def _may_match_below(pattern: CompiledPattern, parts: List[str]) -> bool:
    if not pattern.anchored:
        return True
    for index, segment in enumerate(pattern.segments):
        if segment.is_double_star or index >= len(parts):
            return True
        if not segment.matches(parts[index]):
            return False
    return False


def _match_segments(pattern: CompiledPattern, parts: List[str], is_directory: bool) -> bool:
    count = len(parts)
    # row[j] is True when the segments seen so far match parts[:j]
    if pattern.anchored:
        row = [True] + [False] * count
    else:
        row = [True] * (count + 1)

    last_index = len(pattern.segments) - 1
    for index, segment in enumerate(pattern.segments):
        if segment.is_double_star:
            # A trailing '**' needs at least one component: 'dir/**' is
            # everything under dir, not dir itself
            trailing = index == last_index
            next_row = [False] * (count + 1)
            seen = False
            for j in range(count + 1):
                if trailing:
                    next_row[j] = seen
                    seen = seen or row[j]
                else:
                    seen = seen or row[j]
                    next_row[j] = seen
        else:
            next_row = [False] * (count + 1)
            for j in range(1, count + 1):
                next_row[j] = row[j - 1] and segment.matches(parts[j - 1])

        row = next_row
        if not any(row):
            return False

    if any(row[1:count]):
        return True
    return row[count] and (is_directory or not pattern.directory_only)
