"""
Compiled pattern data model shared by the compiler and the matcher
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SegmentKind(Enum):
    """How a single pattern segment is matched"""
    LITERAL = "literal"
    WILDCARD = "wildcard"
    DOUBLE_STAR = "double_star"


@dataclass(frozen=True)
class Segment:
    """One '/'-separated component of an ignore pattern"""
    kind: SegmentKind
    text: str  # Raw token as written in the pattern
    literal: Optional[str] = None  # Unescaped text for LITERAL segments
    regex: Optional[re.Pattern] = None  # Compiled glob for WILDCARD segments

    @property
    def is_double_star(self) -> bool:
        return self.kind is SegmentKind.DOUBLE_STAR

    def matches(self, name: str) -> bool:
        """
        Match one path component against this segment

        DOUBLE_STAR segments span components and are handled by the matcher,
        so they never match a single name here.
        """
        if self.kind is SegmentKind.LITERAL:
            return name == self.literal
        if self.kind is SegmentKind.WILDCARD:
            return self.regex.fullmatch(name) is not None
        return False


DOUBLE_STAR = "**"
DOUBLE_STAR_SEGMENT = Segment(kind=SegmentKind.DOUBLE_STAR, text=DOUBLE_STAR)


@dataclass(frozen=True)
class CompiledPattern:
    """Immutable form of one ignore-file line"""
    raw: str
    negated: bool
    directory_only: bool
    anchored: bool
    segments: Tuple[Segment, ...]

    @property
    def has_double_star(self) -> bool:
        return any(segment.is_double_star for segment in self.segments)

    @property
    def is_simple(self) -> bool:
        """Unanchored single-segment pattern such as '*.log' or 'node_modules'"""
        return (
            not self.anchored
            and len(self.segments) == 1
            and not self.segments[0].is_double_star
        )

    def __str__(self) -> str:
        return self.raw


class MatchVerdict(Enum):
    """Decision for a single path"""
    EXCLUDED = "excluded"
    INCLUDED = "included"


@dataclass(frozen=True)
class MatchResult:
    """Result of matching a path against a pattern set"""
    verdict: MatchVerdict
    matched_pattern: Optional[CompiledPattern] = None

    @property
    def should_ignore(self) -> bool:
        return self.verdict is MatchVerdict.EXCLUDED


def literal_segment(text: str, literal: str) -> Segment:
    return Segment(kind=SegmentKind.LITERAL, text=text, literal=literal)


def wildcard_segment(text: str, regex: str) -> Segment:
    return Segment(
        kind=SegmentKind.WILDCARD,
        text=text,
        regex=re.compile(regex, re.DOTALL),
    )
