"""
Pattern compiler: turns raw ignore-file lines into CompiledPattern values

Syntax follows .dockerignore/.gitignore conventions:

- blank lines and lines starting with '#' are skipped
- a leading '!' negates the pattern, '\\!' is a literal '!'
- a trailing '/' restricts the pattern to directories
- a pattern with a '/' (other than a leading '**/') is anchored to the base
  directory, otherwise it matches at any depth
- '*', '?', '[...]' match within one path segment, '**' as a whole segment
  matches any number of segments

'**' mixed with other text inside a segment (e.g. 'a**b') is not special:
it behaves like a single '*' and never crosses a '/'.

Compilation never fails. Syntax that cannot be read as a wildcard is taken
literally, so one malformed line cannot break a whole ignore file.
"""

import re
from typing import Iterable, List, Optional, Tuple

from ..utils import get_logger
from .pattern import (
    CompiledPattern,
    DOUBLE_STAR,
    DOUBLE_STAR_SEGMENT,
    Segment,
    literal_segment,
    wildcard_segment,
)

logger = get_logger(__name__)


def compile_pattern(raw: str) -> Optional[CompiledPattern]:
    """
    Compile a single ignore-file line

    Args:
        raw: Pattern text as read from the ignore file

    Returns:
        CompiledPattern, or None for blank lines, comments and patterns that
        reduce to nothing (such as '/' or '!')
    """
    text = raw.strip()
    if not text or text.startswith('#'):
        return None

    directory_only = False
    if text.endswith('/'):
        text = text[:-1]
        directory_only = True

    negated = False
    if text.startswith('!'):
        text = text[1:]
        negated = True

    segments = _split_segments(text)
    if not segments:
        logger.debug(f"Pattern '{raw}' has no path segments, skipping")
        return None

    return CompiledPattern(
        raw=raw.strip(),
        negated=negated,
        directory_only=directory_only,
        anchored=_is_anchored(text),
        segments=segments,
    )


def compile_patterns(lines: Iterable[str]) -> Tuple[CompiledPattern, ...]:
    """
    Compile an ordered list of ignore-file lines

    Blank lines and comments are dropped, order is preserved.
    """
    compiled = []
    for line in lines:
        pattern = compile_pattern(line)
        if pattern is not None:
            compiled.append(pattern)
    return tuple(compiled)


def find_class_end(token: str, start: int) -> int:
    """
    Find the closing ']' of a character class

    Args:
        token: Segment text
        start: Index of the opening '['

    Returns:
        Index of the closing ']', or -1 if the class is unterminated
    """
    i = start + 1
    if i < len(token) and token[i] in '!^':
        i += 1
    # A ']' right after the opening bracket is part of the class
    if i < len(token) and token[i] == ']':
        i += 1
    while i < len(token):
        char = token[i]
        if char == '\\':
            i += 2
            continue
        if char == ']':
            return i
        i += 1
    return -1


def unescape(token: str) -> str:
    """Resolve backslash escapes; a trailing lone backslash stays literal"""
    chars = []
    i = 0
    while i < len(token):
        if token[i] == '\\' and i + 1 < len(token):
            chars.append(token[i + 1])
            i += 2
        else:
            chars.append(token[i])
            i += 1
    return ''.join(chars)


def escape(path: str) -> str:
    """Escape a relative path so it compiles to a pattern matching only itself"""
    escaped = ''.join('\\' + char if char in '\\*?[' else char for char in path)
    if escaped[:1] in ('!', '#'):
        escaped = '\\' + escaped
    return escaped


def _is_anchored(text: str) -> bool:
    rest = text
    while rest.startswith(DOUBLE_STAR + '/'):
        rest = rest[len(DOUBLE_STAR) + 1:]
    return '/' in rest.rstrip('/')


def _split_segments(text: str) -> Tuple[Segment, ...]:
    segments: List[Segment] = []
    for token in text.split('/'):
        # './a' and 'a//b' normalize the same way paths do
        if token in ('', '.'):
            continue
        segment = _compile_segment(token)
        if segment.is_double_star and segments and segments[-1].is_double_star:
            continue
        segments.append(segment)
    return tuple(segments)


def _compile_segment(token: str) -> Segment:
    if token == DOUBLE_STAR:
        return DOUBLE_STAR_SEGMENT

    regex, has_wildcard = _translate(token)
    if not has_wildcard:
        return literal_segment(token, unescape(token))

    try:
        return wildcard_segment(token, regex)
    except re.error as e:
        logger.debug(f"Treating segment '{token}' as literal text: {e}")
        return literal_segment(token, unescape(token))


def _translate(token: str) -> Tuple[str, bool]:
    """Translate one segment to a regular expression body"""
    parts = []
    has_wildcard = False
    i = 0
    while i < len(token):
        char = token[i]
        if char == '\\':
            if i + 1 < len(token):
                parts.append(re.escape(token[i + 1]))
                i += 2
            else:
                parts.append(re.escape(char))
                i += 1
        elif char == '*':
            while i < len(token) and token[i] == '*':
                i += 1
            parts.append('[^/]*')
            has_wildcard = True
        elif char == '?':
            parts.append('[^/]')
            has_wildcard = True
            i += 1
        elif char == '[':
            end = find_class_end(token, i)
            if end == -1:
                parts.append(re.escape(char))
                i += 1
            else:
                parts.append(_translate_class(token[i + 1:end]))
                has_wildcard = True
                i = end + 1
        else:
            parts.append(re.escape(char))
            i += 1
    return ''.join(parts), has_wildcard


def _translate_class(body: str) -> str:
    negate = body[:1] in ('!', '^')
    if negate:
        body = body[1:]

    parts = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == '\\' and i + 1 < len(body):
            parts.append(re.escape(body[i + 1]))
            i += 2
            continue
        parts.append('-' if char == '-' else re.escape(char))
        i += 1

    return '[' + ('^' if negate else '') + ''.join(parts) + ']'
