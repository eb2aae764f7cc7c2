"""
Build context ignore processing for ctxignore

This module decides which files of a build context are sent to the daemon:
- Pattern compilation with .dockerignore/.gitignore syntax
- Last-match-wins matching with negation and directory propagation
- Ignore file discovery, including Dockerfile-specific ignore files
- Tree walking over the included files
"""

from .constants import IGNORE_FILE_EXTENSION, DOCKERFILE_NAME, ALWAYS_IGNORED
from .exceptions import CtxIgnoreError, IgnoreFileError, ContextRootError
from .pattern import CompiledPattern, Segment, SegmentKind, MatchVerdict, MatchResult
from .compiler import compile_pattern, compile_patterns
from .matcher import IgnoreMatcher
from .file_loader import IgnoreFileLoader, IgnoreFileInfo
from .manager import BuildContext
from .init import init_ignore_file, generate_ignore_content

__all__ = [
    'IGNORE_FILE_EXTENSION',
    'DOCKERFILE_NAME',
    'ALWAYS_IGNORED',
    'CtxIgnoreError',
    'IgnoreFileError',
    'ContextRootError',
    'CompiledPattern',
    'Segment',
    'SegmentKind',
    'MatchVerdict',
    'MatchResult',
    'compile_pattern',
    'compile_patterns',
    'IgnoreMatcher',
    'IgnoreFileLoader',
    'IgnoreFileInfo',
    'BuildContext',
    'init_ignore_file',
    'generate_ignore_content',
]
