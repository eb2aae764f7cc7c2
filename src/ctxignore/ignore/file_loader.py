"""
Ignore file loading and assembly of the final pattern list
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Dict, Iterable, List, Optional

from ..utils import get_logger
from .compiler import escape, find_class_end
from .constants import (
    ALWAYS_IGNORED,
    DOCKERFILE_NAME,
    IGNORE_FILE_EXTENSION,
    MAX_IGNORE_FILE_SIZE,
    MAX_PATTERNS_PER_FILE,
)
from .exceptions import IgnoreFileError
from .pattern import DOUBLE_STAR

logger = get_logger(__name__)


@dataclass
class ValidationError:
    """Represents a problem that prevented an ignore file from loading"""
    line: int
    pattern: str
    message: str


@dataclass
class ValidationWarning:
    """Represents a pattern that loads but probably does not do what was meant"""
    line: int
    pattern: str
    message: str


@dataclass
class IgnoreFileInfo:
    """Information about a loaded ignore file"""
    path: Path
    patterns: List[str]
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


class IgnoreFileLoader:
    """
    Locates and parses the ignore file of a build context and assembles the
    ordered pattern list handed to the matcher

    The final list is, in precedence order: the always-ignored editor
    directories, the ignore file's own patterns, caller supplied extras, and
    last the re-inclusion of the files the daemon always needs (the ignore
    file itself and the Dockerfile).
    """

    def __init__(self,
                 dockerfile: str = DOCKERFILE_NAME,
                 ignore_extension: str = IGNORE_FILE_EXTENSION,
                 strict: bool = False):
        """
        Initialize loader

        Args:
            dockerfile: Dockerfile path relative to the context directory
            ignore_extension: Ignore file name, also used as the suffix of a
                Dockerfile-specific ignore file
            strict: Raise IgnoreFileError instead of recording load errors
        """
        self.dockerfile = _to_posix(dockerfile)
        self.ignore_extension = ignore_extension
        self.strict = strict

    def resolve_ignore_file(self, directory: Path) -> Optional[Path]:
        """
        Pick the ignore file that applies to a context directory

        A Dockerfile-specific file ('Dockerfile.dockerignore') wins over the
        shared one ('.dockerignore').

        Args:
            directory: Build context directory

        Returns:
            Path to the ignore file, or None if neither exists
        """
        directory = Path(directory)
        candidates = [
            directory / (self.dockerfile + self.ignore_extension),
            directory / self.ignore_extension,
        ]
        for candidate in candidates:
            if candidate.is_file():
                logger.debug(f"Using ignore file: {candidate}")
                return candidate
        return None

    def load_file(self, file_path: Path) -> IgnoreFileInfo:
        """
        Load and check an ignore file

        Args:
            file_path: Path to the ignore file

        Returns:
            IgnoreFileInfo with patterns in file order, errors and warnings

        Raises:
            IgnoreFileError: In strict mode, if the file cannot be used
        """
        file_path = Path(file_path)
        info = IgnoreFileInfo(
            path=file_path,
            patterns=[],
            stats={
                'total_lines': 0,
                'empty_lines': 0,
                'comment_lines': 0,
                'pattern_lines': 0,
            }
        )

        if not file_path.exists():
            return self._fail(info, f"File not found: {file_path}")

        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            return self._fail(info, f"Cannot stat file: {e}")

        if file_size > MAX_IGNORE_FILE_SIZE:
            return self._fail(
                info, f"File too large: {file_size} bytes (max: {MAX_IGNORE_FILE_SIZE})"
            )

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            return self._fail(info, f"Error reading file: {e}")

        info.stats['total_lines'] = len(lines)
        necessary = set(self._necessary_names(file_path.parent))

        for line_num, line in enumerate(lines, 1):
            stripped = line.strip()

            if not stripped:
                info.stats['empty_lines'] += 1
                continue

            if stripped.startswith('#'):
                info.stats['comment_lines'] += 1
                continue

            info.stats['pattern_lines'] += 1
            info.patterns.append(stripped)

            for warning_msg in self._check_pattern_warnings(stripped, necessary):
                info.warnings.append(ValidationWarning(
                    line=line_num,
                    pattern=stripped,
                    message=warning_msg
                ))

        if len(info.patterns) > MAX_PATTERNS_PER_FILE:
            info.errors.append(ValidationError(
                line=0,
                pattern="",
                message=f"Too many patterns: {len(info.patterns)} (max: {MAX_PATTERNS_PER_FILE})"
            ))
            info.patterns = info.patterns[:MAX_PATTERNS_PER_FILE]

        for warning in info.warnings:
            logger.warning(f"{file_path}:{warning.line}: {warning.message}")

        return info

    def necessary_patterns(self, directory: Path,
                           ignore_file: Optional[Path] = None) -> List[str]:
        """
        Negated patterns for the files the daemon always receives

        The ADD and COPY instructions never copy these into the image, but
        the daemon needs them to run the build. The patterns are anchored so
        that same-named files deeper in the tree are not re-included.

        Args:
            directory: Build context directory
            ignore_file: The ignore file in use, if any
        """
        return ['!/' + escape(name) for name in self._necessary_names(directory, ignore_file)]

    def _necessary_names(self, directory: Path,
                         ignore_file: Optional[Path] = None) -> List[str]:
        names = [self.ignore_extension, self.dockerfile]
        if ignore_file is not None:
            try:
                relative = Path(ignore_file).relative_to(directory).as_posix()
            except ValueError:
                relative = None
            if relative and relative not in names:
                names.append(relative)
        return names

    def assemble_patterns(self,
                          directory: Path,
                          file_info: Optional[IgnoreFileInfo] = None,
                          extra_patterns: Optional[Iterable[str]] = None,
                          use_defaults: bool = True) -> List[str]:
        """
        Build the ordered pattern list for a context directory

        Args:
            directory: Build context directory
            file_info: Loaded ignore file, if any
            extra_patterns: Caller patterns applied after the file's patterns
            use_defaults: Whether to start with the always-ignored entries

        Returns:
            Raw patterns in precedence order (later wins)
        """
        patterns: List[str] = []
        if use_defaults:
            patterns.extend(ALWAYS_IGNORED)
        if file_info is not None:
            patterns.extend(file_info.patterns)
        if extra_patterns:
            patterns.extend(extra_patterns)
        patterns.extend(self.necessary_patterns(
            directory, file_info.path if file_info is not None else None
        ))
        return patterns

    def build_patterns(self,
                       directory: Path,
                       extra_patterns: Optional[Iterable[str]] = None,
                       use_defaults: bool = True) -> List[str]:
        """
        Resolve, load and assemble in one step

        Args:
            directory: Build context directory
            extra_patterns: Caller patterns applied after the file's patterns
            use_defaults: Whether to start with the always-ignored entries

        Returns:
            Raw patterns in precedence order (later wins)
        """
        directory = Path(directory)
        ignore_file = self.resolve_ignore_file(directory)
        file_info = self.load_file(ignore_file) if ignore_file is not None else None
        return self.assemble_patterns(directory, file_info, extra_patterns, use_defaults)

    def _fail(self, info: IgnoreFileInfo, message: str) -> IgnoreFileInfo:
        if self.strict:
            raise IgnoreFileError(info.path, message)
        logger.error(f"{info.path}: {message}")
        info.errors.append(ValidationError(line=0, pattern="", message=message))
        return info

    def _check_pattern_warnings(self, pattern: str, necessary: Iterable[str]) -> List[str]:
        """
        Check pattern for potential issues that aren't errors

        Args:
            pattern: Stripped pattern line
            necessary: Names of the files that are always re-included

        Returns:
            List of warning messages
        """
        warnings = []

        # Leading '\!' and '\#' are the documented escapes
        body = pattern[2:] if pattern[:2] in ('\\!', '\\#') else pattern
        if '\\' in body:
            warnings.append(
                "Pattern contains backslash, which escapes the next character. "
                "Use forward slashes for paths."
            )

        if pattern in ('*', '**', '**/*'):
            warnings.append(
                "Very broad pattern - excludes everything not re-included later"
            )

        if pattern.startswith('!') and pattern[1:].lstrip('/') in necessary:
            warnings.append(
                f"'{pattern[1:].lstrip('/')}' is always sent to the daemon; this line has no effect"
            )

        for segment in pattern.lstrip('!').split('/'):
            if DOUBLE_STAR in segment and segment != DOUBLE_STAR:
                warnings.append(
                    f"'**' inside '{segment}' matches like '*' and does not cross directories"
                )
            if _has_unterminated_class(segment):
                warnings.append(
                    f"Unterminated '[' in '{segment}' is matched literally"
                )

        return warnings


def _has_unterminated_class(segment: str) -> bool:
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == '\\':
            i += 2
            continue
        if char == '[':
            end = find_class_end(segment, i)
            if end == -1:
                return True
            i = end + 1
            continue
        i += 1
    return False


def _to_posix(path: str) -> str:
    if '\\' in path:
        return PureWindowsPath(path).as_posix()
    return PurePosixPath(path).as_posix()
