"""
Build context API: ignore file discovery, matching and tree walking
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..utils import get_logger, log_with_context
from .constants import DOCKERFILE_NAME, IGNOREFILE_WARNING_ENV
from .exceptions import ContextRootError, CtxIgnoreError
from .file_loader import IgnoreFileInfo, IgnoreFileLoader
from .matcher import IgnoreMatcher
from .pattern import MatchResult

logger = get_logger(__name__)


class BuildContext:
    """
    A directory about to be packaged for the daemon, with its ignore rules

    Patterns are loaded and compiled once when the context is created. Create
    a new BuildContext to pick up changes to the ignore file.
    """

    def __init__(self,
                 root_path: Union[str, Path],
                 dockerfile: str = DOCKERFILE_NAME,
                 extra_patterns: Optional[Iterable[str]] = None,
                 use_defaults: bool = True,
                 strict: bool = False):
        """
        Initialize the build context

        Args:
            root_path: Context directory
            dockerfile: Dockerfile path relative to the context directory
            extra_patterns: Patterns applied after the ignore file's own
            use_defaults: Whether to always ignore editor metadata (.idea, .vs)
            strict: Raise instead of logging when the ignore file is unusable
        """
        self.root_path = Path(root_path).resolve()
        if not self.root_path.is_dir():
            raise ContextRootError(f"Build context is not a directory: {self.root_path}")

        self._loader = IgnoreFileLoader(dockerfile=dockerfile, strict=strict)
        self.dockerfile = self._loader.dockerfile

        self.ignore_file: Optional[Path] = self._loader.resolve_ignore_file(self.root_path)
        self.file_info: Optional[IgnoreFileInfo] = None
        if self.ignore_file is not None:
            self.file_info = self._loader.load_file(self.ignore_file)

        self.patterns: List[str] = self._loader.assemble_patterns(
            self.root_path,
            self.file_info,
            extra_patterns=extra_patterns,
            use_defaults=use_defaults,
        )
        self.matcher = IgnoreMatcher(self.patterns)

        log_with_context(
            logger, logging.INFO,
            f"Build context {self.root_path}: {len(self.matcher)} patterns "
            f"from {self.ignore_file or 'built-in defaults'}",
            root_path=str(self.root_path),
            ignore_file=str(self.ignore_file) if self.ignore_file else None,
            patterns=len(self.matcher),
        )

    def check_ignore_file(self) -> bool:
        """
        Check if the context has an ignore file and warn if not

        The warning can be silenced with CTXIGNORE_IGNOREFILE_WARNING=false.

        Returns:
            True if an ignore file was found, False otherwise
        """
        if self.ignore_file is not None:
            return True

        warn_env = os.environ.get(IGNOREFILE_WARNING_ENV, 'true').lower()
        if warn_env not in ('false', '0', 'no', 'off'):
            logger.warning(
                f"No {self._loader.ignore_extension} found in {self.root_path}. "
                f"The whole directory will be sent to the daemon. "
                f"Run 'ctxignore init' to create one with defaults. "
                f"Set {IGNOREFILE_WARNING_ENV}=false to disable this warning."
            )
        return False

    def relative_path(self, path: Union[str, Path]) -> str:
        """
        Express a path relative to the context root in POSIX form

        Raises:
            CtxIgnoreError: If an absolute path lies outside the context
        """
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.root_path)
            except ValueError:
                raise CtxIgnoreError(f"{path} is outside the build context {self.root_path}")
        return path.as_posix()

    def explain(self, path: Union[str, Path]) -> MatchResult:
        """
        Match a path and report the deciding pattern

        Args:
            path: Path to check (relative to the root, or absolute)
        """
        relative = self.relative_path(path)
        is_directory = (self.root_path / relative).is_dir()
        return self.matcher.match(relative, is_directory)

    def should_ignore(self, path: Union[str, Path]) -> bool:
        """
        Check if a path is left out of the build context

        Args:
            path: Path to check (relative to the root, or absolute)

        Returns:
            True if path should be ignored, False otherwise
        """
        return self.explain(path).should_ignore

    def iter_files(self) -> Iterator[str]:
        """Yield relative POSIX paths of the files sent to the daemon, sorted per directory"""
        for relative, excluded in self._walk(prune=True):
            if not excluded:
                yield relative

    def iter_excluded(self) -> Iterator[str]:
        """Yield relative POSIX paths of every file left out of the context"""
        for relative, excluded in self._walk(prune=False):
            if excluded:
                yield relative

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the context's rules

        Returns:
            Dictionary with pattern and ignore file information
        """
        stats: Dict[str, Any] = {
            'root_path': str(self.root_path),
            'dockerfile': self.dockerfile,
            'ignore_file': str(self.ignore_file) if self.ignore_file else None,
            'patterns': len(self.matcher),
            'negated_patterns': sum(p.negated for p in self.matcher.patterns),
        }
        if self.file_info is not None:
            stats['file'] = dict(self.file_info.stats)
            stats['errors'] = len(self.file_info.errors)
            stats['warnings'] = len(self.file_info.warnings)
        return stats

    def _walk(self, prune: bool) -> Iterator[Tuple[str, bool]]:
        """
        Walk the context yielding (relative path, excluded) for every file

        Excluded directories are skipped when prune is set and no negated
        pattern can re-include anything below them.
        """
        for dirpath, dirnames, filenames in os.walk(self.root_path):
            current = Path(dirpath)
            relative_dir = current.relative_to(self.root_path).as_posix()
            prefix = '' if relative_dir == '.' else relative_dir + '/'

            # Symlinked directories are sent as links, not followed
            links = [name for name in dirnames if (current / name).is_symlink()]
            descend = []
            for name in sorted(dirnames):
                if name in links:
                    continue
                relative = prefix + name
                if (prune
                        and self.matcher.is_excluded(relative, is_directory=True)
                        and not self.matcher.may_reinclude_under(relative)):
                    logger.debug(f"Skipping excluded directory: {relative}")
                    continue
                descend.append(name)
            dirnames[:] = descend

            for name in sorted(filenames + links):
                relative = prefix + name
                yield relative, self.matcher.is_excluded(relative)
