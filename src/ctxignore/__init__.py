"""ctxignore - decide which files of a build context are sent to the daemon"""

__version__ = "1.0.0"

from .ignore import BuildContext, IgnoreMatcher, compile_pattern, compile_patterns

__all__ = ['__version__', 'BuildContext', 'IgnoreMatcher', 'compile_pattern', 'compile_patterns']
