"""
Exceptions raised around the build context
"""


class CtxIgnoreError(Exception):
    """Base class for ctxignore errors."""
    pass


class IgnoreFileError(CtxIgnoreError):
    """Raised in strict mode when an ignore file cannot be used."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class ContextRootError(CtxIgnoreError):
    """Raised when the build context root is missing or not a directory."""
    pass
