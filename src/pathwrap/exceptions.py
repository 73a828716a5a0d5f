"""Exception classes for pathwrap."""

import errno
import os


class PathWrapError(Exception):
    """Base exception for pathwrap operations."""


class UnsupportedArgumentTypeError(PathWrapError, TypeError):
    """Raised when an argument has no registered coercion or dispatch."""


class InvalidUriError(PathWrapError, ValueError):
    """Raised when a URI cannot denote a local file."""


class DirectoryNotEmptyError(PathWrapError, OSError):
    """Raised when removing or replacing a directory that still has entries."""

    def __init__(self, filename: str) -> None:
        super().__init__(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), filename)


class FileSystemLoopError(PathWrapError, OSError):
    """Raised when following links leads back into an ancestor directory."""

    def __init__(self, filename: str) -> None:
        super().__init__(errno.ELOOP, os.strerror(errno.ELOOP), filename)


# Failures that come straight from the platform keep their own types
NotFoundError = FileNotFoundError
IOFailure = OSError
