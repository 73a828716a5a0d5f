"""Common types, protocols, and constants for pathwrap."""

from __future__ import annotations

import codecs
import dataclasses
import os
import sys
from enum import StrEnum
from pathlib import PurePath
from typing import Any, Iterable, Optional, Protocol, runtime_checkable


class CopyOption(StrEnum):
    REPLACE_EXISTING = "replace_existing"
    COPY_ATTRIBUTES = "copy_attributes"
    NOFOLLOW_LINKS = "nofollow_links"


class LinkOption(StrEnum):
    # Same value as CopyOption.NOFOLLOW_LINKS so either can be passed to copy
    NOFOLLOW_LINKS = "nofollow_links"


class OpenOption(StrEnum):
    READ = "read"
    WRITE = "write"
    APPEND = "append"
    TRUNCATE_EXISTING = "truncate_existing"
    CREATE = "create"
    CREATE_NEW = "create_new"
    SYNC = "sync"
    DSYNC = "dsync"


class FileVisitOption(StrEnum):
    FOLLOW_LINKS = "follow_links"


class FileVisitResult(StrEnum):
    CONTINUE = "continue"
    TERMINATE = "terminate"
    SKIP_SUBTREE = "skip_subtree"
    SKIP_SIBLINGS = "skip_siblings"


# Type aliases for better readability
Attributes = os.stat_result
Segments = tuple[str, ...]
ByteBuffer = bytes | bytearray | memoryview


# Constants
DEFAULT_ENCODING = "utf-8"
DEFAULT_WRITE_OPTIONS: tuple[OpenOption, ...] = (
    OpenOption.CREATE,
    OpenOption.TRUNCATE_EXISTING,
    OpenOption.WRITE,
)
UNBOUNDED_DEPTH = sys.maxsize


@runtime_checkable
class SupportsPath(Protocol):
    """Protocol for objects that know how to turn themselves into a path.

    Any object implementing ``to_path`` is accepted by ``paths.path`` as a
    single argument, without registering it with ``unary_path``.

    Example:
        >>> class Checkout:
        ...     def to_path(self) -> PurePath:
        ...         return Path("/srv/checkout")
        >>> path(Checkout())
        PosixPath('/srv/checkout')
    """

    def to_path(self) -> PurePath: ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem handles that build paths from segments.

    Objects implementing ``get_path`` are accepted by ``paths.path`` as the
    first argument of the variadic form: ``path(fs, "a", "b")`` calls
    ``fs.get_path("a", "b")``.
    """

    def get_path(self, first: str, *more: str) -> PurePath: ...


class FileVisitor(Protocol):
    """Protocol for tree walk visitors.

    Each method returns a FileVisitResult that steers the traversal.
    """

    def pre_visit_directory(self, dir: PurePath, attrs: Attributes) -> FileVisitResult:
        """Invoked for a directory before its entries are visited."""
        ...

    def post_visit_directory(
        self, dir: PurePath, exc: Optional[OSError]
    ) -> FileVisitResult:
        """Invoked for a directory after its entries have been visited.

        Args:
            dir: The directory
            exc: None if iteration completed, otherwise the error that
                stopped it early
        """
        ...

    def visit_file(self, file: PurePath, attrs: Attributes) -> FileVisitResult:
        """Invoked for a non-directory entry (or a directory at max depth)."""
        ...

    def visit_file_failed(self, file: PurePath, exc: OSError) -> FileVisitResult:
        """Invoked when an entry's attributes could not be read or a
        directory could not be opened."""
        ...


@dataclasses.dataclass(frozen=True)
class WriteOptions:
    encoding: str = DEFAULT_ENCODING
    flags: tuple[OpenOption, ...] = ()

    @classmethod
    def from_args(
        cls, options: Iterable[Any], encoding: Optional[str] = None
    ) -> WriteOptions:
        """Resolve a positional option list into explicit settings.

        A leading value that is not an OpenOption is taken as the character
        encoding; the rest are open options. An explicit ``encoding`` keyword
        cannot be combined with a leading encoding.
        """
        options = list(options)
        if options and not isinstance(options[0], OpenOption):
            if encoding is not None:
                raise TypeError("encoding given both positionally and by keyword")
            encoding = options.pop(0)
        if encoding is None:
            encoding = DEFAULT_ENCODING
        elif isinstance(encoding, codecs.CodecInfo):
            encoding = encoding.name
        else:
            # Fails with LookupError for unknown encodings
            encoding = codecs.lookup(encoding).name
        return cls(encoding=encoding, flags=tuple(OpenOption(o) for o in options))


@dataclasses.dataclass(frozen=True)
class WalkOptions:
    options: frozenset[FileVisitOption] = frozenset()
    max_depth: int = UNBOUNDED_DEPTH

    @property
    def follow_links(self) -> bool:
        return FileVisitOption.FOLLOW_LINKS in self.options

    @classmethod
    def from_args(
        cls, options: Iterable[Any] = (), max_depth: Optional[int] = None
    ) -> WalkOptions:
        if max_depth is None:
            max_depth = UNBOUNDED_DEPTH
        elif max_depth < 0:
            raise ValueError(f"max_depth must not be negative: {max_depth}")
        return cls(
            options=frozenset(FileVisitOption(o) for o in options),
            max_depth=max_depth,
        )
