"""File visitors and tree walking for pathwrap."""

from pathlib import PurePath
from typing import Any, Callable, Iterable, Optional

from .common import Attributes, FileVisitOption, FileVisitResult, FileVisitor, WalkOptions
from .paths import path
from .walker import FileTreeWalker

# Callbacks for file_visitor receive the path plus attributes or an error
AttrsCallback = Callable[[PurePath, Attributes], FileVisitResult]
ErrorCallback = Callable[[PurePath, Optional[OSError]], FileVisitResult]
# Callbacks for naive_visitor receive only the path and may return None
PathCallback = Callable[[PurePath], Optional[FileVisitResult]]


class SimpleFileVisitor:
    """FileVisitor with default behavior for every method.

    Directories and files are visited with CONTINUE; errors reported to
    post_visit_directory or visit_file_failed are raised.
    """

    def pre_visit_directory(self, dir: PurePath, attrs: Attributes) -> FileVisitResult:
        return FileVisitResult.CONTINUE

    def post_visit_directory(
        self, dir: PurePath, exc: Optional[OSError]
    ) -> FileVisitResult:
        if exc is not None:
            raise exc
        return FileVisitResult.CONTINUE

    def visit_file(self, file: PurePath, attrs: Attributes) -> FileVisitResult:
        return FileVisitResult.CONTINUE

    def visit_file_failed(self, file: PurePath, exc: OSError) -> FileVisitResult:
        raise exc


class CallbackFileVisitor(SimpleFileVisitor):
    """SimpleFileVisitor whose methods are overridden by the callbacks given."""

    def __init__(
        self,
        pre_visit_directory: Optional[AttrsCallback] = None,
        post_visit_directory: Optional[ErrorCallback] = None,
        visit_file: Optional[AttrsCallback] = None,
        visit_file_failed: Optional[ErrorCallback] = None,
    ) -> None:
        self._pre_visit_directory = pre_visit_directory
        self._post_visit_directory = post_visit_directory
        self._visit_file = visit_file
        self._visit_file_failed = visit_file_failed

    def pre_visit_directory(self, dir: PurePath, attrs: Attributes) -> FileVisitResult:
        if self._pre_visit_directory is None:
            return super().pre_visit_directory(dir, attrs)
        return self._pre_visit_directory(dir, attrs)

    def post_visit_directory(
        self, dir: PurePath, exc: Optional[OSError]
    ) -> FileVisitResult:
        if self._post_visit_directory is None:
            return super().post_visit_directory(dir, exc)
        return self._post_visit_directory(dir, exc)

    def visit_file(self, file: PurePath, attrs: Attributes) -> FileVisitResult:
        if self._visit_file is None:
            return super().visit_file(file, attrs)
        return self._visit_file(file, attrs)

    def visit_file_failed(self, file: PurePath, exc: OSError) -> FileVisitResult:
        if self._visit_file_failed is None:
            return super().visit_file_failed(file, exc)
        return self._visit_file_failed(file, exc)


class NaiveFileVisitor(SimpleFileVisitor):
    """SimpleFileVisitor that calls its callbacks with the path only.

    Attributes are dropped, errors are always raised, and a callback that
    returns None continues the walk.
    """

    def __init__(
        self,
        pre_visit_directory: Optional[PathCallback] = None,
        post_visit_directory: Optional[PathCallback] = None,
        visit_file: Optional[PathCallback] = None,
    ) -> None:
        self._pre_visit_directory = pre_visit_directory
        self._post_visit_directory = post_visit_directory
        self._visit_file = visit_file

    @staticmethod
    def _call(callback: Optional[PathCallback], p: PurePath) -> FileVisitResult:
        if callback is None:
            return FileVisitResult.CONTINUE
        result = callback(p)
        return FileVisitResult.CONTINUE if result is None else result

    def pre_visit_directory(self, dir: PurePath, attrs: Attributes) -> FileVisitResult:
        return self._call(self._pre_visit_directory, dir)

    def post_visit_directory(
        self, dir: PurePath, exc: Optional[OSError]
    ) -> FileVisitResult:
        if exc is not None:
            raise exc
        return self._call(self._post_visit_directory, dir)

    def visit_file(self, file: PurePath, attrs: Attributes) -> FileVisitResult:
        return self._call(self._visit_file, file)


def file_visitor(
    pre_visit_directory: Optional[AttrsCallback] = None,
    post_visit_directory: Optional[ErrorCallback] = None,
    visit_file: Optional[AttrsCallback] = None,
    visit_file_failed: Optional[ErrorCallback] = None,
) -> FileVisitor:
    """
    Return a visitor that acts as a SimpleFileVisitor with the given callbacks
    overriding its methods.

    Args:
        pre_visit_directory: Called with (dir, attrs) before entering a directory
        post_visit_directory: Called with (dir, exc) after leaving a directory;
            exc is None unless iterating the directory failed
        visit_file: Called with (file, attrs) for each non-directory entry
        visit_file_failed: Called with (file, exc) when an entry cannot be read;
            if omitted the error is raised

    Returns:
        A FileVisitor for walk_file_tree
    """
    return CallbackFileVisitor(
        pre_visit_directory=pre_visit_directory,
        post_visit_directory=post_visit_directory,
        visit_file=visit_file,
        visit_file_failed=visit_file_failed,
    )


def naive_visitor(
    pre_visit_directory: Optional[PathCallback] = None,
    post_visit_directory: Optional[PathCallback] = None,
    visit_file: Optional[PathCallback] = None,
) -> FileVisitor:
    """
    Return a visitor whose callbacks are called with only the path.

    Each callback may return a FileVisitResult or None; None continues the
    walk. Attributes are ignored and any error encountered is raised, so
    visit_file_failed cannot be overridden.

    Example:
        >>> files = []
        >>> walk_file_tree("/srv/data", naive_visitor(visit_file=files.append))
    """
    return NaiveFileVisitor(
        pre_visit_directory=pre_visit_directory,
        post_visit_directory=post_visit_directory,
        visit_file=visit_file,
    )


def walk_file_tree(
    start: Any,
    visitor: FileVisitor,
    options: Iterable[FileVisitOption] = (),
    max_depth: Optional[int] = None,
) -> PurePath:
    """
    Walk the file tree rooted at start with visitor.

    Args:
        start: Root of the walk, coerced with path
        visitor: A FileVisitor, e.g. from file_visitor or naive_visitor
        options: FileVisitOption flags such as FOLLOW_LINKS
        max_depth: Maximum number of directory levels to enter (default: unbounded)

    Returns:
        The starting path

    Raises:
        OSError: Whatever the visitor raises, including errors it re-raises
    """
    walker = FileTreeWalker(visitor, WalkOptions.from_args(options, max_depth))
    return walker.walk(path(start))
