"""Directory tree traversal engine for pathwrap."""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterator, Optional

from .common import Attributes, FileVisitResult, FileVisitor, WalkOptions
from .exceptions import FileSystemLoopError

logger = logging.getLogger(__name__)

# (st_dev, st_ino) of the directories between the start and the current entry
Ancestors = frozenset[tuple[int, int]]


@dataclass
class _Directory:
    """A directory being walked: its remaining entry names and read error."""

    path: PurePath
    names: Iterator[str]
    error: Optional[OSError]
    depth: int
    ancestors: Ancestors


class FileTreeWalker:
    """Walks a file tree depth first, reporting each entry to a FileVisitor.

    Sibling order is whatever os.scandir yields. Directories at max_depth are
    reported through visit_file instead of being entered.

    Directories being walked are kept on an explicit stack rather than the
    call stack, and each one is read and closed before its entries are
    visited, so neither the recursion limit nor the open file limit bounds
    the depth of the tree.
    """

    def __init__(self, visitor: FileVisitor, walk_options: WalkOptions) -> None:
        self.visitor = visitor
        self.walk_options = walk_options

    def walk(self, start: PurePath) -> PurePath:
        """Walk the tree rooted at start and return start."""
        logger.debug(
            f"Walking {start} (max_depth={self.walk_options.max_depth}, "
            f"follow_links={self.walk_options.follow_links})"
        )
        stack: list[_Directory] = []
        result = self._visit(start, 0, frozenset(), stack)
        while stack and result != FileVisitResult.TERMINATE:
            top = stack[-1]
            if result != FileVisitResult.SKIP_SIBLINGS:
                name = next(top.names, None)
                if name is not None:
                    result = self._visit(
                        top.path / name, top.depth + 1, top.ancestors, stack
                    )
                    continue
                error = top.error
            else:
                error = None
            stack.pop()
            result = self._checked(self.visitor.post_visit_directory(top.path, error))

        if result == FileVisitResult.TERMINATE:
            logger.debug(f"Walk of {start} terminated by visitor")
        return start

    def _read_attributes(self, p: PurePath) -> Attributes:
        if not self.walk_options.follow_links:
            return os.lstat(p)
        try:
            return os.stat(p)
        except OSError as exc:
            # Broken link: report the link itself, or the stat error
            try:
                return os.lstat(p)
            except OSError:
                raise exc

    @staticmethod
    def _read_names(
        entries: Iterator[os.DirEntry],
    ) -> tuple[list[str], Optional[OSError]]:
        names = []
        try:
            for entry in entries:
                names.append(entry.name)
        except OSError as exc:
            return names, exc
        return names, None

    def _visit(
        self,
        p: PurePath,
        depth: int,
        ancestors: Ancestors,
        stack: list[_Directory],
    ) -> FileVisitResult:
        """Report p to the visitor, pushing it onto stack if it is entered."""
        try:
            attrs = self._read_attributes(p)
        except OSError as exc:
            logger.debug(f"Cannot read attributes of {p}: {exc}")
            return self._checked(self.visitor.visit_file_failed(p, exc))

        if not stat.S_ISDIR(attrs.st_mode) or depth >= self.walk_options.max_depth:
            return self._checked(self.visitor.visit_file(p, attrs))

        if self.walk_options.follow_links:
            key = (attrs.st_dev, attrs.st_ino)
            if key in ancestors:
                logger.debug(f"Directory cycle detected at {p}")
                return self._checked(
                    self.visitor.visit_file_failed(p, FileSystemLoopError(str(p)))
                )
            ancestors = ancestors | {key}

        try:
            entries = os.scandir(p)
        except OSError as exc:
            logger.debug(f"Cannot open directory {p}: {exc}")
            return self._checked(self.visitor.visit_file_failed(p, exc))

        with entries:
            result = self._checked(self.visitor.pre_visit_directory(p, attrs))
            if result != FileVisitResult.CONTINUE:
                if result == FileVisitResult.SKIP_SUBTREE:
                    logger.debug(f"Skipping subtree {p}")
                    return FileVisitResult.CONTINUE
                return result
            names, error = self._read_names(entries)

        if error is not None:
            logger.debug(f"Error reading directory {p}: {error}")
        stack.append(_Directory(p, iter(names), error, depth, ancestors))
        return result

    @staticmethod
    def _checked(result: object) -> FileVisitResult:
        if isinstance(result, FileVisitResult):
            return result
        try:
            return FileVisitResult(result)
        except ValueError:
            raise TypeError(
                f"Visitor returned {result!r}, expected a FileVisitResult"
            ) from None
