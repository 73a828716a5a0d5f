"""File operations for pathwrap: copy, write and delete."""

import errno
import io
import logging
import os
import shutil
import stat
from collections.abc import Iterable
from functools import singledispatch
from pathlib import PurePath
from typing import Any, Optional

from .common import (
    DEFAULT_WRITE_OPTIONS,
    Attributes,
    CopyOption,
    OpenOption,
    WriteOptions,
)
from .exceptions import DirectoryNotEmptyError, UnsupportedArgumentTypeError
from .paths import path

logger = logging.getLogger(__name__)

_OPEN_FLAGS: dict[OpenOption, int] = {
    OpenOption.WRITE: os.O_WRONLY,
    OpenOption.APPEND: os.O_APPEND,
    OpenOption.TRUNCATE_EXISTING: os.O_TRUNC,
    OpenOption.CREATE: os.O_CREAT,
    OpenOption.CREATE_NEW: os.O_CREAT | os.O_EXCL,
    OpenOption.SYNC: getattr(os, "O_SYNC", 0),
    OpenOption.DSYNC: getattr(os, "O_DSYNC", getattr(os, "O_SYNC", 0)),
}


def _copy_options(options: Iterable[Any]) -> frozenset[CopyOption]:
    return frozenset(CopyOption(o) for o in options)


def _open_flags(options: tuple[OpenOption, ...]) -> int:
    """Translate open options into os.open flags for writing."""
    if not options:
        options = DEFAULT_WRITE_OPTIONS
    if OpenOption.READ in options:
        raise ValueError("READ is not allowed when writing")
    if OpenOption.APPEND in options and OpenOption.TRUNCATE_EXISTING in options:
        raise ValueError("APPEND and TRUNCATE_EXISTING cannot be combined")
    # Writing always implies WRITE
    flags = os.O_WRONLY | getattr(os, "O_BINARY", 0)
    for option in options:
        flags |= _OPEN_FLAGS[option]
    return flags


def _opener(flags: int):
    def opener(file: str, _: int) -> int:
        return os.open(file, flags, 0o666)

    return opener


#
# Copy
#
# Copying dispatches on the source first and then on the target, so each
# pair of types only needs one implementation.
#


def copy(source: Any, target: Any, *copy_options: CopyOption) -> int | PurePath:
    """
    Copy all bytes from a file to a file, a file to an output stream, or an
    input stream to a file.

    The return type depends on the form of copy. Copying to or from a stream
    returns the number of bytes copied. Copying a file to a file returns the
    target path. Sources and targets that are not streams are coerced with
    path.

    Args:
        source: Binary input stream or anything path accepts
        target: Binary output stream or anything path accepts
        copy_options: CopyOption flags; ignored when the target is a stream

    Returns:
        Bytes copied, or the target path when copying file to file

    Raises:
        FileExistsError: If the target exists and REPLACE_EXISTING is not given
        DirectoryNotEmptyError: If a directory target must be replaced but has entries
        UnsupportedArgumentTypeError: If source or target cannot be coerced

    Extensible by registering types with _copy, _copy_from_stream and
    _copy_from_path.
    """
    return _copy(source, target, tuple(copy_options))


@singledispatch
def _copy(source: Any, target: Any, options: tuple) -> int | PurePath:
    return _copy(path(source), target, options)


@_copy.register
def _(source: io.IOBase, target: Any, options: tuple) -> int | PurePath:
    return _copy_from_stream(target, source, options)


@_copy.register
def _(source: PurePath, target: Any, options: tuple) -> int | PurePath:
    return _copy_from_path(target, source, options)


@singledispatch
def _copy_from_stream(target: Any, source: io.IOBase, options: tuple) -> int:
    return _copy_from_stream(path(target), source, options)


@_copy_from_stream.register
def _(target: io.IOBase, source: io.IOBase, options: tuple) -> int:
    raise UnsupportedArgumentTypeError("Cannot copy from a stream to a stream")


@_copy_from_stream.register
def _(target: PurePath, source: io.IOBase, options: tuple) -> int:
    options = _copy_options(options)
    unsupported = options - {CopyOption.REPLACE_EXISTING}
    if unsupported:
        raise ValueError(
            f"Unsupported options for copying from a stream: {sorted(unsupported)}"
        )
    if CopyOption.REPLACE_EXISTING in options:
        delete_if_exists(target)
    with open(target, "xb") as out:
        shutil.copyfileobj(source, out)
        count = out.tell()
    logger.debug(f"Copied {count} bytes from stream to {target}")
    return count


@singledispatch
def _copy_from_path(target: Any, source: PurePath, options: tuple) -> int | PurePath:
    return _copy_from_path(path(target), source, options)


@_copy_from_path.register
def _(target: io.IOBase, source: PurePath, options: tuple) -> int:
    with open(source, "rb") as f:
        shutil.copyfileobj(f, target)
        count = f.tell()
    logger.debug(f"Copied {count} bytes from {source} to stream")
    return count


def _is_same_file(source_stat: Attributes, target: PurePath, follow: bool) -> bool:
    try:
        target_stat = os.stat(target) if follow else os.lstat(target)
    except FileNotFoundError:
        # Dangling link
        return False
    return os.path.samestat(source_stat, target_stat)


@_copy_from_path.register
def _(target: PurePath, source: PurePath, options: tuple) -> PurePath:
    options = _copy_options(options)
    follow = CopyOption.NOFOLLOW_LINKS not in options
    copy_attributes = CopyOption.COPY_ATTRIBUTES in options

    source_stat = os.stat(source) if follow else os.lstat(source)
    if os.path.lexists(target):
        if _is_same_file(source_stat, target, follow):
            return target
        if CopyOption.REPLACE_EXISTING not in options:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(target))
        delete(target)

    if stat.S_ISDIR(source_stat.st_mode):
        # Only the directory itself is copied, not its entries
        os.mkdir(target)
        if copy_attributes:
            shutil.copystat(source, target, follow_symlinks=follow)
    elif copy_attributes:
        shutil.copy2(source, target, follow_symlinks=follow)
    else:
        shutil.copyfile(source, target, follow_symlinks=follow)
    logger.debug(f"Copied {source} to {target}")
    return target


#
# Write
#


def write(
    content: Any, p: Any, *options: Any, encoding: Optional[str] = None
) -> PurePath:
    """
    Write bytes or lines of text to the file at p.

    Byte content (bytes, bytearray, memoryview) is written as is. Any other
    iterable is written as lines, each followed by os.linesep. For lines, a
    leading option that is not an OpenOption is taken as the encoding; it can
    also be given with the encoding keyword. The default encoding is UTF-8.

    Args:
        content: Bytes or an iterable of strings
        p: Anything path accepts
        options: Optional encoding followed by OpenOption flags; without
            flags the file is created or truncated

    Returns:
        The path written to

    Raises:
        UnsupportedArgumentTypeError: If content is a str or not iterable
        LookupError: If the encoding is unknown
        OSError: If the file cannot be written
    """
    return _write(content, path(p), options, encoding)


@singledispatch
def _write(content: Any, p: PurePath, options: tuple, encoding: Optional[str]) -> PurePath:
    if not isinstance(content, Iterable):
        raise UnsupportedArgumentTypeError(
            f"Cannot write {type(content).__name__}; expected bytes or lines"
        )
    write_options = WriteOptions.from_args(options, encoding)
    flags = _open_flags(write_options.flags)
    with open(
        p,
        "w",
        encoding=write_options.encoding,
        newline="",
        opener=_opener(flags),
    ) as f:
        for line in content:
            f.write(line)
            f.write(os.linesep)
    logger.debug(f"Wrote lines to {p} ({write_options.encoding})")
    return p


@_write.register(bytes)
@_write.register(bytearray)
@_write.register(memoryview)
def _(content: Any, p: PurePath, options: tuple, encoding: Optional[str]) -> PurePath:
    if encoding is not None:
        raise TypeError("An encoding cannot be used when writing bytes")
    flags = _open_flags(tuple(OpenOption(o) for o in options))
    with open(p, "wb", opener=_opener(flags)) as f:
        f.write(content)
    logger.debug(f"Wrote {len(content)} bytes to {p}")
    return p


@_write.register
def _(content: str, p: PurePath, options: tuple, encoding: Optional[str]) -> PurePath:
    raise UnsupportedArgumentTypeError(
        "Cannot write a str as lines; wrap it in a list to write a single line"
    )


#
# Delete
#


def delete(p: Any) -> None:
    """
    Delete the file, symbolic link or empty directory at p.

    Raises:
        FileNotFoundError: If nothing exists at p
        DirectoryNotEmptyError: If p is a directory with entries
        OSError: If the entry cannot be removed
    """
    p = path(p)
    if stat.S_ISDIR(os.lstat(p).st_mode):
        try:
            os.rmdir(p)
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise DirectoryNotEmptyError(str(p)) from e
            raise
    else:
        os.unlink(p)
    logger.debug(f"Deleted {p}")


def delete_if_exists(p: Any) -> bool:
    """Delete the entry at p if it exists. Return True if it was deleted."""
    try:
        delete(p)
    except FileNotFoundError:
        return False
    return True
