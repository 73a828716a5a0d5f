"""Path coercion and path functions for pathwrap.

Every function that accepts a path coerces its argument(s) through ``path``
first, so strings, URIs, ``os.PathLike`` objects and anything registered with
``unary_path`` can be used wherever a path is expected.
"""

import ntpath
import os
import posixpath
from functools import singledispatch
from pathlib import Path, PurePath, PureWindowsPath
from typing import Any, Optional
from urllib.parse import ParseResult, SplitResult
from urllib.request import url2pathname

from .common import FileSystem, LinkOption, Segments, SupportsPath
from .exceptions import InvalidUriError, UnsupportedArgumentTypeError

#
# Path creation and coercion
#


@singledispatch
def unary_path(this: Any) -> PurePath:
    """Coerce a single value to a path.

    Extend with ``unary_path.register(SomeType)``.
    """
    if isinstance(this, SupportsPath):
        return this.to_path()
    raise UnsupportedArgumentTypeError(
        f"Cannot coerce {type(this).__name__} to a path"
    )


@unary_path.register
def _(this: PurePath) -> PurePath:
    return this


@unary_path.register
def _(this: str) -> PurePath:
    return Path(this)


@unary_path.register
def _(this: bytes) -> PurePath:
    return Path(os.fsdecode(this))


@unary_path.register
def _(this: os.PathLike) -> PurePath:
    return Path(os.fspath(this))


def _uri_to_path(uri: SplitResult | ParseResult) -> PurePath:
    if uri.scheme.lower() != "file":
        raise InvalidUriError(f"URI scheme is not \"file\": {uri.geturl()}")
    if uri.netloc not in ("", "localhost"):
        raise InvalidUriError(f"URI has an authority component: {uri.geturl()}")
    if uri.query or uri.fragment:
        raise InvalidUriError(
            f"URI has a query or fragment component: {uri.geturl()}"
        )
    if not uri.path:
        raise InvalidUriError(f"URI path component is empty: {uri.geturl()}")
    return Path(url2pathname(uri.path))


unary_path.register(SplitResult, _uri_to_path)
unary_path.register(ParseResult, _uri_to_path)


@singledispatch
def nary_path(this: Any, more: Segments) -> PurePath:
    """Coerce a first value plus trailing string segments to a path.

    Extend with ``nary_path.register(SomeType)``.
    """
    if isinstance(this, FileSystem):
        return this.get_path(*more)
    raise UnsupportedArgumentTypeError(
        f"Cannot build a path from {type(this).__name__} and segments"
    )


@nary_path.register
def _(this: PurePath, more: Segments) -> PurePath:
    raise UnsupportedArgumentTypeError(
        f"A path cannot be followed by segments ({this!s}); use resolve_path instead"
    )


@nary_path.register
def _(this: str, more: Segments) -> PurePath:
    return Path(this, *more)


@nary_path.register
def _(this: type, more: Segments) -> PurePath:
    # A path class stands in for the filesystem it parses paths for
    if not issubclass(this, PurePath):
        raise UnsupportedArgumentTypeError(
            f"Cannot build a path from class {this.__name__}"
        )
    if not more:
        raise UnsupportedArgumentTypeError(
            f"{this.__name__} needs at least one path segment"
        )
    return this(*more)


def path(this: Any, *more: str) -> PurePath:
    """
    Return a path from a path, URI, os.PathLike, filesystem and strings, or strings.

    Paths are not accepted in place of strings in the variadic form because
    the intent is ambiguous; use resolve_path for that.

    Args:
        this: A PurePath, urllib.parse SplitResult/ParseResult with a file
            scheme, os.PathLike, bytes, str, PurePath subclass or FileSystem
        more: Further path segments (variadic form only)

    Returns:
        The coerced path; an existing PurePath is returned unchanged

    Raises:
        UnsupportedArgumentTypeError: If no coercion is registered for the
            argument type(s)
        InvalidUriError: If a URI does not denote a local file

    Example:
        >>> path("/tmp", "a", "b")
        PosixPath('/tmp/a/b')
        >>> path(urlsplit("file:///tmp/a"))
        PosixPath('/tmp/a')
    """
    if not more:
        return unary_path(this)
    for segment in more:
        if not isinstance(segment, str):
            raise UnsupportedArgumentTypeError(
                f"Path segments must be strings, got {type(segment).__name__}"
            )
    return nary_path(this, more)


def absolute_path(this: Any, *more: str) -> PurePath:
    """Return an absolute path from the same arguments as path.

    The path is resolved against the current working directory without
    normalization or filesystem access.
    """
    p = path(this, *more)
    if isinstance(p, Path):
        return p.absolute()
    if p.is_absolute():
        return p
    raise UnsupportedArgumentTypeError(
        f"Cannot make the pure {type(p).__name__} {p!s} absolute"
    )


def real_path(p: Any, *link_options: LinkOption) -> Path:
    """Return the real path of an existing file.

    Symbolic links are resolved unless LinkOption.NOFOLLOW_LINKS is given, in
    which case the path is only made absolute and normalized.

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the path cannot be resolved
    """
    p = Path(path(p))
    options = {LinkOption(o) for o in link_options}
    if LinkOption.NOFOLLOW_LINKS in options:
        os.lstat(p)
        return Path(os.path.normpath(p.absolute()))
    return p.resolve(strict=True)


#
# Path functions, ordered alphabetically.
#
# No wrappers for __eq__, str() or as_uri() since Python covers those, and
# none for name counts or subpaths because a path's parts are a tuple.
#


def _flavour(p: PurePath):
    return ntpath if isinstance(p, PureWindowsPath) else posixpath


def _check_flavours(a: PurePath, b: PurePath, operation: str) -> None:
    if _flavour(a) is not _flavour(b):
        raise UnsupportedArgumentTypeError(
            f"Cannot {operation} a {type(a).__name__} and a {type(b).__name__}"
        )


def compare_to(p: Any, other: Any) -> int:
    """Return -1, 0 or 1 comparing the path to the other lexicographically.

    Raises:
        UnsupportedArgumentTypeError: If the paths are of different flavours
    """
    a, b = path(p), path(other)
    _check_flavours(a, b, "compare")
    return (a > b) - (a < b)


def _names(p: PurePath) -> tuple[str, ...]:
    return p.parts[1:] if p.anchor else p.parts


def ends_with(p: Any, other: Any) -> bool:
    """Return True if the path ends with the other, False otherwise.

    Paths are compared by name elements, not characters.
    """
    a, b = path(p), path(other)
    if b.anchor:
        return a == b
    if not b.parts:
        return not a.parts
    names = _names(a)
    n = len(b.parts)
    return n <= len(names) and type(a)(*names[-n:]) == b


def file_name(p: Any) -> Optional[PurePath]:
    """Return the name of the file or directory denoted by the path.

    The empty path is its own name; a bare root has none.
    """
    p = path(p)
    if not p.parts:
        return type(p)()
    return type(p)(p.name) if p.name else None


def parent(p: Any) -> Optional[PurePath]:
    """Return the parent of the path if it has one, None otherwise."""
    p = path(p)
    return p.parent if len(p.parts) > 1 else None


def root(p: Any) -> Optional[PurePath]:
    """Return the root of the path if it has one, None otherwise."""
    p = path(p)
    return type(p)(p.anchor) if p.anchor else None


def is_absolute(p: Any) -> bool:
    """Return True if the path is absolute, False otherwise."""
    return path(p).is_absolute()


def normalize(p: Any) -> PurePath:
    """Return the path with redundant name elements eliminated."""
    p = path(p)
    return type(p)(_flavour(p).normpath(str(p)))


def relativize(p: Any, other: Any) -> PurePath:
    """Return a relative path between the path and other.

    Works on name elements only; the filesystem and the current working
    directory are never consulted.

    Raises:
        ValueError: If the paths have different roots, or the part of the path
            not shared with other contains ".."
        UnsupportedArgumentTypeError: If the paths are of different flavours
    """
    a, b = path(p), path(other)
    _check_flavours(a, b, "relativize")
    normcase = _flavour(a).normcase
    if normcase(a.anchor) != normcase(b.anchor):
        raise ValueError(f"Cannot relativize {b!s} against {a!s}")

    base, names = _names(a), _names(b)
    common = 0
    for x, y in zip(base, names):
        if normcase(x) != normcase(y):
            break
        common += 1
    if ".." in base[common:]:
        raise ValueError(f"Cannot relativize {b!s} against {a!s}")
    return type(a)(*[".."] * (len(base) - common), *names[common:])


def resolve_path(p: Any, other: Any) -> PurePath:
    """Resolve the other against the path."""
    return path(p) / path(other)


def resolve_sibling(p: Any, other: Any) -> PurePath:
    """Resolve the other against the path's parent."""
    base = parent(p)
    return path(other) if base is None else base / path(other)


def starts_with(p: Any, other: Any) -> bool:
    """Return True if the path starts with the other, False otherwise.

    Paths are compared by name elements, not characters.
    """
    a, b = path(p), path(other)
    if not b.parts:
        return not a.parts
    n = len(b.parts)
    return n <= len(a.parts) and type(a)(*a.parts[:n]) == b
