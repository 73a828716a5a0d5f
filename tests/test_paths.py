"""
Tests for path coercion and path functions in pathwrap.paths.
"""

import os
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from urllib.parse import urlparse, urlsplit

import pytest

from pathwrap.common import LinkOption
from pathwrap.exceptions import InvalidUriError, UnsupportedArgumentTypeError
from pathwrap.paths import (
    absolute_path,
    compare_to,
    ends_with,
    file_name,
    is_absolute,
    nary_path,
    normalize,
    parent,
    path,
    real_path,
    relativize,
    resolve_path,
    resolve_sibling,
    root,
    starts_with,
    unary_path,
)


class Ticket:
    """A third-party type that is taught to become a path by registration."""

    def __init__(self, number: int) -> None:
        self.number = number


unary_path.register(Ticket, lambda t: Path("/tickets") / str(t.number))


class TestPathCoercion:
    """Tests for the single argument form of path."""

    def test_path_passes_through_unchanged(self):
        p = Path("/tmp/x")
        assert path(p) is p

    def test_pure_path_passes_through_unchanged(self):
        p = PureWindowsPath("C:/Users")
        assert path(p) is p

    def test_string(self):
        assert path("a/b") == Path("a/b")

    def test_bytes(self):
        assert path(b"/tmp/x") == Path("/tmp/x")

    def test_path_like(self):
        class Handle:
            def __fspath__(self):
                return "/srv/data"

        assert path(Handle()) == Path("/srv/data")

    def test_dir_entry(self, tmp_path):
        (tmp_path / "entry").touch()
        with os.scandir(tmp_path) as entries:
            entry = next(entries)
            assert path(entry) == tmp_path / "entry"

    def test_supports_path_protocol(self):
        class Checkout:
            def to_path(self):
                return PurePosixPath("/srv/checkout")

        assert path(Checkout()) == PurePosixPath("/srv/checkout")

    def test_registered_type(self):
        assert path(Ticket(7)) == Path("/tickets/7")

    @pytest.mark.parametrize("value", [42, None, 1.5, ["a", "b"]])
    def test_unsupported_type(self, value):
        with pytest.raises(UnsupportedArgumentTypeError):
            path(value)

    def test_unsupported_type_is_type_error(self):
        with pytest.raises(TypeError):
            path(object())


class TestUriCoercion:
    """Tests for coercing file URIs."""

    def test_file_uri(self):
        assert path(urlsplit("file:///tmp/a")) == Path("/tmp/a")

    def test_file_uri_from_urlparse(self):
        assert path(urlparse("file:///tmp/a")) == Path("/tmp/a")

    def test_file_uri_is_unquoted(self):
        assert path(urlsplit("file:///tmp/a%20b")) == Path("/tmp/a b")

    def test_localhost_authority(self):
        assert path(urlsplit("file://localhost/tmp/a")) == Path("/tmp/a")

    def test_round_trip_with_as_uri(self, tmp_path):
        assert path(urlsplit(tmp_path.as_uri())) == tmp_path

    @pytest.mark.parametrize(
        "uri",
        [
            "https://example.com/a",
            "file://server/share/a",
            "file:///tmp/a?x=1",
            "file:///tmp/a#frag",
            "file:",
        ],
    )
    def test_invalid_uri(self, uri):
        with pytest.raises(InvalidUriError):
            path(urlsplit(uri))

    def test_uri_string_is_parsed_as_a_path(self):
        # Strings are never sniffed for a scheme
        assert path("file:///tmp/a") == Path("file:/tmp/a")


class TestVariadicCoercion:
    """Tests for path with trailing segments."""

    def test_string_segments(self):
        assert path("/tmp", "a", "b") == Path("/tmp/a/b")

    def test_path_class_as_filesystem(self):
        result = path(PureWindowsPath, "C:\\", "Users", "me")
        assert isinstance(result, PureWindowsPath)
        assert result == PureWindowsPath("C:/Users/me")

    def test_filesystem_protocol(self):
        class MountedFs:
            def get_path(self, first, *more):
                return PurePosixPath("/mnt", first, *more)

        assert path(MountedFs(), "a", "b") == PurePosixPath("/mnt/a/b")

    def test_path_followed_by_segments_is_rejected(self):
        with pytest.raises(UnsupportedArgumentTypeError, match="resolve_path"):
            path(Path("/tmp"), "a")

    def test_non_string_segment_is_rejected(self):
        with pytest.raises(UnsupportedArgumentTypeError):
            path("/tmp", Path("a"))

    def test_non_path_class_is_rejected(self):
        with pytest.raises(UnsupportedArgumentTypeError):
            path(dict, "a")

    def test_unsupported_first_argument(self):
        with pytest.raises(UnsupportedArgumentTypeError):
            path(42, "a")

    def test_path_class_needs_a_segment(self):
        with pytest.raises(UnsupportedArgumentTypeError):
            nary_path(PureWindowsPath, ())

    def test_registered_nary_type(self):
        class Bucket:
            pass

        nary_path.register(Bucket, lambda b, more: PurePosixPath("/bucket", *more))
        assert path(Bucket(), "x", "y") == PurePosixPath("/bucket/x/y")


class TestCoercionIdempotence:
    @pytest.mark.parametrize(
        "value",
        ["a/b", "/tmp/x", b"/tmp/y", urlsplit("file:///tmp/z"), Path("/srv")],
    )
    def test_path_of_path_is_same(self, value):
        once = path(value)
        assert path(once) is once
        assert path(once) == path(value)


class TestPathFunctions:
    """Tests for the path accessor and transform functions."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [("a", "b", -1), ("b", "a", 1), ("a", "a", 0), ("/a/b", "/a", 1)],
    )
    def test_compare_to(self, a, b, expected):
        assert compare_to(a, b) == expected

    def test_compare_to_mixed_flavours(self):
        with pytest.raises(UnsupportedArgumentTypeError) as exc_info:
            compare_to(PurePosixPath("a"), PureWindowsPath("a"))
        assert "PurePosixPath" in str(exc_info.value)
        assert "PureWindowsPath" in str(exc_info.value)

    @pytest.mark.parametrize(
        "p,other,expected",
        [
            ("/a/b", "/a", True),
            ("/a/b", "a", False),
            ("/ab", "/a", False),
            ("a/b", "a", True),
            ("a", "a/b", False),
            ("a", ".", False),
        ],
    )
    def test_starts_with(self, p, other, expected):
        assert starts_with(p, other) is expected

    @pytest.mark.parametrize(
        "p,other,expected",
        [
            ("/a/b", "b", True),
            ("/a/b", "a/b", True),
            ("/a/b", "/a/b", True),
            ("/a/b", "/b", False),
            ("/a/bc", "c", False),
            ("b", "a/b", False),
            ("a", ".", False),
        ],
    )
    def test_ends_with(self, p, other, expected):
        assert ends_with(p, other) is expected

    def test_file_name(self):
        assert file_name("/a/b.txt") == Path("b.txt")
        assert file_name("b.txt") == Path("b.txt")
        assert file_name("/") is None

    def test_file_name_of_empty_path(self):
        assert file_name("") == Path("")
        assert file_name(PureWindowsPath("")) == PureWindowsPath("")

    def test_parent(self):
        assert parent("/a/b") == Path("/a")
        assert parent("/a") == Path("/")
        assert parent("a/b") == Path("a")
        assert parent("a") is None
        assert parent("/") is None

    def test_root(self):
        assert root("/a/b") == Path("/")
        assert root("a/b") is None
        assert root(PureWindowsPath("C:/x")) == PureWindowsPath("C:\\")

    def test_is_absolute(self):
        assert is_absolute("/a")
        assert not is_absolute("a")
        assert is_absolute(urlsplit("file:///a"))

    @pytest.mark.parametrize(
        "p,expected",
        [
            ("a/./b/../c", "a/c"),
            ("../a", "../a"),
            ("/a/../..", "/"),
            ("a/..", "."),
        ],
    )
    def test_normalize(self, p, expected):
        assert normalize(p) == Path(expected)

    def test_normalize_keeps_flavour(self):
        result = normalize(PureWindowsPath("C:/a/../b"))
        assert isinstance(result, PureWindowsPath)
        assert result == PureWindowsPath("C:/b")

    def test_relativize(self):
        assert relativize("/a/b", "/a/b/c/d") == Path("c/d")
        assert relativize("/a/b", "/a/x") == Path("../x")
        assert relativize("a", "b") == Path("../b")
        assert relativize("/a/b", "/a/b") == Path("")

    def test_relativize_mixed_paths(self):
        with pytest.raises(ValueError):
            relativize("/a", "b")

    def test_relativize_different_drives(self):
        with pytest.raises(ValueError):
            relativize(PureWindowsPath("C:/a"), PureWindowsPath("D:/a"))

    def test_relativize_windows_ignores_case(self):
        result = relativize(
            PureWindowsPath("C:/Users/A"), PureWindowsPath("c:/users/a/x")
        )
        assert result == PureWindowsPath("x")

    def test_relativize_base_with_parent_reference(self):
        with pytest.raises(ValueError):
            relativize(PurePosixPath("../a"), PurePosixPath("b"))

    def test_relativize_mixed_flavours(self):
        with pytest.raises(UnsupportedArgumentTypeError, match="PureWindowsPath"):
            relativize(PurePosixPath("a"), PureWindowsPath("b"))

    @pytest.mark.parametrize(
        "p,other,expected",
        [
            ("a", "../b", "../../b"),
            ("a/b", "a/../c", "../../c"),
            ("x/y", "x/y/../z", "../z"),
            ("..", "../b", "b"),
        ],
    )
    def test_relativize_ignores_working_directory(
        self, p, other, expected, tmp_path, monkeypatch
    ):
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        for cwd in ("/", nested):
            monkeypatch.chdir(cwd)
            assert relativize(PurePosixPath(p), PurePosixPath(other)) == (
                PurePosixPath(expected)
            )

    def test_resolve_path(self):
        assert resolve_path("/a", "b") == Path("/a/b")
        assert resolve_path("/a", "/b") == Path("/b")
        assert resolve_path("/a", "") == Path("/a")

    def test_resolve_path_accepts_path_segments(self):
        # Unlike path, resolve_path takes a path as the base
        assert resolve_path(Path("/a"), Path("b/c")) == Path("/a/b/c")

    def test_resolve_sibling(self):
        assert resolve_sibling("/a/b", "c") == Path("/a/c")
        assert resolve_sibling("b", "c") == Path("c")

    def test_two_path_functions_coerce_both_operands(self):
        assert starts_with(urlsplit("file:///a/b"), b"/a")

    @pytest.mark.parametrize("p", ["/", "/a/b", "a", "a/b/c", ".", ""])
    def test_path_starts_and_ends_with_itself(self, p):
        assert starts_with(p, p)
        assert ends_with(p, p)

    @pytest.mark.parametrize("p", ["/a/b", "a", "."])
    @pytest.mark.parametrize("other", ["c", "c/d"])
    def test_relativize_undoes_resolve(self, p, other):
        assert relativize(p, resolve_path(p, other)) == Path(other)


class TestAbsoluteAndRealPath:
    """Tests for absolute_path and real_path."""

    def test_absolute_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = absolute_path("x")
        assert result.is_absolute()
        assert result == Path.cwd() / "x"

    def test_absolute_path_variadic(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert absolute_path("a", "b") == Path.cwd() / "a" / "b"

    def test_absolute_path_does_not_touch_filesystem(self):
        assert is_absolute(absolute_path("does/not/exist"))

    def test_absolute_path_keeps_absolute_pure_path(self):
        p = PureWindowsPath("C:/x")
        assert absolute_path(p) is p

    def test_absolute_path_of_relative_pure_path(self):
        with pytest.raises(UnsupportedArgumentTypeError):
            absolute_path(PureWindowsPath("x"))

    def test_real_path_follows_links(self, tmp_path):
        target = tmp_path / "target"
        target.touch()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert real_path(link) == target.resolve()

    def test_real_path_without_following_links(self, tmp_path):
        target = tmp_path / "target"
        target.touch()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert real_path(str(link), LinkOption.NOFOLLOW_LINKS) == link

    def test_real_path_nofollow_normalizes(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").touch()
        assert real_path(tmp_path / "a" / ".." / "b", LinkOption.NOFOLLOW_LINKS) == (
            tmp_path / "b"
        )

    def test_real_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            real_path(tmp_path / "missing")

    def test_real_path_missing_without_following(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            real_path(tmp_path / "missing", LinkOption.NOFOLLOW_LINKS)

    def test_real_path_dangling_link(self, tmp_path):
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "gone")
        with pytest.raises(FileNotFoundError):
            real_path(link)
        assert real_path(link, LinkOption.NOFOLLOW_LINKS) == link

    def test_real_path_returns_concrete_path(self, tmp_path):
        assert isinstance(real_path(tmp_path), PurePath)
