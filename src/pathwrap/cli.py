"""CLI implementation for pathwrap."""

import argparse
import logging
import sys
from typing import Optional

from .__version__ import __version__
from .common import CopyOption, FileVisitOption, LinkOption
from .exceptions import PathWrapError
from .files import copy, delete
from .paths import real_path
from .visitors import naive_visitor, walk_file_tree

logger = logging.getLogger(__name__)

# Stands in for stdin/stdout in copy
STREAM_ARG = "-"


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Path coercion and file operations from the command line."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    realpath_parser = subparsers.add_parser(
        "realpath", help="Print the real path of an existing file"
    )
    realpath_parser.add_argument("path")
    realpath_parser.add_argument(
        "--no-follow",
        action="store_true",
        help="Do not resolve symbolic links",
    )

    copy_parser = subparsers.add_parser(
        "copy",
        help=f"Copy a file; use '{STREAM_ARG}' for stdin as source or stdout as target",
    )
    copy_parser.add_argument("source")
    copy_parser.add_argument("target")
    copy_parser.add_argument(
        "--replace", action="store_true", help="Replace an existing target"
    )
    copy_parser.add_argument(
        "--copy-attributes",
        action="store_true",
        help="Copy timestamps and permissions along with the contents",
    )
    copy_parser.add_argument(
        "--no-follow",
        action="store_true",
        help="Copy a symbolic link itself instead of its target",
    )

    rm_parser = subparsers.add_parser(
        "rm", help="Delete a file, symbolic link or empty directory"
    )
    rm_parser.add_argument("path")

    tree_parser = subparsers.add_parser(
        "tree", help="Print every file below a directory"
    )
    tree_parser.add_argument("root")
    tree_parser.add_argument(
        "--follow", action="store_true", help="Follow symbolic links"
    )
    tree_parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum number of directory levels to descend (default: unbounded)",
    )

    args = parser.parse_args(argv)

    if args.command == "copy" and STREAM_ARG == args.source == args.target:
        print("Error: source and target cannot both be streams")
        raise SystemExit(1)
    if args.command == "tree" and args.max_depth is not None and args.max_depth < 0:
        print("Error: --max-depth must not be negative")
        raise SystemExit(1)

    return args


def setup_logging(debug: bool) -> None:
    """Set up logging based on debug flag."""
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
    )

    # basicConfig is a no-op once handlers exist (e.g. under pytest)
    logging.getLogger().setLevel(log_level)

    if debug:
        logger.debug("Debug logging enabled")


def _handle_realpath(args: argparse.Namespace) -> None:
    options = [LinkOption.NOFOLLOW_LINKS] if args.no_follow else []
    print(real_path(args.path, *options))


def _handle_copy(args: argparse.Namespace) -> None:
    options = []
    if args.replace:
        options.append(CopyOption.REPLACE_EXISTING)
    if args.copy_attributes:
        options.append(CopyOption.COPY_ATTRIBUTES)
    if args.no_follow:
        options.append(CopyOption.NOFOLLOW_LINKS)

    source = sys.stdin.buffer if args.source == STREAM_ARG else args.source
    if args.target == STREAM_ARG:
        copy(source, sys.stdout.buffer)
        sys.stdout.flush()
        return

    result = copy(source, args.target, *options)
    if isinstance(result, int):
        logger.info(f"Copied {result} bytes to {args.target}")
    else:
        logger.info(f"Copied {args.source} to {result}")
    print("Success")


def _handle_rm(args: argparse.Namespace) -> None:
    logger.info(f"Deleting {args.path}")
    delete(args.path)
    print("Success")


def _handle_tree(args: argparse.Namespace) -> None:
    options = [FileVisitOption.FOLLOW_LINKS] if args.follow else []
    walk_file_tree(
        args.root,
        naive_visitor(visit_file=print),
        options,
        args.max_depth,
    )


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    args = parse_arguments(argv)

    setup_logging(args.debug)

    handlers = {
        "realpath": _handle_realpath,
        "copy": _handle_copy,
        "rm": _handle_rm,
        "tree": _handle_tree,
    }

    try:
        handlers[args.command](args)
    except (PathWrapError, OSError) as e:
        print(f"Error: {e}")
        raise SystemExit(1) from e
