"""
Shared pytest configuration and fixtures for pathwrap tests.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for testing
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir / "src"))


@pytest.fixture
def file_tree(tmp_path):
    """Create root/dir1/file1 and an empty root/dir2."""
    root = tmp_path / "root"
    (root / "dir1").mkdir(parents=True)
    (root / "dir2").mkdir()
    (root / "dir1" / "file1").write_bytes(b"file1")
    return {
        "root": root,
        "dir1": root / "dir1",
        "dir2": root / "dir2",
        "file1": root / "dir1" / "file1",
    }


@pytest.fixture
def flat_dir(tmp_path):
    """Create a directory holding three regular files."""
    flat = tmp_path / "flat"
    flat.mkdir()
    for name in ("a", "b", "c"):
        (flat / name).write_text(name)
    return flat


@pytest.fixture
def source_file(tmp_path):
    """Create a small source file for copy tests."""
    src = tmp_path / "source.bin"
    src.write_bytes(b"hello")
    return src
