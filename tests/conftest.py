"""
Shared fixtures for identical-files tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict


CONTENT_A = b"A" * 1024
CONTENT_B = b"B" * 2048


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - 3 identical files of 1KB 'A' (root + subdir) plus a hidden 4th copy
    - 2 identical files of 2KB 'B'
    - 2 unique files (sizes not shared with anything)
    - 1 empty file
    - 2 files of 4KB sharing their first 1KB but differing afterwards
    """
    files = {}

    # Group A (1KB of 'A')
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(CONTENT_A)
    files["dup1_b"].write_bytes(CONTENT_A)

    # Group B (2KB of 'B')
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(CONTENT_B)
    files["dup2_b"].write_bytes(CONTENT_B)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file (single zero-byte file, never grouped)
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Same size, same first 1KB, different tail
    files["late_diff_a"] = temp_dir / "late_diff_a.bin"
    files["late_diff_b"] = temp_dir / "late_diff_b.bin"
    files["late_diff_a"].write_bytes(b"P" * 1024 + b"x" * 3072)
    files["late_diff_b"].write_bytes(b"P" * 1024 + b"y" * 3072)

    # Hidden copy of group A
    files["hidden_dup"] = temp_dir / ".hidden_dup.txt"
    files["hidden_dup"].write_bytes(CONTENT_A)

    # Subdirectory with another copy of group A (depth 2)
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(CONTENT_A)

    return files

