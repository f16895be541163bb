"""
Tests for atomic writes used by the synchronizer and the generator.
"""

import os
from unittest.mock import patch

import pytest

from rockplugin.core.file_ops import atomic_write_text


class TestAtomicWriteText:
    """Test all-or-nothing text writes."""

    def test_writes_content(self, tmp_path):
        target = tmp_path / "out.txt"
        assert atomic_write_text(target, "hello\n") == target
        assert target.read_text(encoding="utf-8") == "hello\n"

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "out.txt"
        atomic_write_text(target, "x")
        assert target.is_file()

    def test_keeps_unix_newlines(self, tmp_path):
        target = tmp_path / "out.txt"
        atomic_write_text(target, "a\nb\n")
        assert target.read_bytes() == b"a\nb\n"

    def test_replaces_existing_file(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("old", encoding="utf-8")
        atomic_write_text(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_failure_keeps_original_and_cleans_temp(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("old", encoding="utf-8")

        with patch("rockplugin.core.file_ops.os.replace", side_effect=OSError("denied")):
            with pytest.raises(OSError):
                atomic_write_text(target, "new")

        assert target.read_text(encoding="utf-8") == "old"
        assert os.listdir(tmp_path) == ["out.txt"]

