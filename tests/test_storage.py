"""Tests for local filesystem helpers."""

from pathlib import Path

import pytest

from buildcontent.errors import FileSystemError
from buildcontent.storage import copy_file, ensure_directory, ensure_parent_directories, write_bytes


class TestEnsureDirectory:
    def test_is_idempotent(self, tmp_path: Path):
        target = tmp_path / "a" / "b"

        ensure_directory(target)
        ensure_directory(target)

        assert target.is_dir()

    def test_file_in_the_way_raises(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(FileSystemError) as exc_info:
            ensure_directory(blocker / "child")

        assert exc_info.value.path == blocker / "child"

    def test_parent_directories_are_created_once(self, tmp_path: Path):
        paths = [tmp_path / "x" / "one.coverage", tmp_path / "x" / "two.coverage", tmp_path / "y" / "z.coverage"]

        created = ensure_parent_directories(paths)

        assert created == [tmp_path / "x", tmp_path / "y"]
        assert all(path.is_dir() for path in created)


class TestWriteAndCopy:
    def test_write_bytes(self, tmp_path: Path):
        target = write_bytes(tmp_path / "f.bin", b"\x00\x01")

        assert target.read_bytes() == b"\x00\x01"

    def test_write_into_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(FileSystemError):
            write_bytes(tmp_path / "missing" / "f.bin", b"data")

    def test_copy_overwrites_existing_file(self, tmp_path: Path):
        source = write_bytes(tmp_path / "src.bin", b"new")
        destination = write_bytes(tmp_path / "dst.bin", b"old content")

        copy_file(source, destination)

        assert destination.read_bytes() == b"new"

    def test_copy_missing_source_raises(self, tmp_path: Path):
        with pytest.raises(FileSystemError):
            copy_file(tmp_path / "nope", tmp_path / "dst")
