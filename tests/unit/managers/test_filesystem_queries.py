"""Unit tests for FilesystemManager queries, listing and reading."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from scopefs.errors import ExpectationNotMetError, InvalidArgumentError
from scopefs.managers import FilesystemManager


class TestExistenceQueries:
    """exists / is_file / is_directory / is_executable."""

    def test_missing_path_is_false_everywhere(self, fs: FilesystemManager):
        assert fs.exists("nope") is False
        assert fs.is_file("nope") is False
        assert fs.is_directory("nope") is False
        assert fs.is_executable("nope") is False

    def test_file_is_not_directory(self, fs: FilesystemManager, working_root: Path):
        (working_root / "a.txt").write_text("x")

        assert fs.exists("a.txt")
        assert fs.is_file("a.txt")
        assert not fs.is_directory("a.txt")

    def test_directory_is_not_file(self, fs: FilesystemManager, working_root: Path):
        (working_root / "d").mkdir()

        assert fs.exists("d")
        assert fs.is_directory("d")
        assert not fs.is_file("d")

    def test_relative_paths_resolve_against_working_root(
        self, fs: FilesystemManager, working_root: Path, tmp_path: Path
    ):
        (tmp_path / "outside.txt").write_text("x")

        assert not fs.exists("outside.txt")
        assert fs.exists(str(tmp_path / "outside.txt"))

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_executable_requires_mode_bit(self, fs: FilesystemManager, working_root: Path):
        script = working_root / "run.sh"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o644)
        assert not fs.is_executable("run.sh")

        script.chmod(0o755)
        assert fs.is_executable("run.sh")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_directory_is_never_executable(self, fs: FilesystemManager, working_root: Path):
        (working_root / "bin").mkdir(mode=0o755)

        assert not fs.is_executable("bin")

    def test_absolute_and_relative_use_raw_reference(self, fs: FilesystemManager, tmp_path: Path):
        assert fs.is_absolute(str(tmp_path))
        assert not fs.is_relative(str(tmp_path))
        assert fs.is_relative("a/b")
        assert not fs.is_absolute("a/b")

    def test_fixture_reference_resolves_to_fixtures_directory(self, fs: FilesystemManager):
        assert fs.is_file("%/template.txt")


class TestListing:
    """list_paths / all_paths / all_files / all_directories."""

    def test_list_nested_entries_relative_to_root(
        self, fs: FilesystemManager, working_root: Path
    ):
        (working_root / "a" / "b").mkdir(parents=True)
        (working_root / "a" / "b" / "c.txt").write_text("c")

        entries = fs.list_paths(".")

        assert os.path.join("a") in entries
        assert os.path.join("a", "b") in entries
        assert os.path.join("a", "b", "c.txt") in entries

    def test_list_subdirectory_keeps_root_relative_paths(
        self, fs: FilesystemManager, working_root: Path
    ):
        (working_root / "a" / "b").mkdir(parents=True)
        (working_root / "a" / "b" / "c.txt").write_text("c")
        (working_root / "top.txt").write_text("t")

        assert fs.list_paths("a") == [
            os.path.join("a", "b"),
            os.path.join("a", "b", "c.txt"),
        ]

    def test_list_includes_dotfiles(self, fs: FilesystemManager, working_root: Path):
        (working_root / ".hidden").write_text("h")

        assert ".hidden" in fs.list_paths(".")

    def test_list_missing_directory(self, fs: FilesystemManager):
        with pytest.raises(InvalidArgumentError) as exc_info:
            fs.list_paths("missing")

        assert 'Path "missing" does not exist.' in str(exc_info.value)
        assert exc_info.value.details["path"] == "missing"

    def test_list_file_is_rejected(self, fs: FilesystemManager, working_root: Path):
        (working_root / "f.txt").write_text("x")

        with pytest.raises(InvalidArgumentError, match="not a directory"):
            fs.list_paths("f.txt")

    def test_list_does_not_mutate(self, fs: FilesystemManager, adapter, working_root: Path):
        (working_root / "a").mkdir()

        fs.list_paths(".")

        assert adapter.calls == []

    def test_all_views_are_absolute_and_filtered(
        self, fs: FilesystemManager, working_root: Path
    ):
        (working_root / "d" / "e").mkdir(parents=True)
        (working_root / "d" / "f.txt").write_text("f")
        (working_root / "g.txt").write_text("g")

        assert set(fs.all_paths()) == {
            working_root / "d",
            working_root / "d" / "e",
            working_root / "d" / "f.txt",
            working_root / "g.txt",
        }
        assert set(fs.all_files()) == {working_root / "d" / "f.txt", working_root / "g.txt"}
        assert set(fs.all_directories()) == {working_root / "d", working_root / "d" / "e"}

    def test_directory_handle(self, fs: FilesystemManager, working_root: Path):
        (working_root / "d").mkdir()

        assert fs.directory("d") == working_root / "d"
        with pytest.raises(InvalidArgumentError):
            fs.directory("missing")


class TestReading:
    """read_lines / with_file_content."""

    def test_read_strips_line_terminators(self, fs: FilesystemManager, working_root: Path):
        (working_root / "f.txt").write_bytes(b"unix\nwindows\r\nmac\rlast")

        assert fs.read_lines("f.txt") == ["unix", "windows", "mac", "last"]

    def test_join_round_trip_drops_trailing_newline(
        self, fs: FilesystemManager, working_root: Path
    ):
        (working_root / "f.txt").write_bytes(b"one\ntwo\n")

        assert "\n".join(fs.read_lines("f.txt")) == "one\ntwo"

    def test_read_keeps_blank_lines(self, fs: FilesystemManager, working_root: Path):
        (working_root / "f.txt").write_bytes(b"a\n\nb\n")

        assert fs.read_lines("f.txt") == ["a", "", "b"]

    def test_read_empty_file(self, fs: FilesystemManager, working_root: Path):
        (working_root / "empty").write_bytes(b"")

        assert fs.read_lines("empty") == []

    def test_read_missing_file(self, fs: FilesystemManager):
        with pytest.raises(InvalidArgumentError, match="does not exist"):
            fs.read_lines("missing.txt")

    def test_read_directory_is_rejected(self, fs: FilesystemManager, working_root: Path):
        (working_root / "d").mkdir()

        with pytest.raises(InvalidArgumentError, match="Only files are supported"):
            fs.read_lines("d")

    def test_with_file_content_passes_joined_content(
        self, fs: FilesystemManager, working_root: Path
    ):
        (working_root / "f.txt").write_bytes(b"hello\r\nworld\n")

        result = fs.with_file_content("f.txt", lambda content: content.upper())

        assert result == "HELLO\nWORLD"

    def test_with_file_content_missing_is_assertion_failure(self, fs: FilesystemManager):
        called = []

        with pytest.raises(ExpectationNotMetError) as exc_info:
            fs.with_file_content("missing.txt", called.append)

        assert isinstance(exc_info.value, AssertionError)
        assert exc_info.value.path == "missing.txt"
        assert 'expected "missing.txt" to be an existing path' in str(exc_info.value)
        assert called == []
