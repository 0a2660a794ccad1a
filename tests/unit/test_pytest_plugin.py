"""Unit tests for the scopefs pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from scopefs.managers import FilesystemManager
from scopefs.pytest_plugin import PytestExpectations


def test_scoped_fs_uses_tmp_path(scoped_fs: FilesystemManager, tmp_path: Path):
    assert scoped_fs.working_root == tmp_path / "tmp" / "scopefs"
    assert scoped_fs.working_root.is_dir()
    assert scoped_fs.list_paths(".") == []


def test_scoped_fs_round_trip(scoped_fs: FilesystemManager):
    scoped_fs.write_file("notes/today.txt", "first\nsecond\n")
    scoped_fs.append_lines_to_file("notes/today.txt", "third")

    assert scoped_fs.read_lines("notes/today.txt") == ["first", "second", "third"]


def test_scoped_fs_fixtures(scopefs_settings, tmp_path: Path):
    (tmp_path / "tests" / "fixtures").mkdir(parents=True)
    (tmp_path / "tests" / "fixtures" / "seed.txt").write_text("seed")
    manager = FilesystemManager.from_settings(scopefs_settings)
    manager.setup_working_directory()

    manager.copy("%/seed.txt", "seed.txt")

    assert manager.read_lines("seed.txt") == ["seed"]


def test_assertion_failures_are_pytest_failures(scoped_fs: FilesystemManager):
    with pytest.raises(pytest.fail.Exception, match="to be an existing file"):
        scoped_fs.file_size("missing.bin")


def test_pytest_expectations_fail():
    with pytest.raises(pytest.fail.Exception, match="boom"):
        PytestExpectations().fail("boom", path="x")


def test_scoped_fs_ignores_nested_env(
    request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
):
    monkeypatch.setenv("SCOPEFS_FILESYSTEM__WORKING_DIRECTORY", "wd")

    manager: FilesystemManager = request.getfixturevalue("scoped_fs")

    assert manager.working_root == tmp_path / "tmp" / "scopefs"
