"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from scopefs.managers import FilesystemManager
from scopefs.resolver import ScopeResolver
from tests.fakes import RecordingAdapter


@pytest.fixture
def working_root(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    fixtures = tmp_path / "fixtures"
    fixtures.mkdir()
    (fixtures / "template.txt").write_text("template\n")
    return fixtures


@pytest.fixture
def resolver(working_root: Path, fixtures_dir: Path) -> ScopeResolver:
    return ScopeResolver(
        working_root,
        fixtures_path_prefix="%",
        fixtures_directory=fixtures_dir,
    )


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def fs(resolver: ScopeResolver, adapter: RecordingAdapter, tmp_path: Path) -> FilesystemManager:
    """FilesystemManager over tmp_path/work with a recording adapter."""
    return FilesystemManager(resolver, adapter, root_directory=tmp_path)
