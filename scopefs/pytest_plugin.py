"""pytest integration.

Enable in a conftest.py:

    pytest_plugins = ["scopefs.pytest_plugin"]

Provides:
- scopefs_settings: Settings rooted at tmp_path
- scoped_fs: FilesystemManager with a freshly created working directory,
  reporting assertion-style failures through pytest.fail
"""

from __future__ import annotations

from pathlib import Path

import pytest

from scopefs.config import FilesystemConfig, Settings
from scopefs.expectations import Expectations
from scopefs.managers import FilesystemManager


class PytestExpectations(Expectations):
    """Reports failed expectations as pytest failures."""

    def fail(self, message: str, *, path: str | None = None) -> None:
        pytest.fail(message, pytrace=False)


@pytest.fixture
def scopefs_settings(tmp_path: Path) -> Settings:
    """Settings with the project root at tmp_path."""
    return Settings(filesystem=FilesystemConfig(root_directory=str(tmp_path)))


@pytest.fixture
def scoped_fs(scopefs_settings: Settings) -> FilesystemManager:
    """FilesystemManager for an empty working directory."""
    manager = FilesystemManager.from_settings(
        scopefs_settings,
        expectations=PytestExpectations(),
    )
    manager.setup_working_directory(clean=True)
    return manager
