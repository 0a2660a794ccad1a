"""Platform adapter base class - raw filesystem abstraction.

An adapter ONLY performs filesystem calls on absolute paths.
It does NOT handle:
- Path resolution against the working root
- Fixture protection
- Precondition validation

Errors raised by the operating system propagate unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from scopefs.models import FileMode, FileSize, TouchOptions


class PlatformAdapter(ABC):
    """Abstract capability set consumed by FilesystemManager."""

    # Queries

    @abstractmethod
    def exists(self, path: Path) -> bool:
        ...

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        ...

    @abstractmethod
    def is_directory(self, path: Path) -> bool:
        ...

    @abstractmethod
    def is_executable(self, path: Path) -> bool:
        """True if the path may be executed by the current user."""
        ...

    @abstractmethod
    def is_absolute_path(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_relative_path(self, path: str) -> bool:
        ...

    # Mutations

    @abstractmethod
    def mkdir(self, path: Path) -> None:
        """Create a directory and any missing ancestors (idempotent)."""
        ...

    @abstractmethod
    def copy(self, sources: Sequence[Path], destination: Path) -> None:
        """Copy files/directories.

        Args:
            sources: One or more existing paths
            destination: Target path; an existing directory receives the
                sources by name
        """
        ...

    @abstractmethod
    def move(self, sources: Sequence[Path], destination: Path) -> None:
        """Move files/directories (same destination rules as copy)."""
        ...

    @abstractmethod
    def remove(self, paths: Sequence[Path], *, force: bool = False) -> None:
        """Remove paths recursively.

        Args:
            paths: Paths to remove
            force: Ignore missing paths
        """
        ...

    @abstractmethod
    def chmod(self, mode: "FileMode", paths: Sequence[Path], *, recursive: bool = False) -> None:
        ...

    @abstractmethod
    def touch(self, paths: Sequence[Path], options: "TouchOptions") -> None:
        """Create empty files or update their modification time."""
        ...

    @abstractmethod
    def create_file(self, path: Path, content: str, *, fail_if_exists: bool) -> None:
        """Write text content verbatim, creating parent directories.

        Raises:
            AlreadyExistsError: fail_if_exists is set and path exists
        """
        ...

    @abstractmethod
    def create_fixed_size_file(self, path: Path, size: int, *, fail_if_exists: bool) -> None:
        """Write a file of exactly size bytes, creating parent directories."""
        ...

    # Sizes

    @abstractmethod
    def determine_disk_usage(self, paths: Sequence[Path]) -> "FileSize":
        """Sum allocated space of all paths (directories recursively)."""
        ...

    @abstractmethod
    def determine_file_size(self, path: Path) -> "FileSize":
        ...
