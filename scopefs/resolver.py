"""ScopeResolver - maps path references onto the working root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from scopefs.errors import InvalidArgumentError

if TYPE_CHECKING:
    from scopefs.config import Settings

logger = structlog.get_logger()


def find_fixtures_directory(root_directory: str | Path, candidates: list[str]) -> Path | None:
    """Return the first existing fixtures directory under root_directory."""
    for candidate in candidates:
        path = Path(root_directory, candidate)
        if path.is_dir():
            return path.absolute()
    return None


class ScopeResolver:
    """Resolves user-supplied paths against a single working root.

    Holds the per-scope context (working root, fixture prefix, fixtures
    directory). expand() does no I/O.
    """

    def __init__(
        self,
        working_root: str | Path,
        *,
        fixtures_path_prefix: str = "%",
        fixtures_directory: str | Path | None = None,
    ) -> None:
        self._working_root = Path(os.path.abspath(working_root))
        self._fixtures_prefix = fixtures_path_prefix
        self._fixtures_directory = (
            Path(os.path.abspath(fixtures_directory)) if fixtures_directory else None
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ScopeResolver":
        fs = settings.filesystem
        fixtures_directory = find_fixtures_directory(
            fs.root_directory, fs.fixtures_directories
        )
        if fixtures_directory is None:
            logger.debug(
                "resolver.no_fixtures_directory",
                root_directory=fs.root_directory,
                candidates=fs.fixtures_directories,
            )
        return cls(
            fs.working_root,
            fixtures_path_prefix=fs.fixtures_path_prefix,
            fixtures_directory=fixtures_directory,
        )

    @property
    def working_root(self) -> Path:
        return self._working_root

    @property
    def fixtures_path_prefix(self) -> str:
        return self._fixtures_prefix

    @property
    def fixtures_directory(self) -> Path | None:
        return self._fixtures_directory

    def is_fixture(self, path: str) -> bool:
        """Check the raw reference against the fixture prefix."""
        return str(path).startswith(self._fixtures_prefix)

    def expand(self, path: str | os.PathLike[str]) -> Path:
        """Expand a path reference to an absolute, normalized path.

        - "~" and "~/x" expand to the user's home directory
        - "<prefix>/x" expands into the fixtures directory
        - absolute paths pass through
        - everything else is joined onto the working root

        Raises:
            InvalidArgumentError: Fixture reference without a fixtures directory
        """
        raw = os.fspath(path)

        if self.is_fixture(raw):
            if self._fixtures_directory is None:
                raise InvalidArgumentError(
                    f'No fixtures directory found for "{raw}"',
                    path=raw,
                )
            remainder = raw[len(self._fixtures_prefix):].lstrip("/\\")
            return Path(os.path.normpath(self._fixtures_directory / remainder))

        if raw == "~" or raw.startswith(("~/", "~\\")):
            return Path(os.path.normpath(os.path.expanduser(raw)))

        if os.path.isabs(raw):
            return Path(os.path.normpath(raw))

        return Path(os.path.normpath(self._working_root / raw))

    def relative_to_root(self, path: str | os.PathLike[str]) -> str:
        """Express an absolute path relative to the working root."""
        return os.path.relpath(os.fspath(path), self._working_root)
