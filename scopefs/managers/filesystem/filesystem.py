"""FilesystemManager - scoped filesystem access for test harnesses.

Every path reference is expanded through the ScopeResolver before the
PlatformAdapter touches disk. Mutations validate all of their arguments
(existence, type, fixture protection) before the first side effect; there is
no rollback once a platform call has started.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence, TypeVar

import structlog
from pydantic import ValidationError

from scopefs.adapters.local import LocalAdapter
from scopefs.errors import AlreadyExistsError, InvalidArgumentError, OperationAbortedError
from scopefs.expectations import AssertionExpectations, Expectations
from scopefs.models import (
    ChmodOptions,
    FileMode,
    FileSize,
    RemoveOptions,
    TouchOptions,
    TransferRequest,
    as_path_list,
)
from scopefs.resolver import ScopeResolver

if TYPE_CHECKING:
    from scopefs.adapters.base import PlatformAdapter
    from scopefs.config import Settings

logger = structlog.get_logger()

T = TypeVar("T")


def _chomp(line: str) -> str:
    """Strip one trailing line terminator (\\r\\n, \\n or \\r)."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


class FilesystemManager:
    """Query and mutate files inside one working root."""

    def __init__(
        self,
        resolver: ScopeResolver,
        adapter: "PlatformAdapter | None" = None,
        expectations: Expectations | None = None,
        *,
        encoding: str = "utf-8",
        root_directory: str | Path | None = None,
        clean_working_directory: bool = True,
    ) -> None:
        self._resolver = resolver
        self._adapter = adapter or LocalAdapter(encoding=encoding)
        self._expectations = expectations or AssertionExpectations()
        self._encoding = encoding
        self._root_directory = Path(root_directory).absolute() if root_directory else None
        self._clean_working_directory = clean_working_directory
        self._log = logger.bind(manager="filesystem")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        *,
        adapter: "PlatformAdapter | None" = None,
        expectations: Expectations | None = None,
    ) -> "FilesystemManager":
        """Build a manager for the configured working root."""
        fs = settings.filesystem
        return cls(
            ScopeResolver.from_settings(settings),
            adapter
            or LocalAdapter(encoding=fs.encoding, physical_block_size=fs.physical_block_size),
            expectations,
            encoding=fs.encoding,
            root_directory=fs.root_directory,
            clean_working_directory=fs.clean_working_directory,
        )

    @property
    def resolver(self) -> ScopeResolver:
        return self._resolver

    @property
    def working_root(self) -> Path:
        return self._resolver.working_root

    def expand_path(self, path: str | os.PathLike[str]) -> Path:
        """Expand a path reference to an absolute path."""
        return self._resolver.expand(path)

    # ------------------------------------------------------------------
    # Existence & type queries
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        return self._adapter.exists(self.expand_path(path))

    def is_file(self, path: str) -> bool:
        return self._adapter.is_file(self.expand_path(path))

    def is_directory(self, path: str) -> bool:
        return self._adapter.is_directory(self.expand_path(path))

    def is_executable(self, path: str) -> bool:
        """True only for a regular file the current user may execute."""
        full = self.expand_path(path)
        return self._adapter.is_file(full) and self._adapter.is_executable(full)

    def is_absolute(self, path: str) -> bool:
        # The raw reference: every expanded path is absolute
        return self._adapter.is_absolute_path(path)

    def is_relative(self, path: str) -> bool:
        return self._adapter.is_relative_path(path)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def _require_directory(self, path: str) -> Path:
        if not self.exists(path):
            raise InvalidArgumentError(f'Path "{path}" does not exist.', path=path)
        if not self.is_directory(path):
            raise InvalidArgumentError(
                f'Only directories are supported. Path "{path}" is not a directory.',
                path=path,
            )
        return self.expand_path(path)

    def directory(self, path: str) -> Path:
        """Return the absolute path of an existing directory."""
        return self._require_directory(path)

    def list_paths(self, scoped_dir: str) -> list[str]:
        """List every entry below a directory, at any depth.

        Args:
            scoped_dir: Directory to enumerate

        Returns:
            Sorted paths relative to the working root (not to scoped_dir)

        Raises:
            InvalidArgumentError: scoped_dir is missing or not a directory
        """
        top = self._require_directory(scoped_dir)

        entries: list[str] = []
        for dirpath, dirnames, filenames in os.walk(top):
            for name in dirnames + filenames:
                entries.append(self._resolver.relative_to_root(Path(dirpath, name)))
        return sorted(entries)

    def all_paths(self) -> list[Path]:
        return [self.expand_path(p) for p in self.list_paths(".")]

    def all_files(self) -> list[Path]:
        return [p for p in self.all_paths() if self._adapter.is_file(p)]

    def all_directories(self) -> list[Path]:
        return [p for p in self.all_paths() if self._adapter.is_directory(p)]

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_lines(self, path: str) -> list[str]:
        """Read a text file as lines without line terminators.

        "\\n".join() of the result rebuilds the content, except for a
        trailing newline at end of file, which is not preserved.

        Raises:
            InvalidArgumentError: path is missing or not a file
        """
        if not self.exists(path):
            raise InvalidArgumentError(f'Path "{path}" does not exist.', path=path)
        if not self.is_file(path):
            raise InvalidArgumentError(
                f'Only files are supported. Path "{path}" is not a file.',
                path=path,
            )

        with open(self.expand_path(path), encoding=self._encoding, newline="") as f:
            return [_chomp(line) for line in f]

    def with_file_content(self, path: str, fn: Callable[[str], T]) -> T:
        """Pass the content of an existing file to fn and return its result."""
        self._expect_existing_path(path)
        return fn("\n".join(self.read_lines(path)))

    # ------------------------------------------------------------------
    # Writing & appending
    # ------------------------------------------------------------------

    def _reject_fixtures(self, paths: Sequence[str], role: str) -> None:
        for path in paths:
            if self._resolver.is_fixture(path):
                raise InvalidArgumentError(
                    f"Using a fixture as {role} ({path}) is not supported",
                    path=path,
                    role=role,
                )

    def write_file(self, path: str, content: str, *, overwrite: bool = False) -> None:
        """Write content verbatim, creating parent directories.

        Args:
            path: Target file
            content: Text written as-is (caller controls trailing newline)
            overwrite: Replace an existing file

        Raises:
            AlreadyExistsError: Target exists and overwrite is False
        """
        self._reject_fixtures([path], "destination")
        if not overwrite and self.exists(path):
            raise AlreadyExistsError(f'Path "{path}" already exists.', path=path)

        self._log.info("fs.write", path=path, content_len=len(content), overwrite=overwrite)
        self._adapter.create_file(self.expand_path(path), content, fail_if_exists=not overwrite)

    def overwrite_file(self, path: str, content: str) -> None:
        self.write_file(path, content, overwrite=True)

    def write_fixed_size_file(self, path: str, size: int) -> None:
        """Create a file of exactly size zero bytes (overwrites)."""
        self._reject_fixtures([path], "destination")
        if size < 0:
            raise InvalidArgumentError(f"Invalid file size: {size}", path=path, size=size)

        self._log.info("fs.write_fixed_size", path=path, size=size)
        self._adapter.create_fixed_size_file(self.expand_path(path), size, fail_if_exists=False)

    def append_to_file(self, path: str, content: str) -> None:
        """Append content verbatim, creating the file if absent."""
        self._reject_fixtures([path], "destination")

        self._log.info("fs.append", path=path, content_len=len(content))
        with open(self.expand_path(path), "a", encoding=self._encoding, newline="") as f:
            f.write(content)

    def append_lines_to_file(self, path: str, content: str) -> None:
        """Append content, keeping old and new content on separate lines.

        A newline is inserted first unless the file is empty or already ends
        with one. Only the last byte is read.

        Raises:
            InvalidArgumentError: path is missing or not a file
        """
        self._reject_fixtures([path], "destination")
        if not self.is_file(path):
            raise InvalidArgumentError(f'File "{path}" does not exist.', path=path)

        self._log.info("fs.append_lines", path=path, content_len=len(content))
        with open(self.expand_path(path), "a+b") as f:
            size = f.seek(0, os.SEEK_END)
            if size > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    f.write(b"\n")
            f.write(content.encode(self._encoding))

    def touch(self, paths: str | Sequence[str], options: TouchOptions | None = None) -> None:
        """Create empty files or update their modification time.

        Parent directories are created first. options go to the adapter
        unmodified.
        """
        path_list = as_path_list(paths)
        self._reject_fixtures(path_list, "destination")

        expanded = [self.expand_path(p) for p in path_list]
        self._log.info("fs.touch", paths=path_list)
        for full in expanded:
            self._adapter.mkdir(full.parent)
        self._adapter.touch(expanded, options or TouchOptions())

    # ------------------------------------------------------------------
    # Copy / move
    # ------------------------------------------------------------------

    def _transfer_request(
        self, sources: str | Sequence[str], destination: str
    ) -> TransferRequest:
        try:
            return TransferRequest(sources=sources, destination=destination)
        except ValidationError as exc:
            raise InvalidArgumentError(
                f"Invalid copy/move arguments: {exc.errors()[0]['msg']}",
                destination=destination,
            ) from exc

    def _validate_transfer(self, request: TransferRequest, *, move: bool) -> None:
        # Fixtures are never consumed by a move
        if move:
            self._reject_fixtures(request.sources, "source")
        self._reject_fixtures([request.destination], "destination")

        for source in request.sources:
            if not self.exists(source):
                raise InvalidArgumentError(
                    f'The following source "{source}" does not exist.',
                    path=source,
                )

        if (
            request.is_fan_in
            and self.exists(request.destination)
            and not self.is_directory(request.destination)
        ):
            raise InvalidArgumentError(
                "Multiple sources can only be copied to a directory",
                destination=request.destination,
            )

    def _prepare_destination(self, request: TransferRequest) -> tuple[list[Path], Path]:
        sources = [self.expand_path(s) for s in request.sources]
        destination = self.expand_path(request.destination)

        if request.is_fan_in:
            self._adapter.mkdir(destination)
        else:
            self._adapter.mkdir(destination.parent)
        return sources, destination

    def copy(self, sources: str | Sequence[str], destination: str) -> None:
        """Copy files and/or directories.

        Args:
            sources: One path or several; several need a directory destination
            destination: Target path, created if absent

        Raises:
            InvalidArgumentError: Missing source, fixture destination, or
                several sources with a non-directory destination
        """
        request = self._transfer_request(sources, destination)
        self._validate_transfer(request, move=False)

        self._log.info("fs.copy", sources=request.sources, destination=request.destination)
        source_paths, destination_path = self._prepare_destination(request)
        self._adapter.copy(source_paths, destination_path)

    def move(self, sources: str | Sequence[str], destination: str) -> None:
        """Move files and/or directories.

        Same rules as copy; additionally no source may be a fixture.
        """
        request = self._transfer_request(sources, destination)
        self._validate_transfer(request, move=True)

        self._log.info("fs.move", sources=request.sources, destination=request.destination)
        source_paths, destination_path = self._prepare_destination(request)
        self._adapter.move(source_paths, destination_path)

    # ------------------------------------------------------------------
    # Directories & removal
    # ------------------------------------------------------------------

    def create_directory(self, path: str) -> None:
        """Create a directory and missing ancestors (idempotent)."""
        self._reject_fixtures([path], "destination")

        self._log.info("fs.mkdir", path=path)
        self._adapter.mkdir(self.expand_path(path))

    def remove(self, paths: str | Sequence[str], options: RemoveOptions | None = None) -> None:
        """Remove files/directories recursively.

        Without force, a missing path raises the adapter's FileNotFoundError.
        """
        options = options or RemoveOptions()
        path_list = as_path_list(paths)
        self._reject_fixtures(path_list, "destination")

        expanded = [self.expand_path(p) for p in path_list]
        self._log.info("fs.remove", paths=path_list, force=options.force)
        self._adapter.remove(expanded, force=options.force)

    def setup_working_directory(self, *, clean: bool | None = None) -> Path:
        """Create the working root, wiping it first when clean is set.

        Returns:
            The working root

        Raises:
            InvalidArgumentError: Working root is the filesystem root or lies
                outside the configured root directory
        """
        root = self.working_root
        if root.parent == root:
            raise InvalidArgumentError(
                f'Refusing to use "{root}" as working directory', path=str(root)
            )
        if self._root_directory is not None:
            base = str(self._root_directory)
            if root == self._root_directory or os.path.commonpath([base, str(root)]) != base:
                raise InvalidArgumentError(
                    f'Working directory "{root}" must be inside "{base}"',
                    path=str(root),
                )

        clean = self._clean_working_directory if clean is None else clean
        self._log.info("fs.setup_working_directory", path=str(root), clean=clean)
        if clean:
            self._adapter.remove([root], force=True)
        self._adapter.mkdir(root)
        return root

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def chmod(
        self,
        mode: FileMode | int | str,
        paths: str | Sequence[str],
        options: ChmodOptions | None = None,
    ) -> None:
        """Change permissions of existing paths.

        Args:
            mode: FileMode, int (0o755) or octal string ("755")
            paths: Paths to change
            options: recursive applies the mode to whole subtrees

        Raises:
            OperationAbortedError: A path does not exist; nothing is changed
        """
        file_mode = FileMode.parse(mode)
        options = options or ChmodOptions()
        path_list = as_path_list(paths)
        self._reject_fixtures(path_list, "destination")

        for path in path_list:
            if not self.exists(path):
                raise OperationAbortedError(f"Expected {path} to be present", path=path)

        expanded = [self.expand_path(p) for p in path_list]
        self._log.info("fs.chmod", mode=str(file_mode), paths=path_list, recursive=options.recursive)
        self._adapter.chmod(file_mode, expanded, recursive=options.recursive)

    # ------------------------------------------------------------------
    # Sizes (assertion-style preconditions)
    # ------------------------------------------------------------------

    def _expect_existing_path(self, path: str) -> None:
        if not self.exists(path):
            self._expectations.fail(f'expected "{path}" to be an existing path', path=path)

    def _expect_existing_file(self, path: str) -> None:
        if not self.is_file(path):
            self._expectations.fail(f'expected "{path}" to be an existing file', path=path)

    def file_size(self, path: str) -> FileSize:
        """Return the size of an existing file in bytes."""
        self._expect_existing_file(path)
        return self._adapter.determine_file_size(self.expand_path(path))

    def disk_usage(self, paths: str | Sequence[str]) -> FileSize:
        """Return allocated disk space summed over paths and their subtrees."""
        path_list = as_path_list(paths)
        missing = [p for p in path_list if not self.exists(p)]
        if missing:
            quoted = ", ".join(f'"{p}"' for p in missing)
            self._expectations.fail(
                f"expected all paths to be existing paths, missing: {quoted}",
                path=missing[0],
            )
        return self._adapter.determine_disk_usage([self.expand_path(p) for p in path_list])
