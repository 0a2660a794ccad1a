"""Local platform adapter using os / shutil / pathlib."""

from __future__ import annotations

import errno
import math
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Sequence

import structlog

from scopefs.adapters.base import PlatformAdapter
from scopefs.errors import AlreadyExistsError
from scopefs.models import FileSize

if TYPE_CHECKING:
    from scopefs.models import FileMode, TouchOptions

logger = structlog.get_logger()

# Filler chunk for fixed size files
_CHUNK_SIZE = 64 * 1024


def _missing(path: Path) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))


def _walk(path: Path) -> Iterator[Path]:
    """Yield path and, for real directories, every entry below it."""
    yield path
    if path.is_dir() and not path.is_symlink():
        for dirpath, dirnames, filenames in os.walk(path):
            for name in dirnames + filenames:
                yield Path(dirpath, name)


class LocalAdapter(PlatformAdapter):
    """Adapter for the local filesystem."""

    def __init__(self, *, encoding: str = "utf-8", physical_block_size: int = 512) -> None:
        self._encoding = encoding
        # st_blocks is counted in units of this size
        self._block_size = physical_block_size
        self._log = logger.bind(adapter="local")

    # Queries

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def is_executable(self, path: Path) -> bool:
        return os.access(path, os.X_OK)

    def is_absolute_path(self, path: str) -> bool:
        return os.path.isabs(path)

    def is_relative_path(self, path: str) -> bool:
        return not os.path.isabs(path)

    # Mutations

    def mkdir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def _target(self, source: Path, destination: Path) -> Path:
        if destination.is_dir():
            return destination / source.name
        return destination

    def copy(self, sources: Sequence[Path], destination: Path) -> None:
        for source in sources:
            target = self._target(source, destination)
            self._log.debug("local.copy", source=str(source), target=str(target))
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target, follow_symlinks=False)

    def move(self, sources: Sequence[Path], destination: Path) -> None:
        for source in sources:
            self._log.debug("local.move", source=str(source), destination=str(destination))
            shutil.move(str(source), str(destination))

    def remove(self, paths: Sequence[Path], *, force: bool = False) -> None:
        present = [path for path in paths if path.exists() or path.is_symlink()]
        if not force:
            for path in paths:
                if path not in present:
                    raise _missing(path)

        for path in present:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()

    def chmod(self, mode: "FileMode", paths: Sequence[Path], *, recursive: bool = False) -> None:
        for path in paths:
            targets = _walk(path) if recursive else (path,)
            for target in targets:
                if target.is_symlink():
                    continue
                os.chmod(target, int(mode))

    def touch(self, paths: Sequence[Path], options: "TouchOptions") -> None:
        timestamp: float | None = None
        if isinstance(options.mtime, datetime):
            timestamp = options.mtime.timestamp()
        elif options.mtime is not None:
            timestamp = float(options.mtime)

        for path in paths:
            path.touch(exist_ok=True)
            if timestamp is not None:
                os.utime(path, (timestamp, timestamp))
            if options.mode is not None:
                os.chmod(path, int(options.mode))

    def create_file(self, path: Path, content: str, *, fail_if_exists: bool) -> None:
        self.mkdir(path.parent)
        mode = "x" if fail_if_exists else "w"
        try:
            with open(path, mode, encoding=self._encoding, newline="") as f:
                f.write(content)
        except FileExistsError as exc:
            raise AlreadyExistsError(f'Path "{path}" already exists', path=str(path)) from exc

    def create_fixed_size_file(self, path: Path, size: int, *, fail_if_exists: bool) -> None:
        self.mkdir(path.parent)
        mode = "xb" if fail_if_exists else "wb"
        try:
            with open(path, mode) as f:
                remaining = size
                while remaining > 0:
                    chunk = min(remaining, _CHUNK_SIZE)
                    f.write(b"\0" * chunk)
                    remaining -= chunk
        except FileExistsError as exc:
            raise AlreadyExistsError(f'Path "{path}" already exists', path=str(path)) from exc

    # Sizes

    def _allocated(self, st: os.stat_result) -> int:
        blocks = getattr(st, "st_blocks", None)
        if blocks is not None:
            return blocks * self._block_size
        # No block count (e.g. Windows): round up to whole blocks
        return math.ceil(st.st_size / self._block_size) * self._block_size

    def determine_disk_usage(self, paths: Sequence[Path]) -> FileSize:
        total = 0
        # Inodes already counted (hard links, overlapping arguments)
        seen: set[tuple[int, int]] = set()
        for path in paths:
            for entry in _walk(path):
                st = entry.lstat()
                key = (st.st_dev, st.st_ino)
                if key in seen:
                    continue
                seen.add(key)
                total += self._allocated(st)
        return FileSize(total)

    def determine_file_size(self, path: Path) -> FileSize:
        return FileSize(path.stat().st_size)
