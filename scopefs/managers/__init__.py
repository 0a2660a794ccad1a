"""Manager layer - scoped filesystem operations."""

from scopefs.managers.filesystem import FilesystemManager

__all__ = ["FilesystemManager"]
