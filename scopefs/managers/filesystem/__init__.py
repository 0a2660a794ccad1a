from scopefs.managers.filesystem.filesystem import FilesystemManager

__all__ = ["FilesystemManager"]
