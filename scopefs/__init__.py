"""scopefs - sandboxed filesystem access for test harnesses."""

from scopefs.config import Settings, get_settings
from scopefs.errors import (
    AlreadyExistsError,
    ExpectationNotMetError,
    InvalidArgumentError,
    OperationAbortedError,
    ScopeFsError,
)
from scopefs.managers import FilesystemManager
from scopefs.models import (
    ChmodOptions,
    FileMode,
    FileSize,
    RemoveOptions,
    TouchOptions,
    TransferRequest,
)
from scopefs.resolver import ScopeResolver

__version__ = "0.1.0"

__all__ = [
    "AlreadyExistsError",
    "ChmodOptions",
    "ExpectationNotMetError",
    "FileMode",
    "FileSize",
    "FilesystemManager",
    "InvalidArgumentError",
    "OperationAbortedError",
    "RemoveOptions",
    "ScopeFsError",
    "ScopeResolver",
    "Settings",
    "TouchOptions",
    "TransferRequest",
    "get_settings",
]
