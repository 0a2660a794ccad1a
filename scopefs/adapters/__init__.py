"""Platform adapters."""

from scopefs.adapters.base import PlatformAdapter
from scopefs.adapters.local import LocalAdapter

__all__ = ["LocalAdapter", "PlatformAdapter"]
