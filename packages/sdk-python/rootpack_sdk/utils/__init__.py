"""Shared SDK utilities: app root detection, locking and the resolver runner."""

from .locking import ExclusionLock, FileLock, NullLock
from .resolver import ComposerRunner, ResolverResult
from .workspace import find_app_root

__all__ = [
    "ExclusionLock",
    "FileLock",
    "NullLock",
    "ComposerRunner",
    "ResolverResult",
    "find_app_root",
]
