"""Storage adapter package."""

from .adapter import LocalStorageAdapter, StorageAdapter
from .factory import AdapterFactory, register_adapter
from .paths import InvalidRelativePathError, PathOutsideRootError
from .types import EntryKind, StorageEntry, StorageStat, split_basename

__all__ = [
    "AdapterFactory",
    "EntryKind",
    "InvalidRelativePathError",
    "LocalStorageAdapter",
    "PathOutsideRootError",
    "StorageAdapter",
    "StorageEntry",
    "StorageStat",
    "register_adapter",
    "split_basename",
]
