"""Storage adapters.

A storage adapter performs the primitive stat/list/read/write operations
against a resolved base directory. FileLocation only depends on the
``StorageAdapter`` protocol; ``LocalStorageAdapter`` is the implementation for
locations of type ``local``.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from filelocation.core.errors import EntryNotFoundError, NotAFileError, StorageError
from filelocation.core.logging import get_logger

from .paths import is_within, resolve_path
from .types import EntryKind, StorageEntry, StorageStat, split_basename

_logger = get_logger(__name__)


@runtime_checkable
class StorageAdapter(Protocol):
    """Primitive storage operations consumed by FileLocation.

    Paths are relative to the adapter's base directory.
    """

    def stat(self, path: str) -> StorageStat | None:
        """Return metadata for ``path`` or None when it does not exist."""
        ...

    def list_dir(self, dir_path: str = ".") -> list[StorageEntry]:
        """Return the direct entries of ``dir_path`` (non-recursive)."""
        ...

    def read(self, path: str) -> bytes:
        """Return the whole content of ``path``.

        Raises:
            StorageError: If the entry is missing or not a regular file
            OSError: If the underlying read fails
        """
        ...

    def write(self, path: str, data: bytes) -> bool:
        """Write the whole buffer to ``path``; False on failure."""
        ...


class LocalStorageAdapter:
    """Storage adapter for a directory on the local filesystem."""

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def stat(self, path: str) -> StorageStat | None:
        abs_path = resolve_path(self._base_dir, path)
        try:
            st = abs_path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            _logger.debug(f"storage.stat unreadable: path={path!r} {type(e).__name__}: {e}")
            return None
        return StorageStat(
            exists=True,
            is_file=abs_path.is_file(),
            size=int(st.st_size),
            mtime=int(st.st_mtime),
        )

    def list_dir(self, dir_path: str = ".") -> list[StorageEntry]:
        base = resolve_path(self._base_dir, dir_path)

        if not base.exists():
            raise EntryNotFoundError(f"Not found: {dir_path}")
        if not base.is_dir():
            raise StorageError(f"Not a directory: {dir_path}")

        entries: list[StorageEntry] = []
        for item in sorted(base.iterdir(), key=lambda p: p.name):
            if not is_within(self._base_dir, item):
                _logger.debug(f"storage.list skipped {item.name!r}: outside location")
                continue
            try:
                st = item.stat()
            except OSError as e:
                # Dangling or looping symlink, or removed since iterdir.
                _logger.debug(f"storage.list skipped {item.name!r}: {type(e).__name__}: {e}")
                continue

            if item.is_file():
                kind = EntryKind.FILE
            elif item.is_dir():
                kind = EntryKind.DIR
            else:
                kind = EntryKind.OTHER

            name, ext = split_basename(item.name)
            entries.append(
                StorageEntry(
                    kind=kind,
                    basename=item.name,
                    filename=name,
                    extension=ext,
                    size=int(st.st_size) if kind is EntryKind.FILE else 0,
                    mtime=int(st.st_mtime),
                )
            )

        return entries

    def read(self, path: str) -> bytes:
        abs_path = resolve_path(self._base_dir, path)
        if not abs_path.exists():
            raise EntryNotFoundError(f"Not found: {path}")
        if not abs_path.is_file():
            raise NotAFileError(f"Not a file: {path}")
        return abs_path.read_bytes()

    def write(self, path: str, data: bytes) -> bool:
        abs_path = resolve_path(self._base_dir, path)
        if abs_path.is_dir():
            _logger.warning(f"storage.write refused: {path!r} is a directory")
            return False

        tmp_path: Path | None = None
        try:
            abs_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=abs_path.parent, prefix=f".{abs_path.name}.", suffix=".tmp", delete=False
            ) as f:
                tmp_path = Path(f.name)
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            tmp_path.replace(abs_path)
        except OSError as e:
            _logger.warning(f"storage.write failed: path={path!r} {type(e).__name__}: {e}")
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            return False

        return True
