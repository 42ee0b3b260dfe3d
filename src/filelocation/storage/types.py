"""Types exchanged with storage adapters.

ASCII-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class EntryKind(StrEnum):
    """Kind of a directory entry."""

    FILE = "file"
    DIR = "dir"
    OTHER = "other"


@dataclass(frozen=True)
class StorageStat:
    """Metadata returned by stat."""

    exists: bool
    is_file: bool
    size: int
    mtime: int


@dataclass(frozen=True)
class StorageEntry:
    """Directory entry returned by list_dir.

    ``filename`` is the basename without extension; ``extension`` is the text
    after the last dot of the basename, empty when there is none.
    """

    kind: EntryKind
    basename: str
    filename: str
    extension: str
    size: int
    mtime: int

    def to_record(self) -> dict[str, object]:
        """Return the metadata record understood by FileHandle."""
        return {
            "kind": self.kind.value,
            "timestamp": self.mtime,
            "size": self.size,
            "basename": self.basename,
            "filename": self.filename,
            "extension": self.extension,
        }


def split_basename(basename: str) -> tuple[str, str]:
    """Split a basename into (name, extension).

    The extension is taken from the final path component only. A basename
    without a dot, or with nothing after its last dot, has no extension and
    keeps the whole basename as its name.
    """
    last = basename.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in last:
        return basename, ""
    ext = last.rsplit(".", 1)[1]
    if ext == "":
        return basename, ""
    return basename[: -(len(ext) + 1)], ext
