"""FileHandle: identity, metadata and content access for one file.

A handle is either materialized (all metadata known, usually because it came
from a listing) or name-only (built from a bare file name). A name-only handle
resolves its metadata through the owning FileLocation the first time any
field other than ``basename`` is read. Resolution happens at most once;
afterwards the handle is immutable.

Content is never cached: every ``content`` access reads through the location.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from filelocation.core.errors import (
    FileReadError,
    IllegalStateError,
    NotFoundError,
    StorageError,
    ValidationError,
)

if TYPE_CHECKING:
    from filelocation.location.location import FileLocation


REQUIRED_KEYS = ("kind", "timestamp", "size", "basename", "extension", "filename")
METADATA_FIELDS = ("basename", "name", "ext", "size", "timestamp")


def join_basename(name: str, ext: str) -> str:
    """Inverse of ``split_basename``: ``name`` or ``name.ext``."""
    return name if ext == "" else f"{name}.{ext}"


@dataclass(frozen=True)
class _Metadata:
    name: str
    ext: str
    size: int
    timestamp: int


def _non_negative_int(record: Mapping[str, Any], key: str) -> int:
    raw = record[key]
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {key}: {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {key}: {raw!r}") from None
    if value < 0:
        raise ValidationError(f"Invalid {key}: {value} is negative")
    return value


class FileHandle:
    """One file in a FileLocation.

    Build it from a metadata record (materialized) or from a bare file name
    (name-only):

        FileHandle(location, {"kind": "file", "basename": "a.txt", ...})
        FileHandle(location, "a.txt")

    Raises:
        ValidationError: If the record is malformed or the name is empty
    """

    def __init__(self, location: FileLocation, file_info: Mapping[str, Any] | str) -> None:
        self._location = location
        self._lock = threading.Lock()
        self._basename = ""
        self._meta: _Metadata | None = None

        if isinstance(file_info, Mapping):
            self._set_from_record(file_info)
        elif isinstance(file_info, str) and file_info != "":
            self._basename = file_info
        else:
            raise ValidationError(
                "Invalid param file_info",
                "Pass a metadata record or a non-empty file name",
            )

    @classmethod
    def from_record(cls, location: FileLocation, record: Mapping[str, Any]) -> FileHandle:
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Metadata record must be a mapping, got {type(record).__name__}"
            )
        return cls(location, record)

    @classmethod
    def from_name(cls, location: FileLocation, basename: str) -> FileHandle:
        if not isinstance(basename, str):
            raise ValidationError(f"File name must be a string, got {type(basename).__name__}")
        return cls(location, basename)

    @property
    def location(self) -> FileLocation:
        return self._location

    @property
    def loaded(self) -> bool:
        return self._meta is not None

    @property
    def basename(self) -> str:
        """Full file name, with extension. Known without resolution."""
        return self._basename

    @property
    def name(self) -> str:
        """File name without extension."""
        return self._metadata().name

    @property
    def ext(self) -> str:
        """Extension without the leading dot; empty when there is none."""
        return self._metadata().ext

    @property
    def size(self) -> int:
        """Size in bytes."""
        return self._metadata().size

    @property
    def timestamp(self) -> int:
        """Modification time, whole seconds since the epoch."""
        return self._metadata().timestamp

    @property
    def content(self) -> bytes:
        """Whole content of the file, read fresh on every access.

        Raises:
            FileReadError: If the location cannot read the file
        """
        try:
            return self._location.read_file(self._basename)
        except (StorageError, OSError) as e:
            raise FileReadError(self._location.get_file_url(self._basename)) from e

    def text(self, encoding: str = "utf-8") -> str:
        """Content decoded as text."""
        return self.content.decode(encoding)

    def get(self, field: str) -> Any:
        """Return a metadata field by name.

        Raises:
            ValidationError: If ``field`` is not a metadata field
            NotFoundError: If a name-only handle cannot be resolved
        """
        if field not in METADATA_FIELDS:
            raise ValidationError(
                f'There is no property "{field}" in {type(self).__name__}',
                f"Known fields: {', '.join(METADATA_FIELDS)}",
            )
        return getattr(self, field)

    def metadata(self) -> dict[str, Any]:
        """All metadata fields as a dict (resolves a name-only handle)."""
        return {field: self.get(field) for field in METADATA_FIELDS}

    def __repr__(self) -> str:
        state = "loaded" if self.loaded else "name-only"
        return f"FileHandle({self._basename!r}, {state})"

    def _metadata(self) -> _Metadata:
        if self._meta is None:
            with self._lock:
                if self._meta is None:
                    self._load()
        return cast(_Metadata, self._meta)

    def _load(self) -> None:
        if self._meta is not None:
            raise IllegalStateError(f"File {self._basename} is already loaded")

        url = self._location.get_file_url(self._basename)
        try:
            fetched = self._location.get_file(self._basename)
        except StorageError as e:
            raise NotFoundError(url) from e
        if fetched is None:
            raise NotFoundError(url)

        self._basename = fetched.basename
        self._meta = fetched._metadata()

    def _set_from_record(self, record: Mapping[str, Any]) -> None:
        for key in REQUIRED_KEYS:
            if record.get(key) is None:
                raise ValidationError(f"Missing key {key} in param file_info")

        if record["kind"] != "file":
            raise ValidationError(f"File is required, got kind {record['kind']!r}")

        size = _non_negative_int(record, "size")
        timestamp = _non_negative_int(record, "timestamp")

        ext = str(record["extension"])
        name = str(record["filename"])
        basename = str(record["basename"])

        if basename == "" or basename != join_basename(name, ext):
            raise ValidationError(
                f"Inconsistent file_info: basename={basename!r} "
                f"filename={name!r} extension={ext!r}"
            )

        self._basename = basename
        self._meta = _Metadata(name=name, ext=ext, size=size, timestamp=timestamp)
