"""FileLocation: a configured directory that files are listed and read from.

The storage adapter is created lazily on first use and cached for the life
of the instance. Every adapter call runs under ``observe_operation`` so it
shows up on the event bus and in the logs.
"""

from __future__ import annotations

import os

from filelocation.core.diagnostics import observe_operation
from filelocation.core.errors import StorageError, ValidationError
from filelocation.core.logging import get_logger
from filelocation.storage.adapter import StorageAdapter
from filelocation.storage.factory import AdapterFactory
from filelocation.storage.types import EntryKind, split_basename

from .config import LocationConfig
from .filters import ExtensionFilter, ExtensionFilterArg
from .handle import FileHandle

_logger = get_logger(__name__)

_COMPONENT = "file_location"


class FileLocation:
    """Files in one configured directory.

    Example:
        location = FileLocation(LocationConfig(type="local", root="/srv/data"))
        for handle in location.list_files(["txt", "md"]):
            print(handle.basename, handle.size)
    """

    def __init__(
        self,
        config: LocationConfig,
        *,
        adapter: StorageAdapter | None = None,
    ) -> None:
        """Create a location.

        Args:
            config: Location configuration
            adapter: Storage adapter to use instead of the one built from
                ``config`` on first use
        """
        self._config = config
        self._adapter = adapter

    @property
    def config(self) -> LocationConfig:
        return self._config

    def location_path(self) -> str:
        """Return the base directory of this location.

        Raises:
            ConfigError: If the configuration is incomplete or unsupported
        """
        return self._config.resolve_base_path()

    def get_file_url(self, file_name: str) -> str:
        """Return a displayable URL of a file, for diagnostics only.

        The URL is built from the local base path and is not meaningful for
        adapters that are not backed by the local filesystem.
        """
        return self.location_path() + os.sep + file_name.lstrip("/\\")

    def get_file(self, file_name: str) -> FileHandle | None:
        """Return a materialized handle, or None if ``file_name`` is not a regular file."""
        with observe_operation(
            component=_COMPONENT, operation="location.stat", base=self._base(file_name)
        ) as summary:
            st = self._storage().stat(file_name)
            summary["found"] = bool(st and st.exists and st.is_file)

        if st is None or not st.exists or not st.is_file:
            return None

        name, ext = split_basename(file_name)
        return FileHandle(
            self,
            {
                "kind": EntryKind.FILE.value,
                "timestamp": st.mtime,
                "size": st.size,
                "filename": name,
                "extension": ext,
                "basename": file_name,
            },
        )

    def read_file(self, file_name: str) -> bytes:
        """Return the content of a file; adapter errors propagate unchanged."""
        with observe_operation(
            component=_COMPONENT, operation="location.read", base=self._base(file_name)
        ) as summary:
            data = self._storage().read(file_name)
            summary["bytes"] = len(data)
            return data

    def put_file(self, file_name: str, content: bytes | bytearray | memoryview | str) -> bool:
        """Write the whole content of a file.

        ``str`` content is encoded as UTF-8.

        Returns:
            True on success, False when the adapter reports a failure

        Raises:
            ValidationError: If ``content`` is neither text nor a bytes-like buffer
        """
        if isinstance(content, str):
            data = content.encode("utf-8")
        elif isinstance(content, (bytes, bytearray, memoryview)):
            data = bytes(content)
        else:
            raise ValidationError(
                f"Invalid param content: {type(content).__name__}",
                "Pass str or bytes",
            )
        adapter = self._storage()

        try:
            with observe_operation(
                component=_COMPONENT, operation="location.write", base=self._base(file_name)
            ) as summary:
                written = adapter.write(file_name, data)
                summary["written"] = written
                summary["bytes"] = len(data) if written else 0
        except (StorageError, OSError) as e:
            _logger.warning(f"location.write failed file={file_name!r} {type(e).__name__}: {e}")
            return False

        if not written:
            _logger.warning(f"location.write failed file={file_name!r}")
        return written

    def list_files(self, with_extension: ExtensionFilterArg = None) -> list[FileHandle]:
        """List regular files, optionally restricted to some extensions.

        Args:
            with_extension: None, a single extension, or a collection of
                extensions. An empty collection means no restriction.

        Order follows the adapter and must not be relied upon.

        Raises:
            ValidationError: If ``with_extension`` has an unsupported type
        """
        ext_filter = ExtensionFilter.coerce(with_extension)

        with observe_operation(
            component=_COMPONENT, operation="location.list", base=self._base(".")
        ) as summary:
            entries = self._storage().list_dir(".")
            summary["items_count"] = len(entries)

            handles = [
                FileHandle(self, entry.to_record())
                for entry in entries
                if entry.kind == EntryKind.FILE and ext_filter.matches(entry.extension)
            ]
            summary["files_count"] = len(handles)
            return handles

    def list_files_with_prefix(
        self, name_prefix: str, with_extension: ExtensionFilterArg = None
    ) -> list[FileHandle]:
        """Like ``list_files`` but keep only names starting with ``name_prefix``.

        The prefix is compared against the name without extension and is
        case-sensitive.
        """
        return [f for f in self.list_files(with_extension) if f.name.startswith(name_prefix)]

    def _storage(self) -> StorageAdapter:
        if self._adapter is None:
            self._adapter = AdapterFactory(self._config).get_adapter()
        return self._adapter

    def _base(self, rel_path: str) -> dict[str, str]:
        return {"location": str(self._config.type), "rel_path": rel_path}

    def __repr__(self) -> str:
        cfg = self._config
        return f"FileLocation(type={cfg.type!s}, root={cfg.root!r}, path={cfg.path!r})"
