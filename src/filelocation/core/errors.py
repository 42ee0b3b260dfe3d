"""Error handling with friendly messages."""

from __future__ import annotations


class FileLocationError(Exception):
    """Base exception for all filelocation errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(FileLocationError):
    """Configuration error."""

    pass


class MissingConfigKeyError(ConfigError):
    """No configuration source provides the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Config key '{key}' not found in any source")
        self.key = key


class ValidationError(FileLocationError):
    """Invalid argument or malformed metadata record."""

    pass


class NotFoundError(FileLocationError):
    """Requested file is absent or is not a regular file."""

    def __init__(self, url: str) -> None:
        super().__init__(
            f"File {url} is not available",
            "Check that the file exists in the configured location",
        )
        self.url = url


class FileReadError(FileLocationError):
    """Content of a file could not be read."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Unable to read content of file {url}")
        self.url = url


class IllegalStateError(FileLocationError):
    """Operation is not allowed in the current object state."""

    pass


class StorageError(FileLocationError):
    """Storage adapter error."""

    pass


class EntryNotFoundError(StorageError):
    """Raised when a storage entry does not exist."""


class NotAFileError(StorageError):
    """Raised when a regular file was expected."""
