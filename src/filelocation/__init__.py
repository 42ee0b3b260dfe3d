"""filelocation - list, inspect and read files in a configured directory."""

from filelocation.core.config import ConfigResolver
from filelocation.core.errors import (
    ConfigError,
    FileLocationError,
    FileReadError,
    IllegalStateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from filelocation.location import (
    ExtensionFilter,
    FileHandle,
    FileLocation,
    LocationConfig,
    LocationType,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Location
    "FileLocation",
    "FileHandle",
    "ExtensionFilter",
    "LocationConfig",
    "LocationType",
    # Config
    "ConfigResolver",
    # Errors
    "FileLocationError",
    "ConfigError",
    "ValidationError",
    "NotFoundError",
    "FileReadError",
    "IllegalStateError",
    "StorageError",
]
