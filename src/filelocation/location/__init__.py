"""File location package."""

from .config import LocationConfig, LocationType
from .filters import ExtensionFilter
from .handle import FileHandle
from .location import FileLocation

__all__ = [
    "ExtensionFilter",
    "FileHandle",
    "FileLocation",
    "LocationConfig",
    "LocationType",
]
