"""Location configuration and base path composition.

ASCII-only.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from filelocation.core.config import ConfigResolver
from filelocation.core.errors import ConfigError

_SEPARATORS = "/\\"


class LocationType(StrEnum):
    """Supported kinds of location."""

    LOCAL = "local"


@dataclass(frozen=True)
class LocationConfig:
    """Where a FileLocation lives.

    ``type`` is required. ``root`` is the base directory; when set, ``path``
    is a subdirectory relative to it. When ``root`` is empty, ``path`` alone
    is used as the base directory.

    ``type`` keeps any string it is given; unsupported values only fail when
    the base path or the storage adapter is requested.
    """

    type: LocationType | str | None = None
    root: str = ""
    path: str = ""

    FIELDS = ("type", "root", "path")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LocationConfig:
        """Build a config from a plain mapping.

        Raises:
            ConfigError: On unknown keys or non-string values
        """
        unknown = sorted(set(data) - set(cls.FIELDS))
        if unknown:
            raise ConfigError(
                f"Unknown location config keys: {', '.join(map(str, unknown))}",
                f"Allowed keys: {', '.join(cls.FIELDS)}",
            )

        values: dict[str, str] = {}
        for key in cls.FIELDS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ConfigError(
                    f"Location config key '{key}' must be a string, got {type(value).__name__}"
                )
            values[key] = value

        return cls(
            type=_coerce_type(values.get("type")),
            root=values.get("root", ""),
            path=values.get("path", ""),
        )

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver, key: str = "location") -> LocationConfig:
        """Build a config from ``<key>.type``, ``<key>.root`` and ``<key>.path``."""
        return cls.from_mapping(
            {field: resolver.resolve_optional(f"{key}.{field}") for field in cls.FIELDS}
        )

    def location_type(self) -> LocationType:
        """Return the validated location type.

        Raises:
            ConfigError: If the type is missing or unsupported
        """
        if not self.type:
            raise ConfigError('Invalid configuration - missing key "type"')
        try:
            return LocationType(self.type)
        except ValueError:
            supported = ", ".join(t.value for t in LocationType)
            raise ConfigError(
                f"Unsupported type of location: {self.type}",
                f"Supported types: {supported}",
            ) from None

    def split_root(self) -> tuple[str, str]:
        """Return (root, subpath) after applying the composition rules.

        Raises:
            ConfigError: If both root and path are empty
        """
        if not self.root and not self.path:
            raise ConfigError(f'Invalid configuration for location of type "{self.type}"')

        if self.root:
            root, sub = self.root, self.path
        else:
            root, sub = self.path, ""

        trimmed = root.rstrip(_SEPARATORS)
        # A root made only of separators is the filesystem root.
        root = trimmed if trimmed else os.sep

        return root, sub.lstrip(_SEPARATORS)

    def resolve_base_path(self) -> str:
        """Compute the base directory of the location.

        Raises:
            ConfigError: If the type is missing or unsupported, or if both
                root and path are empty
        """
        self.location_type()
        root, sub = self.split_root()
        if sub == "":
            return root
        if root.endswith(os.sep):
            return root + sub
        return root + os.sep + sub


def _coerce_type(value: str | None) -> LocationType | str | None:
    if not value:
        return None
    try:
        return LocationType(value)
    except ValueError:
        return value
