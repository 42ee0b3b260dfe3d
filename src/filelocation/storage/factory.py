"""Build storage adapters from location configuration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from filelocation.core.errors import ConfigError
from filelocation.core.logging import get_logger
from filelocation.location.config import LocationConfig, LocationType

from .adapter import LocalStorageAdapter, StorageAdapter

_logger = get_logger(__name__)

AdapterBuilder = Callable[[LocationConfig], StorageAdapter]


def _build_local(config: LocationConfig) -> StorageAdapter:
    return LocalStorageAdapter(Path(config.resolve_base_path()))


_BUILDERS: dict[LocationType, AdapterBuilder] = {
    LocationType.LOCAL: _build_local,
}


class AdapterFactory:
    """Create and cache the storage adapter for one configuration.

    The adapter is built on first ``get_adapter`` call and reused until the
    configuration changes.
    """

    def __init__(self, config: LocationConfig | Mapping[str, Any] | None = None) -> None:
        self._config: LocationConfig | None = None
        self._adapter: StorageAdapter | None = None
        self.set_config(config)

    @property
    def config(self) -> LocationConfig | None:
        return self._config

    def set_config(self, config: LocationConfig | Mapping[str, Any] | None) -> None:
        """Set or unset the configuration.

        The cached adapter is dropped only when the configuration actually
        changes.

        Raises:
            ConfigError: If ``config`` is not a LocationConfig, a mapping or None
        """
        if config is None:
            new_config = None
        elif isinstance(config, LocationConfig):
            new_config = config
        elif isinstance(config, Mapping):
            new_config = LocationConfig.from_mapping(config)
        else:
            raise ConfigError(f"Invalid param config: {type(config).__name__}")

        if new_config is not None and new_config == self._config:
            return

        self._config = new_config
        self._adapter = None

    def get_adapter(self) -> StorageAdapter:
        """Return the adapter for the current configuration.

        Raises:
            ConfigError: If there is no configuration, or its type is missing
                or unsupported
        """
        if self._adapter is None:
            if self._config is None:
                raise ConfigError("Invalid configuration and adapter cannot be specified")
            location_type = self._config.location_type()
            builder = _BUILDERS.get(location_type)
            if builder is None:
                raise ConfigError(f"Unable to create adapter of type {location_type.value}")
            self._adapter = builder(self._config)
            _logger.debug(f"storage adapter created type={location_type.value!r}")
        return self._adapter


def register_adapter(location_type: LocationType, builder: AdapterBuilder) -> None:
    """Register (or replace) the adapter builder for a location type."""
    _BUILDERS[location_type] = builder
