"""Configuration resolver with layered priority.

Priority (highest to lowest):
1. Explicit arguments (``cli_args``)
2. Environment variables (FILELOCATION_*)
3. Config files (user > system), YAML
4. Defaults

Config files are read lazily, the first time a lookup reaches them.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from filelocation.core.errors import ConfigError, MissingConfigKeyError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

ENV_PREFIX = "FILELOCATION_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

Lookup = Callable[[str], Any]


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class LoggingPolicy:
    """Resolved, immutable logging policy."""

    level_name: str  # quiet | normal | verbose | debug
    emit_error: bool
    emit_warning: bool
    emit_info: bool
    emit_debug: bool
    sources: dict[str, ConfigSource]

    @classmethod
    def for_level(cls, source: ConfigSource) -> LoggingPolicy:
        level_name = source.value
        return cls(
            level_name=level_name,
            emit_error=True,
            emit_warning=True,
            emit_info=level_name != "quiet",
            emit_debug=level_name in {"verbose", "debug"},
            sources={"level_name": source},
        )


class ConfigResolver:
    """Resolve configuration values by priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'location': {'type': 'local', 'root': '/srv/data'}},
            user_config_path=Path('~/.config/filelocation/config.yaml'),
        )

        root, source = resolver.resolve('location.root')
        # root = '/srv/data', source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Explicit values (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority); None selects the
                built-in defaults, ``{}`` disables them
        """
        self.cli_args = cli_args or {}
        self.user_config_path = (
            user_config_path or Path.home() / ".config" / "filelocation" / "config.yaml"
        )
        self.system_config_path = system_config_path or Path("/etc/filelocation/config.yaml")
        self.defaults = defaults if defaults is not None else default_config()

        self._files: dict[Path, dict[str, Any]] = {}

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (dot notation: 'location.root')

        Returns:
            (value, source) tuple

        Raises:
            MissingConfigKeyError: If no source provides the key
            ConfigError: If a config file cannot be loaded
        """
        for source, lookup in self._lookups():
            value = lookup(key)
            if value is not None:
                return value, source
        raise MissingConfigKeyError(key)

    def resolve_optional(self, key: str, default: Any = None) -> Any:
        """Resolve a key, returning ``default`` when no source provides it."""
        try:
            value, _src = self.resolve(key)
        except MissingConfigKeyError:
            return default
        return value

    def resolve_bool(self, key: str, default: bool = False) -> bool:
        """Resolve a boolean key; env values arrive as strings.

        Raises:
            ConfigError: If the value is not a recognizable boolean
        """
        value = self.resolve_optional(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)

        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigError(
            f"Config key '{key}' must be a bool, got {value!r}",
            f"Use one of: {', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES))}",
        )

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Allowed values (after normalization):
            quiet | normal | verbose | debug

        Raises:
            ConfigError: If the resolved value is invalid.
        """
        return self._logging_level_source().value

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Resolve the logging policy without touching runtime logging state."""
        return LoggingPolicy.for_level(self._logging_level_source())

    def _logging_level_source(self) -> ConfigSource:
        key = "logging.level"
        try:
            value, source = self.resolve(key)
        except MissingConfigKeyError:
            return ConfigSource(value=DEFAULT_LOGGING_LEVEL, source="default")

        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        level = value.strip().lower()
        if level not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}", f"Allowed values: {allowed}")

        return ConfigSource(value=level, source=source)

    def _lookups(self) -> list[tuple[str, Lookup]]:
        return [
            ("cli", lambda key: get_nested(self.cli_args, key)),
            ("env", env_value),
            ("user_config", lambda key: get_nested(self._file(self.user_config_path), key)),
            ("system_config", lambda key: get_nested(self._file(self.system_config_path), key)),
            ("default", lambda key: get_nested(self.defaults, key)),
        ]

    def _file(self, path: Path) -> dict[str, Any]:
        if path not in self._files:
            self._files[path] = load_yaml(path)
        return self._files[path]


def env_value(key: str) -> str | None:
    """Read ``key`` from the environment.

    Example: location.root -> FILELOCATION_LOCATION_ROOT
    """
    return os.environ.get(ENV_PREFIX + key.upper().replace(".", "_"))


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; a missing file or a non-mapping document is empty.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    return data if isinstance(data, dict) else {}


def get_nested(data: dict[str, Any], key: str) -> Any | None:
    """Get nested value using dot notation.

    Example:
        get_nested({'location': {'root': '/srv'}}, 'location.root') -> '/srv'
    """
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def default_config() -> dict[str, Any]:
    """Built-in defaults."""
    return {
        "location": {
            "type": "local",
            "root": "",
            "path": "",
        },
        "logging": {
            "level": DEFAULT_LOGGING_LEVEL,
            "color": True,
        },
        "diagnostics": {
            "enabled": False,
            "path": str(Path.home() / ".filelocation" / "diagnostics.jsonl"),
        },
    }
