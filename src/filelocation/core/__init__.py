"""Core services shared by storage and location code: errors, config, logging, diagnostics."""

from filelocation.core.config import ConfigResolver, ConfigSource, LoggingPolicy
from filelocation.core.errors import (
    ConfigError,
    EntryNotFoundError,
    FileLocationError,
    FileReadError,
    IllegalStateError,
    MissingConfigKeyError,
    NotAFileError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from filelocation.core.events import EventBus, get_event_bus
from filelocation.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_log_sink,
    set_verbosity,
)

__all__ = [
    # Config
    "ConfigResolver",
    "ConfigSource",
    "LoggingPolicy",
    # Errors
    "FileLocationError",
    "ConfigError",
    "MissingConfigKeyError",
    "ValidationError",
    "NotFoundError",
    "FileReadError",
    "IllegalStateError",
    "StorageError",
    "EntryNotFoundError",
    "NotAFileError",
    # Events
    "EventBus",
    "get_event_bus",
    # Logging
    "VerbosityLevel",
    "apply_logging_policy",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_log_sink",
    "set_verbosity",
]
