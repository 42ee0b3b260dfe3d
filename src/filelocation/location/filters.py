"""Extension filter for file listings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from filelocation.core.errors import ValidationError


@dataclass(frozen=True)
class ExtensionFilter:
    """No restriction, a single extension, or a set of extensions.

    An empty set matches every extension. The empty string is a valid member
    and matches files without an extension. Matching is exact and
    case-sensitive.
    """

    extensions: frozenset[str] = frozenset()

    @classmethod
    def coerce(cls, value: ExtensionFilterArg) -> ExtensionFilter:
        """Validate a caller-supplied filter argument.

        Raises:
            ValidationError: If ``value`` is not None, a string, an
                ExtensionFilter or an iterable of strings
        """
        if value is None:
            return cls()
        if isinstance(value, ExtensionFilter):
            return value
        if isinstance(value, str):
            return cls(frozenset({value}))
        if isinstance(value, (bytes, bytearray, dict)) or not isinstance(value, Iterable):
            raise ValidationError(f"Invalid param with_extension: {type(value).__name__}")

        items = list(value)
        bad = [item for item in items if not isinstance(item, str)]
        if bad:
            raise ValidationError(
                f"Invalid param with_extension: expected strings, got {type(bad[0]).__name__}"
            )
        return cls(frozenset(items))

    @property
    def is_empty(self) -> bool:
        return not self.extensions

    def matches(self, extension: str) -> bool:
        return self.is_empty or extension in self.extensions


ExtensionFilterArg = ExtensionFilter | str | Iterable[str] | None
