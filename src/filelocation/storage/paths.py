"""Path normalization and root-jail resolution for storage adapters.

All paths are relative to the adapter's base directory.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from filelocation.core.errors import StorageError


class PathOutsideRootError(StorageError):
    """Raised when a requested path escapes the base directory."""


class InvalidRelativePathError(StorageError):
    """Raised when a requested relative path is invalid."""


def normalize_rel_path(rel_path: str) -> PurePosixPath:
    """Normalize and validate a relative path.

    Rules:
    - must be relative (no leading slash)
    - no '..' segments
    - backslashes are treated as separators

    Raises:
        InvalidRelativePathError
    """
    if rel_path is None:
        raise InvalidRelativePathError("Path is required")

    p = PurePosixPath(str(rel_path).replace("\\", "/"))

    if p.is_absolute():
        raise InvalidRelativePathError(f"Absolute paths are not allowed: {rel_path!r}")

    if any(part == ".." for part in p.parts):
        raise InvalidRelativePathError(f"Parent path segments ('..') are not allowed: {rel_path!r}")

    # PurePosixPath('.') is valid and represents the base directory itself.
    return p


def resolve_path(base_dir: Path, rel_path: str) -> Path:
    """Resolve a relative path within a base directory.

    Raises:
        PathOutsideRootError
        InvalidRelativePathError
    """
    rel = normalize_rel_path(rel_path)

    try:
        abs_path = (base_dir / Path(*rel.parts)).resolve()
    except RuntimeError:
        # Symlink loop on interpreters whose non-strict resolve() raises.
        raise InvalidRelativePathError(f"Symlink loop in path: {rel_path!r}") from None

    if not is_within(base_dir, abs_path):
        raise PathOutsideRootError(f"Path escapes configured location: {rel_path!r}")

    return abs_path


def is_within(base_dir: Path, path: Path) -> bool:
    """Return True if ``path`` resolves to ``base_dir`` or a path below it.

    Symlinks are followed; a path that cannot be resolved is not within.
    """
    try:
        resolved = path.resolve()
        resolved.relative_to(base_dir.resolve())
    except (OSError, RuntimeError, ValueError):
        return False
    return True
