"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path (for 'filelocation.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

FILE1_TEXT = "MIT License file1"
OTHER_FILE2_TEXT = "MIT License other_file2"


@pytest.fixture(autouse=True)
def _isolate_global_buses():
    """Ensure event subscribers, the log sink and verbosity do not leak between tests."""
    from filelocation.core.events import get_event_bus
    from filelocation.core.logging import VerbosityLevel, set_colors, set_log_sink, set_verbosity

    get_event_bus().clear()
    set_log_sink(None)
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(False)
    yield
    get_event_bus().clear()
    set_log_sink(None)
    set_verbosity(VerbosityLevel.NORMAL)


@pytest.fixture
def files_dir(tmp_path):
    """Create a location directory with four files and one subdirectory.

    Layout:
        file1.txt          "MIT License file1"
        other_file2.txt    "MIT License other_file2"
        readme.md
        other_notes.md
        nested/inner.txt   (not a direct entry)

    Args:
        tmp_path: pytest temporary directory

    Returns:
        Path to the location directory
    """
    root = tmp_path / "files"
    root.mkdir()
    (root / "file1.txt").write_text(FILE1_TEXT, encoding="utf-8")
    (root / "other_file2.txt").write_text(OTHER_FILE2_TEXT, encoding="utf-8")
    (root / "readme.md").write_text("# readme\n", encoding="utf-8")
    (root / "other_notes.md").write_text("# notes\n", encoding="utf-8")
    (root / "nested").mkdir()
    (root / "nested" / "inner.txt").write_text("inner", encoding="utf-8")
    return root


@pytest.fixture
def location(files_dir):
    """Create FileLocation of type local rooted at files_dir.

    Returns:
        FileLocation instance
    """
    from filelocation import FileLocation, LocationConfig

    return FileLocation(LocationConfig(type="local", root=str(files_dir)))


@pytest.fixture
def config_resolver(tmp_path):
    """Create ConfigResolver isolated from user and system config files.

    Returns:
        ConfigResolver instance
    """
    from filelocation import ConfigResolver

    return ConfigResolver(
        cli_args={},
        user_config_path=tmp_path / "nonexistent.yaml",
        system_config_path=tmp_path / "nonexistent_system.yaml",
        defaults={},
    )
