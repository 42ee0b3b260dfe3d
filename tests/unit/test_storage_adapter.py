"""Unit tests for storage paths, types and LocalStorageAdapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from filelocation.core.errors import EntryNotFoundError, NotAFileError, StorageError
from filelocation.storage import (
    EntryKind,
    InvalidRelativePathError,
    LocalStorageAdapter,
    PathOutsideRootError,
    StorageAdapter,
    StorageEntry,
    split_basename,
)
from filelocation.storage.paths import normalize_rel_path, resolve_path


@pytest.fixture()
def adapter(files_dir: Path) -> LocalStorageAdapter:
    return LocalStorageAdapter(files_dir)


class TestPaths:
    def test_normalize_accepts_relative_and_backslashes(self):
        assert str(normalize_rel_path("a\\b.txt")) == "a/b.txt"
        assert str(normalize_rel_path(".")) == "."

    @pytest.mark.parametrize("bad", ["/etc/passwd", "../x", "a/../../x", "..\\x"])
    def test_normalize_rejects_escapes(self, bad):
        with pytest.raises(InvalidRelativePathError):
            normalize_rel_path(bad)

    def test_resolve_path_stays_inside_base(self, tmp_path: Path):
        assert resolve_path(tmp_path, "a/b.txt") == (tmp_path / "a" / "b.txt").resolve()

    def test_resolve_path_rejects_symlink_escape(self, tmp_path: Path):
        base = tmp_path / "base"
        base.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (base / "link").symlink_to(outside, target_is_directory=True)

        with pytest.raises(PathOutsideRootError):
            resolve_path(base, "link/secret.txt")


class TestSplitBasename:
    @pytest.mark.parametrize(
        "basename, expected",
        [
            ("file1.txt", ("file1", "txt")),
            ("archive.tar.gz", ("archive.tar", "gz")),
            ("README", ("README", "")),
            ("file.", ("file.", "")),
            (".bashrc", ("", "bashrc")),
            ("sub.d/file", ("sub.d/file", "")),
            ("sub/a.txt", ("sub/a", "txt")),
        ],
    )
    def test_split(self, basename, expected):
        assert split_basename(basename) == expected


class TestLocalStorageAdapter:
    def test_satisfies_protocol(self, adapter: LocalStorageAdapter):
        assert isinstance(adapter, StorageAdapter)

    def test_stat_file(self, adapter: LocalStorageAdapter, files_dir: Path):
        st = adapter.stat("file1.txt")

        assert st is not None
        assert st.exists and st.is_file
        assert st.size == 17
        assert st.mtime == int((files_dir / "file1.txt").stat().st_mtime)

    def test_stat_directory_and_missing(self, adapter: LocalStorageAdapter):
        st = adapter.stat("nested")
        assert st is not None
        assert st.exists and not st.is_file

        assert adapter.stat("missing.txt") is None
        assert adapter.stat("file1.txt/below") is None

    def test_list_dir_is_flat_and_sorted(self, adapter: LocalStorageAdapter):
        entries = adapter.list_dir(".")

        assert [e.basename for e in entries] == [
            "file1.txt",
            "nested",
            "other_file2.txt",
            "other_notes.md",
            "readme.md",
        ]
        nested = entries[1]
        assert nested.kind == EntryKind.DIR
        assert nested.size == 0

        other = entries[2]
        assert other == StorageEntry(
            kind=EntryKind.FILE,
            basename="other_file2.txt",
            filename="other_file2",
            extension="txt",
            size=23,
            mtime=other.mtime,
        )

    def test_list_dir_skips_symlink_leaving_base(
        self, adapter: LocalStorageAdapter, files_dir: Path, tmp_path: Path
    ):
        secret = tmp_path / "secret.txt"
        secret.write_text("secret", encoding="utf-8")
        (files_dir / "link.txt").symlink_to(secret)
        (files_dir / "linkdir").symlink_to(tmp_path, target_is_directory=True)

        names = [e.basename for e in adapter.list_dir(".")]

        assert "link.txt" not in names
        assert "linkdir" not in names
        assert len(names) == 5
        with pytest.raises(StorageError):
            adapter.stat("link.txt")

    def test_list_dir_keeps_symlink_inside_base(
        self, adapter: LocalStorageAdapter, files_dir: Path
    ):
        (files_dir / "alias.txt").symlink_to(files_dir / "file1.txt")

        by_name = {e.basename: e for e in adapter.list_dir(".")}

        assert by_name["alias.txt"].kind == EntryKind.FILE
        assert by_name["alias.txt"].size == 17

    def test_list_dir_skips_broken_entries(self, adapter: LocalStorageAdapter, files_dir: Path):
        (files_dir / "loop").symlink_to(files_dir / "loop")
        (files_dir / "dangling.txt").symlink_to(files_dir / "gone.txt")

        names = [e.basename for e in adapter.list_dir(".")]

        assert names == [
            "file1.txt",
            "nested",
            "other_file2.txt",
            "other_notes.md",
            "readme.md",
        ]

    def test_list_dir_of_subdirectory(self, adapter: LocalStorageAdapter):
        assert [e.basename for e in adapter.list_dir("nested")] == ["inner.txt"]

    def test_list_dir_errors(self, adapter: LocalStorageAdapter):
        with pytest.raises(EntryNotFoundError):
            adapter.list_dir("missing")
        with pytest.raises(StorageError, match="Not a directory"):
            adapter.list_dir("file1.txt")

    def test_entry_to_record(self, adapter: LocalStorageAdapter):
        entry = adapter.list_dir(".")[0]
        record = entry.to_record()

        assert record == {
            "kind": "file",
            "timestamp": entry.mtime,
            "size": 17,
            "basename": "file1.txt",
            "filename": "file1",
            "extension": "txt",
        }

    def test_read(self, adapter: LocalStorageAdapter):
        assert adapter.read("file1.txt") == b"MIT License file1"

        with pytest.raises(EntryNotFoundError):
            adapter.read("missing.txt")
        with pytest.raises(NotAFileError):
            adapter.read("nested")
        with pytest.raises(InvalidRelativePathError):
            adapter.read("../outside.txt")

    def test_write_creates_and_replaces(self, adapter: LocalStorageAdapter, files_dir: Path):
        assert adapter.write("new/deep.bin", b"\x00\x01") is True
        assert (files_dir / "new" / "deep.bin").read_bytes() == b"\x00\x01"

        assert adapter.write("file1.txt", b"replaced") is True
        assert (files_dir / "file1.txt").read_bytes() == b"replaced"
        assert list(files_dir.rglob("*.tmp")) == []

    def test_write_keeps_file_named_like_a_temp_file(
        self, adapter: LocalStorageAdapter, files_dir: Path
    ):
        (files_dir / "file1.txt.tmp").write_bytes(b"user data")

        assert adapter.write("file1.txt", b"replaced") is True

        assert (files_dir / "file1.txt.tmp").read_bytes() == b"user data"
        assert sorted(p.name for p in files_dir.glob("*.tmp")) == ["file1.txt.tmp"]

    def test_failed_write_leaves_no_temp_file(
        self, adapter: LocalStorageAdapter, files_dir: Path
    ):
        assert adapter.write("nested", b"x") is False
        assert list(files_dir.glob(".*")) == []

    def test_write_to_directory_returns_false(self, adapter: LocalStorageAdapter):
        assert adapter.write("nested", b"x") is False

    def test_write_rejects_escape(self, adapter: LocalStorageAdapter):
        with pytest.raises(InvalidRelativePathError):
            adapter.write("/abs.txt", b"x")
