"""Unit tests for ExtensionFilter."""

import pytest

from filelocation.core.errors import ValidationError
from filelocation.location.filters import ExtensionFilter


def test_none_means_no_restriction():
    f = ExtensionFilter.coerce(None)

    assert f.is_empty
    assert f.matches("txt")
    assert f.matches("")


def test_empty_collection_means_no_restriction():
    assert ExtensionFilter.coerce([]).is_empty
    assert ExtensionFilter.coerce(()).matches("md")


def test_single_string():
    f = ExtensionFilter.coerce("txt")

    assert f.extensions == frozenset({"txt"})
    assert f.matches("txt")
    assert not f.matches("md")


def test_collection_of_strings():
    f = ExtensionFilter.coerce(["txt", "md"])

    assert f.matches("txt")
    assert f.matches("md")
    assert not f.matches("py")


def test_generator_is_accepted():
    f = ExtensionFilter.coerce(ext for ext in ("txt",))
    assert f.extensions == frozenset({"txt"})


def test_matching_is_exact_and_case_sensitive():
    f = ExtensionFilter.coerce("txt")

    assert not f.matches("TXT")
    assert not f.matches("tx")


def test_empty_string_selects_files_without_extension():
    f = ExtensionFilter.coerce("")

    assert f.matches("")
    assert not f.matches("txt")


def test_existing_filter_passes_through():
    f = ExtensionFilter(frozenset({"md"}))
    assert ExtensionFilter.coerce(f) is f


@pytest.mark.parametrize("bad", [42, 1.5, b"txt", {"txt": 1}, object()])
def test_unsupported_type_raises(bad):
    with pytest.raises(ValidationError, match="Invalid param with_extension"):
        ExtensionFilter.coerce(bad)


def test_non_string_member_raises():
    with pytest.raises(ValidationError, match="expected strings, got int"):
        ExtensionFilter.coerce(["txt", 1])
