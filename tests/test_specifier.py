"""Tests for specifier formatting and parsing."""

import pytest

from workspace_bundler.specifier import directory_name
from workspace_bundler.specifier import format_specifier
from workspace_bundler.specifier import is_valid_name
from workspace_bundler.specifier import parse_specifier


def test_single_version_uses_bare_name():
    assert format_specifier("lodash", "4.17.21", False) == "lodash"


def test_disambiguation_appends_version():
    assert format_specifier("lodash", "4.17.0", True) == "lodash@4.17.0"


def test_scoped_name_keeps_scope_marker():
    specifier = format_specifier("@scope/util", "1.2.3", True)

    assert specifier == "@scope/util@1.2.3"
    assert parse_specifier(specifier) == ("@scope/util", "1.2.3")
    assert directory_name(specifier) == "@scope/util"


def test_scoped_name_without_version_is_not_split():
    assert parse_specifier("@scope/util") == ("@scope/util", None)
    assert directory_name("@scope/util") == "@scope/util"


def test_missing_version_never_disambiguates():
    assert format_specifier("left-pad", None, True) == "left-pad"


@pytest.mark.parametrize("name", ["", "@", "@scope"])
def test_invalid_names_are_rejected(name):
    with pytest.raises(ValueError):
        format_specifier(name, "1.0.0", True)


@pytest.mark.parametrize(
    ("name", "valid"),
    [
        ("lodash", True),
        ("@scope/util", True),
        ("@scope", False),
        ("@scope/", False),
        ("@/util", False),
        ("a/b", False),
        ("../escape", False),
        ("", False),
    ],
)
def test_is_valid_name(name, valid):
    assert is_valid_name(name) is valid
