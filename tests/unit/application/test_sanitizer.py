"""Unit tests for the name sanitizer."""

import pytest

from user_directory.application.sanitizer import is_name_char, sanitize_name

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ada", "Ada"),
        ("  Mary-Jane  ", "Mary-Jane"),
        ("O'Brien", "O'Brien"),
        ("Ada<script>1", "Adascript"),
        ("Zoë  Ñúñez", "Zoë  Ñúñez"),
        ("!!!", ""),
    ],
)
def test_sanitize_name_strings(raw, expected):
    assert sanitize_name(raw) == expected


def test_falsy_input_returned_unchanged():
    assert sanitize_name("") == ""
    assert sanitize_name(None) is None


def test_non_string_becomes_empty():
    assert sanitize_name(42) == ""
    assert sanitize_name(["Ada"]) == ""


def test_is_name_char():
    assert is_name_char("a")
    assert is_name_char("-")
    assert not is_name_char("1")
    assert not is_name_char("_")
