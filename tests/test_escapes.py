from __future__ import annotations

import pytest

from i18n_tool.escapes import escape, unescape


@pytest.mark.parametrize(
    ("escaped", "text"),
    [
        (r"Line\nBreak", "Line\nBreak"),
        (r"Tab\there", "Tab\there"),
        (r"C:\\Temp", "C:\\Temp"),
        (r"\x41\x4a", "AJ"),
        (r"\u00e9t\u00E9", "été"),
        (r"\U0001F600", "\U0001F600"),
    ],
)
def test_unescape(escaped, text):
    assert unescape(escaped) == text


def test_unescape_keeps_unknown_sequences():
    assert unescape(r"\q \u12") == r"\q \u12"


def test_unescape_keeps_out_of_range_code_points():
    assert unescape(r"\UFFFFFFFF") == r"\UFFFFFFFF"


def test_escape_control_characters_and_backslash():
    assert escape("a\\b\n\tc") == r"a\\b\n\tc"


def test_escape_leaves_printable_text_alone():
    assert escape("Ünïcode {0} & <tags>") == "Ünïcode {0} & <tags>"


def test_escape_other_control_characters_with_fixed_width():
    escaped = escape("bell\x07here \x1b[31mred\x7f")

    assert escaped == r"bell\u0007here \u001b[31mred\u007f"
    assert unescape(escaped) == "bell\x07here \x1b[31mred\x7f"
