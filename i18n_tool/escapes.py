"""Backslash escape convention used by keys and values of translation files.

The escapes are a convention of the translation format, not of XML: the file
stores ``\\n`` as two characters and the runtime decodes it when loading.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

_DECODE_TABLE: Mapping[str, str] = MappingProxyType(
    {
        "n": "\n",
        "r": "\r",
        "f": "\f",
        "t": "\t",
        "v": "\v",
        "b": "\b",
        "\\": "\\",
    }
)

_ENCODE_TABLE: Mapping[str, str] = MappingProxyType(
    {decoded: "\\" + code for code, decoded in _DECODE_TABLE.items()}
)

ESCAPE_RE = re.compile(r"\\([nrftvb\\]|x[0-9A-Fa-f]{1,4}|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8})")
# C0 controls, DEL and backslash.
_ENCODE_RE = re.compile(r"[\x00-\x1f\x7f\\]")


def unescape(text: str) -> str:
    """Decode the escape sequences found in ``text``.

    Unknown sequences are kept verbatim.
    """

    def repl(match: re.Match[str]) -> str:
        payload = match.group(1)
        decoded = _DECODE_TABLE.get(payload)
        if decoded is not None:
            return decoded
        code_point = int(payload[1:], 16)
        if code_point > 0x10FFFF:
            return match.group(0)
        return chr(code_point)

    return ESCAPE_RE.sub(repl, text)


def escape(text: str) -> str:
    """Encode control characters and backslashes as escape sequences.

    Characters without a short escape use the fixed-width ``\\uHHHH`` form, so
    that a hex digit following them is not read as part of the sequence.
    """

    def repl(match: re.Match[str]) -> str:
        char = match.group(0)
        return _ENCODE_TABLE.get(char) or f"\\u{ord(char):04x}"

    return _ENCODE_RE.sub(repl, text)
