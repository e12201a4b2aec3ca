"""Character classification, string escaping and number formatting.

These helpers are shared by the encoder and the decoder, so both sides agree
on what a bare identifier is and how escapes are spelled.
"""

from __future__ import annotations

import math
import string
import unicodedata
from decimal import Decimal

from toonify.errors import DeserializationError

# Spellings that would read back as a literal or a numeric sentinel.
RESERVED_TOKENS = frozenset(
    {"true", "false", "null", "inf", "-inf", "nan", "infinity", "-infinity"}
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
    "\b": "\\b",
    "\f": "\\f",
}

_UNESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}

# Characters allowed after a backslash.
ESCAPE_MARKERS = frozenset(_UNESCAPES) | {"u", "U"}

_HEX_DIGITS = frozenset(string.hexdigits)


def is_whitespace(c: str) -> bool:
    return c.isspace()


def is_inline_whitespace(c: str) -> bool:
    """Whitespace that does not end a line."""
    return c != "\n" and c.isspace()


def is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def is_ident_continue(c: str) -> bool:
    return c.isalnum() or c in "_-."


def is_valid_ident(s: str) -> bool:
    if not s or not is_ident_start(s[0]):
        return False
    return all(is_ident_continue(c) for c in s[1:])


def needs_quotes(s: str, *, ascii_only: bool = False) -> bool:
    """Return True if `s` cannot be written as a bare token.

    Args:
        s: The string to check.
        ascii_only: Also require quoting when `s` holds non-ASCII characters,
            which must then be written as escapes.
    """
    if not is_valid_ident(s):
        return True
    if ascii_only and not s.isascii():
        return True
    return s in RESERVED_TOKENS


def _unicode_escape(code: int) -> str:
    if code <= 0xFFFF:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def escape_str(s: str, *, ascii_only: bool = False) -> str:
    """Escape `s` for use between double quotes.

    Named escapes are used where one exists. Other control characters become
    ``\\uXXXX`` (or ``\\UXXXXXXXX`` above the BMP). With `ascii_only`, non-ASCII
    characters are escaped the same way.
    """
    parts: list[str] = []
    for c in s:
        escaped = _ESCAPES.get(c)
        if escaped is not None:
            parts.append(escaped)
        elif unicodedata.category(c) == "Cc" or (ascii_only and ord(c) > 0x7F):
            parts.append(_unicode_escape(ord(c)))
        else:
            parts.append(c)
    return "".join(parts)


def _read_hex(s: str, start: int, width: int) -> tuple[int, int]:
    digits = s[start : start + width]
    if len(digits) != width:
        raise DeserializationError("Invalid unicode escape sequence")
    if not _HEX_DIGITS.issuperset(digits):
        raise DeserializationError(f"Invalid unicode code point '{digits}'")
    return int(digits, 16), start + width


def _to_char(code: int) -> str:
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        raise DeserializationError(f"Invalid unicode code point U+{code:04X}")
    return chr(code)


def unescape_str(s: str) -> str:
    """Resolve the escapes produced by `escape_str` (and JSON's).

    Raises:
        DeserializationError: On an unknown escape or a bad code point.
    """
    if "\\" not in s:
        return s

    out: list[str] = []
    i = 0
    n = len(s)
    while i < n:
        c = s[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue

        if i + 1 >= n:
            raise DeserializationError("Invalid escape sequence at end of string")
        marker = s[i + 1]
        i += 2

        simple = _UNESCAPES.get(marker)
        if simple is not None:
            out.append(simple)
            continue

        if marker == "u":
            code, i = _read_hex(s, i, 4)
            # Join a UTF-16 surrogate pair written as two escapes.
            if 0xD800 <= code <= 0xDBFF and s.startswith("\\u", i):
                low, after = _read_hex(s, i + 2, 4)
                if 0xDC00 <= low <= 0xDFFF:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    i = after
        elif marker == "U":
            code, i = _read_hex(s, i, 8)
        else:
            raise DeserializationError(f"Invalid escape sequence '\\{marker}'")
        out.append(_to_char(code))

    return "".join(out)


def format_number(n: float) -> str:
    """Format `n` without a redundant fractional part.

    Integral values print with no decimal point. Fractional values print the
    shortest round-trip digits in positional notation.
    """
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "inf" if n > 0 else "-inf"
    if n.is_integer():
        return f"{n:.0f}"

    text = format(Decimal(repr(n)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
