"""TOON decoder.

A single-pass recursive-descent parser. Besides the JSON-like grammar it reads
the two layouts the encoder writes outside of brackets: a brace-less top-level
object (one ``key: value`` per line) and a tabular array (a header of field
names followed by one row of values per line).
"""

from __future__ import annotations

import logging

from toonify.errors import DeserializationError, InvalidFormatError
from toonify.types import Array, Bool, Null, Number, Object, String, Value
from toonify.utils import (
    ESCAPE_MARKERS,
    is_ident_continue,
    is_ident_start,
    is_inline_whitespace,
    is_whitespace,
    unescape_str,
)

logger = logging.getLogger(__name__)

MAX_DEPTH = 256

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_I64_DIGITS = len(str(_I64_MIN))

_ESCAPE_WIDTHS = {"u": 4, "U": 8}

_KEYWORDS: dict[str, Value] = {
    "true": Bool(True),
    "false": Bool(False),
    "null": Null(),
}


def decode(text: str) -> Value:
    """Parse a complete TOON document into a `Value`.

    Raises:
        InvalidFormatError: If the text violates the grammar.
        DeserializationError: If a token cannot be converted to a value.
    """
    logger.debug("Decoding %d characters", len(text))
    try:
        return Parser(text).parse()
    except (InvalidFormatError, DeserializationError) as e:
        logger.debug("Decode failed: %s", e)
        raise


class Parser:
    """Parser state: the input, a cursor, and the line/column of the cursor."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.col = 1

    @property
    def current(self) -> str | None:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def advance(self) -> None:
        if self.pos >= len(self.text):
            return
        if self.text[self.pos] == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        self.pos += 1

    def error(self, message: str) -> InvalidFormatError:
        return InvalidFormatError(message, self.line, self.col)

    def unexpected(self, context: str = "") -> InvalidFormatError:
        c = self.current
        if c is None:
            suffix = f" while parsing {context}" if context else ""
            return self.error(f"Unexpected end of input{suffix}")
        return self.error(f"Unexpected character {c!r}")

    def _mark(self) -> tuple[int, int, int]:
        return self.pos, self.line, self.col

    def _reset(self, mark: tuple[int, int, int]) -> None:
        self.pos, self.line, self.col = mark

    def skip_whitespace(self) -> None:
        while (c := self.current) is not None and is_whitespace(c):
            self.advance()

    def skip_inline_whitespace(self) -> None:
        while (c := self.current) is not None and is_inline_whitespace(c):
            self.advance()

    # Documents

    def parse(self) -> Value:
        self.skip_whitespace()
        if self._at_key_line():
            value: Value = self._parse_document_object()
        else:
            value = self.parse_value(0)

        self.skip_whitespace()
        if self.current is not None:
            raise self.error(f"Unexpected trailing character {self.current!r}")
        return value

    def _at_key_line(self) -> bool:
        """Look ahead for ``key:`` without consuming anything."""
        c = self.current
        if c is None or not (c == '"' or is_ident_start(c)):
            return False

        mark = self._mark()
        try:
            self.parse_key()
            self.skip_inline_whitespace()
            return self.current == ":"
        except (InvalidFormatError, DeserializationError):
            return False
        finally:
            self._reset(mark)

    def _parse_document_object(self) -> Object:
        fields: dict[str, Value] = {}
        while True:
            key = self.parse_key()
            self.skip_inline_whitespace()
            self._expect(":", "after key")
            self.skip_inline_whitespace()
            fields[key] = self.parse_value(1)

            self.skip_inline_whitespace()
            if self.current is None:
                break
            if self.current != "\n":
                raise self.error("Expected newline after value")
            self.skip_whitespace()
            if self.current is None:
                break
        return Object(fields)

    # Values

    def parse_value(self, depth: int) -> Value:
        if depth > MAX_DEPTH:
            raise self.error("Maximum nesting depth exceeded")

        self.skip_whitespace()
        c = self.current
        if c is None:
            raise self.unexpected()
        if c == "{":
            return self._parse_object(depth)
        if c == "[":
            return self._parse_table_rows(self._parse_array(depth))
        if c == '"':
            return String(self._parse_string())
        if (c.isascii() and c.isdigit()) or c == "-":
            return self._parse_number()
        if is_ident_start(c):
            return self._parse_identifier()
        raise self.unexpected()

    def parse_key(self) -> str:
        c = self.current
        if c == '"':
            return self._parse_string()
        if c is not None and is_ident_start(c):
            return self._scan_identifier()
        if c is None:
            raise self.unexpected("object")
        raise self.error(f"Expected string or identifier, found {c!r}")

    def _expect(self, token: str, context: str) -> None:
        if self.current != token:
            if self.current is None:
                raise self.error(f"Unexpected end of input, expected {token!r} {context}")
            raise self.error(f"Expected {token!r} {context}, found {self.current!r}")
        self.advance()

    def _parse_object(self, depth: int) -> Object:
        self.advance()  # {
        fields: dict[str, Value] = {}

        self.skip_whitespace()
        if self.current == "}":
            self.advance()
            return Object(fields)

        while True:
            self.skip_whitespace()
            key = self.parse_key()
            self.skip_whitespace()
            self._expect(":", "after key")
            fields[key] = self.parse_value(depth + 1)

            self.skip_whitespace()
            if self.current == ",":
                self.advance()
            elif self.current == "}":
                self.advance()
                return Object(fields)
            elif self.current is None:
                raise self.unexpected("object")
            else:
                raise self.error(f"Expected ',' or '}}', found {self.current!r}")

    def _parse_array(self, depth: int) -> Array:
        self.advance()  # [
        items: list[Value] = []

        self.skip_whitespace()
        if self.current == "]":
            self.advance()
            return Array(items)

        while True:
            items.append(self.parse_value(depth + 1))

            self.skip_whitespace()
            if self.current == ",":
                self.advance()
            elif self.current == "]":
                self.advance()
                return Array(items)
            elif self.current is None:
                raise self.unexpected("array")
            else:
                raise self.error(f"Expected ',' or ']', found {self.current!r}")

    def _parse_string(self) -> str:
        self.advance()  # opening quote
        start = self.pos
        while True:
            c = self.current
            if c is None:
                raise self.unexpected("string")
            if c == '"':
                break
            if c == "\\":
                self.advance()
                marker = self.current
                if marker is None:
                    raise self.unexpected("string")
                if marker not in ESCAPE_MARKERS:
                    raise self.error(f"Invalid escape sequence '\\{marker}'")
                self.advance()
                width = _ESCAPE_WIDTHS.get(marker, 0)
                for _ in range(width):
                    if self.current is None:
                        raise self.unexpected("string")
                    self.advance()
                continue
            self.advance()

        raw = self.text[start : self.pos]
        self.advance()  # closing quote
        return unescape_str(raw)

    def _parse_number(self) -> Number:
        start = self.pos
        has_fraction = False
        has_exponent = False

        if self.current == "-":
            self.advance()
        if not self._consume_digits():
            raise self.error("Expected digit")

        if self.current == ".":
            has_fraction = True
            self.advance()
            if not self._consume_digits():
                raise self.error("Expected digit after decimal point")

        if self.current in ("e", "E"):
            has_exponent = True
            self.advance()
            if self.current in ("+", "-"):
                self.advance()
            if not self._consume_digits():
                raise self.error("Expected digit in exponent")

        literal = self.text[start : self.pos]
        try:
            if not (has_fraction or has_exponent) and len(literal) <= _I64_DIGITS:
                integer = int(literal)
                if _I64_MIN <= integer <= _I64_MAX:
                    return Number(float(integer))
            return Number(float(literal))
        except (ValueError, OverflowError) as e:
            raise DeserializationError(f"Invalid number {literal!r}: {e}") from e

    def _consume_digits(self) -> bool:
        seen = False
        while (c := self.current) is not None and c.isascii() and c.isdigit():
            seen = True
            self.advance()
        return seen

    def _scan_identifier(self) -> str:
        start = self.pos
        self.advance()
        while (c := self.current) is not None and is_ident_continue(c):
            self.advance()
        return self.text[start : self.pos]

    def _parse_identifier(self) -> Value:
        ident = self._scan_identifier()
        keyword = _KEYWORDS.get(ident)
        if keyword is not None:
            return keyword
        return String(ident)

    # Tables

    def _parse_table_rows(self, header: Array) -> Array:
        """Read the rows of a tabular array whose header is `header`."""
        fields = [item.as_str() for item in header.items]
        if not fields or any(name is None for name in fields):
            return header
        names = [name for name in fields if name is not None]

        rows: list[Value] = []
        while self._at_row_start():
            self.skip_whitespace()
            rows.append(Object(dict(zip(names, self._parse_row(len(names)), strict=True))))

        if not rows:
            return header
        return Array(rows)

    def _at_row_start(self) -> bool:
        mark = self._mark()
        try:
            self.skip_inline_whitespace()
            if self.current != "\n":
                return False
            self.skip_whitespace()
            c = self.current
            if c is None:
                return False
            if not (c in "\"-" or (c.isascii() and c.isdigit()) or is_ident_start(c)):
                return False
            return not self._at_key_line()
        finally:
            self._reset(mark)

    def _parse_row(self, width: int) -> list[Value]:
        values: list[Value] = []
        for i in range(width):
            if i:
                self.skip_inline_whitespace()
                if self.current != ",":
                    raise self.error(f"Expected {width} values in table row, found {i}")
                self.advance()
                self.skip_inline_whitespace()
            values.append(self._parse_cell())
        return values

    def _parse_cell(self) -> Value:
        c = self.current
        if c == '"':
            return String(self._parse_string())
        if c is not None and (c == "-" or (c.isascii() and c.isdigit())):
            return self._parse_number()
        if c is not None and is_ident_start(c):
            return self._parse_identifier()
        if c is None:
            raise self.unexpected("table row")
        raise self.error(f"Expected primitive value in table row, found {c!r}")
