"""TOON encoder.

Renders a `Value` as TOON text. Top-level objects become ``key: value``
lines, uniform arrays of records become a header plus rows, and everything
nested is written inline in brackets.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from toonify.errors import SerializationError
from toonify.types import Array, Bool, EncodeOptions, Null, Number, Object, String, Value
from toonify.utils import escape_str, format_number, needs_quotes

if TYPE_CHECKING:
    from typing import TextIO  # pragma: no cover

logger = logging.getLogger(__name__)


def encode(value: Value) -> str:
    """Encode `value` with the default options."""
    return encode_with_options(value, EncodeOptions())


def encode_with_options(value: Value, options: EncodeOptions) -> str:
    """Encode `value` to a TOON string.

    Raises:
        SerializationError: If writing the output fails.
    """
    buffer = io.StringIO()
    encode_to(value, buffer, options)
    return buffer.getvalue()


def encode_to(value: Value, sink: TextIO, options: EncodeOptions | None = None) -> None:
    """Write the TOON text for `value` to a text sink.

    Raises:
        SerializationError: If the sink rejects a write.
    """
    logger.debug("Encoding %s value", value.kind)
    Renderer(sink, options or EncodeOptions()).value(value, 0, in_array=False)


def tabular_fields(items: list[Value]) -> list[str] | None:
    """Return the sorted header for a tabular array, or None if not uniform.

    Every element must be an object whose fields are all primitive, and every
    element must carry the same field names as the first.
    """
    if not items:
        return None

    first = items[0]
    if not isinstance(first, Object):
        return None
    fields = sorted(key for key, value in first.fields.items() if value.is_primitive())
    if not fields or len(fields) != len(first.fields):
        return None

    for item in items[1:]:
        if not isinstance(item, Object) or len(item.fields) != len(fields):
            return None
        for name in fields:
            field_value = item.fields.get(name)
            if field_value is None or not field_value.is_primitive():
                return None

    return fields


class Renderer:
    """Writes values to a sink, one layout decision per node."""

    def __init__(self, sink: TextIO, options: EncodeOptions) -> None:
        self.sink = sink
        self.options = options

    def write(self, text: str) -> None:
        try:
            self.sink.write(text)
        except (OSError, ValueError) as e:
            raise SerializationError(f"Failed to write output: {e}") from e

    def quoted(self, text: str) -> str:
        ascii_only = self.options.escape_non_ascii
        if needs_quotes(text, ascii_only=ascii_only):
            return f'"{escape_str(text, ascii_only=ascii_only)}"'
        return text

    def value(self, value: Value, level: int, *, in_array: bool) -> None:
        if isinstance(value, Null):
            self.write("null")
        elif isinstance(value, Bool):
            self.write("true" if value.value else "false")
        elif isinstance(value, Number):
            self.write(format_number(value.value))
        elif isinstance(value, String):
            self.write(self.quoted(value.value))
        elif isinstance(value, Array):
            self.array(value.items, level, in_array=in_array)
        elif isinstance(value, Object):
            self.object(value.fields, level, in_array=in_array)
        else:
            raise SerializationError(f"Unsupported value type: {type(value).__name__}")

    def array(self, items: list[Value], level: int, *, in_array: bool) -> None:
        if not items:
            self.write("[]")
            return

        fields = tabular_fields(items)
        if fields is not None:
            self.table(items, fields, level)
            return

        if all(item.is_primitive() for item in items):
            self._inline_items(items, 0)
            return

        if in_array or level > 0:
            self._inline_items(items, level + 1)
            return

        # Top-level array of containers: one element per line.
        indent = " " * (level * self.options.indent)
        inner = indent + " " * self.options.indent
        self.write("[\n")
        for i, item in enumerate(items):
            if i:
                self.write(",\n")
            self.write(inner)
            self.value(item, level + 1, in_array=True)
        self.write(f"\n{indent}]")

    def _inline_items(self, items: list[Value], level: int) -> None:
        self.write("[")
        for i, item in enumerate(items):
            if i:
                self.write(", ")
            self.value(item, level, in_array=True)
        self.write("]")

    def object(self, fields: dict[str, Value], level: int, *, in_array: bool) -> None:
        if not fields:
            self.write("{}")
            return

        if in_array or level > 0:
            self.write("{")
            for i, (key, value) in enumerate(fields.items()):
                if i:
                    self.write(", ")
                self.write(f"{self.quoted(key)}: ")
                self.value(value, level + 1, in_array=False)
            self.write("}")
            return

        indent = " " * (level * self.options.indent)
        for i, (key, value) in enumerate(fields.items()):
            if i:
                self.write("\n")
            self.write(f"{indent}{self.quoted(key)}: ")
            if isinstance(value, Array) and value.items:
                self.array(value.items, level + 1, in_array=False)
            elif isinstance(value, Object) and value.fields:
                self.object(value.fields, level + 1, in_array=False)
            else:
                self.value(value, level + 1, in_array=False)

    def table(self, items: list[Value], fields: list[str], level: int) -> None:
        self.write("[" + ", ".join(self.quoted(name) for name in fields) + "]\n")
        for row, item in enumerate(items):
            if row:
                self.write("\n")
            assert isinstance(item, Object)
            for col, name in enumerate(fields):
                if col:
                    self.write(", ")
                cell = item.fields.get(name)
                if cell is None:
                    self.write("null")
                else:
                    self.value(cell, level + 1, in_array=True)
