"""Core value model for the TOON format.

A `Value` is one of six variants: `Null`, `Bool`, `Number`, `String`,
`Array` and `Object`. Composite variants own their children, so a value is
always a tree.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from toonify.utils import escape_str, format_number

if TYPE_CHECKING:
    from collections.abc import Mapping  # pragma: no cover

# Native Python data accepted at the conversion boundary.
JsonValue = Any


class Value:
    """Base class of the TOON value variants.

    Accessors never raise: asking for the wrong variant returns ``None``.
    """

    __slots__ = ()

    kind: ClassVar[str] = "value"

    def is_null(self) -> bool:
        return False

    def is_primitive(self) -> bool:
        return True

    def as_bool(self) -> bool | None:
        return None

    def as_number(self) -> float | None:
        return None

    def as_str(self) -> str | None:
        return None

    def as_array(self) -> tuple[Value, ...] | None:
        return None

    def as_array_mut(self) -> list[Value] | None:
        return None

    def as_object(self) -> Mapping[str, Value] | None:
        return None

    def as_object_mut(self) -> dict[str, Value] | None:
        return None


@dataclass(frozen=True)
class Null(Value):
    """The absence of a value."""

    kind: ClassVar[str] = "null"

    def is_null(self) -> bool:
        return True

    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class Bool(Value):
    value: bool

    kind: ClassVar[str] = "bool"

    def as_bool(self) -> bool | None:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Number(Value):
    """A double-precision number. Integers are stored as floats too."""

    value: float

    kind: ClassVar[str] = "number"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def as_number(self) -> float | None:
        return self.value

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str

    kind: ClassVar[str] = "string"

    def as_str(self) -> str | None:
        return self.value

    def __str__(self) -> str:
        return f'"{escape_str(self.value)}"'


@dataclass
class Array(Value):
    """An ordered sequence of values."""

    items: list[Value] = field(default_factory=list)

    kind: ClassVar[str] = "array"

    def is_primitive(self) -> bool:
        return False

    def as_array(self) -> tuple[Value, ...] | None:
        return tuple(self.items)

    def as_array_mut(self) -> list[Value] | None:
        return self.items

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


@dataclass
class Object(Value):
    """A string-keyed mapping of values. Keys keep insertion order."""

    fields: dict[str, Value] = field(default_factory=dict)

    kind: ClassVar[str] = "object"

    def is_primitive(self) -> bool:
        return False

    def as_object(self) -> Mapping[str, Value] | None:
        return MappingProxyType(self.fields)

    def as_object_mut(self) -> dict[str, Value] | None:
        return self.fields

    def __str__(self) -> str:
        pairs = (f'"{escape_str(key)}": {value}' for key, value in self.fields.items())
        return "{" + ", ".join(pairs) + "}"


@dataclass(frozen=True)
class EncodeOptions:
    """Rendering options for the encoder.

    Attributes:
        pretty: Reserved. The encoder always lays out top-level containers
            over multiple lines.
        indent: Spaces per nesting level.
        escape_non_ascii: Write non-ASCII characters as ``\\u``/``\\U`` escapes
            and quote any string that contains them.
    """

    pretty: bool = False
    indent: int = 2
    escape_non_ascii: bool = False

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError(f"indent must be non-negative, got {self.indent}")

    def with_pretty(self, pretty: bool) -> EncodeOptions:
        return dataclasses.replace(self, pretty=pretty)

    def with_indent(self, indent: int) -> EncodeOptions:
        return dataclasses.replace(self, indent=indent)

    def with_escape_non_ascii(self, escape: bool) -> EncodeOptions:
        return dataclasses.replace(self, escape_non_ascii=escape)
