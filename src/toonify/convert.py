"""Conversion between TOON values and native Python data."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from toonify.errors import ToonTypeError
from toonify.types import Array, Bool, JsonValue, Null, Number, Object, String, Value

_I64_MIN = -(2**63)
_I64_LIMIT = 2**63


def from_python(obj: Any) -> Value:
    """Convert native Python data to a `Value`.

    Accepts None, bool, int, float, str, lists/tuples and string-keyed
    mappings of those, recursively. `Value` instances pass through.

    Raises:
        ToonTypeError: For any other type, a non-string key, or an int too
            large for a float.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Null()
    # bool first: it is a subclass of int.
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        try:
            return Number(float(obj))
        except OverflowError as e:
            raise ToonTypeError(f"Integer too large to convert: {obj}") from e
    if isinstance(obj, float):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple)):
        return Array([from_python(item) for item in obj])
    if isinstance(obj, Mapping):
        fields: dict[str, Value] = {}
        for key, value in obj.items():
            if not isinstance(key, str):
                raise ToonTypeError(f"Object keys must be str, got {type(key).__name__}")
            fields[key] = from_python(value)
        return Object(fields)
    raise ToonTypeError(f"Unsupported Python type: {type(obj).__name__}")


def to_python(value: Value) -> JsonValue:
    """Convert a `Value` to native Python data.

    Integral numbers within the signed 64-bit range come back as `int`.
    """
    if isinstance(value, Null):
        return None
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, Number):
        n = value.value
        if n.is_integer() and _I64_MIN <= n < _I64_LIMIT:
            return int(n)
        return n
    if isinstance(value, String):
        return value.value
    if isinstance(value, Array):
        return [to_python(item) for item in value.items]
    if isinstance(value, Object):
        return {key: to_python(item) for key, item in value.fields.items()}
    raise ToonTypeError(f"Unsupported value type: {type(value).__name__}")
