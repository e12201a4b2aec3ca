"""TOON - a compact, human-readable JSON superset.

Uniform arrays of records encode as header-plus-rows tables, for fewer tokens
than JSON when handing data to LLMs.
"""

from toonify.convert import from_python, to_python
from toonify.core import TOON, EncodingResult, dump, load
from toonify.decoder import decode
from toonify.encoder import encode, encode_to, encode_with_options
from toonify.errors import (
    DeserializationError,
    InvalidFormatError,
    SerializationError,
    ToonError,
    ToonIOError,
    ToonTypeError,
)
from toonify.types import Array, Bool, EncodeOptions, Null, Number, Object, String, Value

__all__ = [
    "TOON",
    "Array",
    "Bool",
    "DeserializationError",
    "EncodeOptions",
    "EncodingResult",
    "InvalidFormatError",
    "Null",
    "Number",
    "Object",
    "SerializationError",
    "String",
    "ToonError",
    "ToonIOError",
    "ToonTypeError",
    "Value",
    "decode",
    "dump",
    "encode",
    "encode_to",
    "encode_with_options",
    "from_python",
    "load",
    "to_python",
]
__version__ = "0.1.0"
