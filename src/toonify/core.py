"""TOON Protocol.

TOON is a compact, human-readable superset of JSON for handing structured
data to LLMs.

Core features:
    - Bare tokens: identifier-like strings and keys are written unquoted.
    - Tabular arrays: uniform lists of records become a header plus rows.
    - Brace-less documents: top-level objects are one ``key: value`` per line.
    - JSON in, JSON out: any JSON document decodes, and decoded data dumps
      back to JSON.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import orjson

from toonify.convert import from_python, to_python
from toonify.decoder import decode
from toonify.encoder import encode_to, encode_with_options
from toonify.encoding import DEFAULT_ENCODING, count_tokens
from toonify.errors import ToonError, ToonIOError
from toonify.types import EncodeOptions

if TYPE_CHECKING:
    from typing import TextIO  # pragma: no cover

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodingResult:
    """TOON text with its token cost next to the compact JSON baseline."""

    text: str
    tokens: int
    json_tokens: int

    @property
    def savings(self) -> float:
        """Fraction of JSON tokens saved (negative if TOON is larger)."""
        return 1.0 - (self.tokens / max(1, self.json_tokens))


class TOON:
    """Encoder/decoder for TOON working on native Python data.

    Values cross the boundary through `from_python`/`to_python`: None, bool,
    int, float, str, lists and str-keyed dicts.
    """

    @staticmethod
    def encode(data: Any, *, indent: int = 2, escape_non_ascii: bool = False) -> str:
        """Encode data to TOON text.

        Args:
            data: None, bool, int, float, str, or lists/dicts of those.
            indent: Spaces per nesting level in multi-line layouts.
            escape_non_ascii: Write non-ASCII characters as escapes.

        Returns:
            The encoded text.

        Raises:
            ToonTypeError: If data holds an unsupported type.

        Example:
            >>> TOON.encode([{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}])
            '[id, name]\\n1, Alice\\n2, Bob'
        """
        options = EncodeOptions(indent=indent, escape_non_ascii=escape_non_ascii)
        return encode_with_options(from_python(data), options)

    @staticmethod
    def encode_with_stats(
        data: Any,
        *,
        indent: int = 2,
        encoding: str = DEFAULT_ENCODING,
    ) -> EncodingResult:
        """Encode data and count tokens against its compact JSON form.

        Same as encode() but returns an EncodingResult with token counts.
        """
        value = from_python(data)
        text = encode_with_options(value, EncodeOptions(indent=indent))
        json_text = orjson.dumps(to_python(value)).decode()
        return EncodingResult(
            text=text,
            tokens=count_tokens(text, encoding=encoding),
            json_tokens=count_tokens(json_text, encoding=encoding),
        )

    @staticmethod
    def decode(payload: str) -> Any:
        """Decode TOON (or JSON) text to native Python data.

        Raises:
            ToonError: If the payload is invalid.
        """
        return to_python(decode(payload))

    @staticmethod
    def from_json(json_text: str | bytes, *, indent: int = 2) -> str:
        """Re-encode a JSON document as TOON.

        Raises:
            ToonError: If `json_text` is not valid JSON.
        """
        try:
            data = orjson.loads(json_text)
        except orjson.JSONDecodeError as e:
            logger.warning("Rejected invalid JSON input: %s", e)
            raise ToonError(f"Invalid JSON: {e}") from e
        return TOON.encode(data, indent=indent)

    @staticmethod
    def to_json(payload: str) -> str:
        """Decode TOON text and return it as compact JSON."""
        return orjson.dumps(TOON.decode(payload)).decode()

    @staticmethod
    def count_tokens(text: str, *, encoding: str = DEFAULT_ENCODING) -> int:
        """Count tokens in text using the specified encoding."""
        return count_tokens(text, encoding=encoding)


def load(fp: TextIO) -> Any:
    """Read a TOON document from a text file object.

    Raises:
        ToonIOError: If reading fails.
        ToonError: If the document is invalid.
    """
    try:
        text = fp.read()
    except OSError as e:
        raise ToonIOError(f"Failed to read input: {e}") from e
    return to_python(decode(text))


def dump(data: Any, fp: TextIO, *, indent: int = 2, escape_non_ascii: bool = False) -> None:
    """Write data as TOON to a text file object.

    Raises:
        SerializationError: If writing fails.
    """
    options = EncodeOptions(indent=indent, escape_non_ascii=escape_non_ascii)
    encode_to(from_python(data), fp, options)
