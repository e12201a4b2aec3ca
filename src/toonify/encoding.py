"""Token counting for comparing TOON output against JSON."""

from __future__ import annotations

from functools import lru_cache

import tiktoken

DEFAULT_ENCODING = "o200k_base"


@lru_cache(maxsize=8)
def _get_encoder(encoding: str) -> tiktoken.Encoding:
    return tiktoken.get_encoding(encoding)


def count_tokens(text: str, *, encoding: str = DEFAULT_ENCODING) -> int:
    """Count tokens in `text` with the named tiktoken encoding."""
    return len(_get_encoder(encoding).encode(text, disallowed_special=()))
