"""TOON error hierarchy.

Every error derives from `ToonError`, which is itself a `ValueError` so that
callers treating malformed input as a bad value keep working.
"""

from __future__ import annotations


class ToonError(ValueError):
    """Base exception for TOON encoding and decoding."""


class InvalidFormatError(ToonError):
    """Raised when input text violates the TOON grammar."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        if line is not None and column is not None:
            message = f"{message} at line {line}, column {column}"
        super().__init__(message)
        self.line = line
        self.column = column


class DeserializationError(ToonError):
    """Raised when a well-formed token cannot be turned into a value."""


class SerializationError(ToonError):
    """Raised when the output sink fails during encoding."""


class ToonTypeError(ToonError, TypeError):
    """Raised when a Python object has no TOON representation."""


class ToonIOError(ToonError):
    """Raised when reading TOON text from a file object fails."""
