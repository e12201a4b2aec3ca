"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from toonify import encoding


@pytest.fixture
def simple_data() -> list[dict[str, Any]]:
    """Simple test data with basic fields."""
    return [
        {"id": 1, "name": "Alice", "role": "admin"},
        {"id": 2, "name": "Bob", "role": "user"},
        {"id": 3, "name": "Charlie", "role": "user"},
    ]


@pytest.fixture
def nested_data() -> dict[str, Any]:
    """Test data with nested objects and arrays."""
    return {
        "company": "ACME",
        "address": {"street": "123 Main St", "city": "Seattle"},
        "tags": ["tools", "anvils"],
    }


@pytest.fixture
def ragged_data() -> list[dict[str, Any]]:
    """Records that do not share one field set."""
    return [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
        {"id": 3},
    ]


class WhitespaceEncoder:
    """Stand-in for a tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text: str, disallowed_special: Any = ()) -> list[str]:
        return text.split()


@pytest.fixture
def fake_tokenizer(monkeypatch: pytest.MonkeyPatch) -> WhitespaceEncoder:
    """Replace tiktoken so token counts need no downloaded vocabulary."""
    fake = WhitespaceEncoder()
    monkeypatch.setattr(encoding, "_get_encoder", lambda name: fake)
    return fake
