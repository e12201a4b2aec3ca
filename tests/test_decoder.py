"""Tests for the TOON decoder."""

from __future__ import annotations

import textwrap

import pytest

from toonify import (
    Array,
    Bool,
    DeserializationError,
    InvalidFormatError,
    Null,
    Number,
    Object,
    String,
    decode,
)


class TestPrimitives:
    def test_integer(self) -> None:
        assert decode("42") == Number(42.0)

    def test_numbers(self) -> None:
        assert decode("-3.5") == Number(-3.5)
        assert decode("1e3") == Number(1000.0)
        assert decode("1.5E-2") == Number(0.015)
        assert decode("2e+2") == Number(200.0)

    def test_integer_beyond_64_bits_falls_back_to_float(self) -> None:
        assert decode("12345678901234567890") == Number(12345678901234567890.0)

    def test_keywords(self) -> None:
        assert decode("true") == Bool(True)
        assert decode("false") == Bool(False)
        assert decode("null") == Null()

    def test_keyword_prefix_is_identifier(self) -> None:
        assert decode("nullable") == String("nullable")
        assert decode("truest") == String("truest")
        assert decode("false-positive") == String("false-positive")

    def test_bare_identifier(self) -> None:
        assert decode("hello.world_2") == String("hello.world_2")

    def test_surrounding_whitespace(self) -> None:
        assert decode("  \n\t 7 \n") == Number(7.0)


class TestStrings:
    def test_escapes(self) -> None:
        assert decode('"hello\\nworld"') == String("hello\nworld")
        assert decode('"say \\"hi\\""') == String('say "hi"')
        assert decode('"a\\/b\\\\c"') == String("a/b\\c")
        assert decode('"\\0"') == String("\0")

    def test_unicode_escapes(self) -> None:
        assert decode('"\\u0041"') == String("A")
        assert decode('"\\U0001F600"') == String("😀")
        assert decode('"\\ud83d\\ude00"') == String("😀")

    def test_escaped_backslash_is_not_unescaped_twice(self) -> None:
        assert decode('"\\\\n"') == String("\\n")

    def test_unknown_escape(self) -> None:
        with pytest.raises(InvalidFormatError, match="Invalid escape sequence"):
            decode('"\\x"')

    def test_bad_code_point(self) -> None:
        with pytest.raises(DeserializationError):
            decode('"\\u00g1"')
        with pytest.raises(DeserializationError):
            decode('"\\ud800"')

    def test_unterminated(self) -> None:
        with pytest.raises(InvalidFormatError, match="end of input while parsing string"):
            decode('"abc')

    def test_truncated_unicode_escape(self) -> None:
        with pytest.raises(InvalidFormatError, match="Unexpected end of input"):
            decode('"\\u12')


class TestContainers:
    def test_empty(self) -> None:
        assert decode("[]") == Array([])
        assert decode("{}") == Object({})
        assert decode("[ \n ]") == Array([])

    def test_array(self) -> None:
        assert decode("[1, two, \"three\", null]") == Array(
            [Number(1), String("two"), String("three"), Null()]
        )

    def test_bare_and_quoted_keys_are_equivalent(self) -> None:
        assert decode("{a: 1, b: 2}") == decode('{"a": 1, "b": 2}')

    def test_keyword_keys_stay_strings(self) -> None:
        assert decode("{true: 1, null: 2}") == Object({"true": Number(1), "null": Number(2)})

    def test_duplicate_keys_last_wins(self) -> None:
        assert decode("{a: 1, a: 2}") == Object({"a": Number(2)})

    def test_key_order_preserved(self) -> None:
        obj = decode("{z: 1, a: 2, m: 3}")
        assert isinstance(obj, Object)
        assert list(obj.fields) == ["z", "a", "m"]

    def test_nested_json(self) -> None:
        text = '{"users": [{"id": 1, "tags": ["a"]}], "ok": true}'
        assert decode(text) == Object(
            {
                "users": Array([Object({"id": Number(1), "tags": Array([String("a")])})]),
                "ok": Bool(True),
            }
        )

    def test_multiline_json_array_of_strings(self) -> None:
        text = textwrap.dedent(
            """\
            {
              "tags": ["a", "b"]
            }
            """
        )
        assert decode(text) == Object({"tags": Array([String("a"), String("b")])})


class TestDocumentObject:
    def test_key_value_lines(self) -> None:
        assert decode("a: 1\nb: hello") == Object({"a": Number(1), "b": String("hello")})

    def test_quoted_keys(self) -> None:
        assert decode('"my key": 1\nother: [1, 2]') == Object(
            {"my key": Number(1), "other": Array([Number(1), Number(2)])}
        )

    def test_nested_values(self) -> None:
        assert decode("user: {name: Alice, tags: [a, b]}\nempty: []") == Object(
            {
                "user": Object(
                    {"name": String("Alice"), "tags": Array([String("a"), String("b")])}
                ),
                "empty": Array([]),
            }
        )

    def test_entries_must_be_on_separate_lines(self) -> None:
        with pytest.raises(InvalidFormatError, match="Expected newline after value"):
            decode("a: 1 b: 2")

    def test_lone_string_is_not_an_object(self) -> None:
        assert decode('"a"') == String("a")


class TestTables:
    def test_top_level_table(self) -> None:
        assert decode("[id, name]\n1, Alice\n2, Bob") == Array(
            [
                Object({"id": Number(1), "name": String("Alice")}),
                Object({"id": Number(2), "name": String("Bob")}),
            ]
        )

    def test_table_under_key(self) -> None:
        assert decode("users: [id]\n1\n2\ncount: 2") == Object(
            {
                "users": Array([Object({"id": Number(1)}), Object({"id": Number(2)})]),
                "count": Number(2),
            }
        )

    def test_string_array_before_key_line_is_plain(self) -> None:
        assert decode("tags: [a, b]\nnext: 1") == Object(
            {"tags": Array([String("a"), String("b")]), "next": Number(1)}
        )

    def test_table_inside_inline_object(self) -> None:
        assert decode("{rows: [k]\n1\n2, n: 1}") == Object(
            {
                "rows": Array([Object({"k": Number(1)}), Object({"k": Number(2)})]),
                "n": Number(1),
            }
        )

    def test_cells_of_every_primitive_kind(self) -> None:
        decoded = decode('[a, b, c, d]\n"x y", -1.5, null, true')
        assert decoded == Array(
            [
                Object(
                    {"a": String("x y"), "b": Number(-1.5), "c": Null(), "d": Bool(True)}
                )
            ]
        )

    def test_short_row(self) -> None:
        with pytest.raises(InvalidFormatError, match="Expected 2 values in table row"):
            decode("[id, name]\n1")


class TestErrors:
    def test_truncated_object(self) -> None:
        with pytest.raises(InvalidFormatError, match="Unexpected end of input"):
            decode("{a: 1,")

    def test_empty_input(self) -> None:
        with pytest.raises(InvalidFormatError, match="Unexpected end of input"):
            decode("   ")

    def test_unexpected_character_position(self) -> None:
        with pytest.raises(InvalidFormatError) as excinfo:
            decode("[1,\n  @]")
        assert excinfo.value.line == 2
        assert excinfo.value.column == 3
        assert "line 2, column 3" in str(excinfo.value)

    def test_missing_separator(self) -> None:
        with pytest.raises(InvalidFormatError, match="Expected ',' or ']'"):
            decode("[1 2]")

    def test_missing_colon(self) -> None:
        with pytest.raises(InvalidFormatError, match="Expected ':' after key"):
            decode("{a 1}")

    def test_bad_key(self) -> None:
        with pytest.raises(InvalidFormatError, match="Expected string or identifier"):
            decode("{1: 2}")

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("1.", "Expected digit after decimal point"),
            ("1e", "Expected digit in exponent"),
            ("-", "Expected digit"),
            ("-x", "Expected digit"),
        ],
    )
    def test_malformed_numbers(self, text: str, message: str) -> None:
        with pytest.raises(InvalidFormatError, match=message):
            decode(text)

    def test_trailing_content(self) -> None:
        with pytest.raises(InvalidFormatError, match="Unexpected trailing character"):
            decode("1 2")

    def test_deep_nesting_is_rejected(self) -> None:
        with pytest.raises(InvalidFormatError, match="Maximum nesting depth"):
            decode("[" * 300 + "]" * 300)

    def test_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            decode("{")
