"""Tests for the JAML (indentation syntax) parser."""

from datetime import datetime, timezone

import pytest

from jasn import (
    Binary,
    Bool,
    DuplicateKeyError,
    EmptyDocumentError,
    Float,
    InconsistentIndentStyleError,
    Int,
    InvalidBinaryError,
    InvalidIndentCountError,
    List,
    Map,
    MissingValueError,
    MixedIndentError,
    NestingTooDeepError,
    Null,
    ParseError,
    String,
    Timestamp,
    UnexpectedIndentError,
    parse_jaml,
)
from jasn.block import strip_comment


def m(*pairs):
    return Map.from_pairs(pairs)


class TestMaps:
    def test_flat(self):
        source = 'name: "demo"\ncount: 3\nratio: 0.5\nenabled: true\nnothing: null\n'
        assert parse_jaml(source) == m(
            ("name", String("demo")),
            ("count", Int(3)),
            ("ratio", Float(0.5)),
            ("enabled", Bool(True)),
            ("nothing", Null()),
        )

    def test_nested_block(self):
        value = parse_jaml('outer:\n  inner: "value"')
        assert value == m(("outer", m(("inner", String("value")))))

    def test_deeply_nested(self):
        source = "a:\n  b:\n    c:\n      d: 1\n  e: 2\n"
        value = parse_jaml(source)
        assert value["a"]["b"]["c"]["d"] == Int(1)
        assert value["a"]["e"] == Int(2)

    def test_quoted_keys(self):
        value = parse_jaml('"with space": 1\n\'single\': 2\n"true": 3\n"a:b": 4\n')
        assert value.keys() == ["a:b", "single", "true", "with space"]

    def test_no_space_after_colon(self):
        assert parse_jaml("a:1") == m(("a", Int(1)))

    def test_prefix_words_as_keys(self):
        """`ts: "x"` is an entry keyed `ts`; `ts"..."` is a timestamp."""
        value = parse_jaml('ts: "x"\nat: ts"2024-01-01T00:00:00Z"\n')
        assert value["ts"] == String("x")
        assert value["at"] == Timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))

    @pytest.mark.parametrize("source", ['data: hex"0001"', 'data: h"0001"', 'data: b64"AAE="'])
    def test_binary_spellings(self, source):
        assert parse_jaml(source) == m(("data", Binary(b"\x00\x01")))

    @pytest.mark.parametrize("key", ["null", "true", "false", "inf", "nan", "Inf"])
    def test_reserved_keys_must_be_quoted(self, key):
        with pytest.raises(ParseError, match="must be quoted"):
            parse_jaml(f"{key}: 1")


class TestLists:
    def test_scalars(self):
        assert parse_jaml("- 1\n- 'two'\n- 3.0\n") == List([Int(1), String("two"), Float(3.0)])

    def test_list_in_map(self):
        value = parse_jaml("items:\n  - 1\n  - 2\nnext: 3\n")
        assert value == m(("items", List([Int(1), Int(2)])), ("next", Int(3)))

    def test_maps_in_list(self):
        source = "-\n  a: 1\n  b: 2\n-\n  a: 3\n"
        assert parse_jaml(source) == List([m(("a", Int(1)), ("b", Int(2))), m(("a", Int(3)))])

    def test_nested_lists(self):
        source = "-\n  - 1\n  - 2\n- 3\n"
        assert parse_jaml(source) == List([List([Int(1), Int(2)]), Int(3)])

    def test_negative_number_is_not_an_item(self):
        assert parse_jaml("-5") == Int(-5)
        assert parse_jaml("- -5") == List([Int(-5)])


class TestFlowValues:
    def test_inline_collections(self):
        value = parse_jaml("a: [1, 2]\nb: {c: 3, 'd': [true]}\nempty: []\nnone: {}\n")
        assert value["a"] == List([Int(1), Int(2)])
        assert value["b"]["d"] == List([Bool(True)])
        assert value["empty"] == List()
        assert value["none"] == Map()

    def test_top_level_scalar(self):
        assert parse_jaml("42") == Int(42)
        assert parse_jaml('"just a string"\n') == String("just a string")

    def test_top_level_flow_collection(self):
        assert parse_jaml("[]") == List()
        assert parse_jaml("{a: 1}") == m(("a", Int(1)))

    def test_scalar_must_stand_alone(self):
        with pytest.raises(ParseError, match="only line in its block"):
            parse_jaml("42\n43")

    def test_nested_scalar_must_stand_alone(self):
        with pytest.raises(ParseError):
            parse_jaml("a:\n  1\n  2\n")


class TestWhitespaceAndComments:
    def test_comments_and_blank_lines(self):
        source = '# header\n\na: 1  # trailing\n\n  # indented comment\nb: "x # not a comment"\n'
        assert parse_jaml(source) == m(("a", Int(1)), ("b", String("x # not a comment")))

    def test_crlf(self):
        assert parse_jaml("a:\r\n  b: 1\r\n") == m(("a", m(("b", Int(1)))))

    def test_tabs(self):
        assert parse_jaml("a:\n\tb:\n\t\tc: 1\n") == m(("a", m(("b", m(("c", Int(1)))))))

    def test_quote_inside_flow_comment(self):
        """An apostrophe in a /* */ or // comment does not hide a trailing # comment."""
        assert parse_jaml("a: [1, /* it's */ 2]  # note\n") == m(("a", List([Int(1), Int(2)])))
        assert parse_jaml("a: 1 // it's # all comment\nb: 2\n") == m(("a", Int(1)), ("b", Int(2)))

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a: 1 # c", "a: 1 "),
            ('a: "#"', 'a: "#"'),
            ("a: 'x\\'#' # c", "a: 'x\\'#' "),
            ('a: "\\"" # c', 'a: "\\"" '),
            ("a: [1, /* it's */ 2]  # note", "a: [1, /* it's */ 2]  "),
            ("a: 1 // it's # x", "a: 1 // it's # x"),
            ("a: 1 /* # */ # c", "a: 1 /* # */ "),
        ],
    )
    def test_strip_comment(self, text, expected):
        assert strip_comment(text) == expected


class TestErrors:
    @pytest.mark.parametrize("source", ["", "\n\n", "# only a comment\n"])
    def test_empty_document(self, source):
        with pytest.raises(EmptyDocumentError):
            parse_jaml(source)

    def test_duplicate_key(self):
        with pytest.raises(DuplicateKeyError) as exc:
            parse_jaml("a: 1\na: 2\n")
        assert exc.value.key == "a"
        assert exc.value.line == 2

    def test_duplicate_key_in_nested_map(self):
        with pytest.raises(DuplicateKeyError):
            parse_jaml("outer:\n  a: 1\n  'a': 2\n")

    def test_invalid_indent_count(self):
        with pytest.raises(InvalidIndentCountError) as exc:
            parse_jaml("a:\n  b: 1\n   c: 2\n")
        assert exc.value.line == 3

    def test_inconsistent_indent_style(self):
        with pytest.raises(InconsistentIndentStyleError):
            parse_jaml("a:\n  b: 1\nc:\n\td: 1\n")

    def test_mixed_indent(self):
        with pytest.raises(MixedIndentError):
            parse_jaml("a:\n \tb: 1\n")

    def test_missing_value_at_end(self):
        with pytest.raises(MissingValueError) as exc:
            parse_jaml("a: 1\nb:\n")
        assert exc.value.line == 2

    def test_missing_value_before_sibling(self):
        with pytest.raises(MissingValueError) as exc:
            parse_jaml("a:\nb: 1\n")
        assert exc.value.line == 1

    def test_missing_list_value(self):
        with pytest.raises(MissingValueError):
            parse_jaml("- 1\n-\n")

    def test_unexpected_indent_after_scalar(self):
        with pytest.raises(UnexpectedIndentError) as exc:
            parse_jaml("a: 1\n  b: 2\n")
        assert (exc.value.expected, exc.value.got) == (0, 1)

    def test_skipped_level(self):
        with pytest.raises(UnexpectedIndentError) as exc:
            parse_jaml("a:\n  b:\n      c: 1\n")
        assert (exc.value.expected, exc.value.got) == (2, 3)

    def test_indented_first_line(self):
        with pytest.raises(UnexpectedIndentError):
            parse_jaml("  a: 1\n")

    def test_list_item_in_map(self):
        with pytest.raises(ParseError, match="expected a map entry"):
            parse_jaml("a: 1\n- 2\n")

    def test_map_entry_in_list(self):
        with pytest.raises(ParseError, match="expected a list item"):
            parse_jaml("- 1\na: 2\n")

    def test_multiline_flow_collection(self):
        with pytest.raises(ParseError):
            parse_jaml("a: [1,\n  2]\n")

    def test_scalar_error_position(self):
        with pytest.raises(InvalidBinaryError) as exc:
            parse_jaml('a: 1\nb: h"ABC"\n')
        assert (exc.value.line, exc.value.col) == (2, 4)

    def test_nested_scalar_error_position(self):
        with pytest.raises(ParseError) as exc:
            parse_jaml("a:\n  b: [1 2]\n")
        assert (exc.value.line, exc.value.col) == (2, 9)

    def test_depth_limit(self):
        lines = [" " * depth + "-" for depth in range(129)]
        with pytest.raises(NestingTooDeepError):
            parse_jaml("\n".join(lines) + "\n" + " " * 129 + "- 1\n")
