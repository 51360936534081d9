"""JASN and JAML: two text syntaxes over one value model.

JASN is bracketed and JSON5-like; JAML is indentation-based and
YAML-like. Both carry integers, floats, strings, binary blobs and
timestamps, and both round-trip through the formatter.

Example:
    from jasn import parse, parse_jaml, to_string_pretty, format_jaml

    value = parse('{name: "demo", data: b64"AAEC", at: ts"2024-01-01T00:00:00Z"}')
    print(format_jaml(value))
    print(to_string_pretty(parse_jaml("items:\\n  - 1\\n  - 2\\n")))
"""

__version__ = "0.1.0"

from pathlib import Path

from .block import BlockParser, parse_jaml, parse_jaml_file
from .bridge import dumps, dumps_jaml, from_value, loads, loads_jaml, to_value
from .errors import (
    DuplicateKeyError,
    EmptyDocumentError,
    FloatParseError,
    InconsistentIndentStyleError,
    IndentError,
    IntegerOverflowError,
    InvalidBinaryError,
    InvalidEscapeError,
    InvalidIndentCountError,
    InvalidTimestampError,
    JasnError,
    MissingValueError,
    MixedIndentError,
    NestingTooDeepError,
    ParseError,
    UnexpectedIndentError,
)
from .formatter import format_jaml, to_string, to_string_opts, to_string_pretty
from .indent import IndentKind, IndentTracker, IndentUnit
from .options import BinaryEncoding, FormatOptions, QuoteStyle, TimestampPrecision
from .parser import Lexer, Parser, parse
from .parser import parse_file as parse_jasn_file
from .value import Binary, Bool, Float, Int, List, Map, Null, String, Timestamp, Value


def parse_file(filepath: str | Path) -> Value:
    """Parse a file, as JAML when it ends in .jaml and as JASN otherwise."""
    filepath = Path(filepath)
    if filepath.suffix.lower() == ".jaml":
        return parse_jaml_file(filepath)
    return parse_jasn_file(filepath)


__all__ = [
    # Parse
    "parse",
    "parse_jaml",
    "parse_file",
    "parse_jasn_file",
    "parse_jaml_file",
    "Lexer",
    "Parser",
    "BlockParser",
    "IndentTracker",
    "IndentUnit",
    "IndentKind",
    # Format
    "to_string",
    "to_string_pretty",
    "to_string_opts",
    "format_jaml",
    "FormatOptions",
    "QuoteStyle",
    "BinaryEncoding",
    "TimestampPrecision",
    # Values
    "Value",
    "Null",
    "Bool",
    "Int",
    "Float",
    "String",
    "Binary",
    "Timestamp",
    "List",
    "Map",
    # Python objects
    "to_value",
    "from_value",
    "dumps",
    "loads",
    "dumps_jaml",
    "loads_jaml",
    # Errors
    "JasnError",
    "ParseError",
    "NestingTooDeepError",
    "IntegerOverflowError",
    "FloatParseError",
    "InvalidEscapeError",
    "InvalidBinaryError",
    "InvalidTimestampError",
    "DuplicateKeyError",
    "IndentError",
    "MixedIndentError",
    "InconsistentIndentStyleError",
    "InvalidIndentCountError",
    "UnexpectedIndentError",
    "MissingValueError",
    "EmptyDocumentError",
]
