"""Render value trees as JASN or JAML text.

Rendering is total over valid values and every output re-parses to an
equal value: floats keep a ``.`` or exponent so they never read back as
integers, keys that could be mistaken for keywords are quoted, and in
JAML an empty collection is written inline as ``[]`` or ``{}``.
"""

import base64
import logging
from datetime import timedelta

from . import literals
from .options import BinaryEncoding, FormatOptions, QuoteStyle
from .parser import IDENTIFIER
from .value import Binary, Bool, Float, Int, List, Map, Null, String, Timestamp, Value

logger = logging.getLogger(__name__)

ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
}

DEFAULT_BLOCK_INDENT = "  "


# Scalars


def format_int(value: int, opts: FormatOptions) -> str:
    if opts.leading_plus and value >= 0:
        return f"+{value}"
    return str(value)


def format_float(value: float, opts: FormatOptions) -> str:
    if value != value:
        return "nan"
    if value in (float("inf"), float("-inf")):
        text = "inf" if value > 0 else "-inf"
    else:
        text = repr(value)
    if opts.leading_plus and not text.startswith("-"):
        return "+" + text
    return text


def choose_quote(text: str, style: QuoteStyle) -> str:
    if style is QuoteStyle.SINGLE:
        return "'"
    if style is QuoteStyle.PREFER_DOUBLE and text.count('"') > text.count("'"):
        return "'"
    return '"'


def escape_char(ch: str, quote: str, escape_unicode: bool) -> str:
    if ch == quote:
        return "\\" + ch
    if ch in ESCAPES:
        return ESCAPES[ch]
    code = ord(ch)
    if code < 0x20 or 0x7F <= code <= 0x9F:
        return f"\\u{code:04x}"
    if escape_unicode and code > 0x7F:
        if code > 0xFFFF:
            code -= 0x10000
            return f"\\u{0xD800 + (code >> 10):04x}\\u{0xDC00 + (code & 0x3FF):04x}"
        return f"\\u{code:04x}"
    return ch


def format_string(text: str, opts: FormatOptions) -> str:
    quote = choose_quote(text, opts.quote_style)
    body = "".join(escape_char(ch, quote, opts.escape_unicode) for ch in text)
    return f"{quote}{body}{quote}"


def can_be_unquoted(key: str) -> bool:
    """True if ``key`` can be written as a bare identifier."""
    return bool(IDENTIFIER.fullmatch(key)) and not literals.is_reserved_word(key)


def format_key(key: str, opts: FormatOptions) -> str:
    if opts.unquoted_keys and can_be_unquoted(key):
        return key
    return format_string(key, opts)


def format_binary(data: bytes, opts: FormatOptions, hex_prefix: str = "h") -> str:
    if opts.binary_encoding is BinaryEncoding.HEX:
        return f'{hex_prefix}"{data.hex()}"'
    return f'b64"{base64.b64encode(data).decode("ascii")}"'


def format_timestamp(ts: Timestamp, opts: FormatOptions) -> str:
    m = ts.moment
    text = (
        f"{m.year:04d}-{m.month:02d}-{m.day:02d}"
        f"T{m.hour:02d}:{m.minute:02d}:{m.second:02d}"
    )

    fraction = f"{ts.nanosecond:09d}"
    digits = opts.timestamp_precision.digits
    if digits is None:
        fraction = fraction.rstrip("0")
    else:
        fraction = fraction[:digits]
    if fraction:
        text += "." + fraction

    offset = ts.offset
    if not offset and opts.use_zulu:
        text += "Z"
    else:
        sign = "-" if offset < timedelta(0) else "+"
        minutes = int(abs(offset).total_seconds()) // 60
        text += f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
    return f'ts"{text}"'


def format_scalar(value: Value, opts: FormatOptions, hex_prefix: str = "h") -> str:
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Int):
        return format_int(value.value, opts)
    if isinstance(value, Float):
        return format_float(value.value, opts)
    if isinstance(value, String):
        return format_string(value.value, opts)
    if isinstance(value, Binary):
        return format_binary(value.value, opts, hex_prefix)
    if isinstance(value, Timestamp):
        return format_timestamp(value, opts)
    raise TypeError(f"not a scalar value: {type(value).__name__}")


def map_entries(value: Map, opts: FormatOptions) -> list[tuple[str, Value]]:
    return value.items() if opts.sort_keys else value.insertion_items()


# JASN


class BracketedFormatter:
    """Renders JASN; an empty indent gives single-line output."""

    def __init__(self, opts: FormatOptions):
        self.opts = opts

    def format(self, value: Value, depth: int = 0) -> str:
        if isinstance(value, List):
            return self._collection("[", "]", [self.format(item, depth + 1) for item in value], depth)
        if isinstance(value, Map):
            sep = ":" if self.opts.is_compact else ": "
            parts = [
                f"{format_key(key, self.opts)}{sep}{self.format(item, depth + 1)}"
                for key, item in map_entries(value, self.opts)
            ]
            return self._collection("{", "}", parts, depth)
        return format_scalar(value, self.opts)

    def _collection(self, open_: str, close: str, parts: list[str], depth: int) -> str:
        if not parts:
            return open_ + close
        if self.opts.is_compact:
            return open_ + ",".join(parts) + close

        inner = self.opts.indent * (depth + 1)
        body = ",\n".join(inner + part for part in parts)
        if self.opts.trailing_commas:
            body += ","
        return f"{open_}\n{body}\n{self.opts.indent * depth}{close}"


def to_string_opts(value: Value, opts: FormatOptions) -> str:
    """Render ``value`` as JASN with explicit options."""
    logger.debug("formatting JASN with %s", opts)
    return BracketedFormatter(opts).format(value)


def to_string(value: Value) -> str:
    """Render ``value`` as compact single-line JASN."""
    return to_string_opts(value, FormatOptions.compact())


def to_string_pretty(value: Value) -> str:
    """Render ``value`` as indented JASN with sorted keys."""
    return to_string_opts(value, FormatOptions.pretty())


# JAML


def _nests(value: Value) -> bool:
    """Non-empty collections are written as an indented block."""
    return isinstance(value, (List, Map)) and len(value) > 0


class BlockFormatter:
    """Renders JAML. Scalars and empty collections go inline after ``- `` or ``key: ``."""

    def __init__(self, opts: FormatOptions):
        self.opts = opts
        self.unit = opts.indent or DEFAULT_BLOCK_INDENT

    def format(self, value: Value) -> str:
        if not _nests(value):
            return self.inline(value)
        lines: list[str] = []
        self._block(value, 0, lines)
        return "\n".join(lines) + "\n"

    def inline(self, value: Value) -> str:
        if isinstance(value, List):
            return "[]"
        if isinstance(value, Map):
            return "{}"
        return format_scalar(value, self.opts, hex_prefix="hex")

    def _block(self, value: Value, depth: int, lines: list[str]) -> None:
        prefix = self.unit * depth
        if isinstance(value, List):
            heads = [("-", item) for item in value]
        else:
            heads = [(format_key(key, self.opts) + ":", item) for key, item in map_entries(value, self.opts)]

        for head, item in heads:
            if _nests(item):
                lines.append(prefix + head)
                self._block(item, depth + 1, lines)
            else:
                lines.append(f"{prefix}{head} {self.inline(item)}")


def format_jaml(value: Value, opts: FormatOptions | None = None) -> str:
    """Render ``value`` as JAML (block syntax)."""
    opts = opts or FormatOptions.block()
    logger.debug("formatting JAML with %s", opts)
    return BlockFormatter(opts).format(value)
