"""Decoding of scalar literal tokens into values.

The parsers decide which kind of literal a token is; the functions here
turn its source text into a ``Value``. Grammar-level checks (where an
underscore may appear, which characters end a number) are the parsers'
job.
"""

import base64
import binascii
import math
import re
from datetime import datetime, timedelta, timezone

from .errors import (
    FloatParseError,
    IntegerOverflowError,
    InvalidBinaryError,
    InvalidEscapeError,
    InvalidTimestampError,
    ParseError,
)
from .value import INT64_MAX, INT64_MIN, Binary, Float, Int, String, Timestamp

# Token grammar shared by both syntaxes. "_" may only sit between digits.
_DIGITS = r"[0-9]+(?:_[0-9]+)*"
_EXPONENT = rf"[eE][+-]?{_DIGITS}"

INTEGER_LITERAL = re.compile(
    r"[+-]?(?:"
    r"0[xX][0-9a-fA-F]+(?:_[0-9a-fA-F]+)*"
    r"|0[bB][01]+(?:_[01]+)*"
    r"|0[oO][0-7]+(?:_[0-7]+)*"
    rf"|{_DIGITS})"
)
FLOAT_LITERAL = re.compile(
    rf"[+-]?(?:{_DIGITS}\.{_DIGITS}(?:{_EXPONENT})?"
    rf"|\.{_DIGITS}(?:{_EXPONENT})?"
    rf"|{_DIGITS}{_EXPONENT})"
)
SPECIAL_FLOAT_LITERAL = re.compile(r"[+-]?(?:inf|nan)", re.IGNORECASE)

RESERVED_WORDS = {"null", "true", "false", "inf", "nan"}

RADIX_PREFIXES = {"0x": 16, "0b": 2, "0o": 8}

SPECIAL_FLOATS = {
    "inf": math.inf,
    "+inf": math.inf,
    "-inf": -math.inf,
    "nan": math.nan,
    "+nan": math.nan,
    "-nan": math.nan,
}

SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
}

HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")

TIMESTAMP = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


def decode_integer(text: str) -> Int:
    """Decode a decimal, hex (0x), binary (0b) or octal (0o) integer."""
    if not INTEGER_LITERAL.fullmatch(text):
        raise ParseError(f"invalid integer literal {text!r}")

    body = text
    negative = False
    if body[0] in "+-":
        negative = body[0] == "-"
        body = body[1:]

    base = RADIX_PREFIXES.get(body[:2].lower(), 10)
    if base != 10:
        body = body[2:]

    magnitude = int(body.replace("_", ""), base)
    number = -magnitude if negative else magnitude
    if not INT64_MIN <= number <= INT64_MAX:
        raise IntegerOverflowError(text)
    return Int(number)


def is_reserved_word(word: str) -> bool:
    """Words that can never be used as unquoted map keys."""
    return word in RESERVED_WORDS or word.lower() in ("inf", "nan")


def decode_float(text: str) -> Float:
    """Decode a decimal float or one of inf, +inf, -inf, nan (any case)."""
    special = SPECIAL_FLOATS.get(text.lower())
    if special is not None:
        return Float(special)
    if not FLOAT_LITERAL.fullmatch(text):
        raise FloatParseError(text)
    return Float(float(text.replace("_", "")))


def decode_string(content: str) -> String:
    """Process escapes in the text between a pair of quotes."""
    return String(unescape(content))


def unescape(content: str) -> str:
    if "\\" not in content:
        return content

    out: list[str] = []
    pos = 0
    end = len(content)
    while pos < end:
        ch = content[pos]
        if ch != "\\":
            out.append(ch)
            pos += 1
            continue

        if pos + 1 >= end:
            raise InvalidEscapeError("unterminated escape sequence at end of string")
        esc = content[pos + 1]
        if esc in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[esc])
            pos += 2
        elif esc == "u":
            code = _read_hex4(content, pos + 2)
            pos += 6
            if 0xD800 <= code <= 0xDBFF:
                if content[pos : pos + 2] != "\\u":
                    raise InvalidEscapeError(f"unpaired high surrogate \\u{code:04x}")
                low = _read_hex4(content, pos + 2)
                if not 0xDC00 <= low <= 0xDFFF:
                    raise InvalidEscapeError(
                        f"high surrogate \\u{code:04x} followed by \\u{low:04x}"
                    )
                pos += 6
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
            elif 0xDC00 <= code <= 0xDFFF:
                raise InvalidEscapeError(f"unpaired low surrogate \\u{code:04x}")
            out.append(chr(code))
        else:
            raise InvalidEscapeError(f"invalid escape character: {esc!r}")

    return "".join(out)


def _read_hex4(content: str, pos: int) -> int:
    digits = content[pos : pos + 4]
    if len(digits) != 4 or not HEX_DIGITS.fullmatch(digits):
        raise InvalidEscapeError(f"invalid unicode escape: \\u{digits}")
    return int(digits, 16)


def decode_base64(content: str) -> Binary:
    try:
        return Binary(base64.b64decode(content, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise InvalidBinaryError(f"invalid base64 data: {exc}") from None


def decode_hex(content: str) -> Binary:
    if not HEX_DIGITS.fullmatch(content):
        raise InvalidBinaryError(f"invalid hex digit in {content!r}")
    if len(content) % 2:
        raise InvalidBinaryError("hex binary must have an even number of digits")
    return Binary(bytes.fromhex(content))


BINARY_DECODERS = {
    "b64": decode_base64,
    "h": decode_hex,
    "hex": decode_hex,
}


def decode_binary(prefix: str, content: str) -> Binary:
    return BINARY_DECODERS[prefix](content)


def decode_timestamp(content: str) -> Timestamp:
    """Parse an RFC 3339 date-time. Fractions past nanoseconds are truncated."""
    match = TIMESTAMP.fullmatch(content)
    if match is None:
        raise InvalidTimestampError(content, "expected RFC 3339 date-time with offset")

    year, month, day, hour, minute, second = (int(g) for g in match.group(1, 2, 3, 4, 5, 6))
    fraction = match.group(7) or ""
    nanosecond = int(fraction[:9].ljust(9, "0")) if fraction else 0

    if match.group(8):
        tz = timezone.utc
    else:
        off_hours, off_minutes = int(match.group(10)), int(match.group(11))
        if off_hours > 23 or off_minutes > 59:
            raise InvalidTimestampError(content, "offset out of range")
        offset = timedelta(hours=off_hours, minutes=off_minutes)
        tz = timezone(-offset if match.group(9) == "-" else offset)

    try:
        moment = datetime(year, month, day, hour, minute, second, tzinfo=tz)
    except ValueError as exc:
        raise InvalidTimestampError(content, str(exc)) from None
    return Timestamp(moment, nanosecond)
