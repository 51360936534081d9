"""Formatter options.

``FormatOptions`` is immutable; the ``with_*`` methods return validated
copies, so presets can be tweaked one field at a time:

    opts = FormatOptions.pretty().with_indent("    ").with_sort_keys(False)
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class QuoteStyle(str, Enum):
    DOUBLE = "double"
    SINGLE = "single"
    PREFER_DOUBLE = "prefer"  # double, unless the string holds more " than '


class BinaryEncoding(str, Enum):
    BASE64 = "base64"
    HEX = "hex"


class TimestampPrecision(str, Enum):
    AUTO = "auto"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"

    @property
    def digits(self) -> int | None:
        """Fraction digits printed, or None to print only the significant ones."""
        return _PRECISION_DIGITS[self]


_PRECISION_DIGITS = {
    TimestampPrecision.AUTO: None,
    TimestampPrecision.SECONDS: 0,
    TimestampPrecision.MILLISECONDS: 3,
    TimestampPrecision.MICROSECONDS: 6,
    TimestampPrecision.NANOSECONDS: 9,
}


class FormatOptions(BaseModel):
    """How a value tree is rendered back to text."""

    model_config = ConfigDict(frozen=True)

    indent: str = "  "  # empty means single-line output
    trailing_commas: bool = True
    quote_style: QuoteStyle = QuoteStyle.DOUBLE
    binary_encoding: BinaryEncoding = BinaryEncoding.BASE64
    unquoted_keys: bool = True
    leading_plus: bool = False
    sort_keys: bool = True
    escape_unicode: bool = False
    use_zulu: bool = True
    timestamp_precision: TimestampPrecision = TimestampPrecision.AUTO

    @field_validator("indent")
    @classmethod
    def indent_is_uniform(cls, v: str) -> str:
        if v and (set(v) != {" "} and set(v) != {"\t"}):
            raise ValueError("indent must be empty, all spaces, or all tabs")
        return v

    @property
    def is_compact(self) -> bool:
        return not self.indent

    @classmethod
    def compact(cls) -> "FormatOptions":
        return cls(indent="", trailing_commas=False, sort_keys=False, escape_unicode=True)

    @classmethod
    def pretty(cls) -> "FormatOptions":
        return cls()

    @classmethod
    def block(cls) -> "FormatOptions":
        return cls(trailing_commas=False)

    def _replace(self, **changes) -> "FormatOptions":
        return type(self).model_validate({**self.model_dump(), **changes})

    def with_indent(self, indent: str) -> "FormatOptions":
        return self._replace(indent=indent)

    def with_trailing_commas(self, enabled: bool) -> "FormatOptions":
        return self._replace(trailing_commas=enabled)

    def with_quote_style(self, style: QuoteStyle | str) -> "FormatOptions":
        return self._replace(quote_style=style)

    def with_binary_encoding(self, encoding: BinaryEncoding | str) -> "FormatOptions":
        return self._replace(binary_encoding=encoding)

    def with_unquoted_keys(self, enabled: bool) -> "FormatOptions":
        return self._replace(unquoted_keys=enabled)

    def with_leading_plus(self, enabled: bool) -> "FormatOptions":
        return self._replace(leading_plus=enabled)

    def with_sort_keys(self, enabled: bool) -> "FormatOptions":
        return self._replace(sort_keys=enabled)

    def with_escape_unicode(self, enabled: bool) -> "FormatOptions":
        return self._replace(escape_unicode=enabled)

    def with_zulu(self, enabled: bool) -> "FormatOptions":
        return self._replace(use_zulu=enabled)

    def with_timestamp_precision(self, precision: TimestampPrecision | str) -> "FormatOptions":
        return self._replace(timestamp_precision=precision)
