"""Exceptions raised while lexing and parsing JASN and JAML text.

Every error derives from ``JasnError``. Lexer-level errors are raised
without a position; the parsers attach the offending token's line and
column with ``at()`` before letting them propagate.
"""


class JasnError(Exception):
    """Base class for all parse errors."""

    def __init__(self, msg: str, line: int | None = None, col: int | None = None):
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.col = col

    def at(self, line: int, col: int | None = None) -> "JasnError":
        """Attach a source position unless one is already known."""
        if self.line is None:
            self.line = line
            self.col = col
        return self

    def __str__(self) -> str:
        if self.line is None:
            return self.msg
        if self.col is None:
            return f"line {self.line}: {self.msg}"
        return f"line {self.line}, col {self.col}: {self.msg}"


class ParseError(JasnError):
    """Syntax error: unexpected token, missing delimiter, trailing input."""


class NestingTooDeepError(ParseError):
    pass


class IntegerOverflowError(JasnError):
    def __init__(self, text: str):
        super().__init__(f"integer {text} does not fit in a signed 64-bit integer")
        self.text = text


class FloatParseError(JasnError):
    def __init__(self, text: str):
        super().__init__(f"invalid float literal {text!r}")
        self.text = text


class InvalidEscapeError(JasnError):
    """Bad escape character, malformed \\u sequence or unpaired surrogate."""


class InvalidBinaryError(JasnError):
    """Bad base64 payload or malformed hex digits."""


class InvalidTimestampError(JasnError):
    def __init__(self, text: str, reason: str):
        super().__init__(f"invalid timestamp {text!r}: {reason}")
        self.text = text
        self.reason = reason


class DuplicateKeyError(JasnError):
    def __init__(self, key: str):
        super().__init__(f"duplicate key in map: {key!r}")
        self.key = key


class IndentError(JasnError):
    """Base class for block-syntax indentation errors."""


class MixedIndentError(IndentError):
    def __init__(self, indent: str):
        super().__init__(f"mixed tabs and spaces in indentation, got {indent!r}")
        self.indent = indent


class InconsistentIndentStyleError(IndentError):
    def __init__(self, expected: str, got: str):
        super().__init__(f"inconsistent indentation: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class InvalidIndentCountError(IndentError):
    def __init__(self, unit: int, got: int):
        super().__init__(f"invalid indentation: expected a multiple of {unit}, got {got}")
        self.unit = unit
        self.got = got


class UnexpectedIndentError(IndentError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"unexpected indentation: expected level {expected}, got {got}")
        self.expected = expected
        self.got = got


class MissingValueError(JasnError):
    def __init__(self, line: int):
        super().__init__("missing value", line=line)


class EmptyDocumentError(JasnError):
    def __init__(self):
        super().__init__("empty document")
