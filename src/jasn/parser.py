"""Parser for JASN, the bracketed (JSON5-like) syntax.

Grammar:
    document    = value EOF
    value       = "null" | "true" | "false" | INTEGER | FLOAT | STRING
                | BINARY | TIMESTAMP | list | map
    list        = "[" (value ("," value)* ","?)? "]"
    map         = "{" (entry ("," entry)* ","?)? "}"
    entry       = key ":" value
    key         = IDENTIFIER | STRING

    INTEGER     = [+-]? (DIGITS | 0x HEX | 0b BIN | 0o OCT)    ("_" between digits)
    FLOAT       = [+-]? DIGITS "." DIGITS EXP? | DIGITS EXP | [+-]? (inf | nan)
    BINARY      = b64"..." | h"..." | hex"..."
    TIMESTAMP   = ts"RFC 3339"

Whitespace, // line comments and /* block comments */ may appear
between any two tokens.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from . import literals
from .errors import DuplicateKeyError, JasnError, NestingTooDeepError, ParseError
from .value import Bool, List, Map, Null, Value

logger = logging.getLogger(__name__)

MAX_DEPTH = 128


class TokenType(Enum):
    # Symbols
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    COLON = ":"

    # Keywords
    NULL = "null"
    TRUE = "true"
    FALSE = "false"

    # Literals
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BINARY = "binary"
    TIMESTAMP = "timestamp"
    IDENTIFIER = "identifier"

    EOF = "end of input"


SYMBOLS = {t.value: t for t in (
    TokenType.LBRACE,
    TokenType.RBRACE,
    TokenType.LBRACKET,
    TokenType.RBRACKET,
    TokenType.COMMA,
    TokenType.COLON,
)}

KEYWORDS = {
    "null": TokenType.NULL,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

LITERAL_PREFIXES = {
    "b64": TokenType.BINARY,
    "h": TokenType.BINARY,
    "hex": TokenType.BINARY,
    "ts": TokenType.TIMESTAMP,
}

LITERAL_TYPES = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BINARY,
    TokenType.TIMESTAMP,
)

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
NUMBER_TAIL = re.compile(r"[A-Za-z0-9_.]+")


@dataclass
class Token:
    type: TokenType
    value: str  # source text; for quoted tokens, the raw text between the quotes
    line: int
    col: int
    prefix: str = ""  # b64, h, hex or ts for BINARY and TIMESTAMP tokens

    def describe(self) -> str:
        if self.type is TokenType.EOF:
            return self.type.value
        if self.type.value in SYMBOLS or self.type.value in KEYWORDS:
            return repr(self.value)
        return f"{self.type.value} {self.prefix}{self.value!r}"


class Lexer:
    """Tokenizer for JASN text.

    ``line`` and ``col`` give the position of the first character, so a
    span cut out of a larger document reports positions in that document.
    """

    def __init__(self, source: str, line: int = 1, col: int = 1):
        self.source = source
        self.pos = 0
        self.line = line
        self.col = col
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                break

            ch = self.source[self.pos]
            if ch in SYMBOLS:
                self.tokens.append(Token(SYMBOLS[ch], ch, self.line, self.col))
                self._advance()
            elif ch == '"' or ch == "'":
                self._read_quoted(TokenType.STRING, "", self.line, self.col)
            elif ch.isascii() and (ch.isalpha() or ch == "_"):
                self._read_word()
            elif (ch.isascii() and ch.isdigit()) or ch in "+-.":
                self._read_number()
            else:
                raise ParseError(f"unexpected character {ch!r}", self.line, self.col)

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.col))
        return self.tokens

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return ""

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip(self, count: int) -> None:
        for _ in range(count):
            self._advance()

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in " \t\r\n\ufeff":
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while self.pos < len(self.source) and self.source[self.pos] != "\n":
                    self._advance()
            elif ch == "/" and self._peek(1) == "*":
                start_line, start_col = self.line, self.col
                end = self.source.find("*/", self.pos + 2)
                if end < 0:
                    raise ParseError("unterminated block comment", start_line, start_col)
                self._skip(end + 2 - self.pos)
            else:
                break

    def _read_quoted(self, ttype: TokenType, prefix: str, line: int, col: int) -> None:
        quote = self._advance()
        start = self.pos
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == "\\":
                self._advance()
                if self.pos >= len(self.source):
                    break
                self._advance()
            elif ch == quote:
                content = self.source[start : self.pos]
                self._advance()
                self.tokens.append(Token(ttype, content, line, col, prefix))
                return
            else:
                self._advance()
        raise ParseError(f"unterminated {ttype.value}", line, col)

    def _read_word(self) -> None:
        line, col = self.line, self.col
        word = IDENTIFIER.match(self.source, self.pos).group(0)
        self._skip(len(word))

        # A literal prefix only counts when the quote follows immediately.
        if word in LITERAL_PREFIXES and self._peek() in ("\"", "'"):
            self._read_quoted(LITERAL_PREFIXES[word], word, line, col)
        elif word in KEYWORDS:
            self.tokens.append(Token(KEYWORDS[word], word, line, col))
        elif word.lower() in ("inf", "nan"):
            self.tokens.append(Token(TokenType.FLOAT, word, line, col))
        else:
            self.tokens.append(Token(TokenType.IDENTIFIER, word, line, col))

    def _read_number(self) -> None:
        line, col = self.line, self.col
        ttype = TokenType.FLOAT
        m = None
        if self._peek() in ("+", "-"):
            m = literals.SPECIAL_FLOAT_LITERAL.match(self.source, self.pos)
        if m is None:
            m = literals.FLOAT_LITERAL.match(self.source, self.pos)
        if m is None:
            ttype = TokenType.INTEGER
            m = literals.INTEGER_LITERAL.match(self.source, self.pos)

        end = m.end() if m else self.pos
        tail = NUMBER_TAIL.match(self.source, end)
        if m is None or tail is not None:
            bad = self.source[self.pos : tail.end() if tail else end + 1]
            raise ParseError(f"invalid number literal {bad!r}", line, col)

        text = m.group(0)
        self._skip(len(text))
        self.tokens.append(Token(ttype, text, line, col))


class Parser:
    """Recursive descent parser over a JASN token list."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def at(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def consume(self, ttype: TokenType, expected: str) -> Token:
        tok = self.peek()
        if tok.type != ttype:
            raise ParseError(f"expected {expected}, found {tok.describe()}", tok.line, tok.col)
        self.pos += 1
        return tok

    def match(self, *types: TokenType) -> Token | None:
        if self.at(*types):
            tok = self.peek()
            self.pos += 1
            return tok
        return None

    def parse_document(self) -> Value:
        """Parse a single value followed by end of input."""
        value = self.parse_value()
        tok = self.peek()
        if tok.type is not TokenType.EOF:
            raise ParseError(f"unexpected {tok.describe()} after value", tok.line, tok.col)
        return value

    def parse_value(self) -> Value:
        tok = self.peek()
        if tok.type is TokenType.LBRACKET:
            return self.parse_list()
        if tok.type is TokenType.LBRACE:
            return self.parse_map()
        if self.match(TokenType.NULL):
            return Null()
        if self.match(TokenType.TRUE):
            return Bool(True)
        if self.match(TokenType.FALSE):
            return Bool(False)
        if self.match(*LITERAL_TYPES):
            return self._literal(tok)
        raise ParseError(f"expected a value, found {tok.describe()}", tok.line, tok.col)

    def parse_list(self) -> List:
        self._enter(self.consume(TokenType.LBRACKET, "'['"))
        items: list[Value] = []
        while not self.at(TokenType.RBRACKET):
            items.append(self.parse_value())
            if not self.match(TokenType.COMMA):
                break
        self.consume(TokenType.RBRACKET, "',' or ']'")
        self.depth -= 1
        return List(items)

    def parse_map(self) -> Map:
        self._enter(self.consume(TokenType.LBRACE, "'{'"))
        result = Map()
        while not self.at(TokenType.RBRACE):
            key_tok = self.peek()
            key = self.parse_key()
            self.consume(TokenType.COLON, "':'")
            value = self.parse_value()
            try:
                result.insert(key, value)
            except DuplicateKeyError as exc:
                raise exc.at(key_tok.line, key_tok.col)
            if not self.match(TokenType.COMMA):
                break
        self.consume(TokenType.RBRACE, "',' or '}'")
        self.depth -= 1
        return result

    def parse_key(self) -> str:
        tok = self.peek()
        if tok.type is TokenType.IDENTIFIER:
            self.pos += 1
            return tok.value
        if tok.type is TokenType.STRING:
            self.pos += 1
            return self._literal(tok).value
        if tok.type in (TokenType.NULL, TokenType.TRUE, TokenType.FALSE, TokenType.FLOAT) and (
            literals.is_reserved_word(tok.value)
        ):
            raise ParseError(
                f"reserved word {tok.value!r} must be quoted to be used as a key",
                tok.line,
                tok.col,
            )
        raise ParseError(f"expected a map key, found {tok.describe()}", tok.line, tok.col)

    def _enter(self, tok: Token) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise NestingTooDeepError(
                f"nesting deeper than {MAX_DEPTH} levels", tok.line, tok.col
            )

    def _literal(self, tok: Token) -> Value:
        """Decode a literal token, reporting failures at the token's position."""
        try:
            if tok.type is TokenType.INTEGER:
                return literals.decode_integer(tok.value)
            if tok.type is TokenType.FLOAT:
                return literals.decode_float(tok.value)
            if tok.type is TokenType.STRING:
                return literals.decode_string(tok.value)
            if tok.type is TokenType.BINARY:
                return literals.decode_binary(tok.prefix, tok.value)
            return literals.decode_timestamp(tok.value)
        except JasnError as exc:
            raise exc.at(tok.line, tok.col)


def parse(source: str) -> Value:
    """Parse JASN text into a value."""
    logger.debug("parsing %d characters of JASN", len(source))
    lexer = Lexer(source)
    parser = Parser(lexer.tokenize())
    return parser.parse_document()


def parse_inline(source: str, line: int, col: int) -> Value:
    """Parse a JASN value embedded in a larger document at ``line``/``col``."""
    lexer = Lexer(source, line, col)
    parser = Parser(lexer.tokenize())
    return parser.parse_document()


def parse_file(filepath: str | Path) -> Value:
    """Parse a .jasn file."""
    filepath = Path(filepath)
    return parse(filepath.read_text(encoding="utf-8"))
