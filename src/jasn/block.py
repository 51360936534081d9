"""Parser for JAML, the indentation-based (YAML-like) syntax.

A document is a single value: a list, a map, or one scalar line. Nesting
is expressed by indentation, measured with ``IndentTracker``:

    - item              list item; an empty remainder opens a nested block
    key: value          map entry; an empty remainder opens a nested block
    key: [1, 2]         flow collections are parsed as JASN on that line
    # comment           comments run to the end of the line

Scalars use the JASN literal syntax, so strings are always quoted.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from . import literals
from .errors import (
    DuplicateKeyError,
    EmptyDocumentError,
    IndentError,
    JasnError,
    MissingValueError,
    NestingTooDeepError,
    ParseError,
    UnexpectedIndentError,
)
from .indent import IndentTracker
from .parser import MAX_DEPTH, parse_inline
from .value import List, Map, Value

logger = logging.getLogger(__name__)

INDENT = re.compile(r"[ \t]*")
LIST_ITEM = re.compile(r"-(?:[ \t]+(?P<value>.*))?$")
MAP_ENTRY = re.compile(
    r"""(?:(?P<name>[A-Za-z_][A-Za-z0-9_]*)"""
    r"""|(?P<quoted>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'))"""
    r""":(?:[ \t]*(?P<value>.*))?$"""
)


@dataclass
class Line:
    number: int
    level: int
    text: str  # content without indentation, trailing comment or trailing space
    col: int  # column where ``text`` starts


def strip_comment(text: str) -> str:
    """Cut a ``#`` comment off the end of a line.

    ``#`` inside quotes or inside the JASN comments a flow value may carry
    (``/* ... */`` and ``// ...``) does not start a comment.
    """
    quote = None
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch == '"' or ch == "'":
            quote = ch
        elif text.startswith("//", i):
            return text
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end < 0:
                return text
            i = end + 2
            continue
        elif ch == "#":
            return text[:i]
        i += 1
    return text


class BlockParser:
    """Line-oriented recursive descent parser for JAML."""

    def __init__(self, source: str):
        self.tracker = IndentTracker()
        self.lines = self._scan(source)
        self.pos = 0
        self.depth = 0

    def _scan(self, source: str) -> list[Line]:
        lines = []
        for number, raw in enumerate(source.split("\n"), start=1):
            raw = raw.rstrip("\r")
            if number == 1:
                raw = raw.lstrip("\ufeff")
            indent = INDENT.match(raw).group(0)
            text = strip_comment(raw[len(indent) :]).rstrip()
            if not text:
                continue
            try:
                level = self.tracker.measure(indent)
            except IndentError as exc:
                raise exc.at(number, 1)
            lines.append(Line(number, level, text, len(indent) + 1))
        return lines

    def parse(self) -> Value:
        if not self.lines:
            raise EmptyDocumentError()
        first = self.lines[0]
        if first.level != 0:
            raise UnexpectedIndentError(0, first.level).at(first.number, first.col)
        return self.parse_node(0)

    def _current(self) -> Line | None:
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return None

    def parse_node(self, level: int) -> Value:
        """Parse the block starting at the current line, at ``level``."""
        line = self.lines[self.pos]
        if LIST_ITEM.match(line.text):
            return self.parse_list(level)
        if MAP_ENTRY.match(line.text):
            return self.parse_map(level)

        self.pos += 1
        value = parse_inline(line.text, line.number, line.col)
        following = self._current()
        if following is not None and following.level >= level:
            raise ParseError(
                "a scalar value must be the only line in its block",
                following.number,
                following.col,
            )
        return value

    def parse_list(self, level: int) -> List:
        self._enter(self.lines[self.pos])
        result = List()
        while (line := self._sibling(level)) is not None:
            m = LIST_ITEM.match(line.text)
            if m is None:
                raise ParseError("expected a list item ('- ...')", line.number, line.col)
            self.pos += 1
            if m.group("value"):
                result.append(self._scalar(line, m))
            else:
                result.append(self._child(line, level))
        self.depth -= 1
        return result

    def parse_map(self, level: int) -> Map:
        self._enter(self.lines[self.pos])
        result = Map()
        while (line := self._sibling(level)) is not None:
            m = MAP_ENTRY.match(line.text)
            if m is None:
                raise ParseError("expected a map entry ('key: ...')", line.number, line.col)
            key = self._key(line, m)
            self.pos += 1
            value = self._scalar(line, m) if m.group("value") else self._child(line, level)
            try:
                result.insert(key, value)
            except DuplicateKeyError as exc:
                raise exc.at(line.number, line.col)
        self.depth -= 1
        return result

    def _sibling(self, level: int) -> Line | None:
        """Return the next line of the block at ``level``, or None when it ends."""
        line = self._current()
        if line is None or line.level < level:
            return None
        if line.level > level:
            raise UnexpectedIndentError(level, line.level).at(line.number, line.col)
        return line

    def _child(self, parent: Line, level: int) -> Value:
        """Parse the nested block under a ``-`` or ``key:`` line with no inline value."""
        line = self._current()
        if line is None or line.level <= level:
            raise MissingValueError(parent.number)
        if line.level != level + 1:
            raise UnexpectedIndentError(level + 1, line.level).at(line.number, line.col)
        return self.parse_node(level + 1)

    def _scalar(self, line: Line, m: re.Match) -> Value:
        return parse_inline(m.group("value"), line.number, line.col + m.start("value"))

    def _key(self, line: Line, m: re.Match) -> str:
        name = m.group("name")
        if name is not None:
            if literals.is_reserved_word(name):
                raise ParseError(
                    f"reserved word {name!r} must be quoted to be used as a key",
                    line.number,
                    line.col,
                )
            return name
        try:
            return literals.unescape(m.group("quoted")[1:-1])
        except JasnError as exc:
            raise exc.at(line.number, line.col)

    def _enter(self, line: Line) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise NestingTooDeepError(f"nesting deeper than {MAX_DEPTH} levels", line.number, line.col)


def parse_jaml(source: str) -> Value:
    """Parse JAML text into a value."""
    logger.debug("parsing %d characters of JAML", len(source))
    return BlockParser(source).parse()


def parse_jaml_file(filepath: str | Path) -> Value:
    """Parse a .jaml file."""
    filepath = Path(filepath)
    return parse_jaml(filepath.read_text(encoding="utf-8"))
