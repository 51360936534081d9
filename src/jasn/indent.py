"""Indentation tracking for the JAML block syntax.

The first indented line of a document fixes the indentation unit: its
width and whether it is made of spaces or tabs. Every later indent must
use the same character and be a whole multiple of that width.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import InconsistentIndentStyleError, InvalidIndentCountError, MixedIndentError

logger = logging.getLogger(__name__)


class IndentKind(Enum):
    SPACE = " "
    TAB = "\t"

    def __str__(self) -> str:
        return "tabs" if self is IndentKind.TAB else "spaces"


@dataclass(frozen=True)
class IndentUnit:
    width: int
    kind: IndentKind

    def __str__(self) -> str:
        return repr(self.kind.value * self.width)


class IndentTracker:
    """Measures indentation levels against the document's unit."""

    def __init__(self):
        self.unit: IndentUnit | None = None

    def measure(self, indent: str) -> int:
        """Return the indentation level of ``indent`` (0, 1, 2, ...)."""
        if not indent:
            return 0

        kinds = set(indent)
        if len(kinds) != 1:
            raise MixedIndentError(indent)
        kind = IndentKind(indent[0])

        if self.unit is None:
            self.unit = IndentUnit(len(indent), kind)
            logger.debug("indentation unit established: %s", self.unit)
            return 1

        if kind is not self.unit.kind:
            raise InconsistentIndentStyleError(str(self.unit.kind), str(kind))
        if len(indent) % self.unit.width:
            raise InvalidIndentCountError(self.unit.width, len(indent))
        return len(indent) // self.unit.width
