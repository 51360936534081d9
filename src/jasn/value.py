"""Value model shared by the JASN and JAML syntaxes.

A value tree is built from the variants below. Every variant derives
from ``Value``, which provides the ``is_*`` predicates and the ``as_*``
narrowing accessors (returning ``None`` on a type mismatch).
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .errors import DuplicateKeyError, IntegerOverflowError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Value:
    """Base class for all value variants."""

    def is_null(self) -> bool:
        return isinstance(self, Null)

    def is_bool(self) -> bool:
        return isinstance(self, Bool)

    def is_int(self) -> bool:
        return isinstance(self, Int)

    def is_float(self) -> bool:
        return isinstance(self, Float)

    def is_string(self) -> bool:
        return isinstance(self, String)

    def is_binary(self) -> bool:
        return isinstance(self, Binary)

    def is_timestamp(self) -> bool:
        return isinstance(self, Timestamp)

    def is_list(self) -> bool:
        return isinstance(self, List)

    def is_map(self) -> bool:
        return isinstance(self, Map)

    def as_bool(self) -> bool | None:
        return self.value if isinstance(self, Bool) else None

    def as_int(self) -> int | None:
        return self.value if isinstance(self, Int) else None

    def as_float(self) -> float | None:
        return self.value if isinstance(self, Float) else None

    def as_str(self) -> str | None:
        return self.value if isinstance(self, String) else None

    def as_bytes(self) -> bytes | None:
        return self.value if isinstance(self, Binary) else None

    def as_timestamp(self) -> "Timestamp | None":
        return self if isinstance(self, Timestamp) else None

    def as_list(self) -> "list[Value] | None":
        return self.items if isinstance(self, List) else None

    def as_map(self) -> "Map | None":
        return self if isinstance(self, Map) else None

    def to_python(self) -> Any:
        """Convert into plain Python data (dict, list, str, ...)."""
        raise NotImplementedError


@dataclass
class Null(Value):
    def to_python(self) -> None:
        return None


@dataclass
class Bool(Value):
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise TypeError(f"Bool requires a bool, got {type(self.value).__name__}")

    def to_python(self) -> bool:
        return self.value


@dataclass
class Int(Value):
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Int requires an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise IntegerOverflowError(str(self.value))

    def to_python(self) -> int:
        return self.value


@dataclass(eq=False)
class Float(Value):
    """64-bit float. NaN is allowed and, as usual, never equals itself."""

    value: float

    def __post_init__(self):
        self.value = float(self.value)

    def __eq__(self, other: object) -> bool:
        # Compare payloads directly; tuple comparison would match a NaN by identity.
        if not isinstance(other, Float):
            return NotImplemented
        return self.value == other.value

    def to_python(self) -> float:
        return self.value


@dataclass
class String(Value):
    value: str

    def to_python(self) -> str:
        return self.value


@dataclass
class Binary(Value):
    value: bytes

    def __post_init__(self):
        self.value = bytes(self.value)

    def to_python(self) -> bytes:
        return self.value


@dataclass
class Timestamp(Value):
    """A point in time with an explicit UTC offset and nanosecond precision.

    ``moment`` holds the offset-aware date and time at whole-second
    resolution; the sub-second part lives in ``nanosecond``. A datetime
    passed with microseconds is folded into ``nanosecond``.
    """

    moment: datetime
    nanosecond: int = 0

    def __post_init__(self):
        if self.moment.tzinfo is None or self.moment.utcoffset() is None:
            raise ValueError("timestamp requires a UTC offset, got a naive datetime")
        if self.moment.utcoffset() % timedelta(minutes=1):
            raise ValueError("timestamp offset must be a whole number of minutes")
        if self.moment.microsecond:
            if self.nanosecond:
                raise ValueError("sub-second precision given twice")
            self.nanosecond = self.moment.microsecond * 1000
            self.moment = self.moment.replace(microsecond=0)
        if not 0 <= self.nanosecond < 1_000_000_000:
            raise ValueError(f"nanosecond out of range: {self.nanosecond}")

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Timestamp":
        return cls(moment)

    def to_datetime(self) -> datetime:
        """Return an aware datetime, truncated to microseconds."""
        return self.moment.replace(microsecond=self.nanosecond // 1000)

    @property
    def offset(self) -> timedelta:
        return self.moment.utcoffset()

    def to_python(self) -> datetime:
        return self.to_datetime()


@dataclass
class List(Value):
    items: list[Value] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def __setitem__(self, index: int, value: Value) -> None:
        self.items[index] = value

    def append(self, value: Value) -> None:
        self.items.append(value)

    def take(self, index: int) -> Value:
        """Remove the item at ``index`` from the tree, leaving ``Null`` behind."""
        value = self.items[index]
        self.items[index] = Null()
        return value

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]


def _check_key(key: object) -> None:
    if not isinstance(key, str):
        raise TypeError(f"map keys must be strings, got {type(key).__name__}")


@dataclass
class Map(Value):
    """String-keyed mapping. Iteration is always sorted by key.

    The insertion order of ``entries`` is kept so a formatter can
    reproduce source order when key sorting is turned off.
    """

    entries: dict[str, Value] = field(default_factory=dict)

    def __post_init__(self):
        for key in self.entries:
            _check_key(key)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Value]]) -> "Map":
        result = cls()
        for key, value in pairs:
            result.insert(key, value)
        return result

    def insert(self, key: str, value: Value) -> None:
        """Add a new entry; an existing key is an error, never overwritten."""
        _check_key(key)
        if key in self.entries:
            raise DuplicateKeyError(key)
        self.entries[key] = value

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Value:
        return self.entries[key]

    def __setitem__(self, key: str, value: Value) -> None:
        _check_key(key)
        self.entries[key] = value

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self.entries.get(key, default)

    def keys(self) -> list[str]:
        return sorted(self.entries)

    def items(self) -> list[tuple[str, Value]]:
        return sorted(self.entries.items(), key=lambda kv: kv[0])

    def insertion_items(self) -> list[tuple[str, Value]]:
        return list(self.entries.items())

    def take(self, key: str) -> Value:
        """Remove the value under ``key`` from the tree, leaving ``Null`` behind."""
        value = self.entries[key]
        self.entries[key] = Null()
        return value

    def to_python(self) -> dict:
        return {key: value.to_python() for key, value in self.items()}
