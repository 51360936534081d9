"""Tests for converting Python objects to and from value trees."""

from datetime import datetime, timezone
from enum import Enum, IntEnum

import pytest
from pydantic import BaseModel

from jasn import (
    Binary,
    Bool,
    DuplicateKeyError,
    IntegerOverflowError,
    Float,
    Int,
    List,
    Map,
    Null,
    String,
    Timestamp,
    dumps,
    dumps_jaml,
    from_value,
    loads,
    loads_jaml,
    to_value,
)


class Color(Enum):
    RED = "red"


class Level(IntEnum):
    HIGH = 3


class Point(BaseModel):
    x: int
    y: int


class Shape(BaseModel):
    name: str
    points: list[Point]
    data: bytes = b""
    created: datetime | None = None


class TestToValue:
    @pytest.mark.parametrize(
        "obj,expected",
        [
            (None, Null()),
            (True, Bool(True)),
            (7, Int(7)),
            (1.5, Float(1.5)),
            ("s", String("s")),
            (b"\x00", Binary(b"\x00")),
            (bytearray(b"\x01"), Binary(b"\x01")),
            ((1, 2), List([Int(1), Int(2)])),
            (Color.RED, String("red")),
            (Level.HIGH, Int(3)),
        ],
    )
    def test_scalars_and_sequences(self, obj, expected):
        assert to_value(obj) == expected

    def test_dict(self):
        assert to_value({"a": [1, None]}) == Map.from_pairs([("a", List([Int(1), Null()]))])

    def test_datetime(self):
        moment = datetime(2024, 1, 1, 0, 0, 0, 5, tzinfo=timezone.utc)
        value = to_value(moment)
        assert isinstance(value, Timestamp)
        assert value.nanosecond == 5000

    def test_model(self):
        value = to_value(Point(x=1, y=2))
        assert value == Map.from_pairs([("x", Int(1)), ("y", Int(2))])

    def test_values_pass_through(self):
        value = String("x")
        assert to_value(value) is value

    def test_non_string_keys(self):
        with pytest.raises(TypeError, match="map keys must be strings"):
            to_value({1: "a"})

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="cannot convert set"):
            to_value({1, 2})

    def test_naive_datetime(self):
        with pytest.raises(ValueError):
            to_value(datetime(2024, 1, 1))

    def test_int_out_of_range(self):
        with pytest.raises(IntegerOverflowError):
            to_value(2**64)


class TestFromValue:
    def test_plain_data(self):
        assert from_value(Map.from_pairs([("a", List([Int(1)]))])) == {"a": [1]}

    def test_model(self):
        point = from_value(Map.from_pairs([("x", Int(1)), ("y", Int(2))]), Point)
        assert point == Point(x=1, y=2)


class TestDumpsLoads:
    def test_dumps_is_compact(self):
        assert dumps({"name": "x", "sizes": [1, 2]}) == '{name:"x",sizes:[1,2]}'

    def test_loads(self):
        assert loads("{a: 1, b: [true, null]}") == {"a": 1, "b": [True, None]}

    def test_model_round_trip(self):
        shape = Shape(
            name="tri",
            points=[Point(x=0, y=0), Point(x=1, y=0)],
            data=b"\xff",
            created=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert loads(dumps(shape), Shape) == shape
        assert loads_jaml(dumps_jaml(shape), Shape) == shape

    def test_duplicate_keys_rejected(self):
        with pytest.raises(DuplicateKeyError):
            loads("{a: 1, a: 2}")

    def test_jaml(self):
        text = dumps_jaml({"outer": {"inner": "value"}})
        assert text == 'outer:\n  inner: "value"\n'
        assert loads_jaml(text) == {"outer": {"inner": "value"}}
