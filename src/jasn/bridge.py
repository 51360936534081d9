"""Conversion between plain Python objects and value trees.

    >>> dumps({"name": "x", "sizes": [1, 2]})
    '{name:"x",sizes:[1,2]}'
    >>> loads("{a: 1}")
    {'a': 1}

Pydantic models are dumped with ``model_dump()`` and can be loaded back
by passing the model class to ``loads``/``from_value``.
"""

from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel

from .block import parse_jaml
from .formatter import format_jaml, to_string_opts
from .options import FormatOptions
from .parser import parse
from .value import Binary, Bool, Float, Int, List, Map, Null, String, Timestamp, Value

M = TypeVar("M", bound=BaseModel)


def to_value(obj: Any) -> Value:
    """Build a value tree from Python data."""
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, Enum):
        return to_value(obj.value)
    if isinstance(obj, int):
        return Int(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (bytes, bytearray)):
        return Binary(bytes(obj))
    if isinstance(obj, datetime):
        return Timestamp.from_datetime(obj)
    if isinstance(obj, (list, tuple)):
        return List([to_value(item) for item in obj])
    if isinstance(obj, dict):
        result = Map()
        for key, item in obj.items():
            result.insert(key, to_value(item))
        return result
    if isinstance(obj, BaseModel):
        return to_value(obj.model_dump())
    raise TypeError(f"cannot convert {type(obj).__name__} to a value")


def from_value(value: Value, model: type[M] | None = None) -> Any:
    """Turn a value tree into Python data, or into ``model`` when given."""
    data = value.to_python()
    if model is not None:
        return model.model_validate(data)
    return data


def dumps(obj: Any, opts: FormatOptions | None = None) -> str:
    """Serialize ``obj`` as JASN (compact unless ``opts`` says otherwise)."""
    return to_string_opts(to_value(obj), opts or FormatOptions.compact())


def loads(text: str, model: type[M] | None = None) -> Any:
    return from_value(parse(text), model)


def dumps_jaml(obj: Any, opts: FormatOptions | None = None) -> str:
    """Serialize ``obj`` as JAML."""
    return format_jaml(to_value(obj), opts)


def loads_jaml(text: str, model: type[M] | None = None) -> Any:
    return from_value(parse_jaml(text), model)
