"""Value model and typed extraction.

mpv values are plain JSON data: ``None`` (absent), ``bool``, ``str``,
``int``, ``float``, ``list`` and ``dict`` with string keys. Values coming
from mpv are produced by ``json.loads`` only, so they never contain cycles.

The ``as_*`` accessors unwrap a value into a fixed Python type or raise
:class:`ValueTypeError` naming the expected and actual shapes:

    >>> as_float(50)
    50.0
    >>> as_str(True)
    Traceback (most recent call last):
    ...
    mpv_socket.core.errors.ValueTypeError: expected string, but got bool: True
"""

from __future__ import annotations

from typing import Any, TypeAlias

from mpv_socket.core.errors import ValueTypeError

Value: TypeAlias = "None | bool | str | int | float | list[Value] | dict[str, Value]"


def shape_of(value: Any) -> str:
    """Name the shape of a value as used in type-mismatch messages."""
    # bool before int: bool is a subclass of int
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def to_value(obj: Any) -> Value:
    """Coerce an outbound Python object into the value model.

    Tuples become arrays. Anything else that JSON cannot represent
    faithfully raises before it reaches the wire.

    Raises:
        ValueTypeError: If obj (or a nested item) is not representable.
    """
    if obj is None or isinstance(obj, (bool, str, int, float)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [to_value(item) for item in obj]
    if isinstance(obj, dict):
        result: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise ValueTypeError("string key", shape_of(key), key)
            result[key] = to_value(item)
        return result
    raise ValueTypeError("value", shape_of(obj), obj)


def as_value(value: Value) -> Value:
    return value


def as_bool(value: Value) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueTypeError("bool", shape_of(value), value)


def as_str(value: Value) -> str:
    if isinstance(value, str):
        return value
    raise ValueTypeError("string", shape_of(value), value)


def as_int(value: Value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ValueTypeError("integer", shape_of(value), value)


def as_uint(value: Value) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise ValueTypeError("unsigned integer", shape_of(value), value)


def as_float(value: Value) -> float:
    """Extract a float. Integers are promoted, booleans are rejected."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueTypeError("float", shape_of(value), value)


def as_list(value: Value) -> list[Value]:
    if isinstance(value, list):
        return value
    raise ValueTypeError("array", shape_of(value), value)


def as_dict(value: Value) -> dict[str, Value]:
    if isinstance(value, dict):
        return value
    raise ValueTypeError("object", shape_of(value), value)
