"""Cheap value comparison for application state."""

from __future__ import annotations

import dataclasses
import enum
import struct
from typing import Any

from widgetcore.geometry import Point, Rect, Size, Vec2

IGNORE = "ignore"
SAME_FN = "same_fn"


def _float_bits(value: float) -> bytes:
    return struct.pack("<d", value)


def _same_fields(a: Any, b: Any) -> bool:
    for field in dataclasses.fields(a):
        if field.metadata.get(IGNORE):
            continue
        left = getattr(a, field.name)
        right = getattr(b, field.name)
        compare = field.metadata.get(SAME_FN, same)
        if not compare(left, right):
            return False
    return True


def same(a: Any, b: Any) -> bool:
    """Whether two values are the same.

    A true result means the values are equal. Floats compare by their bit
    pattern, so NaN is the same as an identical NaN and 0.0 differs from
    -0.0. Immutable scalars compare by value, tuples element by element,
    and other objects (lists, dicts, plain objects) by identity.
    """
    if isinstance(a, Data):
        return type(a) is type(b) and a.same(b)
    if isinstance(a, float) or isinstance(b, float):
        return (
            isinstance(a, float)
            and isinstance(b, float)
            and _float_bits(a) == _float_bits(b)
        )
    if a is b:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    if isinstance(a, (bool, int, str, bytes, complex)):
        return a == b
    if isinstance(a, enum.Enum):
        return a == b
    if isinstance(a, tuple):
        return len(a) == len(b) and all(same(x, y) for x, y in zip(a, b))
    if isinstance(a, (Point, Vec2)):
        return same(a.x, b.x) and same(a.y, b.y)
    if isinstance(a, Size):
        return same(a.width, b.width) and same(a.height, b.height)
    if isinstance(a, Rect):
        return (
            same(a.x0, b.x0)
            and same(a.y0, b.y0)
            and same(a.x1, b.x1)
            and same(a.y1, b.y1)
        )
    return False


class Data:
    """Base for value types that can be compared cheaply with `same`.

    Dataclass subclasses compare field by field; a field whose metadata holds
    ``{"ignore": True}`` is skipped, and ``{"same_fn": f}`` replaces the
    comparison for that field. Other subclasses compare with ``==``.
    """

    def same(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        if self is other:
            return True
        if dataclasses.is_dataclass(self):
            return _same_fields(self, other)
        return self == other