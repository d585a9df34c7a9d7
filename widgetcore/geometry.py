"""Small 2D geometry value types: points, vectors, sizes and rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

PointLike = Union["Point", Tuple[float, float]]
SizeLike = Union["Size", Tuple[float, float]]
VecLike = Union["Vec2", Tuple[float, float]]


def _point(value: PointLike) -> "Point":
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


def _size(value: SizeLike) -> "Size":
    if isinstance(value, Size):
        return value
    width, height = value
    return Size(float(width), float(height))


def _vec(value: VecLike) -> "Vec2":
    if isinstance(value, Vec2):
        return value
    x, y = value
    return Vec2(float(x), float(y))


@dataclass(frozen=True)
class Vec2:
    """A displacement in two dimensions."""

    x: float = 0.0
    y: float = 0.0

    ZERO: ClassVar["Vec2"]

    @staticmethod
    def from_angle(angle: float) -> "Vec2":
        """The unit vector pointing at `angle` radians from the x axis."""
        return Vec2(math.cos(angle), math.sin(angle))

    def to_point(self) -> "Point":
        return Point(self.x, self.y)

    def hypot(self) -> float:
        return math.hypot(self.x, self.y)

    def __add__(self, other: VecLike) -> "Vec2":
        other = _vec(other)
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: VecLike) -> "Vec2":
        other = _vec(other)
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Vec2":
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vec2":
        return Vec2(self.x / divisor, self.y / divisor)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)


@dataclass(frozen=True)
class Point:
    """A position in two dimensions."""

    x: float = 0.0
    y: float = 0.0

    ORIGIN: ClassVar["Point"]

    def to_vec2(self) -> Vec2:
        """The vector from the origin to this point."""
        return Vec2(self.x, self.y)

    def __add__(self, other: VecLike) -> "Point":
        other = _vec(other)
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Union["Point", VecLike]):
        if isinstance(other, Point):
            return Vec2(self.x - other.x, self.y - other.y)
        other = _vec(other)
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: float = 0.0
    height: float = 0.0

    ZERO: ClassVar["Size"]

    def clamp(self, min: SizeLike, max: SizeLike) -> "Size":
        """Clamp each dimension between the matching dimensions of min and max."""
        lo = _size(min)
        hi = _size(max)
        width = _fmin(_fmax(self.width, lo.width), hi.width)
        height = _fmin(_fmax(self.height, lo.height), hi.height)
        return Size(width, height)

    def to_vec2(self) -> Vec2:
        return Vec2(self.width, self.height)


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a <= b else b


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by two corners."""

    x0: float = 0.0
    y0: float = 0.0
    x1: float = 0.0
    y1: float = 0.0

    ZERO: ClassVar["Rect"]

    @staticmethod
    def from_points(p0: PointLike, p1: PointLike) -> "Rect":
        a = _point(p0)
        b = _point(p1)
        return Rect(min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))

    @staticmethod
    def from_origin_size(origin: PointLike, size: SizeLike) -> "Rect":
        """The rectangle with the given origin and size."""
        origin = _point(origin)
        return Rect.from_points(origin, origin + _size(size).to_vec2())

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    def origin(self) -> Point:
        """The corner (x0, y0)."""
        return Point(self.x0, self.y0)

    def size(self) -> Size:
        return Size(self.width, self.height)

    def area(self) -> float:
        return self.width * self.height

    def winding(self, point: PointLike) -> int:
        """Non-zero when the point lies inside the rectangle."""
        p = _point(point)
        xmin, xmax = min(self.x0, self.x1), max(self.x0, self.x1)
        ymin, ymax = min(self.y0, self.y1), max(self.y0, self.y1)
        if xmin <= p.x < xmax and ymin <= p.y < ymax:
            return -1 if (self.x1 > self.x0) != (self.y1 > self.y0) else 1
        return 0

    def contains(self, point: PointLike) -> bool:
        return self.winding(point) != 0

    def intersect(self, other: "Rect") -> "Rect":
        """The overlap of two rectangles; empty when they do not meet."""
        x0 = max(self.x0, other.x0)
        y0 = max(self.y0, other.y0)
        x1 = min(self.x1, other.x1)
        y1 = min(self.y1, other.y1)
        return Rect(x0, y0, max(x1, x0), max(y1, y0))

    def __add__(self, offset: VecLike) -> "Rect":
        v = _vec(offset)
        return Rect(self.x0 + v.x, self.y0 + v.y, self.x1 + v.x, self.y1 + v.y)

    def __sub__(self, offset: VecLike) -> "Rect":
        return self + (-_vec(offset))


Vec2.ZERO = Vec2(0.0, 0.0)
Point.ORIGIN = Point(0.0, 0.0)
Size.ZERO = Size(0.0, 0.0)
Rect.ZERO = Rect(0.0, 0.0, 0.0, 0.0)