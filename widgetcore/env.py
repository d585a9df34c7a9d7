"""An environment of typed values passed down through the widget tree."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from widgetcore.data import Data, same
from widgetcore.geometry import Point, Rect, Size
from widgetcore.localization import L10nManager

_U64_MAX = 2**64 - 1
_DEFAULT_RESOURCES = ["builtin.ftl"]
_DEFAULT_BASE_DIR = "./resources/i18n/"


def _channel(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"color channel {name} must be an int, got {value!r}")
    if not 0 <= value <= 0xFF:
        raise ValueError(f"color channel {name} out of range: {value}")
    return value


@dataclass(frozen=True)
class Color(Data):
    """A color stored as a 32-bit 0xRRGGBBAA value."""

    rgba: int

    WHITE: ClassVar["Color"]
    BLACK: ClassVar["Color"]

    @staticmethod
    def rgb8(r: int, g: int, b: int) -> "Color":
        """An opaque color from 8-bit components."""
        return Color.rgba8(r, g, b, 0xFF)

    @staticmethod
    def rgba8(r: int, g: int, b: int, a: int) -> "Color":
        """A color from 8-bit components, alpha included."""
        return Color(
            (_channel(r, "r") << 24)
            | (_channel(g, "g") << 16)
            | (_channel(b, "b") << 8)
            | _channel(a, "a")
        )

    def as_rgba_u32(self) -> int:
        """The color as 0xRRGGBBAA."""
        return self.rgba


Color.WHITE = Color.rgb8(0xFF, 0xFF, 0xFF)
Color.BLACK = Color.rgb8(0, 0, 0)


class _Kind(enum.Enum):
    POINT = "Point"
    SIZE = "Size"
    RECT = "Rect"
    COLOR = "Color"
    FLOAT = "Float"
    UNSIGNED_INT = "UnsignedInt"
    STRING = "String"


_TYPE_KINDS = (
    (Point, _Kind.POINT),
    (Size, _Kind.SIZE),
    (Rect, _Kind.RECT),
    (Color, _Kind.COLOR),
    (float, _Kind.FLOAT),
    (int, _Kind.UNSIGNED_INT),
    (str, _Kind.STRING),
)


def _kind_of(value: Any) -> _Kind:
    if not isinstance(value, bool):
        for typ, kind in _TYPE_KINDS:
            if isinstance(value, typ):
                return kind
    raise TypeError(f"values of type {type(value).__name__} cannot be stored in an Env")


def _kind_for_type(value_type: type) -> _Kind:
    if value_type is not bool:
        for typ, kind in _TYPE_KINDS:
            if issubclass(value_type, typ):
                return kind
    raise TypeError(f"values of type {value_type.__name__} cannot be stored in an Env")


def _describe(value: Any) -> str:
    kind = _kind_of(value)
    if kind is _Kind.STRING:
        return f'{kind.value} "{value}"'
    return f"{kind.value} {value}"


def _value_same(a: Any, b: Any) -> bool:
    kind = _kind_of(a)
    if kind is not _kind_of(b):
        return False
    if kind is _Kind.COLOR:
        return a.as_rgba_u32() == b.as_rgba_u32()
    return same(a, b)


@dataclass(frozen=True)
class Key:
    """A key into an Env, optionally bound to the type of its value."""

    key: str
    value_type: Optional[type] = None

    def __str__(self) -> str:
        return self.key


def _convert(key: Key, value: Any) -> Any:
    if key.value_type is None:
        kind = _kind_of(value)
    else:
        kind = _kind_for_type(key.value_type)
        if kind is _Kind.FLOAT and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if _kind_of(value) is not kind:
            raise TypeError(
                f"value {value!r} does not fit key '{key.key}' of kind {kind.value}"
            )
    if kind is _Kind.UNSIGNED_INT and not 0 <= value <= _U64_MAX:
        raise ValueError(f"unsigned value out of range for key '{key.key}': {value}")
    return value


def _checked(key: Key, value: Any) -> Any:
    if key.value_type is not None:
        expected = _kind_for_type(key.value_type)
        if _kind_of(value) is not expected:
            raise TypeError(
                f"incorrect Value type. Expected {expected.value}, found {_describe(value)}"
            )
    return value


@dataclass
class _EnvImpl:
    values: dict = field(default_factory=dict)
    l10n: Optional[L10nManager] = None


class Env(Data):
    """Theme values and custom settings handed to every widget method.

    Copies share storage until one of them is changed.
    """

    def __init__(self, l10n: Optional[L10nManager] = None):
        self._impl = _EnvImpl({}, l10n)

    def __copy__(self) -> "Env":
        clone = Env.__new__(Env)
        clone._impl = self._impl
        return clone

    def _make_mut(self) -> dict:
        self._impl = _EnvImpl(dict(self._impl.values), self._impl.l10n)
        return self._impl.values

    def get(self, key: Key) -> Any:
        """The value for key; KeyError if absent, TypeError if of the wrong kind."""
        try:
            value = self._impl.values[key.key]
        except KeyError:
            raise KeyError(f"key for {key.key} not found") from None
        return _checked(key, value)

    def try_get(self, key: Key) -> Optional[Any]:
        """The value for key, or None; TypeError if of the wrong kind."""
        value = self._impl.values.get(key.key)
        if value is None:
            return None
        return _checked(key, value)

    def adding(self, key: Key, value: Any) -> "Env":
        """A copy of this environment with the value added."""
        clone = copy.copy(self)
        clone._make_mut()[key.key] = _convert(key, value)
        return clone

    def set(self, key: Key, value: Any) -> None:
        """Set a value; TypeError if the key holds a value of another kind."""
        value = _convert(key, value)
        existing = self._impl.values.get(key.key)
        if existing is not None and _kind_of(existing) is not _kind_of(value):
            raise TypeError(
                f"Invalid type for key '{key.key}': {_describe(existing)} "
                f"differs in kind from {_describe(value)}"
            )
        self._make_mut()[key.key] = value

    def same(self, other: Any) -> bool:
        if not isinstance(other, Env):
            return False
        if self._impl is other._impl:
            return True
        mine, theirs = self._impl.values, other._impl.values
        return len(mine) == len(theirs) and all(
            k in theirs and _value_same(v, theirs[k]) for k, v in mine.items()
        )

    def localization_manager(self) -> L10nManager:
        """The manager for localized strings, created on first use."""
        if self._impl.l10n is None:
            self._impl.l10n = L10nManager(_DEFAULT_RESOURCES, _DEFAULT_BASE_DIR)
        return self._impl.l10n