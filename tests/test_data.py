import enum
import math
from dataclasses import dataclass, field

from widgetcore.data import Data, same
from widgetcore.geometry import Point, Rect, Size, Vec2


def test_integers_and_strings_by_value():
    assert same(3, 3)
    assert not same(3, 4)
    assert same("hello", "hel" + "lo")
    assert not same("a", "b")


def test_bool_and_int_differ_in_type():
    assert not same(True, 1)
    assert same(False, False)


def test_floats_by_bits():
    assert same(0.7, 0.7)
    assert same(math.nan, float("nan"))
    assert not same(0.0, -0.0)
    assert not same(1.0, 1)


def test_none_handling():
    assert same(None, None)
    assert not same(None, 0)
    assert not same(0, None)


def test_tuples_elementwise():
    assert same((1, 2.0, "x"), (1, 2.0, "x"))
    assert not same((1, 2.0), (1, -2.0))
    assert not same((1,), (1, 2))


def test_lists_by_identity():
    items = [1, 2, 3, 4]
    assert same(items, items)
    assert not same(items, list(items))


def test_geometry_values():
    assert same(Point(1.0, 2.0), Point(1.0, 2.0))
    assert not same(Point(1.0, 2.0), Point(1.0, 3.0))
    assert same(Vec2(math.nan, 0.0), Vec2(math.nan, 0.0))
    assert same(Size(10.0, 20.0), Size(10.0, 20.0))
    assert not same(Size(0.0, 1.0), Size(-0.0, 1.0))
    assert same(Rect(0.0, 0.0, 1.0, 1.0), Rect(0.0, 0.0, 1.0, 1.0))


def test_enum_by_equality():
    class Choice(enum.Enum):
        A = 1
        B = 2

    assert same(Choice.A, Choice.A)
    assert not same(Choice.A, Choice.B)


@dataclass
class AppState(Data):
    which: bool = False
    value: float = 0.0


@dataclass
class PathEntry(Data):
    path: list = field(default_factory=list, metadata={"same_fn": lambda a, b: a == b})
    priority: int = 0
    last_read: float = field(default=0.0, metadata={"ignore": True})


def test_dataclass_fieldwise():
    assert same(AppState(True, 0.5), AppState(True, 0.5))
    assert AppState().same(AppState())
    assert not same(AppState(True, 0.5), AppState(False, 0.5))
    assert not AppState(value=0.0).same(AppState(value=-0.0))


def test_dataclass_ignore_and_same_fn():
    a = PathEntry(["a", "b"], 1, last_read=1.0)
    b = PathEntry(["a", "b"], 1, last_read=2.0)
    assert same(a, b)
    assert not same(a, PathEntry(["a"], 1))
    assert not same(a, PathEntry(["a", "b"], 2))


def test_different_data_types_not_same():
    assert not same(AppState(), PathEntry())


def test_plain_data_subclass_uses_equality():
    class Counter(Data):
        def __init__(self, n):
            self.n = n

        def __eq__(self, other):
            return isinstance(other, Counter) and self.n == other.n

        __hash__ = None

    assert same(Counter(1), Counter(1))
    assert not same(Counter(1), Counter(2))