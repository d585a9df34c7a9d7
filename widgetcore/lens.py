"""Lenses: composable access to a part of a larger value."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable

from widgetcore.data import same


def _set_attr(data: Any, name: str, value: Any) -> Any:
    try:
        setattr(data, name, value)
        return data
    except AttributeError:
        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            return dataclasses.replace(data, **{name: value})
        if hasattr(data, "_replace"):
            return data._replace(**{name: value})
        raise


def _set_item(data: Any, key: Any, value: Any) -> Any:
    if isinstance(data, tuple):
        items = list(data)
        items[key] = value
        if hasattr(data, "_make"):
            return data._make(items)
        return tuple(items)
    data[key] = value
    return data


class Lens(ABC):
    """Access to a part of a larger data structure.

    Updates go through ``with_mut``, which returns the updated whole: the same
    object when it was changed in place, a new one when it is immutable.
    """

    @abstractmethod
    def view(self, data: Any, f: Callable[[Any], Any]) -> Any:
        """Call f with the focused value and return its result."""

    @abstractmethod
    def with_mut(self, data: Any, f: Callable[[Any], Any]) -> Any:
        """Replace the focused value with f(focused) and return the updated data."""

    def get(self, data: Any) -> Any:
        """The focused value."""
        return self.view(data, lambda value: value)

    def put(self, data: Any, value: Any) -> Any:
        """Set the focused value; returns the updated data."""
        return self.with_mut(data, lambda _old: value)

    def then(self, other: "Lens") -> "Then":
        """Compose with a lens that focuses further into the focused value."""
        return Then(self, other)

    def map(self, get: Callable[[Any], Any], put: Callable[[Any, Any], Any]) -> "Then":
        """Focus on a value computed from the focused one, with its inverse."""
        return self.then(Map(get, put))

    def index(self, index: Any) -> "Then":
        """Focus on an element of the focused container."""
        return self.then(Index(index))


class Field(Lens):
    """A lens from a getter and a setter.

    ``put(data, value)`` returns the new data, or None when it changed data
    in place.
    """

    def __init__(self, get: Callable[[Any], Any], put: Callable[[Any, Any], Any]):
        self._get = get
        self._put = put

    @classmethod
    def attr(cls, name: str) -> "Field":
        """A lens onto an attribute; frozen dataclasses and named tuples are rebuilt."""
        return cls(lambda data: getattr(data, name), lambda data, v: _set_attr(data, name, v))

    @classmethod
    def item(cls, key: Hashable) -> "Field":
        """A lens onto an item of a sequence or mapping; tuples are rebuilt."""
        return cls(lambda data: data[key], lambda data, v: _set_item(data, key, v))

    def view(self, data, f):
        return f(self._get(data))

    def with_mut(self, data, f):
        updated = self._put(data, f(self._get(data)))
        return data if updated is None else updated


class Then(Lens):
    """Two lenses joined together."""

    def __init__(self, left: Lens, right: Lens):
        self.left = left
        self.right = right

    def view(self, data, f):
        return self.left.view(data, lambda b: self.right.view(b, f))

    def with_mut(self, data, f):
        return self.left.with_mut(data, lambda b: self.right.with_mut(b, f))


class Map(Lens):
    """A lens built from a function and its inverse.

    ``put(whole, value)`` returns the new whole, or None when it changed the
    whole in place.
    """

    def __init__(self, get: Callable[[Any], Any], put: Callable[[Any, Any], Any]):
        self._get = get
        self._put = put

    def view(self, data, f):
        return f(self._get(data))

    def with_mut(self, data, f):
        updated = self._put(data, f(self._get(data)))
        return data if updated is None else updated


class Index(Lens):
    """A lens onto one index of a container."""

    def __init__(self, index: Any):
        self.index_value = index

    def view(self, data, f):
        return f(data[self.index_value])

    def with_mut(self, data, f):
        return _set_item(data, self.index_value, f(data[self.index_value]))


class Identity(Lens):
    """The lens that exposes exactly the original value."""

    def view(self, data, f):
        return f(data)

    def with_mut(self, data, f):
        return f(data)


class LensWrap:
    """A widget whose inner widget sees only the part of the data a lens selects.

    The inner widget's ``event`` may return new data, or None when it left the
    data as it was or changed it in place; ``event`` here returns the whole
    data after the event.
    """

    def __init__(self, inner: Any, lens: Lens):
        self.inner = inner
        self.lens = lens

    def event(self, ctx, event, data, env):
        def handle(value):
            result = self.inner.event(ctx, event, value, env)
            return value if result is None else result

        return self.lens.with_mut(data, handle)

    def update(self, ctx, old_data, data, env):
        new_inner = self.lens.get(data)
        if old_data is None:
            self.inner.update(ctx, None, new_inner, env)
            return
        old_inner = self.lens.get(old_data)
        if not same(old_inner, new_inner):
            self.inner.update(ctx, old_inner, new_inner, env)

    def layout(self, ctx, bc, data, env):
        return self.lens.view(data, lambda value: self.inner.layout(ctx, bc, value, env))

    def paint(self, paint_ctx, base_state, data, env):
        self.lens.view(
            data, lambda value: self.inner.paint(paint_ctx, base_state, value, env)
        )