# widgetcore

Building blocks for a data-oriented widget toolkit: deciding whether
application state has changed, focusing on part of that state, passing typed
settings down a tree, and resolving localized strings. There is no drawing
backend.

## Modules

- `widgetcore.geometry`: frozen value types `Point`, `Vec2`, `Size` and
  `Rect`. `Vec2.from_angle`, `Size.clamp`, `Rect.from_origin_size`,
  `Rect.origin`, `Rect.size`, `Rect.area`, `Rect.winding`, `Rect.contains`
  and `Rect.intersect`, plus arithmetic between points, vectors and
  rectangles.
- `widgetcore.data`: `same(a, b)` and the `Data` base class. Floats compare
  by bit pattern (a NaN is the same as an identical NaN; `0.0` differs from
  `-0.0`), immutable scalars and enums by value, tuples and geometry values
  element by element, and other objects such as lists and dicts by identity.
  Dataclass subclasses of `Data` compare field by field; field metadata
  `{"ignore": True}` skips a field and `{"same_fn": f}` replaces its
  comparison.
- `widgetcore.lens`: `Lens` with `view`, `with_mut`, `get`, `put`, `then`,
  `map` and `index`; the lenses `Field` (with `Field.attr` and `Field.item`),
  `Then`, `Map`, `Index` and `Identity`; and `LensWrap`, which gives an inner
  object with `event`, `update`, `layout` and `paint` methods only the part
  of the data a lens selects, and skips `update` when that part is `same` as
  before. Writes return the updated whole: the same object when it was
  changed in place, a new one when it is immutable (frozen dataclasses, named
  tuples and tuples are rebuilt).
- `widgetcore.env`: `Env`, a copy-on-write map from `Key` to values of kind
  point, size, rect, `Color`, float, unsigned int or string. `get` raises
  `KeyError` for a missing key, and `set` raises `TypeError` when a key
  already holds a value of another kind. `Color` stores `0xRRGGBBAA` and is
  built with `Color.rgb8` / `Color.rgba8`.
- `widgetcore.localization`: `parse_ftl`, `current_locale`,
  `ResourceManager` (file loading, caching and locale negotiation),
  `L10nManager` (looks up and formats messages) and `LocalizedString` (a
  key with optional placeholder and arguments, resolved against an `Env`).
- `widgetcore.graph`: `Graph`, parent/child links between integer node ids,
  with freed ids reused.
- `widgetcore.calc`: `CalcState`, the state machine of a four-function
  calculator (`digit`, `op`, `compute`, `display`).

## Installing

```
pip install .
```

## Examples

A calculator and a lens onto its display:

```python
from widgetcore.calc import CalcState
from widgetcore.lens import Field

state = CalcState()
state.digit(1)
state.digit(2)
state.op("+")
state.digit(3)
state.op("=")
print(state.value)  # 15

value = Field.attr("value")
print(value.get(state))  # 15
```

A typed environment:

```python
from widgetcore.env import Color, Env, Key

LABEL_COLOR = Key("label-color", Color)
env = Env()
env.set(LABEL_COLOR, Color.rgb8(0xA6, 0xCC, 0xFF))
print(hex(env.get(LABEL_COLOR).as_rgba_u32()))  # 0xa6ccffff
```

Localizing a message. Resources live in `base_dir/<locale>/<file>`;
`fallbacks` supplies text for a `(file, locale)` pair that cannot be read:

```python
from widgetcore.localization import L10nManager

manager = L10nManager(
    ["app.ftl"],
    "i18n",
    locale="en-US",
    fallbacks={("app.ftl", "en-US"): "hello-counter = Current value is { $count }\n"},
)
print(manager.localize("hello-counter", {"count": 3}))  # Current value is 3
```

## What it does not do

- It has no widgets, event types, commands, event routing or layout and
  paint contexts; `LensWrap` passes whatever context, event and constraint
  objects it is given straight through to its inner object.
- It opens no windows, draws nothing and has no run loop.
- The `.ftl` parser handles messages, terms, comments, multiline values and
  placeables holding variables, message and term references, and string or
  number literals. Attributes are read past and dropped; entries using other
  expressions, such as selectors or function calls, are skipped with a
  warning.

## Running the tests

```
pip install .[test]
pytest
```