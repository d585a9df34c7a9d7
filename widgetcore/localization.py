"""Localization: Fluent resource files, locale negotiation and localized strings."""

from __future__ import annotations

import locale as _pylocale
import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

START_ISOLATE = "\u2068"
END_ISOLATE = "\u2069"
DEFAULT_LOCALE = "en-US"

# Likely script and region for a bare language, used to widen locale matches.
_LIKELY_SUBTAGS = {
    "ar": ("Arab", "EG"),
    "cs": ("Latn", "CZ"),
    "da": ("Latn", "DK"),
    "de": ("Latn", "DE"),
    "el": ("Grek", "GR"),
    "en": ("Latn", "US"),
    "es": ("Latn", "ES"),
    "fi": ("Latn", "FI"),
    "fr": ("Latn", "FR"),
    "he": ("Hebr", "IL"),
    "hi": ("Deva", "IN"),
    "hu": ("Latn", "HU"),
    "it": ("Latn", "IT"),
    "ja": ("Jpan", "JP"),
    "ko": ("Kore", "KR"),
    "nb": ("Latn", "NO"),
    "nl": ("Latn", "NL"),
    "pl": ("Latn", "PL"),
    "pt": ("Latn", "BR"),
    "ro": ("Latn", "RO"),
    "ru": ("Cyrl", "RU"),
    "sv": ("Latn", "SE"),
    "tr": ("Latn", "TR"),
    "uk": ("Cyrl", "UA"),
    "zh": ("Hans", "CN"),
}
_TRADITIONAL_CHINESE_REGIONS = {"TW", "HK", "MO"}

_LANG_RE = re.compile(r"[A-Za-z]{2,3}|[A-Za-z]{5,8}")
_SCRIPT_RE = re.compile(r"[A-Za-z]{4}")
_REGION_RE = re.compile(r"[A-Za-z]{2}|\d{3}")
_VARIANT_RE = re.compile(r"[A-Za-z0-9]{5,8}|\d[A-Za-z0-9]{3}")


@dataclass(frozen=True)
class _LangId:
    language: str
    script: Optional[str] = None
    region: Optional[str] = None
    variants: tuple = ()

    @classmethod
    def parse(cls, text: str) -> "_LangId":
        parts = re.split(r"[-_]", str(text).strip())
        if not parts or not _LANG_RE.fullmatch(parts[0]):
            raise ValueError(f"invalid language identifier: {text!r}")
        language = parts[0].lower()
        rest = parts[1:]
        script = region = None
        if rest and _SCRIPT_RE.fullmatch(rest[0]):
            script = rest.pop(0).title()
        if rest and _REGION_RE.fullmatch(rest[0]):
            region = rest.pop(0).upper()
        variants = []
        for part in rest:
            if not _VARIANT_RE.fullmatch(part):
                raise ValueError(f"invalid language identifier: {text!r}")
            variants.append(part.lower())
        return cls(language, script, region, tuple(sorted(variants)))

    def maximized(self) -> Optional["_LangId"]:
        """The identifier with likely script and region filled in, or None."""
        if self.script and self.region:
            return None
        likely = _LIKELY_SUBTAGS.get(self.language)
        if likely is None:
            return None
        script, region = likely
        if self.language == "zh" and self.region in _TRADITIONAL_CHINESE_REGIONS:
            script = "Hant"
        return replace(self, script=self.script or script, region=self.region or region)

    def __str__(self) -> str:
        return "-".join(p for p in (self.language, self.script, self.region, *self.variants) if p)


def _matches(available: _LangId, wanted: _LangId, available_range: bool, wanted_range: bool) -> bool:
    def subtag(a, b) -> bool:
        return a == b or (available_range and not a) or (wanted_range and not b)

    return (
        available.language == wanted.language
        and subtag(available.script, wanted.script)
        and subtag(available.region, wanted.region)
        and subtag(available.variants, wanted.variants)
    )


def _negotiate(requested: Iterable[_LangId], available: Iterable[_LangId], default: _LangId) -> list:
    pool = list(dict.fromkeys(available))
    result: list = []

    def take(candidate: _LangId, available_range: bool, wanted_range: bool) -> None:
        nonlocal pool
        found = [l for l in pool if _matches(l, candidate, available_range, wanted_range)]
        result.extend(found)
        pool = [l for l in pool if l not in found]

    for req in requested:
        take(req, False, False)
        take(req, True, False)
        maximized = req.maximized()
        if maximized is not None:
            req = maximized
            take(req, True, False)
        req = replace(req, variants=())
        take(req, True, True)
        req = replace(req, region=None)
        maximized = req.maximized()
        if maximized is not None:
            req = maximized
            take(req, True, False)
        req = replace(req, region=None)
        take(req, True, True)

    if default not in result:
        result.append(default)
    return result


class _FtlError(ValueError):
    pass


@dataclass(frozen=True)
class _Ref:
    """A placeable in a pattern: a variable, term, message, string or number."""

    kind: str
    value: str


_ENTRY_RE = re.compile(r"(-?[A-Za-z][A-Za-z0-9_-]*)[ \t]*=[ \t]*(.*)")
_PLACEABLE_RE = re.compile(r'\{[ \t\n]*("(?:[^"\\\n]|\\.)*"|[^{}"]*?)[ \t\n]*\}')
_IDENT = r"[A-Za-z][A-Za-z0-9_-]*"
_ESCAPE_RE = re.compile(r"\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{6}|.)")


def _unescape(text: str) -> str:
    def repl(m: re.Match) -> str:
        esc = m.group(1)
        if esc[0] in "uU" and len(esc) > 1:
            return chr(int(esc[1:], 16))
        return esc

    return _ESCAPE_RE.sub(repl, text)


def _parse_inline(expr: str) -> _Ref:
    if expr.startswith('"'):
        return _Ref("string", _unescape(expr[1:-1]))
    if re.fullmatch(r"-?\d+(?:\.\d+)?", expr):
        return _Ref("number", expr)
    m = re.fullmatch(rf"\$({_IDENT})", expr)
    if m:
        return _Ref("variable", m.group(1))
    m = re.fullmatch(rf"-({_IDENT})", expr)
    if m:
        return _Ref("term", m.group(1))
    if re.fullmatch(_IDENT, expr):
        return _Ref("message", expr)
    raise _FtlError(f"unsupported expression: {expr!r}")


def _parse_pattern(text: str) -> tuple:
    elements: list = []
    pos = 0
    while True:
        start = text.find("{", pos)
        if start < 0:
            if pos < len(text):
                elements.append(text[pos:])
            return tuple(elements)
        if start > pos:
            elements.append(text[pos:start])
        m = _PLACEABLE_RE.match(text, start)
        if m is None:
            raise _FtlError(f"unsupported placeable at offset {start}")
        elements.append(_parse_inline(m.group(1)))
        pos = m.end()


@dataclass
class _Pending:
    ident: str
    first: str
    lines: list = field(default_factory=list)
    in_attr: bool = False
    has_attr: bool = False


def _finish(entry: _Pending, entries: dict) -> None:
    lines = list(entry.lines)
    while lines and not lines[-1].strip():
        lines.pop()
    non_blank = [l for l in lines if l.strip()]
    indent = min((len(l) - len(l.lstrip()) for l in non_blank), default=0)
    body = [l[indent:] for l in lines]
    parts = ([entry.first] if entry.first else []) + body
    text = "\n".join(parts).rstrip()
    if not text:
        if not entry.has_attr or entry.ident.startswith("-"):
            log.warning("skipping entry %s without a value", entry.ident)
            return
        value = None
    else:
        try:
            value = _parse_pattern(text)
        except _FtlError as err:
            log.warning("skipping entry %s: %s", entry.ident, err)
            return
    if entry.ident in entries:
        log.warning("duplicate entry %s ignored", entry.ident)
        return
    entries[entry.ident] = value


def parse_ftl(text: str) -> dict:
    """Parse Fluent resource text into a map from id to pattern.

    Terms keep their leading '-'. A message that has attributes but no value
    maps to None. Entries that cannot be parsed are skipped.
    """
    entries: dict = {}
    pending: Optional[_Pending] = None
    for line in text.splitlines():
        if not line.strip():
            if pending is not None and not pending.in_attr:
                pending.lines.append("")
            continue
        if line[0] in " \t":
            if pending is None:
                continue
            if line.lstrip().startswith("."):
                pending.in_attr = True
                pending.has_attr = True
                continue
            if not pending.in_attr:
                pending.lines.append(line)
            continue
        if pending is not None:
            _finish(pending, entries)
            pending = None
        if line.startswith("#"):
            continue
        m = _ENTRY_RE.fullmatch(line)
        if m is None:
            log.warning("skipping unparsable line %r", line)
            continue
        pending = _Pending(m.group(1), m.group(2).rstrip())
    if pending is not None:
        _finish(pending, entries)
    return entries


def _display(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _resolve(bundle: Mapping, ref: _Ref, args: Optional[Mapping], errors: list, active: frozenset) -> str:
    if ref.kind in ("string", "number"):
        return ref.value
    if ref.kind == "variable":
        if args is None or ref.value not in args:
            errors.append(f"unknown variable ${ref.value}")
            return "{$" + ref.value + "}"
        return _display(args[ref.value])
    ident = ref.value if ref.kind == "message" else "-" + ref.value
    pattern = bundle.get(ident)
    if pattern is None:
        errors.append(f"unknown {ref.kind} {ident}")
        return "{" + ident + "}"
    if ident in active:
        errors.append(f"cyclic reference to {ident}")
        return "{" + ident + "}"
    scope_args = args if ref.kind == "message" else None
    return _format(bundle, pattern, scope_args, errors, active | {ident})


def _format(bundle: Mapping, pattern: tuple, args: Optional[Mapping], errors: list, active: frozenset) -> str:
    isolate = len(pattern) > 1
    out = []
    for element in pattern:
        if isinstance(element, str):
            out.append(element)
            continue
        text = _resolve(bundle, element, args, errors, active)
        if isolate and element.kind in ("variable", "number"):
            text = START_ISOLATE + text + END_ISOLATE
        out.append(text)
    return "".join(out)


class _BundleStack:
    """Bundles in order of preference, used for fallback."""

    def __init__(self, bundles: Sequence[Mapping]):
        self.bundles = list(bundles)

    def find(self, ident: str) -> Optional[Mapping]:
        if ident.startswith("-"):
            return None
        return next((b for b in self.bundles if ident in b), None)


class ResourceManager:
    """Loads and caches localization files for a set of available locales."""

    def __init__(
        self,
        locales: Iterable[str],
        default_locale: str,
        path_scheme: str,
        fallbacks: Optional[Mapping[tuple, str]] = None,
    ):
        self.locales = [str(_LangId.parse(l)) for l in locales]
        self.default_locale = str(_LangId.parse(default_locale))
        self.path_scheme = path_scheme
        self.resources: dict = {}
        self._fallbacks = dict(fallbacks or {})

    def get_resource(self, res_id: str, locale: str) -> dict:
        """The parsed resource for a locale, read from disk the first time."""
        path = self.path_scheme.replace("{locale}", locale).replace("{res_id}", res_id)
        cached = self.resources.get(path)
        if cached is not None:
            return cached
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            text = self._fallbacks.get((res_id, locale))
            if text is None:
                log.error("missing resource %s/%s", locale, res_id)
                text = ""
        resource = parse_ftl(text)
        self.resources[path] = resource
        return resource

    def get_bundle(self, locale: str, resource_ids: Sequence[str]) -> _BundleStack:
        """The stack of bundles that best serves the locale."""
        resolved = self.resolve_locales(locale)
        log.debug("resolved: [%s]", ", ".join(resolved))
        bundles = []
        for loc in resolved:
            bundle: dict = {}
            for res_id in resource_ids:
                resource = self.get_resource(res_id, loc)
                overlap = bundle.keys() & resource.keys()
                if overlap:
                    raise ValueError(f"{res_id} redefines {', '.join(sorted(overlap))}")
                bundle.update(resource)
            bundles.append(bundle)
        return _BundleStack(bundles)

    def resolve_locales(self, locale: str) -> list:
        """The available locales that serve the given one, best first."""
        result = _negotiate(
            [_LangId.parse(locale)],
            [_LangId.parse(l) for l in self.locales],
            _LangId.parse(self.default_locale),
        )
        return [str(l) for l in result]


def current_locale() -> str:
    """The user's locale as a language tag such as 'en-US'."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value:
            break
    else:
        value = _pylocale.getlocale()[0] or ""
    tag = value.split(".")[0].split("@")[0].replace("_", "-")
    if not tag or tag in ("C", "POSIX"):
        return DEFAULT_LOCALE
    return tag


def _available_locales(base_dir: str) -> list:
    try:
        entries = sorted(os.scandir(base_dir), key=lambda e: e.name)
    except OSError:
        return []
    return [str(_LangId.parse(e.name)) for e in entries if e.is_dir()]


class L10nManager:
    """Localized strings for the current locale.

    `base_dir` holds one directory per locale, each holding the files named
    in `resources`.
    """

    def __init__(
        self,
        resources: Sequence[str],
        base_dir: str,
        locale: Optional[str] = None,
        fallbacks: Optional[Mapping[tuple, str]] = None,
    ):
        default = _LangId.parse(DEFAULT_LOCALE)
        requested = current_locale() if locale is None else locale
        try:
            current = _LangId.parse(requested)
        except ValueError:
            current = default
        base_dir = str(base_dir)
        locales = _available_locales(base_dir)
        log.debug("available locales [%s], current %s", ", ".join(locales), current)
        self.resources = list(resources)
        self.current_locale = str(current)
        self.res_mgr = ResourceManager(
            locales, str(default), base_dir + "/{locale}/{res_id}", fallbacks
        )
        self.current_bundle = self.res_mgr.get_bundle(self.current_locale, self.resources)

    def localize(self, key: str, args: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """The localized string for key, or None when it has no value."""
        bundle = self.current_bundle.find(key)
        if bundle is None:
            return None
        pattern = bundle[key]
        if pattern is None:
            return None
        errors: list = []
        result = _format(bundle, pattern, args, errors, frozenset({key}))
        for err in errors:
            log.warning("localization error %s", err)
        # Isolation marks can upset text rendering; drop them.
        if args is not None and START_ISOLATE in result:
            result = result.replace(START_ISOLATE, "").replace(END_ISOLATE, "")
        return result


@dataclass
class LocalizedString:
    """A string identified by a key and resolved against the current locale."""

    key: str
    placeholder: Optional[str] = None
    args: Optional[list] = None
    resolved: Optional[str] = None
    resolved_lang: Optional[str] = None

    def with_placeholder(self, placeholder: str) -> "LocalizedString":
        """Use placeholder when localization fails."""
        self.placeholder = placeholder
        return self

    def localized_str(self) -> str:
        """The resolved value, else the placeholder, else the key."""
        if self.resolved is not None:
            return self.resolved
        if self.placeholder is not None:
            return self.placeholder
        return self.key

    def with_arg(self, key: str, f: Callable[[Any, Any], Any]) -> "LocalizedString":
        """Add a named argument computed by f(data, env)."""
        if self.args is None:
            self.args = []
        self.args.append((key, f))
        return self

    def resolve(self, data: Any, env: Any) -> bool:
        """Recompute the string if needed; True when its value changed."""
        manager = env.localization_manager()
        if self.args is None and self.resolved_lang == manager.current_locale:
            return False
        args = None if self.args is None else {k: f(data, env) for k, f in self.args}
        self.resolved_lang = manager.current_locale
        following = manager.localize(self.key, args)
        changed = following != self.resolved
        self.resolved = following
        return changed