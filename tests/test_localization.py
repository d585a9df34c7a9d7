import pytest

from widgetcore.localization import (
    L10nManager,
    LocalizedString,
    ResourceManager,
    current_locale,
    parse_ftl,
)

BUILTIN_EN = """# Built-in strings
app-name = Untitled
hello-counter = Current value is { $count }
-brand = Widgets
about = About { -brand }
menu =
    .label = Menu
multi =
    first line
    second line
greeting = Hello
brace = {"{"}
"""


@pytest.fixture
def i18n_dir(tmp_path):
    (tmp_path / "en-US").mkdir()
    (tmp_path / "en-US" / "builtin.ftl").write_text(BUILTIN_EN, encoding="utf-8")
    (tmp_path / "fr-FR").mkdir()
    (tmp_path / "fr-FR" / "builtin.ftl").write_text("greeting = Bonjour\n", encoding="utf-8")
    return tmp_path


class _Env:
    def __init__(self, manager):
        self._manager = manager

    def localization_manager(self):
        return self._manager


def _resmgr():
    return ResourceManager(["en-US", "en-CA", "en-GB", "fr-FR"], "en-US", "")


def test_resolve_cases():
    resmgr = _resmgr()
    en_za = "en-GB"
    assert resmgr.resolve_locales("en-CA") == ["en-CA", "en-US", "en-GB"]
    assert resmgr.resolve_locales(en_za) == ["en-GB", "en-US", "en-CA"]
    assert resmgr.resolve_locales("fr-CA") == ["fr-FR", "en-US"]
    assert resmgr.resolve_locales("fr-FR") == ["fr-FR", "en-US"]
    assert resmgr.resolve_locales("cn-HK") == ["en-US"]
    assert resmgr.resolve_locales("pt-PT") == ["en-US"]


def test_parse_ftl_simple_message():
    assert parse_ftl("a = b")["a"] == ("b",)


def test_parse_ftl_skips_unsupported_entry():
    result = parse_ftl("bad = { $a -> }\nok = fine\n")
    assert "bad" not in result
    assert result["ok"] == ("fine",)


def test_parse_ftl_attribute_only_message_has_no_value():
    result = parse_ftl(BUILTIN_EN)
    assert result["menu"] is None
    assert "-brand" in result


def test_localize_with_args_strips_isolates(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US")
    assert manager.localize("hello-counter", {"count": 5}) == "Current value is 5"


def test_localize_missing_variable_keeps_isolates(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US")
    assert manager.localize("hello-counter") == "Current value is \u2068{$count}\u2069"


def test_localize_term_multiline_and_literal(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US")
    assert manager.localize("about") == "About Widgets"
    assert manager.localize("multi") == "first line\nsecond line"
    assert manager.localize("brace") == "{"


def test_localize_missing_and_valueless(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US")
    assert manager.localize("no-such-key") is None
    assert manager.localize("menu") is None
    assert manager.localize("-brand") is None


def test_localize_falls_back_to_default_locale(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="fr-FR")
    assert manager.localize("greeting") == "Bonjour"
    assert manager.localize("app-name") == "Untitled"


def test_invalid_locale_uses_default(i18n_dir):
    manager = L10nManager(["builtin.ftl"], str(i18n_dir), locale="not a locale!!")
    assert manager.current_locale == "en-US"
    assert manager.localize("greeting") == "Hello"


def test_get_resource_fallback_and_cache(tmp_path):
    rm = ResourceManager(
        [], "en-US", str(tmp_path) + "/{locale}/{res_id}",
        fallbacks={("builtin.ftl", "en-US"): "k = v"},
    )
    first = rm.get_resource("builtin.ftl", "en-US")
    assert first["k"] == ("v",)
    assert rm.get_resource("builtin.ftl", "en-US") is first
    assert rm.get_resource("other.ftl", "en-US") == {}


def test_get_bundle_rejects_duplicate_ids(tmp_path):
    (tmp_path / "en-US").mkdir()
    (tmp_path / "en-US" / "a.ftl").write_text("x = one\n", encoding="utf-8")
    (tmp_path / "en-US" / "b.ftl").write_text("x = two\n", encoding="utf-8")
    rm = ResourceManager(["en-US"], "en-US", str(tmp_path) + "/{locale}/{res_id}")
    with pytest.raises(ValueError):
        rm.get_bundle("en-US", ["a.ftl", "b.ftl"])


def test_current_locale_from_environment(monkeypatch):
    monkeypatch.setenv("LC_ALL", "fr_FR.UTF-8")
    assert current_locale() == "fr-FR"
    monkeypatch.setenv("LC_ALL", "C")
    assert current_locale() == "en-US"


def test_localized_str_prefers_resolved_then_placeholder_then_key():
    s = LocalizedString("some-key")
    assert s.localized_str() == "some-key"
    s.with_placeholder("Placeholder")
    assert s.localized_str() == "Placeholder"


def test_resolve_without_args_only_once(i18n_dir):
    env = _Env(L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US"))
    s = LocalizedString("greeting")
    assert s.resolve(None, env) is True
    assert s.localized_str() == "Hello"
    assert s.resolve(None, env) is False


def test_resolve_missing_key_shows_placeholder(i18n_dir):
    env = _Env(L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US"))
    s = LocalizedString("absent").with_placeholder("Fallback")
    assert s.resolve(None, env) is False
    assert s.localized_str() == "Fallback"


def test_resolve_with_args_tracks_data(i18n_dir):
    env = _Env(L10nManager(["builtin.ftl"], str(i18n_dir), locale="en-US"))
    s = LocalizedString("hello-counter").with_arg("count", lambda data, _env: data)
    assert s.resolve(1, env) is True
    assert s.localized_str() == "Current value is 1"
    assert s.resolve(1, env) is False
    assert s.resolve(2, env) is True
    assert s.localized_str() == "Current value is 2"