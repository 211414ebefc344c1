"""End-to-end tests for the translations manager facade."""

import json

import pytest

from services.translations_manager import TranslationsManager
from translations.errors import InvalidLocaleError, KeyExistsError
from translations.reload import CallbackReloadHandler
from translations.scanner import scan_source


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_end_to_end_greetings(repo):
    repo.catalog({"greet.hi": {"en-US": "Hi"}, "greet.bye": {"en-US": "Hi"}})
    repo.source("bot/greet.py", "def hello():\n    return t('greet.hi')\n")
    report = TranslationsManager(repo.config()).get_report()
    assert report.used_keys_count == 1
    assert report.defined_keys_count == 2
    assert report.missing_keys == ()
    assert report.unused_keys == ("greet.bye",)
    assert report.duplicate_en_us_values == {"Hi": ("greet.bye", "greet.hi")}
    assert report.duplicate_keys == ()
    assert report.key_usages["greet.hi"][0].file == "src/bot/greet.py"
    assert report.strings_path == str(repo.strings.resolve())


def test_end_to_end_dynamic_prefix(repo):
    repo.catalog({"user.name": {"en-US": "Name"}, "user.mail": {"en-US": "Mail"}})
    repo.source("users.py", 'def label(id):\n    return t(f"user.{id}.name")\n')
    report = TranslationsManager(repo.config()).get_report()
    assert len(report.dynamic_key_usages) == 1
    assert report.dynamic_key_usages[0].prefix == "user."
    assert report.unused_keys == ()


def test_duplicate_top_level_key_reported(repo):
    repo.catalog('{"a.key": {"en-US": "A"}, "a.key": {"en-US": "B"}}')
    report = TranslationsManager(repo.config()).get_report()
    assert report.duplicate_keys == ("a.key",)
    assert report.defined_keys_count == 1


def test_missing_catalog_bootstraps_empty(repo):
    repo.source("a.py", "t('menu.title')\n")
    report = TranslationsManager(repo.config()).get_report()
    assert report.defined_keys_count == 0
    assert report.missing_keys == ("menu.title",)


def test_report_scanned_once_within_ttl(repo):
    calls = []

    def counting_scan(*args, **kwargs):
        calls.append(args)
        return scan_source(*args, **kwargs)

    clock = FakeClock()
    manager = TranslationsManager(repo.config(), scanner=counting_scan, clock=clock)
    manager.get_report()
    clock.now += 5
    manager.get_report()
    assert len(calls) == 1
    clock.now += 30
    manager.get_report()
    assert len(calls) == 2


def test_mutations_mark_report_stale(repo):
    repo.source("a.py", "t('menu.title')\n")
    reloads = []
    manager = TranslationsManager(
        repo.config(), reload_handler=CallbackReloadHandler(lambda: reloads.append(1))
    )
    assert manager.get_report().missing_keys == ("menu.title",)
    manager.create("menu.title", {"en-US": "Menu"})
    assert manager.get_report().missing_keys == ()
    manager.save("menu.unused", {"en-US": "Spare", "de": "Frei"})
    assert manager.get_report().unused_keys == ("menu.unused",)
    assert manager.delete("menu.unused") is True
    assert manager.get_report().unused_keys == ()
    assert manager.delete("menu.unused") is False
    assert len(reloads) == 3


def test_create_validation(repo):
    manager = TranslationsManager(repo.config())
    with pytest.raises(InvalidLocaleError):
        manager.create("a", {"de": "nur deutsch"})
    with pytest.raises(InvalidLocaleError):
        manager.create("a", {"en-US": "A", "xx-YY": "?"})
    with pytest.raises(ValueError):
        manager.create("  ", {"en-US": "A"})
    manager.create("a", {"en-us": "A"})
    with pytest.raises(KeyExistsError):
        manager.create("a", {"en-US": "A"})


def test_allowed_locales_override(repo):
    manager = TranslationsManager(repo.config(allowed_locales=("de", "xx-YY")))
    assert manager.locales() == ["en-US", "de", "xx-YY"]
    manager.save("a", {"en-US": "A", "xx-YY": "?"})
    with pytest.raises(InvalidLocaleError):
        manager.save("b", {"en-US": "B", "fr": "B"})


def test_format_rewrites_primary_first(repo):
    repo.catalog({"k": {"fr": "F", "en-US": "E", "de": "D"}})
    TranslationsManager(repo.config()).format()
    data = json.loads(repo.strings.read_text(encoding="utf-8"))
    assert list(data["k"]) == ["en-US", "de", "fr"]


def test_write_audit_to_disk(repo):
    repo.source("a.py", "t('menu.title')\n")
    manager = TranslationsManager(repo.config(write_audit_to_disk=True))
    manager.get_report()
    out = repo.root / "data" / "translation_audit.json"
    assert json.loads(out.read_text(encoding="utf-8"))["missingKeys"] == ["menu.title"]


def test_refresh_report_rescans_within_ttl(repo):
    repo.source("a.py", "t('menu.title')\n")
    clock = FakeClock()
    manager = TranslationsManager(repo.config(), clock=clock)
    assert manager.get_report().missing_keys == ("menu.title",)
    repo.catalog({"menu.title": {"en-US": "Menu"}})
    assert manager.get_report().missing_keys == ("menu.title",)
    assert manager.refresh_report().missing_keys == ()
    assert manager.get_report().missing_keys == ()
    assert manager.cache.build_count == 2
