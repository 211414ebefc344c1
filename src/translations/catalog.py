"""Strings catalog persistence.

The catalog is a single JSON document mapping translation key -> locale ->
text::

    {
      "menu.title": {"en-US": "Menu", "de": "Menü"},
      "menu.empty": {"en-US": ""}
    }

Loading runs two independent passes over the same text:

 1. a structural parse into ``{key: {locale: text}}``;
 2. a count of top-level property names. ``json`` keeps only the last value
    of a repeated key, so the structural map alone can never reveal that a
    key was defined twice.

A missing or unparsable file loads as an empty catalog so a fresh repository
can bootstrap from nothing; mutations load strictly and refuse to overwrite a
catalog they could not parse. Writes are deterministic, keep empty strings,
emit no byte-order mark, leave non-ASCII text unescaped, and go through a
temp file so a failed write never leaves a truncated catalog behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

from core import filesystem

from .errors import CatalogReadError, CatalogWriteError, KeyExistsError
from .locales import primary_first_key
from .reload import NoOpReloadHandler, ReloadHandler

__all__ = [
    "Catalog",
    "TranslationData",
    "load_catalog",
    "dump_catalog",
    "save_catalog",
    "StringsStore",
]

_log = logging.getLogger(__name__)

Catalog = Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class TranslationData:
    """Snapshot of a loaded catalog.

    Attributes
    ----------
    map: key -> locale -> text, in document order.
    duplicate_keys: Top-level keys occurring more than once, in order of first repeat.
    key_counts: Occurrence count of every top-level key.
    """

    map: Catalog = field(default_factory=dict)
    duplicate_keys: List[str] = field(default_factory=list)
    key_counts: Dict[str, int] = field(default_factory=dict)


def _locale_map(key: str, value: Any) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Entry {key!r} is not an object of locale -> text")
    out: Dict[str, str] = {}
    for locale, text in value.items():
        if text is None:
            continue
        out[str(locale)] = text if isinstance(text, str) else str(text)
    return out


def _parse_structure(text: str) -> Catalog:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Catalog root must be a JSON object")
    return {str(k): _locale_map(k, v) for k, v in data.items()}


def _count_top_level_keys(text: str) -> Dict[str, int]:
    # object_pairs_hook fires innermost-first, so the last call sees the root.
    root_keys: List[str] = []

    def _hook(pairs):
        root_keys[:] = [k for k, _ in pairs]
        return None

    json.loads(text, object_pairs_hook=_hook)
    counts: Dict[str, int] = {}
    for key in root_keys:
        counts[key] = counts.get(key, 0) + 1
    return counts


def load_catalog(path: str | Path, *, strict: bool = False) -> TranslationData:
    """Load the catalog at ``path``.

    A missing file always loads empty. An unparsable file loads empty too,
    unless ``strict`` is set, in which case ``CatalogReadError`` is raised so
    the caller does not overwrite a damaged catalog with a fresh one.
    """
    p = Path(path)
    if not p.exists():
        _log.info("Strings catalog %s does not exist; starting empty", p)
        return TranslationData()
    try:
        text = filesystem.read_text(p)
        catalog = _parse_structure(text)
        counts = _count_top_level_keys(text)
    except (OSError, ValueError) as e:
        if strict:
            raise CatalogReadError(
                f"Strings catalog {p} could not be parsed: {e}", context={"path": str(p)}
            ) from e
        _log.warning("Strings catalog %s could not be parsed (%s); starting empty", p, e)
        return TranslationData()
    duplicates = [k for k, n in counts.items() if n > 1]
    if duplicates:
        _log.warning("Strings catalog %s repeats keys: %s", p, ", ".join(duplicates))
    return TranslationData(map=catalog, duplicate_keys=duplicates, key_counts=counts)


def dump_catalog(
    catalog: Mapping[str, Mapping[str, str]],
    *,
    sort: bool = False,
    primary_locale: Optional[str] = None,
) -> str:
    """Serialize ``catalog`` deterministically.

    ``sort`` orders outer keys ordinally. Inner locales are ordered primary
    first then alphabetically when ``primary_locale`` is given, alphabetically
    when only ``sort`` is set, and left in insertion order otherwise.
    """
    keys = sorted(catalog) if sort else list(catalog)
    ordered: Dict[str, Dict[str, str]] = {}
    for key in keys:
        inner = catalog[key] or {}
        locales = list(inner)
        if primary_locale is not None:
            locales.sort(key=primary_first_key(primary_locale))
        elif sort:
            locales.sort()
        ordered[key] = {loc: inner[loc] for loc in locales}
    return json.dumps(ordered, indent=2, ensure_ascii=False) + "\n"


def save_catalog(
    path: str | Path,
    catalog: Mapping[str, Mapping[str, str]],
    *,
    sort: bool = False,
    primary_locale: Optional[str] = None,
) -> None:
    text = dump_catalog(catalog, sort=sort, primary_locale=primary_locale)
    try:
        filesystem.write_text_atomic(path, text)
    except OSError as e:
        _log.error("Failed to write strings catalog %s: %s", path, e)
        raise CatalogWriteError(
            f"Failed to write strings catalog {path}: {e}", context={"path": str(path)}
        ) from e


class StringsStore:
    """Catalog file with single-key mutations and a post-write reload hook.

    Each mutation re-reads the file, applies its change and writes the whole
    catalog back. The reload handler runs after every successful write so a
    runtime translation engine can pick up the new text; its failures are
    logged and do not undo the write.
    """

    def __init__(self, path: str | Path, reload_handler: ReloadHandler | None = None) -> None:
        self._path = Path(path)
        self._reload_handler: ReloadHandler = reload_handler or NoOpReloadHandler()
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Catalog:
        return self.load_data().map

    def load_data(self) -> TranslationData:
        return load_catalog(self._path)

    # Single-key mutations ----------------------------------------------
    def create(self, key: str, translations: Mapping[str, str] | None) -> None:
        """Add a new key; raises ``KeyExistsError`` if it is already defined."""
        with self._lock:
            catalog = load_catalog(self._path, strict=True).map
            if key in catalog:
                raise KeyExistsError(f"Key already exists: {key}", context={"key": key})
            catalog[key] = _clean(translations)
            save_catalog(self._path, catalog)
        self._notify_reload()

    def save(self, key: str, translations: Mapping[str, str] | None) -> None:
        """Create or replace the locale map of ``key``."""
        with self._lock:
            catalog = load_catalog(self._path, strict=True).map
            catalog[key] = _clean(translations)
            save_catalog(self._path, catalog)
        self._notify_reload()

    def delete(self, key: str) -> bool:
        """Remove ``key``; returns False (and writes nothing) when absent."""
        with self._lock:
            catalog = load_catalog(self._path, strict=True).map
            if key not in catalog:
                return False
            del catalog[key]
            save_catalog(self._path, catalog)
        self._notify_reload()
        return True

    def format(self, primary_locale: str) -> None:
        """Rewrite the catalog with locales ordered primary first, then alphabetically."""
        with self._lock:
            catalog = load_catalog(self._path, strict=True).map
            save_catalog(self._path, catalog, primary_locale=primary_locale)
        self._notify_reload()

    def _notify_reload(self) -> None:
        try:
            self._reload_handler.reload()
        except Exception:  # noqa: BLE001
            _log.warning("Translations reload after writing %s failed", self._path, exc_info=True)


def _clean(translations: Mapping[str, str] | None) -> Dict[str, str]:
    if not translations:
        return {}
    return {str(loc): text for loc, text in translations.items() if text is not None}
