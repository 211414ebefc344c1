"""Audit report combining a catalog snapshot with a source scan.

:func:`build_report` is pure: the same catalog and scan always yield the same
report apart from ``generated_at``. It computes

 - ``missing_keys``: keys looked up in code but absent from the catalog;
 - ``unused_keys``: catalog keys never looked up, except keys starting
   (case-insensitively) with the literal prefix of some dynamic lookup, since
   ``t(f"user.{field}")`` may well reach ``user.name`` at runtime;
 - ``duplicate_keys``: keys repeated at the top level of the raw document;
 - ``duplicate_en_us_values``: primary-locale texts shared by several keys;
 - ``locale_missing_counts``: per observed locale, how many keys lack a
   non-blank text for it;
 - ``key_usages`` / ``dynamic_key_usages``: where the lookups live.

Lists are ordinal-sorted; ``key_usages`` keeps first-seen key order with each
group sorted by (file, line).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core import filesystem

from .catalog import Catalog, TranslationData
from .locales import locale_value
from .scanner import DynamicUsage, ScanResult, UsageLocation

__all__ = ["AuditReport", "build_report", "write_report"]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditReport:
    generated_at: datetime
    repo_root: str
    source_directory: str
    strings_path: str
    used_keys_count: int
    defined_keys_count: int
    missing_keys: Tuple[str, ...] = ()
    unused_keys: Tuple[str, ...] = ()
    duplicate_keys: Tuple[str, ...] = ()
    duplicate_en_us_values: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    locale_missing_counts: Mapping[str, int] = field(default_factory=dict)
    dynamic_prefixes: Tuple[str, ...] = ()
    dynamic_key_usages: Tuple[DynamicUsage, ...] = ()
    key_usages: Mapping[str, Tuple[UsageLocation, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Cached reports are shared between callers; make every container read-only.
        _freeze(self, "missing_keys", tuple(self.missing_keys))
        _freeze(self, "unused_keys", tuple(self.unused_keys))
        _freeze(self, "duplicate_keys", tuple(self.duplicate_keys))
        _freeze(self, "dynamic_prefixes", tuple(self.dynamic_prefixes))
        _freeze(self, "dynamic_key_usages", tuple(self.dynamic_key_usages))
        _freeze(
            self,
            "duplicate_en_us_values",
            MappingProxyType({k: tuple(v) for k, v in self.duplicate_en_us_values.items()}),
        )
        _freeze(self, "locale_missing_counts", MappingProxyType(dict(self.locale_missing_counts)))
        _freeze(
            self, "key_usages", MappingProxyType({k: tuple(v) for k, v in self.key_usages.items()})
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation with camelCase keys; ``None`` values omitted."""
        data = {
            "generatedAt": self.generated_at.isoformat(),
            "repoRoot": self.repo_root,
            "sourceDirectory": self.source_directory,
            "stringsPath": self.strings_path,
            "usedKeysCount": self.used_keys_count,
            "definedKeysCount": self.defined_keys_count,
            "missingKeys": list(self.missing_keys),
            "unusedKeys": list(self.unused_keys),
            "duplicateKeys": list(self.duplicate_keys),
            "duplicateEnUsValues": {k: list(v) for k, v in self.duplicate_en_us_values.items()},
            "localeMissingCounts": dict(self.locale_missing_counts),
            "dynamicPrefixes": list(self.dynamic_prefixes),
            "dynamicKeyUsages": [_dynamic_dict(d) for d in self.dynamic_key_usages],
            "keyUsages": {
                key: [_usage_dict(u) for u in group] for key, group in self.key_usages.items()
            },
        }
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def _freeze(report: "AuditReport", name: str, value: Any) -> None:
    object.__setattr__(report, name, value)


def _usage_dict(u: UsageLocation) -> Dict[str, Any]:
    return {"key": u.key, "file": u.file, "line": u.line, "accessor": u.accessor}


def _dynamic_dict(d: DynamicUsage) -> Dict[str, Any]:
    return {
        "file": d.file,
        "line": d.line,
        "accessor": d.accessor,
        "reason": d.reason,
        "expression": d.expression,
        "prefix": d.prefix,
    }


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def dynamic_prefixes(usages: Iterable[DynamicUsage]) -> List[str]:
    """Distinct (case-insensitive) non-empty prefixes, ordinal-sorted."""
    seen: Dict[str, str] = {}
    for usage in usages:
        if usage.prefix and usage.prefix.strip():
            seen.setdefault(usage.prefix.casefold(), usage.prefix)
    return sorted(seen.values())


def _covered(key: str, prefixes: Iterable[str]) -> bool:
    folded = key.casefold()
    return any(folded.startswith(p.casefold()) for p in prefixes)


def _group_usages(usages: Iterable[UsageLocation]) -> Dict[str, List[UsageLocation]]:
    groups: Dict[str, List[UsageLocation]] = {}
    names: Dict[str, str] = {}
    for usage in usages:
        name = names.setdefault(usage.key.casefold(), usage.key)
        groups.setdefault(name, []).append(usage)
    for group in groups.values():
        group.sort(key=lambda u: (u.file, u.line))
    return groups


def _duplicate_values(catalog: Catalog, primary_locale: str) -> Dict[str, List[str]]:
    by_text: Dict[str, List[str]] = {}
    for key, translations in catalog.items():
        text = locale_value(translations, primary_locale)
        if _is_blank(text):
            continue
        by_text.setdefault(text, []).append(key)  # type: ignore[arg-type]
    return {text: sorted(keys) for text, keys in sorted(by_text.items()) if len(keys) > 1}


def _locale_missing_counts(catalog: Catalog) -> Dict[str, int]:
    locales: Dict[str, str] = {}
    for translations in catalog.values():
        for locale in translations:
            locales.setdefault(locale.casefold(), locale)
    counts: Dict[str, int] = {}
    for locale in sorted(locales.values()):
        counts[locale] = sum(
            1 for translations in catalog.values() if _is_blank(locale_value(translations, locale))
        )
    return counts


def build_report(
    data: TranslationData,
    scan: ScanResult,
    *,
    repo_root: str | Path,
    source_directory: str | Path,
    strings_path: str | Path,
    primary_locale: str = "en-US",
    now: Optional[datetime] = None,
) -> AuditReport:
    """Combine a catalog snapshot and a scan result into an ``AuditReport``."""
    catalog = data.map
    prefixes = dynamic_prefixes(scan.dynamic_usages)
    missing = sorted(k for k in scan.keys if k not in catalog)
    unused = sorted(k for k in catalog if k not in scan.keys and not _covered(k, prefixes))
    return AuditReport(
        generated_at=now or datetime.now(timezone.utc),
        repo_root=str(Path(repo_root).resolve()),
        source_directory=str(Path(source_directory).resolve()),
        strings_path=str(Path(strings_path).resolve()),
        used_keys_count=len(scan.keys),
        defined_keys_count=len(catalog),
        missing_keys=tuple(missing),
        unused_keys=tuple(unused),
        duplicate_keys=tuple(sorted(data.duplicate_keys)),
        duplicate_en_us_values=_duplicate_values(catalog, primary_locale),
        locale_missing_counts=_locale_missing_counts(catalog),
        dynamic_prefixes=tuple(prefixes),
        dynamic_key_usages=tuple(scan.dynamic_usages),
        key_usages=_group_usages(scan.usages),
    )


def write_report(report: AuditReport, path: str | Path) -> Path:
    """Persist ``report`` as indented UTF-8 JSON, creating parent directories."""
    target = Path(path)
    filesystem.write_text_atomic(target, report.to_json() + "\n")
    _log.debug("Wrote translations audit report to %s", target)
    return target
