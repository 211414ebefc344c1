"""Translation catalog maintenance and usage auditing.

Pieces, leaves first:
 - ``catalog``: load/save the key -> locale -> text JSON catalog, detect keys
   repeated in the raw document, single-key mutations with a reload hook.
 - ``evaluator``: resolve a key argument expression to a literal, or extract
   the literal prefix of a computed key.
 - ``scanner``: walk a Python source tree and collect translation lookups.
 - ``report``: combine catalog + scan into an immutable ``AuditReport``.
 - ``report_cache``: TTL cache with single-flight recomputation.

Locale codes compare case-insensitively; translation keys are case-sensitive.
"""

from __future__ import annotations

from .catalog import StringsStore, TranslationData, load_catalog, save_catalog
from .errors import (
    CatalogReadError,
    CatalogWriteError,
    InvalidLocaleError,
    KeyExistsError,
    ReportBuildError,
    ReportCancelledError,
    TranslationsError,
)
from .evaluator import Resolved, Unresolved, evaluate, extract_prefix
from .report import AuditReport, build_report, write_report
from .report_cache import CachedReport, ReportCache
from .scanner import DynamicUsage, ScanOptions, ScanResult, UsageLocation, scan_source

__all__ = [
    "AuditReport",
    "CachedReport",
    "CatalogReadError",
    "CatalogWriteError",
    "DynamicUsage",
    "InvalidLocaleError",
    "KeyExistsError",
    "ReportBuildError",
    "ReportCache",
    "ReportCancelledError",
    "Resolved",
    "ScanOptions",
    "ScanResult",
    "StringsStore",
    "TranslationData",
    "TranslationsError",
    "Unresolved",
    "UsageLocation",
    "build_report",
    "evaluate",
    "extract_prefix",
    "load_catalog",
    "save_catalog",
    "scan_source",
    "write_report",
]
