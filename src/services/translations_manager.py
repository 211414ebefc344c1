"""Translations manager facade.

Wires configuration, the strings catalog and the audit report cache together
and exposes the operations a UI or HTTP layer calls:

 - ``get_report``: cached audit of catalog vs. source usage;
 - ``load``: current catalog;
 - ``create`` / ``save`` / ``delete``: single-key edits (validated);
 - ``format``: canonical rewrite with the primary locale first;
 - ``locales``: locale codes accepted by ``create``/``save``.

Catalog edits mark the cached report stale so the next ``get_report`` rescans.
Each manager owns its own cache; nothing here is process-global.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Mapping, Optional

from config.manager_config import ManagerConfig
from translations.catalog import Catalog, StringsStore
from translations.locales import valid_locales, validate_locales
from translations.reload import ReloadHandler
from translations.report import AuditReport, build_report
from translations.report_cache import ReportCache
from translations.scanner import ScanOptions, ScanResult, scan_source

__all__ = ["TranslationsManager"]

_log = logging.getLogger(__name__)


class TranslationsManager:
    def __init__(
        self,
        config: ManagerConfig,
        *,
        reload_handler: ReloadHandler | None = None,
        scanner: Callable[..., ScanResult] = scan_source,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config
        self.store = StringsStore(config.resolve_strings_path(), reload_handler)
        self._scanner = scanner
        output = config.resolve_audit_output_path() if config.write_audit_to_disk else None
        cache_kwargs = {"output_path": output}
        if clock is not None:
            cache_kwargs["clock"] = clock
        self.cache = ReportCache(self._build_report, config.report_cache_seconds, **cache_kwargs)

    # Reporting ----------------------------------------------------------
    def get_report(self, cancel: threading.Event | None = None) -> AuditReport:
        return self.cache.get_report(cancel)

    def refresh_report(self, cancel: threading.Event | None = None) -> AuditReport:
        return self.cache.refresh(cancel)

    def _build_report(self) -> AuditReport:
        cfg = self.config
        repo_root = cfg.resolve_repo_root()
        source_dir = cfg.resolve_source_directory()
        data = self.store.load_data()
        scan = self._scanner(source_dir, repo_root, ScanOptions.from_config(cfg))
        if scan.failed_files:
            _log.warning("%d source files could not be scanned", len(scan.failed_files))
        return build_report(
            data,
            scan,
            repo_root=repo_root,
            source_directory=source_dir,
            strings_path=self.store.path,
            primary_locale=cfg.primary_locale,
        )

    # Catalog ------------------------------------------------------------
    def load(self) -> Catalog:
        return self.store.load()

    def locales(self) -> List[str]:
        cfg = self.config
        if cfg.allowed_locales:
            return valid_locales(cfg.primary_locale, cfg.allowed_locales, include_known=False)
        return valid_locales(cfg.primary_locale)

    def create(self, key: str, translations: Mapping[str, str] | None) -> None:
        self._validate(key, translations)
        self.store.create(key, translations)
        self.cache.invalidate()

    def save(self, key: str, translations: Mapping[str, str] | None) -> None:
        self._validate(key, translations)
        self.store.save(key, translations)
        self.cache.invalidate()

    def delete(self, key: str) -> bool:
        removed = self.store.delete(key)
        if removed:
            self.cache.invalidate()
        return removed

    def format(self, primary_locale: str | None = None) -> None:
        self.store.format(primary_locale or self.config.primary_locale)
        self.cache.invalidate()

    def _validate(self, key: str, translations: Mapping[str, str] | None) -> None:
        if not key or not key.strip():
            raise ValueError("Key is required.")
        validate_locales(translations, self.locales(), self.config.primary_locale)
