"""Translations manager configuration persistence.

Holds the knobs consumed by the scan-and-audit engine: where the repository
and its sources live, which call names count as translation lookups, what to
skip while walking, how long an audit report stays fresh, and where the
catalog and the optional report dump are stored.

Design principles:
- Pure logic, no I/O at import time, so it can be unit-tested headless.
- Explicit schema with version field to enable future migrations.
- Graceful fallback: corrupt or incompatible files produce defaults instead of raising.
- Relative paths are resolved against ``repo_root`` only when asked for.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from config import settings

__all__ = ["ManagerConfig", "load_config", "save_config", "CONFIG_VERSION"]

_log = logging.getLogger(__name__)

CONFIG_VERSION = 1  # Increment when structure changes

DEFAULT_FILENAME = "translations_manager.json"


def _tuple(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return tuple(default)
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(slots=True)
class ManagerConfig:
    """Configuration surface of the scan-and-audit engine.

    Attributes
    ----------
    version: Schema version for migration handling.
    repo_root: Repository root; usage file paths are reported relative to it.
    source_directory: Directory scanned for translation lookups (relative to repo_root when not absolute).
    translations_folder, translations_file_name: Location of the strings catalog.
    primary_locale: Reference locale used for duplicate-value detection.
    accessor_names: Call names treated as translation lookups.
    static_helpers: Receivers whose lookups take ``(locale, key)``.
    excluded_file_names: File names never scanned (case-insensitive).
    excluded_directories: Directory segments never descended into (case-insensitive).
    report_cache_seconds: Time-to-live of a computed audit report.
    audit_output_path: Where the report is dumped when ``write_audit_to_disk`` is set.
    allowed_locales: Locale codes accepted by catalog mutations (empty = built-in list).
    """

    version: int = CONFIG_VERSION
    repo_root: str = field(default_factory=os.getcwd)
    source_directory: str = settings.SOURCE_DIRECTORY
    translations_folder: str = settings.TRANSLATIONS_FOLDER
    translations_file_name: str = settings.TRANSLATIONS_FILE_NAME
    primary_locale: str = settings.PRIMARY_LOCALE
    accessor_names: Tuple[str, ...] = settings.ACCESSOR_NAMES
    static_helpers: Tuple[str, ...] = settings.STATIC_HELPERS
    excluded_file_names: Tuple[str, ...] = settings.EXCLUDED_FILE_NAMES
    excluded_directories: Tuple[str, ...] = settings.EXCLUDED_DIRECTORIES
    report_cache_seconds: float = settings.REPORT_CACHE_SECONDS
    audit_output_path: Optional[str] = settings.AUDIT_OUTPUT_PATH
    write_audit_to_disk: bool = False
    allowed_locales: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerConfig":
        defaults = cls()
        output = data.get("audit_output_path", defaults.audit_output_path)
        return cls(
            version=int(data.get("version", CONFIG_VERSION)),
            repo_root=str(data.get("repo_root") or defaults.repo_root),
            source_directory=str(data.get("source_directory") or defaults.source_directory),
            translations_folder=str(
                data.get("translations_folder") or defaults.translations_folder
            ),
            translations_file_name=str(
                data.get("translations_file_name") or defaults.translations_file_name
            ),
            primary_locale=str(data.get("primary_locale") or defaults.primary_locale),
            accessor_names=_tuple(data.get("accessor_names"), defaults.accessor_names),
            static_helpers=_tuple(data.get("static_helpers"), defaults.static_helpers),
            excluded_file_names=_tuple(
                data.get("excluded_file_names"), defaults.excluded_file_names
            ),
            excluded_directories=_tuple(
                data.get("excluded_directories"), defaults.excluded_directories
            ),
            report_cache_seconds=float(
                data.get("report_cache_seconds", defaults.report_cache_seconds)
            ),
            audit_output_path=str(output) if output else None,
            write_audit_to_disk=bool(data.get("write_audit_to_disk", False)),
            allowed_locales=_tuple(data.get("allowed_locales"), ()),
        )

    # Path resolution ----------------------------------------------------
    def resolve_repo_root(self) -> Path:
        return Path(self.repo_root).resolve()

    def _under_root(self, value: str) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = self.resolve_repo_root() / path
        return path.resolve()

    def resolve_source_directory(self) -> Path:
        return self._under_root(self.source_directory)

    def resolve_strings_path(self) -> Path:
        return self._under_root(self.translations_folder) / self.translations_file_name

    def resolve_audit_output_path(self) -> Optional[Path]:
        if not self.audit_output_path:
            return None
        return self._under_root(self.audit_output_path)


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_config(base_dir: str | Path | None = None) -> ManagerConfig:
    """Load manager config from directory.

    Parameters
    ----------
    base_dir: The directory containing the config file (defaults to CWD).
    """
    path = _resolve_path(base_dir)
    if not path.exists():
        return ManagerConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        cfg = ManagerConfig.from_dict(data)
    except Exception:  # noqa: BLE001
        _log.warning("Ignoring unreadable translations manager config at %s", path, exc_info=True)
        return ManagerConfig()
    if cfg.version != CONFIG_VERSION:
        # Reset to defaults while keeping the repository location.
        return ManagerConfig(repo_root=cfg.repo_root)
    return cfg


def save_config(cfg: ManagerConfig, base_dir: str | Path | None = None) -> Path:
    """Persist manager config to directory.

    Returns the path written for convenience.
    """
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
    return path
