"""Translations audit CLI.

Scans a repository's Python sources for translation lookups and compares them
with the strings catalog.

Features:
 - Reads ``translations_manager.json`` from ``--config-dir`` (defaults when absent);
   command-line flags override individual values.
 - Emits either a human-readable summary or the full report as JSON (via ``--json``).
 - ``--write PATH`` additionally persists the JSON report.
 - Exit code 0 when no keys are missing or duplicated, 1 otherwise, 2 when the
   repository root does not exist.

Example:
  python -m cli.audit_translations --repo-root . --source src --json
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace

from config.manager_config import ManagerConfig, load_config
from services.translations_manager import TranslationsManager
from translations.report import AuditReport, write_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Audit translation keys against source usage")
    p.add_argument("--config-dir", default=None, help="Directory holding translations_manager.json")
    p.add_argument("--repo-root", default=None, help="Repository root (default: config or CWD)")
    p.add_argument("--source", default=None, help="Source directory to scan, relative to repo root")
    p.add_argument("--strings", default=None, help="Path to the strings catalog JSON file")
    p.add_argument("--primary-locale", default=None, help="Primary locale (default: en-US)")
    p.add_argument("--write", default=None, metavar="PATH", help="Also write the JSON report here")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of human-readable text")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> ManagerConfig:
    cfg = load_config(args.config_dir)
    overrides = {}
    if args.repo_root:
        overrides["repo_root"] = args.repo_root
    if args.source:
        overrides["source_directory"] = args.source
    if args.strings:
        folder, name = os.path.split(os.path.abspath(args.strings))
        overrides["translations_folder"] = folder
        overrides["translations_file_name"] = name
    if args.primary_locale:
        overrides["primary_locale"] = args.primary_locale
    return replace(cfg, **overrides) if overrides else cfg


def print_summary(report: AuditReport) -> None:
    print("Translations Audit:")
    print(f"  Catalog: {report.strings_path}")
    print(f"  Sources: {report.source_directory}")
    print(f"  Used keys: {report.used_keys_count}")
    print(f"  Defined keys: {report.defined_keys_count}")
    print(f"  Missing keys: {len(report.missing_keys)}")
    for key in report.missing_keys[:20]:
        usages = report.key_usages.get(key) or []
        where = f" ({usages[0].file}:{usages[0].line})" if usages else ""
        print(f"    - {key}{where}")
    print(f"  Unused keys: {len(report.unused_keys)}")
    for key in report.unused_keys[:20]:
        print(f"    - {key}")
    if report.duplicate_keys:
        print(f"  Duplicate keys: {', '.join(report.duplicate_keys)}")
    if report.duplicate_en_us_values:
        print(f"  Shared primary texts: {len(report.duplicate_en_us_values)}")
        for text, keys in list(report.duplicate_en_us_values.items())[:10]:
            print(f"    - {text!r}: {', '.join(keys)}")
    if report.locale_missing_counts:
        counts = ", ".join(f"{k}={v}" for k, v in report.locale_missing_counts.items())
        print(f"  Missing per locale: {counts}")
    if report.dynamic_key_usages:
        print(f"  Dynamic lookups: {len(report.dynamic_key_usages)}")
        for d in report.dynamic_key_usages[:10]:
            print(f"    - {d.file}:{d.line} {d.accessor}({d.expression or '...'}) [{d.reason}]")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = build_config(args)
    if not os.path.isdir(cfg.repo_root):
        print(f"Repository root not found: {cfg.repo_root}", file=sys.stderr)
        return 2
    manager = TranslationsManager(cfg)
    report = manager.get_report()
    if args.write:
        write_report(report, args.write)
    if args.json:
        print(report.to_json())
    else:
        print_summary(report)
    return 1 if report.missing_keys or report.duplicate_keys else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
