"""Rewrite the strings catalog in canonical order.

Locales inside every entry are ordered primary locale first, then
alphabetically; with ``--sort`` the keys themselves are sorted as well.
Empty texts are preserved.

Example:
  python -m cli.format_strings --strings data/translations/strings.json --sort
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from config import settings
from translations.catalog import load_catalog, save_catalog
from translations.errors import CatalogReadError, CatalogWriteError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Format the translations strings catalog")
    p.add_argument(
        "--strings",
        default=os.path.join(settings.TRANSLATIONS_FOLDER, settings.TRANSLATIONS_FILE_NAME),
        help="Path to the strings catalog JSON file",
    )
    p.add_argument("--primary-locale", default=settings.PRIMARY_LOCALE)
    p.add_argument("--sort", action="store_true", help="Also sort translation keys")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not os.path.isfile(args.strings):
        print(f"Strings catalog not found: {args.strings}", file=sys.stderr)
        return 2
    try:
        data = load_catalog(args.strings, strict=True)
    except CatalogReadError as e:
        print(str(e), file=sys.stderr)
        return 1
    if data.duplicate_keys:
        print(
            f"Warning: duplicate keys collapsed to their last value: {', '.join(data.duplicate_keys)}",
            file=sys.stderr,
        )
    try:
        save_catalog(args.strings, data.map, sort=args.sort, primary_locale=args.primary_locale)
    except CatalogWriteError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"Formatted {len(data.map)} keys in {args.strings}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
