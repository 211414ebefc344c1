"""Global configuration and constants for the translations manager."""

from __future__ import annotations

import os
from typing import Final

DATA_DIR: Final = os.environ.get("TRANSLATIONS_DATA_DIR", "data")
PRIMARY_LOCALE: Final = os.environ.get("TRANSLATIONS_PRIMARY_LOCALE", "en-US")

TRANSLATIONS_FOLDER: Final = os.path.join(DATA_DIR, "translations")
TRANSLATIONS_FILE_NAME: Final = "strings.json"
AUDIT_OUTPUT_PATH: Final = os.path.join(DATA_DIR, "translation_audit.json")
SOURCE_DIRECTORY: Final = "src"

REPORT_CACHE_SECONDS: Final = 30.0

# Call names recognised as translation lookups when scanning sources
ACCESSOR_NAMES: Final = ("t", "translate", "t_locale")
# Receivers whose calls take (locale, key) rather than (key, ...)
STATIC_HELPERS: Final = ("Translator",)
# The accessor definitions themselves would otherwise show up as dynamic usages
EXCLUDED_FILE_NAMES: Final = ("translation_engine.py", "extension_methods.py")
EXCLUDED_DIRECTORIES: Final = (
    "bin",
    "obj",
    "build",
    "dist",
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
)
