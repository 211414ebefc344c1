"""Structured errors for catalog maintenance and usage auditing."""

from __future__ import annotations
from typing import Any


class TranslationsError(Exception):
    """Base class for translations manager issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class CatalogReadError(TranslationsError):
    """Raised by strict loads when an existing catalog cannot be parsed."""


class CatalogWriteError(TranslationsError):
    """Raised when the strings catalog cannot be written to disk."""


class KeyExistsError(TranslationsError):
    """Raised when creating a translation key that is already defined."""


class InvalidLocaleError(TranslationsError, ValueError):
    """Raised when a locale map fails validation (unknown locale, missing primary)."""


class ReportBuildError(TranslationsError):
    """Raised when loading, scanning or building an audit report fails."""


class ReportCancelledError(TranslationsError):
    """Raised when a report request is cancelled before any work started."""
