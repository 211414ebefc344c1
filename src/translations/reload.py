"""Hook invoked after the strings catalog changes on disk.

A host application that keeps translations in memory passes a handler whose
``reload`` re-reads the catalog; the default does nothing.
"""

from __future__ import annotations

from typing import Protocol

__all__ = ["ReloadHandler", "NoOpReloadHandler", "CallbackReloadHandler"]


class ReloadHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def reload(self) -> None: ...  # pragma: no cover - structural


class NoOpReloadHandler:
    def reload(self) -> None:
        return None


class CallbackReloadHandler:
    """Adapter turning a zero-argument callable into a ``ReloadHandler``."""

    def __init__(self, callback) -> None:
        self._callback = callback

    def reload(self) -> None:
        self._callback()
