"""Time-boxed, single-flight cache around audit report computation.

States: empty -> populated(report, computed_at). A report younger than the
TTL is served without I/O. Otherwise callers queue on a one-slot gate; the
first one through recomputes, the rest re-check freshness once they get the
gate and normally just return the report that was built while they waited.

Every invalidation bumps a generation counter. A report only counts as fresh
while no invalidation happened since its build started, so a build that
raced a catalog write is stored stale and the next caller rebuilds.

A failed recomputation leaves the previous report in place (stale beats
empty) and raises ``ReportBuildError`` to the caller that attempted it.

Cancellation (a ``threading.Event``) is honoured while waiting for the gate
and right before a build starts; a build in progress always runs to the end.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path
import threading
import time
from typing import Callable, Optional

from .errors import ReportBuildError, ReportCancelledError
from .report import AuditReport, write_report

__all__ = ["CachedReport", "ReportCache"]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedReport:
    report: AuditReport
    computed_at: float
    stale: bool = False
    generation: int = 0


class ReportCache:
    """Holds the latest ``AuditReport`` for ``ttl_seconds``.

    Parameters
    ----------
    builder : Callable[[], AuditReport]
        Performs catalog load + source scan + report build.
    ttl_seconds : float
        How long a computed report is served before a rescan.
    output_path : Path | None
        When set, every freshly built report is also written there.
    clock : Callable[[], float]
        Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        builder: Callable[[], AuditReport],
        ttl_seconds: float,
        *,
        output_path: str | Path | None = None,
        clock: Callable[[], float] = time.monotonic,
        poll_interval: float = 0.05,
    ) -> None:
        self._builder = builder
        self._ttl = ttl_seconds
        self._output_path = Path(output_path) if output_path else None
        self._clock = clock
        self._poll_interval = poll_interval
        self._gate = threading.Lock()
        self._state = threading.Lock()
        self._generation = 0
        self._cached: Optional[CachedReport] = None
        self.build_count = 0

    # Public API ---------------------------------------------------------
    def get_report(self, cancel: threading.Event | None = None) -> AuditReport:
        cached = self._cached
        if self._is_fresh(cached):
            return cached.report  # type: ignore[union-attr]
        self._acquire(cancel)
        try:
            cached = self._cached
            if self._is_fresh(cached):
                return cached.report  # type: ignore[union-attr]
            if cancel is not None and cancel.is_set():
                raise ReportCancelledError("Report request cancelled before scanning")
            return self._rebuild()
        finally:
            self._gate.release()

    def refresh(self, cancel: threading.Event | None = None) -> AuditReport:
        """Return a report whose build started after this call."""
        self.invalidate()
        return self.get_report(cancel)

    def invalidate(self) -> None:
        """Mark the current report expired without discarding it.

        A build already in progress is stored stale when it finishes.
        """
        with self._state:
            self._generation += 1
            cached = self._cached
            if cached is not None and not cached.stale:
                self._cached = replace(cached, stale=True)

    def peek(self) -> Optional[CachedReport]:
        """Latest report regardless of age (``None`` before the first build)."""
        return self._cached

    # Internals ----------------------------------------------------------
    def _is_fresh(self, cached: Optional[CachedReport]) -> bool:
        if cached is None or cached.stale or cached.generation != self._generation:
            return False
        return self._clock() < cached.computed_at + self._ttl

    def _acquire(self, cancel: threading.Event | None) -> None:
        if cancel is None:
            self._gate.acquire()
            return
        while not self._gate.acquire(timeout=self._poll_interval):
            if cancel.is_set():
                raise ReportCancelledError("Report request cancelled while waiting")

    def _rebuild(self) -> AuditReport:
        self.build_count += 1
        generation = self._generation
        try:
            report = self._builder()
        except Exception as e:  # noqa: BLE001
            _log.error("Failed to build translations audit report", exc_info=True)
            raise ReportBuildError(f"Failed to build translations audit report: {e}") from e
        with self._state:
            self._cached = CachedReport(
                report=report,
                computed_at=self._clock(),
                stale=generation != self._generation,
                generation=generation,
            )
        if self._output_path is not None:
            try:
                write_report(report, self._output_path)
            except OSError:
                _log.warning(
                    "Could not write translations audit report to %s",
                    self._output_path,
                    exc_info=True,
                )
        return report
