"""Phase tracking for the packaging pipeline."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

log = structlog.get_logger("debpack.pipeline")

STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "skipped": "-",
    "running": "~",
}


@dataclass
class PhaseProgress:
    phase: str
    status: str = "running"  # "running" | "completed" | "failed" | "skipped"
    start_time: float | None = None
    end_time: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 2)
        return None


class ProgressTracker:
    """Record the status and duration of each pipeline phase.

    Phases are entered with :meth:`phase`; an exception escaping the block
    marks the phase failed and propagates unchanged.
    """

    def __init__(self) -> None:
        self.phases: list[PhaseProgress] = []

    @contextmanager
    def phase(self, name: str) -> Iterator[PhaseProgress]:
        p = PhaseProgress(phase=name, start_time=time.monotonic())
        self.phases.append(p)
        self._notify(p)
        try:
            yield p
        except Exception as e:
            p.status = "failed"
            p.error = str(e)
            p.end_time = time.monotonic()
            self._notify(p)
            raise
        p.status = "completed"
        p.end_time = time.monotonic()
        self._notify(p)

    def skip(self, name: str, reason: str) -> None:
        p = PhaseProgress(phase=name, status="skipped", detail=reason)
        self.phases.append(p)
        self._notify(p)

    @property
    def failed(self) -> PhaseProgress | None:
        return next((p for p in self.phases if p.status == "failed"), None)

    def format_summary(self) -> list[str]:
        """One line per phase: ``[+] scan (0.12s) - 14 modules``."""
        lines = []
        for p in self.phases:
            icon = STATUS_ICONS.get(p.status, "?")
            duration = f" ({p.duration}s)" if p.duration is not None else ""
            detail = f" - {p.detail}" if p.detail else ""
            lines.append(f"[{icon}] {p.phase}{duration}{detail}")
        return lines

    def _notify(self, p: PhaseProgress) -> None:
        log.debug("pipeline.phase", phase=p.phase, status=p.status, detail=p.detail or None)
