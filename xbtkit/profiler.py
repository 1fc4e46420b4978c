"""Timing context that logs blocks running longer than a limit."""

from __future__ import annotations

import time
from typing import Optional

from xbtkit.btmisc import xbt_syslog


class Profiler:
    """Measure a block and log ``"<ms> ms: <text>"`` when it takes ``limit`` ms or more."""

    def __init__(self, limit: int, text: str):
        self.limit = limit
        self.text = text
        self.elapsed_ms: Optional[int] = None
        self.report: Optional[str] = None
        self._start = 0.0

    def __enter__(self) -> "Profiler":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> bool:
        self.elapsed_ms = int((time.perf_counter() - self._start) * 1000)
        if self.elapsed_ms >= self.limit:
            self.report = f"{self.elapsed_ms} ms: {self.text}"
            xbt_syslog(self.report)
        return False