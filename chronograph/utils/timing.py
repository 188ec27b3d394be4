"""
Timing utilities: the stopwatch behind every chronograph and the duration
formatting used in rendered messages.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

_TICKS_PER_SECOND = 10_000_000

@dataclass
class Stopwatch:
    """
    Pausable wall-clock stopwatch.

    Elapsed time is the sum of all running intervals. ``start`` on a running
    stopwatch and ``stop`` on a stopped one are no-ops.
    """

    accumulated_s: float = 0.0
    started_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self.started_at is not None

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = time.perf_counter()

    def stop(self) -> None:
        if self.started_at is not None:
            self.accumulated_s += time.perf_counter() - self.started_at
            self.started_at = None

    @property
    def elapsed_s(self) -> float:
        if self.started_at is None:
            return self.accumulated_s
        return self.accumulated_s + (time.perf_counter() - self.started_at)

    @property
    def elapsed(self) -> timedelta:
        return timedelta(seconds=self.elapsed_s)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_s * 1000.0


def format_duration(duration: timedelta) -> str:
    """
    Format a duration in the general short form ``[-][d:]h:mm:ss[.fffffff]``.

    Days appear only when non-zero, the fraction is written in 100ns ticks
    with trailing zeros trimmed and is omitted when zero.

    >>> format_duration(timedelta(seconds=1.5))
    '0:00:01.5'
    >>> format_duration(timedelta(days=1, hours=2))
    '1:2:00:00'
    """
    total_us = duration // timedelta(microseconds=1)
    sign = "-" if total_us < 0 else ""
    ticks = abs(total_us) * 10

    total_seconds, fraction = divmod(ticks, _TICKS_PER_SECOND)
    total_minutes, seconds = divmod(total_seconds, 60)
    total_hours, minutes = divmod(total_minutes, 60)
    days, hours = divmod(total_hours, 24)

    text = f"{hours}:{minutes:02d}:{seconds:02d}"
    if days:
        text = f"{days}:{text}"
    if fraction:
        text = f"{text}.{fraction:07d}".rstrip("0")
    return sign + text
