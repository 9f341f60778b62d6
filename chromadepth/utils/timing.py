"""Stage timing utilities for the depth effect pipeline."""

import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional
from collections import OrderedDict, deque


class StageTimer:
    """Track wall-clock durations of named pipeline stages."""

    def __init__(self, window_size: int = 30):
        """
        Initialize stage timer.

        Args:
            window_size: Number of runs to keep per stage for statistics.
        """
        self.window_size = window_size
        self.stage_times: "OrderedDict[str, deque]" = OrderedDict()
        self.last_times: Dict[str, float] = {}

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """
        Time the enclosed block and record it under ``name``.

        Args:
            name: Stage name (e.g. "resize", "smooth").
        """
        start = time.monotonic()
        try:
            yield
        finally:
            self.record(name, (time.monotonic() - start) * 1000)

    def record(self, name: str, duration_ms: float) -> None:
        """Record a stage duration in milliseconds."""
        if name not in self.stage_times:
            self.stage_times[name] = deque(maxlen=self.window_size)
        self.stage_times[name].append(duration_ms)
        self.last_times[name] = duration_ms

    def get_average_ms(self, name: str) -> Optional[float]:
        """
        Get average duration of a stage over the window.

        Returns:
            Average duration in milliseconds, or None if the stage never ran.
        """
        times = self.stage_times.get(name)
        if not times:
            return None

        return sum(times) / len(times)

    def total_ms(self) -> float:
        """Sum of the most recent duration of every stage."""
        return sum(self.last_times.values())

    def summary(self) -> str:
        """Human-readable summary of the most recent run."""
        parts = [f"{name}={ms:.1f}ms" for name, ms in self.last_times.items()]
        return ", ".join(parts)

    def reset(self) -> None:
        """Reset all statistics."""
        self.stage_times.clear()
        self.last_times.clear()


def timestamp_ms() -> int:
    """
    Get current timestamp in milliseconds using monotonic clock.

    Returns:
        Timestamp in milliseconds.
    """
    return int(time.monotonic() * 1000)
