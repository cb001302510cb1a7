"""
Wall-clock timing for statistic summaries.

A summary evaluates the statistic value, the p-value and the critical
value in turn; each stage is timed as a named section.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Section timer started at construction.

    Usage:
        timer = Timer()
        with timer.section('value'):
            stat = statistic.value
        timing = timer.stop()
        # {'total_seconds': 0.002, 'value': 0.001}

    Re-entering a section name adds to its total.
    """

    def __init__(self):
        self._origin = time.perf_counter()
        self._sections: dict[str, float] = {}
        self._timing: dict[str, float] | None = None

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        if self._timing is not None:
            raise RuntimeError(f"Timer already stopped; cannot time section {name!r}")
        begin = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + time.perf_counter() - begin

    def stop(self) -> dict[str, float]:
        """
        Freeze the timer and return the timing breakdown.

        Calling stop() again returns the same breakdown.
        """
        if self._timing is None:
            self._timing = {'total_seconds': time.perf_counter() - self._origin}
            self._timing.update(self._sections)
        return dict(self._timing)

    @property
    def stopped(self) -> bool:
        return self._timing is not None
