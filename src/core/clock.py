from __future__ import annotations

import time
from typing import Callable, Optional


class FrameClock:
    """Measures wall time between consecutive get_delta() calls.

    The first call starts the clock and returns 0.0. There is no clamping: a
    call after a long pause (window minimised, debugger break) reports the
    whole gap.
    """

    def __init__(self, time_fn: Callable[[], float] = time.perf_counter) -> None:
        self._time_fn = time_fn
        self._last: Optional[float] = None
        self.elapsed_time = 0.0

    def get_delta(self) -> float:
        now = self._time_fn()
        if self._last is None:
            self._last = now
            return 0.0
        delta = now - self._last
        self._last = now
        self.elapsed_time += delta
        return delta
