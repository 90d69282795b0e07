from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List


class GameClock:
    def __init__(self):
        self.time_scale = 1.0

    def scaled_dt(self, dt: float) -> float:
        return dt * self.time_scale

    def cycle_speed(self) -> int:
        # x1 / x2
        self.time_scale = 2.0 if self.time_scale < 1.5 else 1.0
        return int(self.time_scale)


@dataclass(eq=False)
class DelayedCall:
    remaining_ms: float
    fn: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """Delayed callbacks driven by the scene update loop (no threads)."""

    def __init__(self):
        self._calls: List[DelayedCall] = []

    def delayed_call(self, delay_ms: float, fn: Callable[[], None]) -> DelayedCall:
        call = DelayedCall(float(delay_ms), fn)
        self._calls.append(call)
        return call

    def tick(self, dt: float):
        """Advance by dt seconds and fire every call that came due."""
        if not self._calls:
            return
        ms = dt * 1000.0
        due: List[DelayedCall] = []
        for c in self._calls:
            if c.cancelled:
                continue
            c.remaining_ms -= ms
            if c.remaining_ms <= 0:
                due.append(c)
        self._calls = [c for c in self._calls if c.pending and c not in due]
        for c in due:
            # an earlier callback in this batch may have cancelled this one
            if c.cancelled:
                continue
            c.fired = True
            c.fn()

    def cancel_all(self):
        for c in self._calls:
            c.cancel()
        self._calls.clear()

    def pending(self) -> int:
        return sum(1 for c in self._calls if c.pending)
