"""Usage clocks: where the tracer reads time consumed in the current turn."""

import time
from typing import Protocol


class IUsageClock(Protocol):
    """Monotonic per-turn usage reading plus the turn's budgets, in milliseconds."""

    limit: float  # normal budget, checked against long_tick_ratio
    tick_limit: float  # hard budget, checked against panic_tick_ratio

    def get_used(self) -> float:
        """Milliseconds consumed since the turn started."""
        ...

    def reset_turn(self) -> None:
        """Start measuring a new turn."""
        ...


class ProcessCpuClock:
    """CPU time of the current process since the last turn reset."""

    def __init__(self, limit: float, tick_limit: float | None = None):
        self.limit = limit
        self.tick_limit = limit if tick_limit is None else tick_limit
        self._turn_start = time.process_time()

    def get_used(self) -> float:
        return (time.process_time() - self._turn_start) * 1000

    def reset_turn(self) -> None:
        self._turn_start = time.process_time()


class SimulatedClock:
    """Wall time since the last turn reset, for simulated environments."""

    def __init__(self, limit: float, tick_limit: float | None = None):
        self.limit = limit
        self.tick_limit = limit if tick_limit is None else tick_limit
        self._turn_start = time.perf_counter()

    def get_used(self) -> float:
        return (time.perf_counter() - self._turn_start) * 1000

    def reset_turn(self) -> None:
        self._turn_start = time.perf_counter()


class ManualClock:
    """Caller-driven clock for replays and tests."""

    def __init__(
        self, limit: float, tick_limit: float | None = None, used: float = 0.0
    ):
        self.limit = limit
        self.tick_limit = limit if tick_limit is None else tick_limit
        self._used = used

    def get_used(self) -> float:
        return self._used

    def set(self, used: float) -> None:
        """Set the current reading."""
        self._used = used

    def advance(self, amount: float) -> float:
        """Move the reading forward and return the new value."""
        self._used += amount
        return self._used

    def reset_turn(self) -> None:
        self._used = 0.0
