"""Usage clock module."""

from .clock import IUsageClock, ManualClock, ProcessCpuClock, SimulatedClock

__all__ = ["IUsageClock", "ManualClock", "ProcessCpuClock", "SimulatedClock"]
