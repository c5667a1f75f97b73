"""tickprof: per-turn call tracing with budget-aware report flushing."""

from .app import Application, IApplication
from .clock import IUsageClock, ManualClock, ProcessCpuClock, SimulatedClock
from .config import ProfilerSettings, load_settings
from .instrument import DEFAULT_DENYLIST, Instrumenter
from .models import Phase, SpanEvent, TraceReport, TurnState
from .sinks import (
    FanoutReportSink,
    FileReportSink,
    IReportSink,
    LoggingReportSink,
    MemoryReportSink,
)
from .storage import IStorage, Storage
from .tracer import ITracer, Tracer

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "Phase",
    "SpanEvent",
    "TraceReport",
    "TurnState",
    # Config
    "ProfilerSettings",
    "load_settings",
    # Components
    "IUsageClock",
    "ProcessCpuClock",
    "SimulatedClock",
    "ManualClock",
    "IReportSink",
    "LoggingReportSink",
    "FileReportSink",
    "FanoutReportSink",
    "MemoryReportSink",
    "ITracer",
    "Tracer",
    "Instrumenter",
    "DEFAULT_DENYLIST",
    "IStorage",
    "Storage",
]
