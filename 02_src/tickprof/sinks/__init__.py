"""Report sinks module."""

from .sink import (
    REPORT_LOGGER,
    FanoutReportSink,
    FileReportSink,
    IReportSink,
    LoggingReportSink,
    MemoryReportSink,
)

__all__ = [
    "REPORT_LOGGER",
    "FanoutReportSink",
    "FileReportSink",
    "IReportSink",
    "LoggingReportSink",
    "MemoryReportSink",
]
