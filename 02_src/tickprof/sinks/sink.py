"""Report sinks: where serialized trace reports and notices go."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from ..logging_config import get_logger

REPORT_LOGGER = "tickprof.report"

logger = get_logger(__name__)


class IReportSink(Protocol):
    """Transport for emitted reports and short diagnostic notices."""

    def emit_report(self, data: str) -> None:
        """Emit a serialized trace report."""
        ...

    def notice(self, message: str) -> None:
        """Emit a short diagnostic notice."""
        ...


class LoggingReportSink:
    """Writes reports and notices to a logger."""

    def __init__(self, report_logger: logging.Logger | None = None):
        self._logger = report_logger or get_logger(REPORT_LOGGER)

    def emit_report(self, data: str) -> None:
        self._logger.info(data)

    def notice(self, message: str) -> None:
        self._logger.warning(message)


class FileReportSink:
    """Writes each report to its own JSON file; notices go to the log."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)
        self.last_path: Path | None = None

    def emit_report(self, data: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)

        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        path = self._directory / f"trace_{stamp}_{uuid.uuid4().hex[:8]}.json"
        path.write_text(data, encoding="utf-8")

        self.last_path = path
        logger.info("Trace report written: %s", path)

    def notice(self, message: str) -> None:
        logger.warning(message)


class MemoryReportSink:
    """Keeps reports in memory until drained."""

    def __init__(self):
        self.reports: list[str] = []
        self.notices: list[str] = []

    def emit_report(self, data: str) -> None:
        self.reports.append(data)

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def drain(self) -> list[str]:
        """Return pending reports and forget them."""
        reports = self.reports
        self.reports = []
        return reports


class FanoutReportSink:
    """Delivers every report and notice to each of several sinks, in order."""

    def __init__(self, sinks: list[IReportSink]):
        self._sinks = list(sinks)

    @property
    def sinks(self) -> list[IReportSink]:
        return list(self._sinks)

    def emit_report(self, data: str) -> None:
        for sink in self._sinks:
            sink.emit_report(data)

    def notice(self, message: str) -> None:
        for sink in self._sinks:
            sink.notice(message)
