"""Application bootstrap and turn driver."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Protocol, TypeVar

from .clock import IUsageClock, ProcessCpuClock, SimulatedClock
from .config import ProfilerSettings, load_settings
from .instrument import Instrumenter
from .logging_config import get_logger
from .models import TurnState
from .sinks import FileReportSink, IReportSink, LoggingReportSink
from .tracer import Tracer

logger = get_logger(__name__)

T = TypeVar("T")


class IApplication(Protocol):
    """Bootstrap and per-turn lifecycle."""

    def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    def stop(self) -> None:
        """Shutdown."""
        ...

    def tick(self, func: Callable[[], T]) -> T:
        """Run one traced turn."""
        ...


class Application:
    """Main application bootstrap: owns the tracer for the host's turn loop."""

    def __init__(
        self,
        settings: ProfilerSettings | None = None,
        state: TurnState | None = None,
        clock: IUsageClock | None = None,
        sink: IReportSink | None = None,
    ):
        self._settings = settings if settings is not None else load_settings()
        self._state = state if state is not None else TurnState()

        # Components (will be initialized in start())
        self._clock: IUsageClock | None = clock
        self._sink: IReportSink | None = sink
        self._tracer: Tracer | None = None
        self._instrumenter: Instrumenter | None = None

    def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting profiler")

        # 1. Clock (no dependencies)
        if self._clock is None:
            self._clock = self._build_clock()
        logger.info("Usage clock initialized: %s", type(self._clock).__name__)

        # 2. Sink (no dependencies)
        if self._sink is None:
            if self._settings.report_dir:
                self._sink = FileReportSink(self._settings.report_dir)
            else:
                self._sink = LoggingReportSink()
        logger.info("Report sink initialized: %s", type(self._sink).__name__)

        # 3. Tracer (depends on TurnState, Clock, Sink)
        if self._settings.long_tick_ratio is not None:
            self._state.long_tick_ratio = self._settings.long_tick_ratio
        if self._settings.panic_tick_ratio is not None:
            self._state.panic_tick_ratio = self._settings.panic_tick_ratio

        self._tracer = Tracer(
            self._state,
            self._clock,
            self._sink,
            turn_span_name=self._settings.turn_span_name,
        )

        # 4. Instrumenter (depends on Tracer)
        self._instrumenter = Instrumenter(self._tracer)
        logger.info("All components initialized successfully")

    def stop(self) -> None:
        """Shutdown (nothing to release)."""
        return

    def _build_clock(self) -> IUsageClock:
        settings = self._settings
        if settings.clock == "simulated":
            return SimulatedClock(settings.cpu_limit, settings.tick_limit)
        return ProcessCpuClock(settings.cpu_limit, settings.tick_limit)

    # --- Turn driver ---

    def tick(self, func: Callable[[], T]) -> T:
        """
        Run func as one traced turn.

        The turn is always closed, so per-turn flags are reset even when
        func raises; the exception then propagates to the caller.
        """
        tracer = self.tracer

        self.clock.reset_turn()
        tracer.begin_trace()
        try:
            return func()
        finally:
            tracer.end_trace()

    def report(self) -> None:
        """Emit the trace at the end of the current turn."""
        self.tracer.request_report()

    def panic(self) -> None:
        """Flush the trace now; at most once per turn."""
        self.tracer.panic_flush()

    def scope(
        self, name: str, args: dict[str, Any] | None = None
    ) -> AbstractContextManager[None]:
        return self.instrumenter.scope(name, args)

    def register_class(self, cls: type, name: str) -> type:
        return self.instrumenter.register_class(cls, name)

    def register_object(self, obj: Any, name: str) -> Any:
        return self.instrumenter.register_object(obj, name)

    # --- Components ---

    @property
    def settings(self) -> ProfilerSettings:
        return self._settings

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def clock(self) -> IUsageClock:
        """Get usage clock instance."""
        if not self._clock:
            raise RuntimeError("Application not started")
        return self._clock

    @property
    def sink(self) -> IReportSink:
        """Get report sink instance."""
        if not self._sink:
            raise RuntimeError("Application not started")
        return self._sink

    @property
    def tracer(self) -> Tracer:
        """Get tracer instance."""
        if not self._tracer:
            raise RuntimeError("Application not started")
        return self._tracer

    @property
    def instrumenter(self) -> Instrumenter:
        """Get instrumenter instance."""
        if not self._instrumenter:
            raise RuntimeError("Application not started")
        return self._instrumenter
