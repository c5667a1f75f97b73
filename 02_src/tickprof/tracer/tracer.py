"""Tracer: span buffer, enable scopes and report flushing for one turn at a time."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from ..clock import IUsageClock
from ..config import DEFAULT_TURN_SPAN
from ..models import Phase, SpanEvent, TraceReport, TurnState
from ..sinks import IReportSink

TIMESTAMP_SCALE = 1000

EXCEEDED_NOTICE = "Exceeded normal tick limit - dumping trace."
PANIC_NOTICE = "Panic flushing"


class ITracer(Protocol):
    """Records begin/end spans against the usage clock and emits reports."""

    @property
    def clock(self) -> IUsageClock:
        """Usage clock shared with instrumentation."""
        ...

    @property
    def panic_tick_ratio(self) -> float | None:
        """Fraction of the hard budget that triggers an emergency flush."""
        ...

    def enabled(self) -> bool:
        """Whether spans should be recorded right now."""
        ...

    def begin_event(
        self, name: str, timestamp: float, args: dict[str, Any] | None = None
    ) -> None:
        """Append a Begin span."""
        ...

    def end_event(
        self, name: str, timestamp: float, args: dict[str, Any] | None = None
    ) -> None:
        """Append an End span."""
        ...

    def panic_flush(self) -> None:
        """Emergency flush, at most once per turn."""
        ...


class Tracer:
    """
    Per-process tracer bound to a host-persisted TurnState.

    Tracing is active while at least one enabled scope is open, no disabled
    scope is open and no emergency flush has fired this turn. Scope push/pop
    calls are not balanced or bounds-checked; the context managers
    enabled_scope() and disabled_scope() always pop.
    """

    def __init__(
        self,
        state: TurnState,
        clock: IUsageClock,
        sink: IReportSink,
        turn_span_name: str = DEFAULT_TURN_SPAN,
    ):
        self._state = state
        self._clock = clock
        self._sink = sink
        self._turn_span_name = turn_span_name

        self._enabled_count = 0
        self._disabled_count = 0
        self._report_at_end = False
        self._panicked = False

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def clock(self) -> IUsageClock:
        return self._clock

    @property
    def sink(self) -> IReportSink:
        return self._sink

    @property
    def turn_span_name(self) -> str:
        return self._turn_span_name

    @property
    def panicked(self) -> bool:
        return self._panicked

    @property
    def report_requested(self) -> bool:
        return self._report_at_end

    @property
    def long_tick_ratio(self) -> float | None:
        return self._state.long_tick_ratio

    @long_tick_ratio.setter
    def long_tick_ratio(self, value: float | None) -> None:
        self._state.long_tick_ratio = value

    @property
    def panic_tick_ratio(self) -> float | None:
        return self._state.panic_tick_ratio

    @panic_tick_ratio.setter
    def panic_tick_ratio(self, value: float | None) -> None:
        self._state.panic_tick_ratio = value

    # --- Scopes ---

    def enabled(self) -> bool:
        return (
            not self._panicked
            and self._enabled_count > 0
            and self._disabled_count == 0
        )

    def push_enabled(self) -> None:
        self._enabled_count += 1

    def pop_enabled(self) -> None:
        self._enabled_count -= 1

    def push_disabled(self) -> None:
        self._disabled_count += 1

    def pop_disabled(self) -> None:
        self._disabled_count -= 1

    @contextmanager
    def enabled_scope(self) -> Iterator[None]:
        """Open an enabled scope for the duration of the block."""
        self.push_enabled()
        try:
            yield
        finally:
            self.pop_enabled()

    @contextmanager
    def disabled_scope(self) -> Iterator[None]:
        """Suppress tracing for the duration of the block."""
        self.push_disabled()
        try:
            yield
        finally:
            self.pop_disabled()

    # --- Events ---

    def begin_event(
        self, name: str, timestamp: float, args: dict[str, Any] | None = None
    ) -> None:
        self._append(name, Phase.BEGIN, timestamp, args)

    def end_event(
        self, name: str, timestamp: float, args: dict[str, Any] | None = None
    ) -> None:
        self._append(name, Phase.END, timestamp, args)

    def _append(
        self, name: str, phase: Phase, timestamp: float, args: dict[str, Any] | None
    ) -> None:
        self._state.events.append(
            SpanEvent(
                name=name,
                phase=phase,
                timestamp=timestamp * TIMESTAMP_SCALE,
                args=args,
            )
        )

    # --- Turn lifecycle ---

    def begin_trace(self) -> None:
        """Start a turn: reset scopes, replace the buffer, open the turn span."""
        self._enabled_count = 0
        self._disabled_count = 0

        self._state.started = True
        self._state.completed = False
        self._state.events = []

        self.push_enabled()

        self.begin_event(self._turn_span_name, self._clock.get_used())

    def end_trace(self) -> None:
        """Close the turn span and flush if requested or the turn ran long."""
        self.end_event(self._turn_span_name, self._clock.get_used())

        self.pop_enabled()

        self._panicked = False

        self._state.started = False
        self._state.completed = False

        long_tick_ratio = self.long_tick_ratio
        exceeded = (
            long_tick_ratio is not None
            and self._clock.get_used() >= self._clock.limit * long_tick_ratio
        )

        if self._report_at_end or exceeded:
            self._report_at_end = False

            if exceeded:
                self._sink.notice(EXCEEDED_NOTICE)

            self.flush()

    def request_report(self) -> None:
        """Emit the trace when the current turn ends."""
        self._report_at_end = True

    def panic_flush(self) -> None:
        if self._panicked:
            return

        self._panicked = True
        self._sink.notice(PANIC_NOTICE)
        self.flush()

    def flush(self) -> TraceReport:
        """Emit a copy of the current buffer; the buffer itself is kept."""
        report = TraceReport(trace_events=list(self._state.events))
        self._sink.emit_report(report.to_json())
        return report
