"""Tests for data models."""

import json

from tickprof.models import Phase, SpanEvent, TraceReport, TurnState


class TestSpanEvent:
    """Tests for SpanEvent model."""

    def test_defaults(self):
        """Test placeholder fields default to the fixed values."""
        event = SpanEvent(name="f", phase=Phase.BEGIN, timestamp=10)
        assert event.category == "Function"
        assert event.pid == 0
        assert event.tid == 0
        assert event.args is None

    def test_to_dict_key_order(self):
        """Test serialized keys follow the trace format order."""
        event = SpanEvent(name="f", phase=Phase.END, timestamp=1500)
        assert list(event.to_dict()) == ["name", "cat", "ph", "ts", "pid", "tid"]

    def test_to_dict_omits_missing_args(self):
        """Test args only appear when present."""
        bare = SpanEvent(name="f", phase=Phase.BEGIN, timestamp=0)
        annotated = SpanEvent(
            name="f", phase=Phase.BEGIN, timestamp=0, args={"turn": 3}
        )

        assert "args" not in bare.to_dict()
        assert annotated.to_dict()["args"] == {"turn": 3}

    def test_integral_float_timestamp_serializes_as_int(self):
        """Test 10000.0 is written as 10000."""
        event = SpanEvent(name="f", phase=Phase.BEGIN, timestamp=10000.0)
        data = event.to_dict()
        assert data["ts"] == 10000
        assert isinstance(data["ts"], int)

    def test_fractional_timestamp_kept(self):
        """Test fractional timestamps are not rounded."""
        event = SpanEvent(name="f", phase=Phase.BEGIN, timestamp=1.5)
        assert event.to_dict()["ts"] == 1.5

    def test_from_dict(self):
        """Test rebuilding from serialized shape."""
        event = SpanEvent.from_dict(
            {"name": "Frame", "cat": "Function", "ph": "E", "ts": 42, "pid": 0, "tid": 0}
        )
        assert event.name == "Frame"
        assert event.phase is Phase.END
        assert event.timestamp == 42


class TestTraceReport:
    """Tests for TraceReport model."""

    def test_to_json_is_compact(self):
        """Test report JSON matches the expected bytes."""
        report = TraceReport(
            trace_events=[
                SpanEvent(name="Frame", phase=Phase.BEGIN, timestamp=0.0),
                SpanEvent(name="Frame", phase=Phase.END, timestamp=2000),
            ]
        )

        assert report.to_json() == (
            '{"traceEvents":['
            '{"name":"Frame","cat":"Function","ph":"B","ts":0,"pid":0,"tid":0},'
            '{"name":"Frame","cat":"Function","ph":"E","ts":2000,"pid":0,"tid":0}'
            "]}"
        )

    def test_empty_report(self):
        """Test an empty buffer still yields a traceEvents list."""
        assert TraceReport().to_json() == '{"traceEvents":[]}'

    def test_from_json(self):
        """Test parsing a serialized report."""
        data = json.dumps(
            {"traceEvents": [{"name": "f", "cat": "Function", "ph": "B", "ts": 5, "pid": 0, "tid": 0}]}
        )
        report = TraceReport.from_json(data)
        assert len(report.trace_events) == 1
        assert report.trace_events[0].name == "f"


class TestTurnState:
    """Tests for TurnState model."""

    def test_defaults(self):
        """Test a fresh state."""
        state = TurnState()
        assert state.started is False
        assert state.completed is False
        assert state.long_tick_ratio is None
        assert state.panic_tick_ratio is None
        assert state.events == []

    def test_to_dict_uses_memory_keys(self):
        """Test persisted keys and omitted ratios."""
        state = TurnState(started=True, long_tick_ratio=0.8)
        data = state.to_dict()

        assert data == {
            "started": True,
            "completed": False,
            "longTickRatio": 0.8,
            "traceEvents": [],
        }

    def test_from_empty_record(self):
        """Test an empty persisted record gives a fresh state."""
        assert TurnState.from_dict({}) == TurnState()
        assert TurnState.from_dict(None) == TurnState()

    def test_from_dict_restores_events(self):
        """Test ratios and events are restored."""
        state = TurnState(
            panic_tick_ratio=0.9,
            events=[SpanEvent(name="Frame", phase=Phase.BEGIN, timestamp=3000)],
        )

        restored = TurnState.from_dict(state.to_dict())
        assert restored.panic_tick_ratio == 0.9
        assert restored.long_tick_ratio is None
        assert restored.events[0].name == "Frame"
        assert restored.events[0].phase is Phase.BEGIN
