"""Trace data models: span events, reports and persisted turn state."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_CATEGORY = "Function"


class Phase(str, Enum):
    """Span event phases (flame-chart trace format)."""

    BEGIN = "B"
    END = "E"


def _json_number(value: float) -> int | float:
    """Integral floats serialize as JSON integers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class SpanEvent:
    """A single begin or end marker for a traced unit of work."""

    name: str
    phase: Phase
    timestamp: float  # usage clock reading x1000
    category: str = DEFAULT_CATEGORY
    pid: int = 0
    tid: int = 0
    args: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the trace event shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "cat": self.category,
            "ph": self.phase.value,
            "ts": _json_number(self.timestamp),
            "pid": self.pid,
            "tid": self.tid,
        }
        if self.args is not None:
            data["args"] = self.args
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpanEvent":
        """Rebuild a SpanEvent from its serialized shape."""
        return cls(
            name=data["name"],
            phase=Phase(data["ph"]),
            timestamp=data["ts"],
            category=data.get("cat", DEFAULT_CATEGORY),
            pid=data.get("pid", 0),
            tid=data.get("tid", 0),
            args=data.get("args"),
        )


@dataclass
class TraceReport:
    """Snapshot of a turn's span buffer, ready for emission."""

    trace_events: list[SpanEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"traceEvents": [event.to_dict() for event in self.trace_events]}

    def to_json(self) -> str:
        """Compact JSON, same bytes as the viewers expect."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, data: str) -> "TraceReport":
        payload = json.loads(data)
        return cls(
            trace_events=[
                SpanEvent.from_dict(item) for item in payload.get("traceEvents", [])
            ]
        )


@dataclass
class TurnState:
    """Record persisted across turns by the host, owned by the Tracer mid-turn."""

    started: bool = False
    completed: bool = False
    long_tick_ratio: float | None = None
    panic_tick_ratio: float | None = None
    events: list[SpanEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted memory keys."""
        data: dict[str, Any] = {
            "started": self.started,
            "completed": self.completed,
        }
        if self.long_tick_ratio is not None:
            data["longTickRatio"] = self.long_tick_ratio
        if self.panic_tick_ratio is not None:
            data["panicTickRatio"] = self.panic_tick_ratio
        data["traceEvents"] = [event.to_dict() for event in self.events]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "TurnState":
        """Rebuild from a persisted record; an empty record gives a fresh state."""
        if not data:
            return cls()

        return cls(
            started=bool(data.get("started", False)),
            completed=bool(data.get("completed", False)),
            long_tick_ratio=data.get("longTickRatio"),
            panic_tick_ratio=data.get("panicTickRatio"),
            events=[SpanEvent.from_dict(item) for item in data.get("traceEvents", [])],
        )
