"""Core data models for tickprof."""

from .trace import DEFAULT_CATEGORY, Phase, SpanEvent, TraceReport, TurnState

__all__ = [
    "DEFAULT_CATEGORY",
    "Phase",
    "SpanEvent",
    "TraceReport",
    "TurnState",
]
