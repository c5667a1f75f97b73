"""Tracer module."""

from .tracer import EXCEEDED_NOTICE, PANIC_NOTICE, TIMESTAMP_SCALE, ITracer, Tracer

__all__ = ["EXCEEDED_NOTICE", "PANIC_NOTICE", "TIMESTAMP_SCALE", "ITracer", "Tracer"]
