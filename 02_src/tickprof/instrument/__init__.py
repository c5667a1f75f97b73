"""Instrumentation module."""

from .wrapper import DEFAULT_DENYLIST, Instrumenter

__all__ = ["DEFAULT_DENYLIST", "Instrumenter"]
