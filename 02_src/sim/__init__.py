"""SIM module."""

from .sim import ISim, Sim, build_types

__all__ = ["ISim", "Sim", "build_types"]
