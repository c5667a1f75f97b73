"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from tickprof.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def clock():
    """Manual clock with a 1000 ms budget, reading 0."""
    from tickprof.clock import ManualClock

    return ManualClock(limit=1000)


@pytest.fixture
def sink():
    """Report sink that keeps everything in memory."""
    from tickprof.sinks import MemoryReportSink

    return MemoryReportSink()


@pytest.fixture
def state():
    """Fresh turn state record."""
    from tickprof.models import TurnState

    return TurnState()


@pytest.fixture
def tracer(state, clock, sink):
    """Create Tracer over the manual clock and memory sink."""
    from tickprof.tracer import Tracer

    return Tracer(state, clock, sink)


@pytest.fixture
def instrumenter(tracer):
    """Create Instrumenter bound to the tracer."""
    from tickprof.instrument import Instrumenter

    return Instrumenter(tracer)


@pytest.fixture
def event_names(tracer):
    """Callable giving (name, phase) pairs of the tracer's buffer, in order."""

    def names():
        return [(e.name, e.phase.value) for e in tracer.state.events]

    return names
