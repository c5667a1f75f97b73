"""Main entry point: run the SIM workload under the profiler for a few turns."""

import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from sim import Sim
from tickprof import (
    Application,
    FanoutReportSink,
    FileReportSink,
    IReportSink,
    MemoryReportSink,
    ProfilerSettings,
    Storage,
    TurnState,
    load_settings,
)
from tickprof.logging_config import get_logger, setup_logging

STATE_KEY = "profiler"

logger = get_logger(__name__)


def build_sink(settings: ProfilerSettings, memory: MemoryReportSink) -> IReportSink:
    """Memory sink for persistence, plus a file sink when report_dir is set."""
    if not settings.report_dir:
        return memory

    return FanoutReportSink([memory, FileReportSink(settings.report_dir)])


async def run(turns: int) -> None:
    """Run turns, persisting the turn state and every emitted report."""
    storage = Storage(os.getenv("DATABASE_URL"))
    await storage.init()

    try:
        state = await storage.get_turn_state(STATE_KEY) or TurnState()
        settings = load_settings()
        memory = MemoryReportSink()

        app = Application(
            settings=settings, state=state, sink=build_sink(settings, memory)
        )
        app.start()

        sim = Sim(app.instrumenter)
        sim.setup()

        for turn in range(turns):
            if turn == turns - 1:
                app.report()
            app.tick(sim.step)

            for data in memory.drain():
                report_id = await storage.save_report(data)
                logger.info("Trace report saved: %s", report_id)

        await storage.save_turn_state(STATE_KEY, app.state)
        app.stop()
    finally:
        await storage.close()


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    setup_logging(log_file=os.getenv("LOG_FILE"))

    turns = int(os.getenv("SIM_TURNS", "3"))
    asyncio.run(run(turns))


if __name__ == "__main__":
    main()
