"""Tests for the main entry point."""

import json

import pytest

from main import build_sink, run
from tickprof.config import SETTINGS_ENV, ProfilerSettings
from tickprof.sinks import FanoutReportSink, FileReportSink, MemoryReportSink


@pytest.fixture
def clean_env(monkeypatch):
    """No profiler settings leaking in from the outer environment."""
    for env_name in SETTINGS_ENV:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv("DATABASE_URL", ":memory:")
    monkeypatch.setenv("PROFILER_CLOCK", "simulated")
    return monkeypatch


class TestBuildSink:
    """Tests for build_sink()."""

    def test_memory_only_without_report_dir(self):
        """Test reports stay in memory when no directory is configured."""
        memory = MemoryReportSink()

        assert build_sink(ProfilerSettings(), memory) is memory

    def test_file_sink_added_with_report_dir(self, tmp_path):
        """Test a report directory adds a file sink next to the memory one."""
        memory = MemoryReportSink()
        sink = build_sink(ProfilerSettings(report_dir=str(tmp_path)), memory)

        assert isinstance(sink, FanoutReportSink)
        assert sink.sinks[0] is memory
        assert isinstance(sink.sinks[1], FileReportSink)


class TestRun:
    """Tests for run()."""

    async def test_report_dir_receives_trace(self, clean_env, tmp_path):
        """Test the final turn's report is written to PROFILER_REPORT_DIR."""
        clean_env.setenv("PROFILER_REPORT_DIR", str(tmp_path))

        await run(1)

        files = list(tmp_path.glob("trace_*.json"))
        assert len(files) == 1
        payload = json.loads(files[0].read_text(encoding="utf-8"))
        assert payload["traceEvents"][0]["name"] == "Frame"

    async def test_no_files_without_report_dir(self, clean_env, tmp_path):
        """Test nothing is written to disk when no directory is set."""
        clean_env.chdir(tmp_path)

        await run(1)

        assert list(tmp_path.iterdir()) == []
