"""Project-level configuration, path helpers and profiler settings."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
DEFAULT_DB_PATH = DATA_DIR / "tickprof.db"

DEFAULT_TURN_SPAN = "Frame"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


class ProfilerSettings(BaseModel):
    """Tracer and clock settings."""

    clock: Literal["process", "simulated"] = "process"
    cpu_limit: float = Field(100.0, gt=0, description="Normal turn budget, ms")
    tick_limit: float | None = Field(None, gt=0, description="Hard turn budget, ms")
    long_tick_ratio: float | None = Field(None, gt=0)
    panic_tick_ratio: float | None = Field(None, gt=0)
    turn_span_name: str = Field(DEFAULT_TURN_SPAN, min_length=1)
    report_dir: str | None = None


# env var -> ProfilerSettings field
SETTINGS_ENV = {
    "PROFILER_CLOCK": "clock",
    "PROFILER_CPU_LIMIT": "cpu_limit",
    "PROFILER_TICK_LIMIT": "tick_limit",
    "PROFILER_LONG_TICK_RATIO": "long_tick_ratio",
    "PROFILER_PANIC_TICK_RATIO": "panic_tick_ratio",
    "PROFILER_TURN_SPAN": "turn_span_name",
    "PROFILER_REPORT_DIR": "report_dir",
}


def load_settings(env: Mapping[str, str] | None = None) -> ProfilerSettings:
    """
    Build ProfilerSettings from environment variables.

    Args:
        env: Mapping to read from. Defaults to os.environ.

    Raises:
        pydantic.ValidationError: If a value is out of range or malformed.
    """
    if env is None:
        env = os.environ

    values = {}
    for env_name, field_name in SETTINGS_ENV.items():
        raw = env.get(env_name)
        if raw is None or raw.strip() == "":
            continue
        values[field_name] = raw.strip()

    return ProfilerSettings(**values)
