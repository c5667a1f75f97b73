"""SQLite storage for persisted turn state and emitted trace reports."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import TraceReport, TurnState


class IStorage(Protocol):
    """Persistent storage for turn state across process runs (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # TurnState
    async def save_turn_state(self, key: str, state: TurnState) -> None:
        """Save a turn state record under key."""
        ...

    async def get_turn_state(self, key: str) -> TurnState | None:
        """Get the turn state record stored under key."""
        ...

    # Reports
    async def save_report(self, report: TraceReport | str) -> str:
        """Save an emitted report, return its ID."""
        ...

    async def get_reports(self, limit: int = 100) -> list[TraceReport]:
        """Get reports (newest first)."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    # TurnState
    async def save_turn_state(self, key: str, state: TurnState) -> None:
        """Save a turn state record under key."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO turn_states (key, data, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            """,
            (key, json.dumps(state.to_dict())),
        )
        await self._conn.commit()

    async def get_turn_state(self, key: str) -> TurnState | None:
        """Get the turn state record stored under key."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT data
            FROM turn_states
            WHERE key = ?
            """,
            (key,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return TurnState.from_dict(json.loads(row[0]))

    # Reports
    async def save_report(self, report: TraceReport | str) -> str:
        """Save an emitted report (object or serialized JSON), return its ID."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        if isinstance(report, str):
            report = TraceReport.from_json(report)

        report_id = str(uuid.uuid4())
        await self._conn.execute(
            """
            INSERT INTO trace_reports (id, data, event_count, timestamp)
            VALUES (?, ?, ?, ?)
            """,
            (
                report_id,
                report.to_json(),
                len(report.trace_events),
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        await self._conn.commit()
        return report_id

    async def get_reports(self, limit: int = 100) -> list[TraceReport]:
        """Get reports (newest first)."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT data
            FROM trace_reports
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = await cursor.fetchall()

        return [TraceReport.from_json(row[0]) for row in rows]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        for table in ["turn_states", "trace_reports"]:
            await self._conn.execute(f"DELETE FROM {table}")

        await self._conn.commit()
