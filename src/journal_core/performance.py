"""Execution timing for async operations, with an optional CSV ledger.

Timing is active only in development mode; every other mode passes the
operation straight through.

Usage:
    timer = ExecutionTimer(PerfConfig.from_env(), CsvLedger())
    notes = await timer.measure("fetchNotes", lambda: fetch_notes(user_id))
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Protocol, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")

PERFORMANCE_LOG_PATH = Path("performance_log.csv")

ENV_MODE = "JOURNAL_ENV"
ENV_CSV = "LOG_PERF_TO_CSV"

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


class Mode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


@dataclass(frozen=True)
class PerfConfig:
    mode: Mode = Mode.PRODUCTION
    csv_logging: bool = False

    @property
    def enabled(self) -> bool:
        return self.mode is Mode.DEVELOPMENT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PerfConfig:
        """Read JOURNAL_ENV and LOG_PERF_TO_CSV.

        Unknown modes count as production. CSV logging is on only for "true".
        """
        env = os.environ if environ is None else environ
        try:
            mode = Mode(env.get(ENV_MODE, Mode.PRODUCTION.value).strip().lower())
        except ValueError:
            mode = Mode.PRODUCTION
        return cls(mode=mode, csv_logging=env.get(ENV_CSV) == "true")


@dataclass(frozen=True)
class ExecutionRecord:
    """Outcome of one measured call."""

    timestamp: str
    function_name: str
    duration_ms: float
    status: str

    def as_row(self) -> dict[str, str | float]:
        """Ledger columns, in header order."""
        return {
            "timestamp": self.timestamp,
            "functionName": self.function_name,
            "duration_ms": self.duration_ms,
            "status": self.status,
        }


class LedgerWriter(Protocol):
    def append(self, record: ExecutionRecord) -> None: ...


class CsvLedger:
    """Append-only CSV file of execution records.

    The header is taken from the first record written to a new file. Values
    are joined with commas as-is; embedded commas or newlines are not escaped.
    Write errors are logged and dropped.
    """

    def __init__(self, path: Path | str = PERFORMANCE_LOG_PATH) -> None:
        self.path = Path(path)

    def append(self, record: ExecutionRecord) -> None:
        row = record.as_row()
        line = ",".join(str(value) for value in row.values()) + "\n"
        try:
            if not self.path.exists():
                with open(self.path, "w", encoding="utf-8") as f:
                    f.write(",".join(row) + "\n")
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as exc:
            log.error("failed to write performance log to %s: %s", self.path, exc)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ExecutionTimer:
    """Measures async operations and reports each one as an ExecutionRecord."""

    def __init__(
        self,
        config: PerfConfig | None = None,
        ledger: LedgerWriter | None = None,
    ) -> None:
        self.config = config or PerfConfig()
        self._ledger = ledger if ledger is not None else CsvLedger()

    async def measure(self, label: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Await *operation()* and return its result.

        In development mode the elapsed time is logged, and recorded in the
        ledger when CSV logging is on. Failures are logged and re-raised
        unchanged. Cancellation is recorded as a failure but logged as a
        warning.
        """
        if not self.config.enabled:
            return await operation()
        if not label:
            raise ValueError("label must not be empty")

        start = time.perf_counter()
        try:
            result = await operation()
        except asyncio.CancelledError:
            duration = round((time.perf_counter() - start) * 1000, 2)
            log.warning("[PERF] %s CANCELLED after %s ms", label, duration)
            self._record(label, duration, STATUS_FAILURE)
            raise
        except Exception as exc:
            duration = round((time.perf_counter() - start) * 1000, 2)
            log.error("[PERF] %s FAILED after %s ms: %s", label, duration, exc)
            self._record(label, duration, STATUS_FAILURE)
            raise

        duration = round((time.perf_counter() - start) * 1000, 2)
        log.info("[PERF] %s took %s ms", label, duration)
        self._record(label, duration, STATUS_SUCCESS)
        return result

    def _record(self, label: str, duration: float, status: str) -> None:
        if not self.config.csv_logging:
            return
        record = ExecutionRecord(
            timestamp=_utc_timestamp(),
            function_name=label,
            duration_ms=duration,
            status=status,
        )
        try:
            self._ledger.append(record)
        except Exception:
            log.exception("ledger append failed for %s", label)
