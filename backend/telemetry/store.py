from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import duckdb

from telemetry.sql import CREATE_PHASES_TABLE_SQL, INSERT_PHASES_SQL, SUMMARY_SQL_TEMPLATE
from telemetry.timers import TimingObserver


def _safe_float(v) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


@dataclass
class TelemetryStore:
    """
    DuckDB-backed log of build phase timings.

    Writes go through a queue drained by a single writer thread, so recording never
    blocks a pyramid build on disk I/O.
    """

    path: Path
    conn: duckdb.DuckDBPyConnection
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _q: "queue.Queue[tuple[Any, ...]]" = field(default_factory=queue.Queue, repr=False)
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _worker: threading.Thread | None = field(default=None, repr=False)

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(CREATE_PHASES_TABLE_SQL)

    def start(self) -> None:
        if self._worker is not None:
            return
        self._stop.clear()
        self._worker = threading.Thread(
            target=self._run, name="telemetry-writer", daemon=True
        )
        self._worker.start()

    def stop(self, *, timeout_s: float = 2.0) -> None:
        """
        Stop the writer thread; everything queued so far is written before it exits.
        """
        self._stop.set()
        w = self._worker
        if w is not None and w.is_alive():
            w.join(timeout=timeout_s)
        self._worker = None

    def flush(self, *, timeout_s: float = 2.0) -> None:
        # The writer drains the queue on exit; the next `record_phase` restarts it.
        self.stop(timeout_s=timeout_s)

    def record_phase(
        self, *, scenario: str, phase: str, elapsed_ms: float, suffix: str = ""
    ) -> None:
        self.start()
        self._q.put_nowait(
            (int(time.time() * 1000), str(scenario), str(phase), str(suffix), float(elapsed_ms))
        )

    def query(self, sql: str, params: list[Any] | None = None) -> list[tuple]:
        with self._lock:
            if params:
                return self.conn.execute(sql, params).fetchall()
            return self.conn.execute(sql).fetchall()

    def summary(self, *, scenario: str | None = None) -> list[dict[str, Any]]:
        where_sql = "WHERE scenario = ?" if scenario else ""
        params = [scenario] if scenario else None
        rows = self.query(SUMMARY_SQL_TEMPLATE.format(where_sql=where_sql), params)

        out: list[dict[str, Any]] = []
        for scenario_v, phase, n, avg_ms, p50, max_ms in rows:
            out.append(
                {
                    "scenario": scenario_v,
                    "phase": phase,
                    "n": int(n),
                    "avgMs": _safe_float(avg_ms),
                    "p50Ms": _safe_float(p50),
                    "maxMs": _safe_float(max_ms),
                }
            )
        return out

    def reset(self) -> None:
        # Stop the writer first so it can't write to a closed connection.
        self.stop(timeout_s=2.0)
        with self._lock:
            self.conn.close()
            self.path.unlink(missing_ok=True)

    def _run(self) -> None:
        batch: list[tuple[Any, ...]] = []
        last_flush = time.time()

        def flush_batch() -> None:
            nonlocal batch
            if not batch:
                return
            with self._lock:
                self.conn.executemany(INSERT_PHASES_SQL, batch)
            batch = []

        while not self._stop.is_set():
            try:
                batch.append(self._q.get(timeout=0.1))
                self._q.task_done()
            except queue.Empty:
                pass

            # Flush on size or time.
            now = time.time()
            if len(batch) >= 250 or (batch and (now - last_flush) >= 0.5):
                flush_batch()
                last_flush = now

        # Drain remaining
        while True:
            try:
                batch.append(self._q.get_nowait())
                self._q.task_done()
            except queue.Empty:
                break
        flush_batch()


class TelemetryObserver(TimingObserver):
    """
    Phase observer that records every finished phase for one scenario.
    """

    def __init__(self, store: TelemetryStore, scenario: str) -> None:
        super().__init__()
        self.store = store
        self.scenario = scenario

    def finished(self, phase: str, elapsed_ms: float, suffix: str) -> None:
        self.store.record_phase(
            scenario=self.scenario, phase=phase, elapsed_ms=elapsed_ms, suffix=suffix
        )
