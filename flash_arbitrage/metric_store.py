"""
Append-only metric store backing the daily-loss aggregate.

Values are wei amounts and can exceed SQLite's 64-bit INTEGER range, so the
sqlite backend stores them as TEXT and sums them in Python.
"""

import sqlite3
import threading
import time
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Protocol, Tuple, Union

from .utils import get_logger

logger = get_logger(__name__)


class MetricStore(Protocol):
    def save_metric(self, name: str, value: int) -> None: ...

    def get_metrics_summary(self) -> Dict[str, int]: ...


class InMemoryMetricStore:
    """Process-local store; the default when nothing is persisted."""

    def __init__(self):
        self._rows: List[Tuple[str, int, float]] = []
        self._lock = threading.Lock()

    def save_metric(self, name: str, value: int) -> None:
        with self._lock:
            self._rows.append((name, int(value), time.time()))

    def get_metrics_summary(self) -> Dict[str, int]:
        totals: Dict[str, int] = defaultdict(int)
        with self._lock:
            for name, value, _ in self._rows:
                totals[name] += value
        return dict(totals)


class SqliteMetricStore:
    """SQLite-backed store; one connection per call."""

    def __init__(self, db_path: Union[str, Path] = "flash_arb_metrics.db"):
        self.db_path = str(db_path)
        self._lock = threading.Lock()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS metrics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    value TEXT NOT NULL,
                    timestamp REAL NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_metrics_name ON metrics(name)")
            conn.commit()
        finally:
            conn.close()

    def save_metric(self, name: str, value: int) -> None:
        with self._lock:
            conn = self._connect()
            try:
                conn.execute(
                    "INSERT INTO metrics (name, value, timestamp) VALUES (?, ?, ?)",
                    (name, str(int(value)), time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        logger.debug(f"Saved metric {name}={value}")

    def get_metrics_summary(self) -> Dict[str, int]:
        conn = self._connect()
        try:
            cursor = conn.execute("SELECT name, value FROM metrics")
            rows = cursor.fetchall()
        finally:
            conn.close()

        totals: Dict[str, int] = defaultdict(int)
        for name, value in rows:
            totals[name] += int(value)
        return dict(totals)
