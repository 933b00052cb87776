"""SQLite-based trade data store: HS code descriptions and monthly trade stats."""

import sqlite3
import threading
from collections.abc import Iterable
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional, Union

from hts_app.config.defaults import StoreParams
from hts_app.data.models import TimeWindow, TradeDirection
from hts_app.errors import StoreUnavailableError
from hts_app.logging import get_logger


class TradeStore:
    """
    Read access to recorded trade data, plus seeding helpers.

    Tables:
        hs_codes(id, hs_code_description)
        trade_stats(id, hs_code_id, trade_flow, year_val, month_val, value, volume)
    """

    def __init__(self, params: Optional[StoreParams] = None, create_schema: bool = True):
        """
        Raises:
            StoreUnavailableError: If the schema cannot be created
        """
        self.params = params or StoreParams()
        self.db_path = Path(self.params.db_path)
        self.logger = get_logger("trade.store")
        self._lock = threading.Lock()

        if create_schema:
            try:
                self._init_database()
            except sqlite3.Error as e:
                raise StoreUnavailableError(
                    f"Failed to initialize trade database at {self.db_path}: {e}",
                    operation="init_schema",
                    target=str(self.db_path)
                ) from e

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS hs_codes (
                    id TEXT PRIMARY KEY,
                    hs_code_description TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS trade_stats (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    hs_code_id TEXT NOT NULL,
                    trade_flow TEXT NOT NULL,
                    year_val INTEGER,
                    month_val INTEGER,
                    value REAL,
                    volume REAL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_trade_stats_code_flow
                ON trade_stats(hs_code_id, trade_flow, year_val, month_val)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.params.timeout_seconds)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise
        finally:
            if conn:
                conn.close()

    def get_description(self, code: str) -> Optional[str]:
        """
        Read the description recorded for an HS code.

        Returns:
            The stored description (possibly empty), or None if no row exists

        Raises:
            StoreUnavailableError: If the query fails
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT hs_code_description FROM hs_codes WHERE id = ?",
                    (code,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailableError(
                f"Failed to read description for {code}: {e}",
                operation="get_description",
                target="hs_codes"
            ) from e

        if row is None:
            return None
        return row["hs_code_description"]

    def fetch_observations(
        self,
        code: str,
        direction: Union[str, TradeDirection],
        window: TimeWindow
    ) -> list[dict[str, Any]]:
        """
        Fetch raw trade observation rows ordered by (year, month).

        Args:
            code: HS code
            direction: Trade flow, "Import" or "Export"
            window: Lower year bound; unbounded when start_year <= 0

        Returns:
            Rows with keys year, month, value, volume, direction, code.
            Values are returned as stored and may be malformed.

        Raises:
            StoreUnavailableError: If the query fails
        """
        flow = direction.value if isinstance(direction, TradeDirection) else direction

        query = """
            SELECT year_val, month_val, value, volume, trade_flow, hs_code_id
            FROM trade_stats
            WHERE hs_code_id = ? AND trade_flow = ?
        """
        params: list[Any] = [code, flow]

        if window.is_bounded:
            query += " AND year_val >= ?"
            params.append(window.start_year)

        query += " ORDER BY year_val ASC, month_val ASC"

        try:
            with self._get_connection() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(
                f"Failed to fetch trade statistics for {code}: {e}",
                operation="fetch_observations",
                target="trade_stats"
            ) from e

        self.logger.debug(
            "Fetched trade observations",
            code=code,
            direction=flow,
            start_year=window.start_year,
            row_count=len(rows)
        )

        return [self._row_to_observation(row) for row in rows]

    def upsert_description(self, code: str, description: Optional[str]) -> None:
        """Insert or replace the description for an HS code."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO hs_codes (id, hs_code_description) VALUES (?, ?)",
                    (code, description)
                )
                conn.commit()

    def insert_observations(self, rows: Iterable[dict[str, Any]]) -> int:
        """
        Insert observation rows (keys as returned by fetch_observations).

        Returns:
            Number of rows inserted
        """
        values = [
            (
                row.get("code"),
                row["direction"].value if isinstance(row.get("direction"), TradeDirection)
                else row.get("direction"),
                row.get("year"),
                row.get("month"),
                row.get("value"),
                row.get("volume"),
            )
            for row in rows
        ]

        with self._lock:
            with self._get_connection() as conn:
                conn.executemany("""
                    INSERT INTO trade_stats (
                        hs_code_id, trade_flow, year_val, month_val, value, volume
                    ) VALUES (?, ?, ?, ?, ?, ?)
                """, values)
                conn.commit()

        self.logger.info("Trade observations stored", count=len(values))
        return len(values)

    def _row_to_observation(self, row: sqlite3.Row) -> dict[str, Any]:
        """Convert database row to the raw observation mapping."""
        return {
            "year": row["year_val"],
            "month": row["month_val"],
            "value": row["value"],
            "volume": row["volume"],
            "direction": row["trade_flow"],
            "code": row["hs_code_id"],
        }
