from __future__ import annotations

import sqlite3
from pathlib import Path

from wheel_journal.ingest.trade_records import normalize_trade
from wheel_journal.models import Trade


class TradeNotFoundError(LookupError):
    def __init__(self, trade_id: str) -> None:
        super().__init__(f"Trade not found: {trade_id}")
        self.trade_id = trade_id


def connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def load_trades(conn: sqlite3.Connection) -> list[Trade]:
    rows = conn.execute(
        "SELECT * FROM trades ORDER BY trade_date DESC, created_at DESC"
    ).fetchall()
    return [normalize_trade(dict(row)) for row in rows]


def load_trade(conn: sqlite3.Connection, trade_id: str) -> Trade:
    row = conn.execute("SELECT * FROM trades WHERE id = ?", (trade_id,)).fetchone()
    if row is None:
        raise TradeNotFoundError(trade_id)
    return normalize_trade(dict(row))
