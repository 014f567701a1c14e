from __future__ import annotations

import sqlite3
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping
from uuid import uuid4

from wheel_journal.ingest.trade_records import (
    FIELD_ALIASES,
    ensure_valid,
    normalize_trade,
    storage_row,
    trade_payload,
)
from wheel_journal.models import Trade
from wheel_journal.storage.sqlite_reader import load_trade


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS trades (
            id TEXT PRIMARY KEY,
            stock TEXT NOT NULL,
            strategy TEXT NOT NULL,
            strike_price REAL,
            premium REAL,
            quantity INTEGER NOT NULL,
            expiry TEXT,
            trade_date TEXT,
            status TEXT NOT NULL,
            entry_price REAL,
            exit_price REAL,
            notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def insert_trade(conn: sqlite3.Connection, raw: Mapping[str, Any] | Trade) -> Trade:
    # Identity is always assigned by the store on creation.
    trade = ensure_valid(replace(normalize_trade(raw), trade_id=str(uuid4())))
    _write(conn, [trade])
    conn.commit()
    return load_trade(conn, trade.trade_id)


def update_trade(
    conn: sqlite3.Connection, trade_id: str, changes: Mapping[str, Any]
) -> Trade:
    current = load_trade(conn, trade_id)
    merged = trade_payload(current)
    for key, value in changes.items():
        if key in ("id", "trade_id"):
            continue
        merged[key] = value
        # An edit sent under either spelling replaces both.
        _drop_alias(merged, key)
    trade = ensure_valid(normalize_trade(merged))
    _write(conn, [trade])
    conn.commit()
    return load_trade(conn, trade_id)


def delete_trade(conn: sqlite3.Connection, trade_id: str) -> bool:
    cursor = conn.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
    conn.commit()
    return cursor.rowcount > 0


def upsert_trades(conn: sqlite3.Connection, trades: Iterable[Trade]) -> int:
    rows = []
    for trade in trades:
        trade = normalize_trade(trade)
        if trade.trade_id is None:
            trade = replace(trade, trade_id=str(uuid4()))
        rows.append(ensure_valid(trade))
    _write(conn, rows)
    conn.commit()
    return len(rows)


def _write(conn: sqlite3.Connection, trades: list[Trade]) -> None:
    conn.executemany(
        """
        INSERT INTO trades (
            id, stock, strategy, strike_price, premium, quantity, expiry, trade_date, status,
            entry_price, exit_price, notes, created_at, updated_at
        )
        VALUES (
            :id, :stock, :strategy, :strike_price, :premium, :quantity, :expiry, :trade_date, :status,
            :entry_price, :exit_price, :notes, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP
        )
        ON CONFLICT(id) DO UPDATE SET
            stock=excluded.stock,
            strategy=excluded.strategy,
            strike_price=excluded.strike_price,
            premium=excluded.premium,
            quantity=excluded.quantity,
            expiry=excluded.expiry,
            trade_date=excluded.trade_date,
            status=excluded.status,
            entry_price=excluded.entry_price,
            exit_price=excluded.exit_price,
            notes=excluded.notes,
            updated_at=CURRENT_TIMESTAMP
        """,
        [storage_row(trade) for trade in trades],
    )


def _drop_alias(merged: dict[str, Any], key: str) -> None:
    for field_name, alias in FIELD_ALIASES.items():
        if key == field_name:
            merged.pop(alias, None)
        elif key == alias:
            merged.pop(field_name, None)
