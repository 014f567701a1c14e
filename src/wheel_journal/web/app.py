from __future__ import annotations

import os
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from wheel_journal.config.app_config import load_app_config
from wheel_journal.ingest.trade_records import TradeValidationError, trade_payload
from wheel_journal.metrics.series import compute_pnl_series, series_payload
from wheel_journal.metrics.summary import (
    compute_portfolio_stats,
    compute_symbol_breakdown,
    stats_payload,
)
from wheel_journal.metrics.windows import TimeWindow, apply_window, available_months, parse_month
from wheel_journal.models import Trade
from wheel_journal.storage import sqlite_reader
from wheel_journal.storage.sqlite_reader import TradeNotFoundError
from wheel_journal.storage.sqlite_store import connect as sqlite_connect
from wheel_journal.storage.sqlite_store import delete_trade, init_db, insert_trade, update_trade

DB_ENV_VAR = "WHEEL_JOURNAL_DB"


app = FastAPI(title="Wheel Journal")


@app.get("/api/trades")
def trades_api(request: Request) -> list[dict[str, Any]]:
    window = _resolve_window(request)
    trades = apply_window(_load_trades(), window)
    return [trade_payload(trade) for trade in trades]


@app.post("/api/trades", status_code=201)
def create_trade_api(payload: dict[str, Any]) -> dict[str, Any]:
    conn = _open_db()
    try:
        trade = insert_trade(conn, payload)
    except TradeValidationError as exc:
        raise HTTPException(status_code=422, detail={"missing": exc.fields}) from exc
    finally:
        conn.close()
    return trade_payload(trade)


@app.put("/api/trades/{trade_id}")
def update_trade_api(trade_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    conn = _open_db()
    try:
        trade = update_trade(conn, trade_id, payload)
    except TradeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Trade not found.") from exc
    except TradeValidationError as exc:
        raise HTTPException(status_code=422, detail={"missing": exc.fields}) from exc
    finally:
        conn.close()
    return trade_payload(trade)


@app.delete("/api/trades/{trade_id}")
def delete_trade_api(trade_id: str) -> dict[str, Any]:
    conn = _open_db()
    try:
        deleted = delete_trade(conn, trade_id)
    finally:
        conn.close()
    if not deleted:
        raise HTTPException(status_code=404, detail="Trade not found.")
    return {"id": trade_id, "deleted": True}


@app.get("/api/summary")
def summary_api(request: Request) -> dict[str, Any]:
    window = _resolve_window(request)
    trades = apply_window(_load_trades(), window)
    stats = compute_portfolio_stats(trades)
    return {
        "window": _window_payload(window),
        "summary": stats_payload(stats),
        "pnl_series": series_payload(compute_pnl_series(trades)),
        "symbol_breakdown": compute_symbol_breakdown(trades),
    }


@app.get("/api/months")
def months_api() -> dict[str, Any]:
    return {"months": available_months(_load_trades())}


@app.get("/api/export")
def export_api() -> list[dict[str, Any]]:
    return [trade_payload(trade) for trade in _load_trades()]


def _resolve_db_path() -> Path:
    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override)
    app_config = load_app_config()
    return app_config.app.db_path


def _open_db() -> sqlite3.Connection:
    conn = sqlite_connect(_resolve_db_path())
    init_db(conn)
    return conn


def _load_trades() -> list[Trade]:
    db_path = _resolve_db_path()
    if not db_path.exists():
        return []
    conn = sqlite_reader.connect(db_path)
    try:
        init_db(conn)
        return sqlite_reader.load_trades(conn)
    finally:
        conn.close()


def _resolve_window(request: Request) -> TimeWindow:
    params = request.query_params
    month_param = (params.get("month") or "").strip()
    start = _parse_date(params.get("start"), "start")
    end = _parse_date(params.get("end"), "end")
    window = TimeWindow()
    if month_param:
        try:
            window = window.with_month(parse_month(month_param))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    if start is not None and end is not None:
        window = window.with_range(start, end)
    return window


def _parse_date(value: str | None, name: str) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {name} date: {value!r}") from exc


def _window_payload(window: TimeWindow) -> dict[str, str | None]:
    return {
        "month": window.month.strftime("%Y-%m") if window.month is not None else None,
        "start": window.start.isoformat() if window.start is not None else None,
        "end": window.end.isoformat() if window.end is not None else None,
    }


def main() -> None:
    import uvicorn

    app_config = load_app_config()
    uvicorn.run(
        "wheel_journal.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
