from __future__ import annotations

import json

import pytest

from wheel_journal.ingest.journal_file import export_trades, load_trades, load_trades_payload
from wheel_journal.ingest.trade_records import normalize_trade
from wheel_journal.models import Status, Strategy


def _sample_trades():
    return [
        normalize_trade(
            {
                "id": "t-1",
                "stock": "RELIANCE",
                "strategy": "covered-call",
                "strike_price": 2500,
                "premium": 50,
                "quantity": 10,
                "expiry": "2024-03-28",
                "trade_date": "2024-03-01",
                "status": "exercised",
                "entry_price": 2400,
                "notes": "assigned at expiry",
            }
        ),
        normalize_trade(
            {
                "id": "t-2",
                "stock": "TCS",
                "strategy": "stock-buy",
                "quantity": 5,
                "trade_date": "2024-02-10",
                "status": "open",
                "entry_price": 3800,
            }
        ),
    ]


def test_export_then_import_is_lossless(tmp_path) -> None:
    trades = _sample_trades()
    out_path = tmp_path / "exports" / "trades.json"
    assert export_trades(trades, out_path) == 2

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload[0]["strikePrice"] == 2500.0
    assert payload[0]["earnings"] == 1500

    result = load_trades(out_path)
    assert result.skipped == 0
    assert result.trades == trades


def test_load_payload_variants_and_skips() -> None:
    result = load_trades_payload({"trades": [{"stock": "infy", "quantity": 1}, "garbage", {"quantity": 2}]})
    assert [trade.stock for trade in result.trades] == ["INFY"]
    assert result.skipped == 2

    nested = load_trades_payload({"data": [{"stock": "tcs"}]})
    assert nested.trades[0].stock == "TCS"


def test_load_payload_rejects_unknown_shape() -> None:
    with pytest.raises(ValueError):
        load_trades_payload({"rows": []})


def test_load_csv_with_defaults(tmp_path) -> None:
    path = tmp_path / "trades.csv"
    path.write_text(
        "stock,strategy,strike_price,premium,quantity,expiry,trade_date,status,entry_price,exit_price\n"
        "hdfcbank,,1500,12.5,100,2024-04-25,2024-04-01,,,\n"
        "itc,stock-buy,,,50,,2024-04-02,closed,420,445\n",
        encoding="utf-8",
    )
    result = load_trades(path, default_strategy=Strategy.CASH_SECURED_PUT, default_status=Status.OPEN)
    first, second = result.trades
    assert first.strategy is Strategy.CASH_SECURED_PUT
    assert first.status is Status.OPEN
    assert first.entry_price is None
    assert first.total_premium == 1250
    assert second.earnings == 1250


def test_unsupported_extension(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_trades(tmp_path / "trades.xlsx")
