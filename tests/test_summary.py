from __future__ import annotations

from wheel_journal.ingest.trade_records import normalize_trade
from wheel_journal.metrics.summary import (
    PortfolioStats,
    compute_portfolio_stats,
    compute_symbol_breakdown,
    stats_payload,
)
from wheel_journal.models import Phase


def _closed_stock(stock: str, entry: float, exit_price: float, quantity: int = 1):
    return normalize_trade(
        {
            "stock": stock,
            "strategy": "stock-buy",
            "status": "closed",
            "quantity": quantity,
            "entry_price": entry,
            "exit_price": exit_price,
        }
    )


def test_empty_input_is_identity() -> None:
    stats = compute_portfolio_stats([])
    assert stats == PortfolioStats()
    assert stats.win_rate == 0
    assert stats.open_risk == 0
    assert stats.phase_counts == {Phase.PUT: 0, Phase.ASSIGNED: 0, Phase.CALL: 0, Phase.OTHER: 0}


def test_open_risk_sums_strike_times_quantity() -> None:
    trades = [
        normalize_trade({"stock": "A", "strategy": "cash-secured-put", "status": "open", "strike_price": 2500, "quantity": 10}),
        normalize_trade({"stock": "B", "strategy": "cash-secured-put", "status": "open", "strike_price": 100, "quantity": 5}),
    ]
    assert compute_portfolio_stats(trades).open_risk == 25500


def test_open_risk_ignores_missing_strike_and_non_open() -> None:
    trades = [
        normalize_trade({"stock": "A", "strategy": "stock-buy", "status": "open", "quantity": 10}),
        normalize_trade({"stock": "B", "strategy": "covered-call", "status": "closed", "strike_price": 100, "quantity": 5}),
        normalize_trade({"stock": "C", "strategy": "covered-call", "status": "open", "strike_price": "bad", "quantity": 5}),
    ]
    assert compute_portfolio_stats(trades).open_risk == 0


def test_win_rate_and_extremes_use_closed_trades_only() -> None:
    trades = [
        _closed_stock("A", 100, 120, 10),
        _closed_stock("B", 100, 90, 10),
        _closed_stock("C", 100, 150, 2),
        _closed_stock("D", 100, 100, 5),
        normalize_trade(
            {"stock": "E", "strategy": "stock-buy", "status": "open", "quantity": 1, "entry_price": 1, "exit_price": 1000}
        ),
    ]
    stats = compute_portfolio_stats(trades)
    assert stats.wins == 2
    assert stats.losses == 1
    assert stats.win_rate == 67
    assert stats.largest_win == 200
    assert stats.largest_loss == -100
    assert stats.realized_earnings == 200 - 100 + 100
    assert stats.total_trades == 5


def test_win_rate_zero_without_decided_trades() -> None:
    stats = compute_portfolio_stats([_closed_stock("A", 10, 10)])
    assert stats.win_rate == 0
    assert stats.largest_win == 0
    assert stats.largest_loss == 0


def test_win_rate_rounds_half_up() -> None:
    trades = [_closed_stock("A", 1, 2)] * 1 + [_closed_stock("B", 2, 1)] * 7
    # 1 / 8 = 12.5%
    assert compute_portfolio_stats(trades).win_rate == 13


def test_total_premium_ignores_status() -> None:
    trades = [
        normalize_trade({"stock": "A", "strategy": "cash-secured-put", "status": "open", "premium": 50, "quantity": 10}),
        normalize_trade({"stock": "A", "strategy": "covered-call", "status": "exercised", "premium": 20, "quantity": 10}),
        normalize_trade({"stock": "A", "strategy": "stock-buy", "status": "closed", "quantity": 10}),
    ]
    assert compute_portfolio_stats(trades).total_premium == 700


def test_phase_counts() -> None:
    trades = [
        normalize_trade({"stock": "A", "strategy": "cash-secured-put", "status": "open"}),
        normalize_trade({"stock": "A", "strategy": "cash-secured-put", "status": "exercised"}),
        normalize_trade({"stock": "A", "strategy": "covered-call", "status": "closed"}),
        normalize_trade({"stock": "A", "strategy": "stock-buy", "status": "open"}),
        normalize_trade({"stock": "A", "strategy": "covered-call", "status": "exercised"}),
    ]
    counts = compute_portfolio_stats(trades).phase_counts
    assert counts == {Phase.PUT: 1, Phase.ASSIGNED: 2, Phase.CALL: 1, Phase.OTHER: 1}


def test_symbol_breakdown_sorted_by_symbol() -> None:
    rows = compute_symbol_breakdown(
        [_closed_stock("TCS", 10, 12, 5), _closed_stock("INFY", 10, 8, 5), _closed_stock("TCS", 10, 9)]
    )
    assert [row["symbol"] for row in rows] == ["INFY", "TCS"]
    assert rows[1]["trades"] == 2
    assert rows[1]["realized_earnings"] == 9
    assert rows[1]["win_rate"] == 50


def test_stats_payload_uses_phase_labels() -> None:
    payload = stats_payload(compute_portfolio_stats([_closed_stock("A", 1, 3)]))
    assert payload["phase_counts"] == {"put": 0, "assigned": 0, "call": 0, "other": 1}
    assert payload["win_rate"] == 100
