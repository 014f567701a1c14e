from __future__ import annotations

from datetime import date, datetime

import pytest

from wheel_journal.ingest.trade_records import normalize_trade
from wheel_journal.metrics.windows import (
    TimeWindow,
    apply_window,
    available_months,
    filter_by_month,
    filter_by_range,
    month_bounds,
    trade_reference_date,
)


def _trade(stock: str, trade_date: str | None = None, expiry: str | None = None):
    return normalize_trade(
        {"stock": stock, "strategy": "cash-secured-put", "trade_date": trade_date, "expiry": expiry}
    )


TRADES = [
    _trade("A", trade_date="2024-02-29"),
    _trade("B", trade_date="2024-03-01"),
    _trade("C", trade_date="2024-03-31"),
    _trade("D", expiry="2024-03-15"),
    _trade("E"),
    _trade("F", trade_date="2024-04-01", expiry="2024-03-28"),
]


def _stocks(trades) -> list[str]:
    return [trade.stock for trade in trades]


def test_reference_date_prefers_trade_date() -> None:
    assert trade_reference_date(TRADES[5]) == date(2024, 4, 1)
    assert trade_reference_date(TRADES[3]) == date(2024, 3, 15)
    assert trade_reference_date(TRADES[4]) is None


def test_month_bounds_handles_leap_february() -> None:
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds("202312") == (date(2023, 12, 1), date(2023, 12, 31))


def test_filter_by_month_is_inclusive() -> None:
    assert _stocks(filter_by_month(TRADES, "2024-03")) == ["B", "C", "D"]
    assert _stocks(filter_by_month(TRADES, "202402")) == ["A"]
    assert _stocks(filter_by_month(TRADES, date(2024, 4, 17))) == ["F"]


def test_filter_by_month_is_idempotent() -> None:
    once = filter_by_month(TRADES, "2024-03")
    assert filter_by_month(once, "2024-03") == once


@pytest.mark.parametrize("month", ["2024-13", "March", "24-03", ""])
def test_filter_by_month_rejects_bad_selector(month) -> None:
    with pytest.raises(ValueError):
        filter_by_month(TRADES, month)


def test_filter_by_range_inclusive_day_granularity() -> None:
    selected = filter_by_range(TRADES, datetime(2024, 3, 1, 18, 45), datetime(2024, 3, 15, 0, 1))
    assert _stocks(selected) == ["B", "D"]


def test_filter_by_range_missing_bound_is_noop() -> None:
    assert filter_by_range(TRADES, None, date(2024, 3, 1)) == TRADES
    assert filter_by_range(TRADES, date(2024, 3, 1), None) == TRADES


def test_filter_by_range_reversed_is_empty() -> None:
    assert filter_by_range(TRADES, date(2024, 4, 1), date(2024, 3, 1)) == []


def test_range_takes_precedence_over_month() -> None:
    window = TimeWindow(month=date(2024, 2, 1), start=date(2024, 4, 1), end=date(2024, 4, 30))
    assert _stocks(apply_window(TRADES, window)) == ["F"]


def test_selecting_one_mode_clears_the_other() -> None:
    ranged = TimeWindow().with_month("2024-02").with_range(date(2024, 3, 1), date(2024, 3, 2))
    assert ranged.month is None
    assert _stocks(apply_window(TRADES, ranged)) == ["B"]

    monthly = ranged.with_month("2024-02")
    assert monthly.start is None and monthly.end is None
    assert _stocks(apply_window(TRADES, monthly)) == ["A"]


def test_incomplete_range_falls_back_to_month() -> None:
    window = TimeWindow(month=date(2024, 2, 1), start=date(2024, 3, 1))
    assert _stocks(apply_window(TRADES, window)) == ["A"]


def test_empty_window_returns_everything() -> None:
    assert apply_window(TRADES, TimeWindow()) == TRADES
    assert apply_window(TRADES, None) == TRADES


def test_available_months_newest_first() -> None:
    assert available_months(TRADES) == ["2024-04", "2024-03", "2024-02"]
