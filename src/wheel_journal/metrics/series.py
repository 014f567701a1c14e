from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from wheel_journal.metrics.earnings import compute_earnings, compute_total_premium
from wheel_journal.models import Status, Trade


@dataclass(frozen=True)
class PnlPoint:
    date: date | None
    cumulative_value: float


def compute_pnl_series(trades: Iterable[Trade]) -> list[PnlPoint]:
    """Running cash-flow total over closed trades, ordered by expiry.

    Each step adds earnings plus total premium. For option trades the premium is
    already part of earnings, so it is counted twice.
    """
    closed = [trade for trade in trades if trade.status == Status.CLOSED]
    dated = [trade for trade in closed if _series_date(trade) is not None]
    undated = [trade for trade in closed if _series_date(trade) is None]
    # Expiry orders the series; a closed trade without one (stock buys) is placed
    # at its trade date among the expiries. sorted() is stable, so equal dates keep
    # input order.
    ordered = sorted(dated, key=_series_date) + undated

    points: list[PnlPoint] = []
    running = 0.0
    for trade in ordered:
        running += compute_earnings(trade) + compute_total_premium(trade)
        points.append(PnlPoint(date=_series_date(trade), cumulative_value=running))
    return points


def series_payload(points: Iterable[PnlPoint]) -> list[dict[str, Any]]:
    return [
        {
            "date": point.date.isoformat() if point.date is not None else None,
            "cumulative_value": point.cumulative_value,
        }
        for point in points
    ]


def _series_date(trade: Trade) -> date | None:
    if trade.expiry is not None:
        return trade.expiry
    return trade.trade_date
