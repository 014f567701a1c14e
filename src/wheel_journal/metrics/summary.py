from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from wheel_journal.metrics.earnings import compute_earnings, compute_total_premium
from wheel_journal.metrics.phase import classify_phase
from wheel_journal.models import Phase, Status, Trade


@dataclass(frozen=True)
class PortfolioStats:
    total_trades: int = 0
    total_premium: float = 0.0
    realized_earnings: float = 0.0
    wins: int = 0
    losses: int = 0
    win_rate: int = 0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    open_risk: float = 0.0
    phase_counts: dict[Phase, int] = field(default_factory=lambda: _empty_phase_counts())


def compute_portfolio_stats(trades: Iterable[Trade]) -> PortfolioStats:
    trade_list = list(trades)
    if not trade_list:
        return PortfolioStats()

    closed_earnings = [
        compute_earnings(trade) for trade in trade_list if trade.status == Status.CLOSED
    ]
    win_values = [value for value in closed_earnings if value > 0]
    loss_values = [value for value in closed_earnings if value < 0]

    phase_counts = _empty_phase_counts()
    for trade in trade_list:
        phase_counts[classify_phase(trade)] += 1

    return PortfolioStats(
        total_trades=len(trade_list),
        total_premium=sum(compute_total_premium(trade) for trade in trade_list),
        realized_earnings=sum(closed_earnings),
        wins=len(win_values),
        losses=len(loss_values),
        win_rate=_win_rate(len(win_values), len(loss_values)),
        largest_win=max(win_values, default=0.0),
        largest_loss=min(loss_values, default=0.0),
        open_risk=sum(_open_exposure(trade) for trade in trade_list if trade.status == Status.OPEN),
        phase_counts=phase_counts,
    )


def compute_symbol_breakdown(trades: Iterable[Trade]) -> list[dict[str, Any]]:
    buckets: dict[str, list[Trade]] = {}
    for trade in trades:
        buckets.setdefault(trade.stock, []).append(trade)

    rows: list[dict[str, Any]] = []
    for symbol, items in sorted(buckets.items(), key=lambda item: item[0]):
        stats = compute_portfolio_stats(items)
        rows.append(
            {
                "symbol": symbol,
                "trades": stats.total_trades,
                "total_premium": stats.total_premium,
                "realized_earnings": stats.realized_earnings,
                "win_rate": stats.win_rate,
                "open_risk": stats.open_risk,
            }
        )
    return rows


def stats_payload(stats: PortfolioStats) -> dict[str, Any]:
    return {
        "total_trades": stats.total_trades,
        "total_premium": stats.total_premium,
        "realized_earnings": stats.realized_earnings,
        "wins": stats.wins,
        "losses": stats.losses,
        "win_rate": stats.win_rate,
        "largest_win": stats.largest_win,
        "largest_loss": stats.largest_loss,
        "open_risk": stats.open_risk,
        "phase_counts": {phase.value: count for phase, count in stats.phase_counts.items()},
    }


def _win_rate(wins: int, losses: int) -> int:
    decided = wins + losses
    if not decided:
        return 0
    # Half-up rounding to a whole percentage.
    return int(math.floor(wins / decided * 100 + 0.5))


def _open_exposure(trade: Trade) -> float:
    if trade.strike_price is None or trade.quantity is None:
        return 0.0
    return trade.strike_price * trade.quantity


def _empty_phase_counts() -> dict[Phase, int]:
    return {phase: 0 for phase in Phase}
