from __future__ import annotations

import math
from typing import assert_never

from wheel_journal.models import Status, Strategy, Trade


def compute_earnings(trade: Trade) -> float:
    """Realized profit/loss for a single trade.

    Returns 0.0 whenever an input the strategy needs is missing. A value of 0 is
    a present value; only None counts as missing. Results that overflow to a
    non-finite number are reported as 0.0 as well.
    """
    return _finite_or_zero(_strategy_earnings(trade))


def _strategy_earnings(trade: Trade) -> float:
    entry = trade.entry_price
    quantity = trade.quantity
    premium = trade.premium

    match trade.strategy:
        case None:
            return 0.0
        case Strategy.STOCK_BUY:
            exit_price = trade.exit_price
            if entry is None or exit_price is None or quantity is None:
                return 0.0
            return (exit_price - entry) * quantity
        case Strategy.CASH_SECURED_PUT:
            exit_price = trade.exit_price
            if entry is None or exit_price is None or quantity is None or premium is None:
                return 0.0
            return (exit_price - entry) * quantity + premium * quantity
        case Strategy.COVERED_CALL:
            if entry is None or quantity is None or premium is None:
                return 0.0
            exit_price = effective_exit_price(trade)
            if exit_price is None:
                return 0.0
            return (exit_price - entry) * quantity + premium * quantity
        case _ as unreachable:
            assert_never(unreachable)


def effective_exit_price(trade: Trade) -> float | None:
    # An exercised call sold the shares at the strike.
    if trade.status == Status.EXERCISED:
        return trade.strike_price
    return trade.exit_price


def compute_total_premium(trade: Trade) -> float:
    if trade.premium is None or trade.quantity is None:
        return 0.0
    return _finite_or_zero(trade.premium * trade.quantity)


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0
