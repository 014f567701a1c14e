from __future__ import annotations

from typing import assert_never

from wheel_journal.models import Phase, Status, Strategy, Trade


def classify_phase(trade: Trade) -> Phase:
    exercised = trade.status == Status.EXERCISED
    match trade.strategy:
        case Strategy.CASH_SECURED_PUT:
            return Phase.ASSIGNED if exercised else Phase.PUT
        case Strategy.COVERED_CALL:
            return Phase.ASSIGNED if exercised else Phase.CALL
        case Strategy.STOCK_BUY | None:
            return Phase.OTHER
        case _ as unreachable:
            assert_never(unreachable)
