from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, TypeVar


class Strategy(StrEnum):
    CASH_SECURED_PUT = "cash-secured-put"
    COVERED_CALL = "covered-call"
    STOCK_BUY = "stock-buy"


class Status(StrEnum):
    OPEN = "open"
    CLOSED = "closed"
    EXERCISED = "exercised"


class Phase(StrEnum):
    PUT = "put"
    ASSIGNED = "assigned"
    CALL = "call"
    OTHER = "other"


@dataclass(frozen=True)
class Trade:
    trade_id: str | None
    stock: str
    strategy: Strategy | None
    quantity: int | None
    status: Status | None
    strike_price: float | None = None
    premium: float | None = None
    expiry: date | None = None
    trade_date: date | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    notes: str | None = None
    total_premium: float = 0.0
    earnings: float = 0.0

    def __post_init__(self) -> None:
        # Unknown labels are stored as None so strategy/status dispatch stays exhaustive.
        object.__setattr__(self, "strategy", coerce_enum(Strategy, self.strategy))
        object.__setattr__(self, "status", coerce_enum(Status, self.status))
        # Numbers are finite or None; NaN never reaches the metrics.
        object.__setattr__(self, "quantity", coerce_int(self.quantity))
        for name in ("strike_price", "premium", "entry_price", "exit_price"):
            object.__setattr__(self, name, coerce_float(getattr(self, name)))
        for name in ("total_premium", "earnings"):
            object.__setattr__(self, name, coerce_float(getattr(self, name)) or 0.0)


_E = TypeVar("_E", bound=StrEnum)


def coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_int(value: Any) -> int | None:
    number = coerce_float(value)
    if number is None:
        return None
    return int(number)


def coerce_enum(enum_type: type[_E], value: Any) -> _E | None:
    if value is None:
        return None
    if isinstance(value, enum_type):
        return value
    text = str(value).strip().lower().replace("_", "-")
    try:
        return enum_type(text)
    except ValueError:
        return None
