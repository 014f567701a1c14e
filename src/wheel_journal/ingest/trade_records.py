from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Mapping

from wheel_journal.metrics.earnings import compute_earnings, compute_total_premium
from wheel_journal.models import Status, Strategy, Trade, coerce_enum, coerce_float, coerce_int

# Storage column -> UI alias. Both spellings are emitted and accepted.
FIELD_ALIASES = {
    "strike_price": "strikePrice",
    "entry_price": "entryPrice",
    "exit_price": "exitPrice",
    "trade_date": "tradeDate",
}

REQUIRED_FIELDS = ("stock", "quantity", "trade_date", "status")
STRATEGY_FIELDS: dict[Strategy, tuple[str, ...]] = {
    Strategy.CASH_SECURED_PUT: ("strike_price", "premium", "expiry"),
    Strategy.COVERED_CALL: ("strike_price", "premium", "expiry", "entry_price"),
    Strategy.STOCK_BUY: ("entry_price",),
}


class TradeValidationError(ValueError):
    def __init__(self, fields: list[str]) -> None:
        super().__init__("Missing or invalid fields: " + ", ".join(fields))
        self.fields = fields


def normalize_trade(raw: Mapping[str, Any] | Trade) -> Trade:
    """Map a stored row, an API payload or an existing Trade to the canonical Trade.

    Storage field names take precedence over their UI aliases. Numeric values
    that cannot be read as finite numbers become None, and so do dates that do
    not parse. The derived total_premium and earnings are always recomputed, so
    normalizing twice gives the same result.
    """
    if isinstance(raw, Trade):
        trade = raw
    else:
        trade_id = _pick(raw, "id", "trade_id")
        stock = _pick(raw, "stock", "symbol")
        trade = Trade(
            trade_id=str(trade_id) if trade_id is not None else None,
            stock=str(stock).strip().upper() if stock is not None else "",
            strategy=coerce_enum(Strategy, _pick(raw, "strategy")),
            quantity=coerce_int(_pick(raw, "quantity")),
            status=coerce_enum(Status, _pick(raw, "status")),
            strike_price=coerce_float(_field(raw, "strike_price")),
            premium=coerce_float(_pick(raw, "premium")),
            expiry=_to_date(_pick(raw, "expiry")),
            trade_date=_to_date(_field(raw, "trade_date")),
            entry_price=coerce_float(_field(raw, "entry_price")),
            exit_price=coerce_float(_field(raw, "exit_price")),
            notes=_to_text(_pick(raw, "notes")),
        )
    return replace(
        trade,
        total_premium=compute_total_premium(trade),
        earnings=compute_earnings(trade),
    )


def trade_payload(trade: Trade) -> dict[str, Any]:
    row = storage_row(trade)
    for field_name, alias in FIELD_ALIASES.items():
        row[alias] = row[field_name]
    row["totalPremium"] = trade.total_premium
    row["earnings"] = trade.earnings
    return row


def storage_row(trade: Trade) -> dict[str, Any]:
    return {
        "id": trade.trade_id,
        "stock": trade.stock,
        "strategy": trade.strategy.value if trade.strategy is not None else None,
        "strike_price": trade.strike_price,
        "premium": trade.premium,
        "quantity": trade.quantity,
        "expiry": _date_text(trade.expiry),
        "trade_date": _date_text(trade.trade_date),
        "status": trade.status.value if trade.status is not None else None,
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "notes": trade.notes,
    }


def validate_trade(trade: Trade) -> list[str]:
    """Names of the fields that block saving this trade (empty when valid)."""
    problems: list[str] = []
    if trade.strategy is None:
        problems.append("strategy")
    values = storage_row(trade)
    values["stock"] = trade.stock or None
    fields = list(REQUIRED_FIELDS)
    if trade.strategy is not None:
        fields.extend(STRATEGY_FIELDS[trade.strategy])
    for name in fields:
        if values[name] is None:
            problems.append(name)
    if trade.quantity is not None and trade.quantity <= 0:
        problems.append("quantity")
    return problems


def ensure_valid(trade: Trade) -> Trade:
    problems = validate_trade(trade)
    if problems:
        raise TradeValidationError(problems)
    return trade


def _field(raw: Mapping[str, Any], name: str) -> Any:
    return _pick(raw, name, FIELD_ALIASES[name])


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _to_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _date_text(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None
