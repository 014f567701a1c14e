from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Iterable

from wheel_journal.models import Trade

_MONTH_RE = re.compile(r"^(\d{4})-?(\d{2})$")


@dataclass(frozen=True)
class TimeWindow:
    """The period selected for the journal view.

    A month and a custom range are alternative modes. A complete range wins
    over a month; the two are never combined.
    """

    month: date | None = None
    start: date | None = None
    end: date | None = None

    @property
    def has_range(self) -> bool:
        return self.start is not None and self.end is not None

    def with_month(self, month: str | date | None) -> TimeWindow:
        return TimeWindow(month=parse_month(month) if month is not None else None)

    def with_range(self, start: date | datetime | None, end: date | datetime | None) -> TimeWindow:
        return replace(self, month=None, start=_day(start), end=_day(end))


def trade_reference_date(trade: Trade) -> date | None:
    if trade.trade_date is not None:
        return trade.trade_date
    return trade.expiry


def parse_month(value: str | date) -> date:
    if isinstance(value, datetime):
        return date(value.year, value.month, 1)
    if isinstance(value, date):
        return date(value.year, value.month, 1)
    match = _MONTH_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid month value: {value!r}")
    year = int(match.group(1))
    month = int(match.group(2))
    if month < 1 or month > 12:
        raise ValueError(f"Invalid month value: {value!r}")
    return date(year, month, 1)


def month_bounds(month: str | date) -> tuple[date, date]:
    first = parse_month(month)
    next_month = first.replace(day=28) + timedelta(days=4)
    last = next_month.replace(day=1) - timedelta(days=1)
    return first, last


def filter_by_month(trades: Iterable[Trade], month: str | date) -> list[Trade]:
    first, last = month_bounds(month)
    return _within(trades, first, last)


def filter_by_range(
    trades: Iterable[Trade],
    start: date | datetime | None,
    end: date | datetime | None,
) -> list[Trade]:
    if start is None or end is None:
        return list(trades)
    return _within(trades, _day(start), _day(end))


def apply_window(trades: Iterable[Trade], window: TimeWindow | None) -> list[Trade]:
    if window is None:
        return list(trades)
    if window.has_range:
        return filter_by_range(trades, window.start, window.end)
    if window.month is not None:
        return filter_by_month(trades, window.month)
    return list(trades)


def available_months(trades: Iterable[Trade]) -> list[str]:
    months = {
        f"{day.year:04d}-{day.month:02d}"
        for day in (trade_reference_date(trade) for trade in trades)
        if day is not None
    }
    return sorted(months, reverse=True)


def _within(trades: Iterable[Trade], first: date, last: date) -> list[Trade]:
    selected = []
    for trade in trades:
        day = trade_reference_date(trade)
        if day is None:
            continue
        if first <= day <= last:
            selected.append(trade)
    return selected


def _day(value: date | datetime | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value
