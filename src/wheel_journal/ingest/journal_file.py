from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from wheel_journal.ingest.trade_records import normalize_trade, trade_payload
from wheel_journal.models import Status, Strategy, Trade


@dataclass(frozen=True)
class IngestResult:
    trades: list[Trade]
    skipped: int = 0


def load_trades(
    path: str | Path,
    *,
    default_strategy: Strategy | None = None,
    default_status: Status | None = None,
) -> IngestResult:
    source_path = Path(path)
    suffix = source_path.suffix.lower()
    if suffix == ".json":
        with source_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return load_trades_payload(
            payload, default_strategy=default_strategy, default_status=default_status
        )
    if suffix in {".csv", ".tsv"}:
        with source_path.open("r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle, delimiter="\t" if suffix == ".tsv" else ",")
            trades, skipped = _normalize_records(
                reader, default_strategy=default_strategy, default_status=default_status
            )
        return IngestResult(trades=trades, skipped=skipped)
    raise ValueError(f"Unsupported file type: {source_path.suffix}")


def load_trades_payload(
    payload: Any,
    *,
    default_strategy: Strategy | None = None,
    default_status: Status | None = None,
) -> IngestResult:
    records = _extract_records(payload)
    trades, skipped = _normalize_records(
        records, default_strategy=default_strategy, default_status=default_status
    )
    return IngestResult(trades=trades, skipped=skipped)


def export_trades(trades: Iterable[Trade], path: str | Path) -> int:
    out_path = Path(path)
    rows = [trade_payload(normalize_trade(trade)) for trade in trades]
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(rows, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return len(rows)


def _extract_records(payload: Any) -> Iterable[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("trades", "data"):
            if key in payload and isinstance(payload[key], list):
                return payload[key]
    raise ValueError("Unsupported JSON format for trades payload")


def _normalize_records(
    records: Iterable[Any],
    *,
    default_strategy: Strategy | None,
    default_status: Status | None,
) -> tuple[list[Trade], int]:
    trades: list[Trade] = []
    skipped = 0
    for raw in records:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        record = dict(raw)
        if default_strategy is not None and record.get("strategy") in (None, ""):
            record["strategy"] = default_strategy
        if default_status is not None and record.get("status") in (None, ""):
            record["status"] = default_status
        trade = normalize_trade(record)
        if not trade.stock:
            skipped += 1
            continue
        trades.append(trade)
    return trades, skipped
