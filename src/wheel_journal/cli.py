from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from wheel_journal.config.app_config import load_app_config
from wheel_journal.metrics.phase import classify_phase
from wheel_journal.metrics.windows import TimeWindow, apply_window
from wheel_journal.models import Trade
from wheel_journal.storage import sqlite_reader


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the wheel trade log.")
    add_window_arguments(parser)
    parser.add_argument("--db", type=Path, default=None, help="SQLite DB path (default from config).")
    parser.add_argument("--out", type=Path, default=None, help="Write the table to a file instead of stdout.")
    args = parser.parse_args(argv)

    window = window_from_args(parser, args)
    trades = apply_window(load_store_trades(args.db), window)

    if not trades:
        print("No trades in window.")
        return 0

    output = ["date stock strategy status qty strike premium entry exit total_premium earnings phase"]
    for trade in trades:
        output.append(_format_row(trade))

    if args.out is None:
        for line in output:
            print(line)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text("\n".join(output) + "\n", encoding="utf-8")

    return 0


def add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--month", type=str, default=None, help="Calendar month (YYYY-MM).")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="Range start (YYYY-MM-DD).")
    parser.add_argument("--end", type=date.fromisoformat, default=None, help="Range end (YYYY-MM-DD).")


def window_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> TimeWindow:
    window = TimeWindow()
    if args.month:
        try:
            window = window.with_month(args.month)
        except ValueError as exc:
            parser.error(str(exc))
    if args.start is not None and args.end is not None:
        if args.month:
            print("Custom range given; ignoring --month.", file=sys.stderr)
        window = window.with_range(args.start, args.end)
    elif args.start is not None or args.end is not None:
        print("Range needs both --start and --end; ignoring it.", file=sys.stderr)
    return window


def load_store_trades(db_path: Path | None) -> list[Trade]:
    path = db_path or load_app_config().app.db_path
    if not path.exists():
        raise SystemExit(f"DB not found: {path}")
    conn = sqlite_reader.connect(path)
    try:
        return sqlite_reader.load_trades(conn)
    finally:
        conn.close()


def _format_row(trade: Trade) -> str:
    day = trade.trade_date or trade.expiry
    strategy = trade.strategy.value if trade.strategy is not None else "na"
    status = trade.status.value if trade.status is not None else "na"
    return (
        f"{day.isoformat() if day else 'na'} {trade.stock} {strategy} {status} "
        f"{trade.quantity if trade.quantity is not None else 'na'} "
        f"{_format_metric(trade.strike_price)} {_format_metric(trade.premium)} "
        f"{_format_metric(trade.entry_price)} {_format_metric(trade.exit_price)} "
        f"{trade.total_premium:.6g} {trade.earnings:.6g} {classify_phase(trade).value}"
    )


def _format_metric(value: float | None) -> str:
    return "na" if value is None else f"{value:.6g}"


if __name__ == "__main__":
    raise SystemExit(main())
