from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from wheel_journal.cli import add_window_arguments, load_store_trades, window_from_args
from wheel_journal.ingest.journal_file import load_trades
from wheel_journal.metrics.series import compute_pnl_series, series_payload
from wheel_journal.metrics.summary import (
    PortfolioStats,
    compute_portfolio_stats,
    compute_symbol_breakdown,
    stats_payload,
)
from wheel_journal.metrics.windows import apply_window


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute wheel portfolio statistics.")
    parser.add_argument(
        "trades_path",
        type=Path,
        nargs="?",
        default=None,
        help="Optional trades export (json/csv/tsv); reads the SQLite store when omitted.",
    )
    add_window_arguments(parser)
    parser.add_argument("--db", type=Path, default=None, help="SQLite DB path (default from config).")
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
    args = parser.parse_args(argv)

    window = window_from_args(parser, args)
    if args.trades_path is not None:
        result = load_trades(args.trades_path)
        trades = result.trades
        if result.skipped:
            print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)
    else:
        trades = load_store_trades(args.db)
    trades = apply_window(trades, window)

    stats = compute_portfolio_stats(trades)
    if args.json or (args.out is not None and args.out.suffix.lower() == ".json"):
        payload = stats_payload(stats)
        payload["pnl_series"] = series_payload(compute_pnl_series(trades))
        payload["symbol_breakdown"] = compute_symbol_breakdown(trades)
        text = json.dumps(payload, indent=2, sort_keys=True)
    else:
        text = _format_stats(stats)

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")

    return 0


def _format_stats(stats: PortfolioStats) -> str:
    lines = [
        f"total_trades {stats.total_trades}",
        f"total_premium {stats.total_premium:.6g}",
        f"realized_earnings {stats.realized_earnings:.6g}",
        f"wins {stats.wins}",
        f"losses {stats.losses}",
        f"win_rate {stats.win_rate}",
        f"largest_win {stats.largest_win:.6g}",
        f"largest_loss {stats.largest_loss:.6g}",
        f"open_risk {stats.open_risk:.6g}",
    ]
    for phase, count in stats.phase_counts.items():
        lines.append(f"phase_{phase.value} {count}")
    return "\n".join(lines)


if __name__ == "__main__":
    raise SystemExit(main())
