from __future__ import annotations

import argparse
import sys
from pathlib import Path

from wheel_journal.config.app_config import load_app_config
from wheel_journal.ingest.journal_file import load_trades
from wheel_journal.ingest.trade_records import validate_trade
from wheel_journal.storage.sqlite_store import connect, init_db, upsert_trades


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import a trades export (json/csv/tsv) into the SQLite store.")
    parser.add_argument("trades_path", type=Path, help="Path to the trades file.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite DB path (default from config).")
    args = parser.parse_args(argv)

    if not args.trades_path.exists():
        raise SystemExit(f"Trades file not found: {args.trades_path}")

    app_config = load_app_config()
    result = load_trades(
        args.trades_path,
        default_strategy=app_config.journal.default_strategy,
        default_status=app_config.journal.default_status,
    )

    valid = []
    invalid = 0
    for trade in result.trades:
        problems = validate_trade(trade)
        if problems:
            invalid += 1
            print(f"Rejected {trade.stock or 'unknown'} trade: missing {', '.join(problems)}.", file=sys.stderr)
            continue
        valid.append(trade)

    db_path = args.db or app_config.app.db_path
    conn = connect(db_path)
    try:
        init_db(conn)
        written = upsert_trades(conn, valid)
    finally:
        conn.close()

    print(f"trades_imported {written}")
    print(f"trades_skipped {result.skipped}")
    print(f"trades_rejected {invalid}")
    print(f"db_path {db_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
