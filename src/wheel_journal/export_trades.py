from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path

from wheel_journal.cli import load_store_trades
from wheel_journal.config.app_config import load_app_config
from wheel_journal.ingest.journal_file import export_trades


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export the trade store to JSON for backup.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite DB path (default from config).")
    parser.add_argument("--out", type=Path, default=None, help="Output JSON path.")
    args = parser.parse_args(argv)

    app_config = load_app_config()
    trades = load_store_trades(args.db)

    out_path = args.out
    if out_path is None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        out_path = app_config.paths.exports / f"trades_{stamp}.json"

    written = export_trades(trades, out_path)
    print(f"exported_trades {written}")
    print(f"export_out {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
