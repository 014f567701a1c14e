from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from wheel_journal.models import Status, Strategy, coerce_enum


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    host: str
    port: int
    reload: bool


@dataclass(frozen=True)
class PathsSettings:
    exports: Path


@dataclass(frozen=True)
class JournalSettings:
    default_status: Status
    default_strategy: Strategy


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    paths: PathsSettings
    journal: JournalSettings


def load_app_config(path: Path | None = None) -> AppConfig:
    config_path = path or Path("config/app.toml")
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    paths_raw = _section(raw, "paths")
    journal_raw = _section(raw, "journal")

    app = AppSettings(
        db_path=Path(app_raw.get("db_path", "data/wheel_journal.sqlite")),
        host=str(app_raw.get("host", "127.0.0.1")),
        port=_int_or_default(app_raw.get("port"), 8000),
        reload=bool(app_raw.get("reload", True)),
    )

    paths = PathsSettings(
        exports=_path_or_none(paths_raw.get("exports")) or Path("data/exports"),
    )

    journal = JournalSettings(
        default_status=coerce_enum(Status, journal_raw.get("default_status")) or Status.OPEN,
        default_strategy=coerce_enum(Strategy, journal_raw.get("default_strategy"))
        or Strategy.CASH_SECURED_PUT,
    )

    return AppConfig(app=app, paths=paths, journal=journal)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _int_or_default(value: Any, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _path_or_none(value: Any) -> Path | None:
    if value in (None, ""):
        return None
    return Path(str(value))
