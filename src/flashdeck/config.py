"""Scheduler configuration loading from files and stored settings."""
import json
from dataclasses import fields
from pathlib import Path

import yaml

from flashdeck.db import get_connection
from flashdeck.sm2 import SchedulerConfig

SETTING_PREFIX = "sm2."

_FIELD_TYPES = {f.name: f.type for f in fields(SchedulerConfig)}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce(key: str, value):
    kind = _FIELD_TYPES[key]
    if kind in (bool, "bool"):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"Invalid boolean for {key}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid number for {key}: {value!r}") from None


def config_from_mapping(data: dict | None) -> SchedulerConfig:
    """Build a SchedulerConfig from overrides; missing keys keep their defaults."""
    if not data:
        return SchedulerConfig()
    unknown = sorted(set(data) - set(_FIELD_TYPES))
    if unknown:
        raise ValueError(f"Unknown scheduler settings: {', '.join(unknown)}")
    return SchedulerConfig(**{k: _coerce(k, v) for k, v in data.items()})


def load_config_file(file_path: str) -> SchedulerConfig:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text())
    elif suffix == ".json":
        text = path.read_text()
        data = json.loads(text) if text.strip() else None
    else:
        raise ValueError(f"Unsupported config format: {suffix or file_path}")
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {file_path}")
    return config_from_mapping(data)


def load_config_from_settings(db_path: str) -> SchedulerConfig:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT key, value FROM user_settings WHERE key LIKE ?", (SETTING_PREFIX + "%",)
    ).fetchall()
    conn.close()
    return config_from_mapping({r["key"][len(SETTING_PREFIX):]: r["value"] for r in rows})


def set_scheduler_setting(db_path: str, key: str, value) -> None:
    if key not in _FIELD_TYPES:
        raise ValueError(f"Unknown scheduler setting: {key}")
    stored = str(_coerce(key, value)).lower()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (SETTING_PREFIX + key, stored, stored),
    )
    conn.commit()
    conn.close()
