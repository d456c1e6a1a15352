"""Race configuration loaded from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or decoded."""


@dataclass
class Config:
    """Race parameters."""

    laps: int = 0
    lap_len: int = 0
    penalty_len: int = 0
    firing_lines: int = 0
    start: str = ""
    start_delta: str = ""


# JSON keys, matched case-insensitively.
_FIELDS = {
    "laps": ("laps", int),
    "laplen": ("lap_len", int),
    "penaltylen": ("penalty_len", int),
    "firinglines": ("firing_lines", int),
    "start": ("start", str),
    "startdelta": ("start_delta", str),
}


def load_config(filename: str | Path) -> Config:
    """Read a JSON configuration file and return its Config."""
    try:
        data = json.loads(Path(filename).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot load configuration {str(filename)!r}: {exc}") from exc
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object")
    values = {}
    for key, raw in data.items():
        spec = _FIELDS.get(key.casefold())
        if spec is None or raw is None:
            continue
        attr, kind = spec
        if isinstance(raw, bool) or not isinstance(raw, kind):
            raise ConfigError(f"field {key!r} must be {kind.__name__}, got {raw!r}")
        values[attr] = raw
    return Config(**values)