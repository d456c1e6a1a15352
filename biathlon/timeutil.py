"""Clock-time parsing and formatting."""

from __future__ import annotations

import re
from datetime import datetime, timedelta

REFERENCE_DATE = datetime(1900, 1, 1)

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})\.(\d{3})")


def parse_time(value: str) -> datetime:
    """Parse ``HH:MM:SS.mmm``; raise ValueError if invalid."""
    match = _TIME_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"cannot parse {value!r} as HH:MM:SS.mmm")
    hours, minutes, seconds, millis = map(int, match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"time of day out of range in {value!r}")
    return REFERENCE_DATE.replace(
        hour=hours, minute=minutes, second=seconds, microsecond=millis * 1000
    )


def format_time(t: datetime) -> str:
    """Format a time of day as ``HH:MM:SS.mmm``."""
    return f"{t:%H:%M:%S}.{t.microsecond // 1000:03d}"


def format_duration(d: timedelta) -> str:
    """Format a duration as ``HH:MM:SS.mmm``; hours are not wrapped at 24."""
    micros = d // timedelta(microseconds=1)
    sign = -1 if micros < 0 else 1
    hours, rest = divmod(abs(micros) // 1000, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    h, m, s, ms = (sign * v for v in (hours, minutes, seconds, millis))
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"