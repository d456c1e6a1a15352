"""Race event records and the parser for event log lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from biathlon.timeutil import parse_time


class EventType(IntEnum):
    """Identifiers of incoming and outgoing race events."""

    REGISTER = 1
    START_TIME_LOTTERY = 2
    AT_START_LINE = 3
    START = 4
    AT_FIRING_LINE = 5
    HIT_SUCCESSFUL = 6
    LEAVE_FIRING_LINE = 7
    ENTER_PENALTY = 8
    LEAVE_PENALTY = 9
    LAP_FINISH = 10
    CANT_CONTINUE = 11

    DISQUALIFIED = 32
    FINISHED = 33
    HIT_MISSED = 61


class EventParseError(ValueError):
    """Raised when an event line cannot be parsed."""


@dataclass(frozen=True)
class Event:
    """A single timestamped event concerning one athlete."""

    time: datetime
    event_id: int
    athlete_id: int
    params: list[str] = field(default_factory=list)
    raw: str = ""


_INT_RE = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def parse_event(line: str) -> Event:
    """Parse a line of the form ``[HH:MM:SS.mmm] eventID athleteID [params...]``."""
    if not line.strip():
        raise EventParseError("пустая строка")

    parts = line.split()
    if len(parts) < 3:
        raise EventParseError(f"Некорректная строка события: {line}")

    try:
        time = parse_time(parts[0].strip("[]"))
    except ValueError as exc:
        raise EventParseError(f"Ошибка парсинга времени: {exc}") from exc

    try:
        event_id = _atoi(parts[1])
    except ValueError as exc:
        raise EventParseError(f"Ошибка парсинга ID события: {exc}") from exc

    try:
        athlete_id = _atoi(parts[2])
    except ValueError as exc:
        raise EventParseError(f"Ошибка парсинга ID участника: {exc}") from exc

    return Event(time=time, event_id=event_id, athlete_id=athlete_id, params=parts[3:], raw=line)