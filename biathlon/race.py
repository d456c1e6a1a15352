"""Race state machine: applies incoming events to athletes and logs outgoing messages."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TextIO

from biathlon.config import Config
from biathlon.events import Event, EventType
from biathlon.models import Athlete, Status
from biathlon.timeutil import REFERENCE_DATE, format_time, parse_time


class RaceError(Exception):
    """Raised when a race cannot be set up from its configuration."""


_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})(?:[.,](\d+))?")
_INT_RE = re.compile(r"[+-]?\d+")
_UNITS = r"(ns|us|µs|μs|ms|h|m|s)"
_SEGMENT_RE = re.compile(r"(\d+\.?\d*|\.\d+)" + _UNITS)
_DURATION_RE = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)" + _UNITS + r")+")
_UNIT_NS = {"ns": 1, "us": 10**3, "µs": 10**3, "μs": 10**3, "ms": 10**6,
            "s": 10**9, "m": 60 * 10**9, "h": 3600 * 10**9}
_MAX_NS = 2**63 - 1


def _parse_clock(value: str) -> datetime:
    """Parse ``H:MM:SS`` (optionally with a fraction of a second) as a time of day."""
    match = _CLOCK_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"cannot parse {value!r} as time of day (expected HH:MM:SS)")
    hours, minutes, seconds = (int(g) for g in match.groups()[:3])
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"time of day out of range in {value!r}")
    fraction = match.group(4) or ""
    micros = int(fraction[:6].ljust(6, "0")) if fraction else 0
    return REFERENCE_DATE.replace(hour=hours, minute=minutes, second=seconds, microsecond=micros)


def _parse_duration(text: str) -> timedelta:
    negative = text.startswith("-")
    body = text[1:] if text[:1] in ("+", "-") else text
    if body == "0":
        return timedelta(0)
    if not _DURATION_RE.fullmatch(text):
        raise ValueError(f"invalid duration {text!r}")
    total = sum(Decimal(num) * _UNIT_NS[unit] for num, unit in _SEGMENT_RE.findall(body))
    nanos = int(total)
    if nanos > _MAX_NS + negative:
        raise ValueError(f"invalid duration {text!r}")
    delta = timedelta(microseconds=nanos // 1000)
    return -delta if negative else delta


def parse_start_delta(value: str) -> timedelta:
    """Parse a start interval given as ``HH:MM:SS`` or as a duration such as ``1m30s``.

    Raises ValueError if the text is not a valid duration.
    """
    parts = value.split(":")
    if len(parts) == 3:
        h, m, s = (int(p) if _INT_RE.fullmatch(p) else 0 for p in parts)
        value = f"{h}h{m}m{s}s"
    return _parse_duration(value)


def _fraction(value: int, scale: int) -> str:
    whole, rest = divmod(value, scale)
    if not rest:
        return str(whole)
    return f"{whole}.{str(rest).rjust(len(str(scale)) - 1, '0').rstrip('0')}"


def format_elapsed(d: timedelta) -> str:
    """Format a duration in the compact ``1h2m3.5s`` style used in log messages."""
    nanos = (d // timedelta(microseconds=1)) * 1000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    n = abs(nanos)
    if n < 1_000:
        return f"{sign}{n}ns"
    if n < 1_000_000:
        return f"{sign}{_fraction(n, 1_000)}µs"
    if n < 1_000_000_000:
        return f"{sign}{_fraction(n, 1_000_000)}ms"
    secs, rest_ns = divmod(n, 1_000_000_000)
    hours, rem = divmod(secs, 3600)
    minutes, seconds = divmod(rem, 60)
    text = _fraction(seconds * 1_000_000_000 + rest_ns, 1_000_000_000) + "s"
    if hours:
        text = f"{hours}h{minutes}m{text}"
    elif minutes:
        text = f"{minutes}m{text}"
    return sign + text


class Race:
    """A race in progress: athletes, the outgoing event log and firing-line tracking."""

    def __init__(self, config: Config, echo: TextIO | None = None) -> None:
        """Set up a race; raise RaceError if the start time or interval is invalid.

        Every logged message is also printed to ``echo`` when it is given.
        """
        try:
            self.start_time = _parse_clock(config.start)
        except ValueError as exc:
            raise RaceError(f"ошибка парсинга времени старта: {exc}") from exc
        try:
            self.start_delta = parse_start_delta(config.start_delta)
        except ValueError as exc:
            raise RaceError(f"ошибка парсинга стартового интервала: {exc}") from exc
        self.config = config
        self.athletes: dict[int, Athlete] = {}
        self.event_log: list[str] = []
        self.current_firing: dict[int, int] = {}
        self._echo = echo

    def _log(self, event: Event, message: str) -> None:
        line = f"[{format_time(event.time)}] {message}"
        self.event_log.append(line)
        if self._echo is not None:
            print(line, file=self._echo)

    def handle_event(self, event: Event) -> None:
        """Apply one event to its athlete, creating the athlete on first sight."""
        athlete = self.athletes.setdefault(event.athlete_id, Athlete(id=event.athlete_id))
        self._apply(athlete, event)
        if (
            athlete.status is Status.NOT_STARTED
            and athlete.start_time_planned is not None
            and event.time > athlete.start_time_planned + self.start_delta
        ):
            athlete.status = Status.DISQUALIFIED
            self._log(event, f"Участник({athlete.id}) дисквалифицирован (не стартовал вовремя)")

    def _apply(self, athlete: Athlete, event: Event) -> None:
        aid, params = athlete.id, event.params
        match event.event_id:
            case EventType.REGISTER:
                athlete.registered_at = event.time
                athlete.status = Status.NOT_STARTED
                self._log(event, f"Участник({aid}) зарегистрирован")
            case EventType.START_TIME_LOTTERY if params:
                try:
                    athlete.start_time_planned = parse_time(params[0])
                except ValueError:
                    return
                self._log(
                    event,
                    f"Время старта для участника({aid}) установлено жеребьевкой на {params[0]}",
                )
            case EventType.AT_START_LINE:
                athlete.status = Status.RACING
                self._log(event, f"Участник({aid}) на стартовой линии")
            case EventType.START:
                athlete.start_time_actual = event.time
                athlete.status = Status.RACING
                self._log(event, f"Участник({aid}) начал гонку")
            case EventType.AT_FIRING_LINE if params and _INT_RE.fullmatch(params[0]):
                line = int(params[0])
                athlete.firing_line_times[line] = event.time
                self.current_firing[aid] = line
                self._log(event, f"Участник({aid}) на огневом рубеже({line})")
            case EventType.HIT_SUCCESSFUL if params:
                athlete.hits += 1
                athlete.shots += 1
                self._log(event, f"Участник({aid}) попал в мишень {params[0]}")
            case EventType.HIT_MISSED if params:
                athlete.shots += 1
                self._log(event, f"Участник({aid}) промахнулся по мишени {params[0]}")
                # Every miss earns a penalty lap.
                athlete.penalty_times.append(timedelta(0))
            case EventType.LEAVE_FIRING_LINE:
                line = self.current_firing.get(aid, 0)
                arrived = athlete.firing_line_times.get(line)
                if arrived is not None:
                    self._log(
                        event,
                        f"Участник({aid}) покинул огневой рубеж({line}) "
                        f"(время: {format_elapsed(event.time - arrived)})",
                    )
            case EventType.ENTER_PENALTY:
                athlete.penalty_times.append(timedelta(0))
                self._log(event, f"Участник({aid}) вошел на штрафные круги")
            case EventType.LEAVE_PENALTY:
                self._leave_penalty(athlete, event)
            case EventType.LAP_FINISH:
                self._lap_finish(athlete, event)
            case EventType.CANT_CONTINUE:
                athlete.status = Status.NOT_FINISHED
                reason = params[0] if params else "без указания причины"
                self._log(event, f"Участник({aid}) не может продолжить: {reason}")
            case EventType.DISQUALIFIED:
                athlete.status = Status.DISQUALIFIED
                self._log(event, f"Участник({aid}) дисквалифицирован")
            case EventType.FINISHED:
                athlete.finish_time = event.time
                athlete.status = Status.FINISHED
                self._log(event, f"Участник({aid}) финишировал")

    def _leave_penalty(self, athlete: Athlete, event: Event) -> None:
        if not athlete.penalty_times or athlete.id not in self.current_firing:
            return
        arrived = athlete.firing_line_times.get(self.current_firing[athlete.id])
        if arrived is None:
            return
        penalty = event.time - arrived
        athlete.penalty_times[-1] = penalty
        athlete.total_penalty += int(penalty.total_seconds())
        self._log(
            event,
            f"Участник({athlete.id}) покинул штрафные круги "
            f"(время: {format_elapsed(penalty)}, общий штраф: {athlete.total_penalty} сек)",
        )

    def _lap_finish(self, athlete: Athlete, event: Event) -> None:
        athlete.current_lap += 1
        started = athlete.start_time_actual
        if athlete.current_lap > self.config.laps or started is None:
            return
        previous = athlete.last_lap_time if athlete.lap_times else None
        lap_time = event.time - (previous if previous is not None else started)
        athlete.lap_times.append(lap_time)
        athlete.last_lap_time = event.time
        self._log(
            event,
            f"Участник({athlete.id}) завершил круг {athlete.current_lap} "
            f"(время круга: {format_elapsed(lap_time)}, "
            f"общее время: {format_elapsed(event.time - started)})",
        )

    def calculate_stats(self) -> None:
        """Fill in distance, average speed and shooting accuracy for every athlete."""
        for athlete in self.athletes.values():
            athlete.total_distance = self.config.lap_len * len(athlete.lap_times)
            if athlete.start_time_actual is not None and athlete.finish_time is not None:
                total = (athlete.finish_time - athlete.start_time_actual).total_seconds()
                if total > 0:
                    athlete.avg_speed = athlete.total_distance / total
            if athlete.shots > 0:
                athlete.accuracy = athlete.hits / athlete.shots * 100