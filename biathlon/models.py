"""Athlete state tracked during a race."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class Status(str, Enum):
    """Race status of an athlete; ordering follows the status names."""

    NOT_STARTED = "NotStarted"
    RACING = "Racing"
    NOT_FINISHED = "NotFinished"
    FINISHED = "Finished"
    DISQUALIFIED = "Disqualified"

    def __str__(self) -> str:
        return self.value


@dataclass
class Athlete:
    """Everything recorded about one athlete."""

    id: int
    registered_at: datetime | None = None
    start_time_planned: datetime | None = None
    start_time_actual: datetime | None = None
    finish_time: datetime | None = None
    status: Status = Status.NOT_STARTED
    lap_times: list[timedelta] = field(default_factory=list)
    penalty_times: list[timedelta] = field(default_factory=list)
    current_lap: int = 0
    total_penalty: int = 0
    shots: int = 0
    hits: int = 0
    firing_line_times: dict[int, datetime] = field(default_factory=dict)
    """Arrival time at each firing line."""
    last_lap_time: datetime | None = None
    """Time the last completed lap ended."""
    total_distance: int = 0
    avg_speed: float = 0.0
    accuracy: float = 0.0