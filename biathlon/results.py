"""Final race report."""

from __future__ import annotations

import math
import sys
from typing import TextIO

from biathlon.models import Athlete
from biathlon.race import Race
from biathlon.timeutil import REFERENCE_DATE, format_duration


def sorted_results(race: Race) -> list[Athlete]:
    """Athletes ordered by status name, then finish time, then id."""
    return sorted(
        race.athletes.values(),
        key=lambda a: (a.status.value, a.finish_time is None, a.finish_time or REFERENCE_DATE, a.id),
    )


def _fmt2(value: float) -> str:
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return "NaN" if math.isnan(value) else f"{value:.2f}"


def _athlete_lines(race: Race, position: int, athlete: Athlete) -> list[str]:
    lines = [f"{position}. Участник {athlete.id} - {athlete.status}"]
    if athlete.start_time_actual is not None:
        if athlete.finish_time is not None:
            total = athlete.finish_time - athlete.start_time_actual
            lines.append(f"   Общее время: {format_duration(total)}")
        lap_len = race.config.lap_len
        for number, lap in enumerate(athlete.lap_times, start=1):
            seconds = lap.total_seconds()
            if seconds:
                speed = lap_len / seconds
            else:
                speed = math.nan if lap_len == 0 else math.copysign(math.inf, lap_len)
            lines.append(f"   Круг {number}: {format_duration(lap)} ({_fmt2(speed)} м/с)")
        penalty_total = 0
        for number, penalty in enumerate(athlete.penalty_times, start=1):
            seconds = penalty.total_seconds()
            if seconds <= 0:
                continue
            speed = race.config.penalty_len / seconds * 100
            rounded = math.copysign(math.floor(abs(speed) + 0.5), speed) / 100
            penalty_total += int(seconds)
            lines.append(f"   Штраф {number}: {format_duration(penalty)} ({_fmt2(rounded)} м/с)")
        if penalty_total > 0:
            lines.append(f"   Общее штрафное время: {penalty_total} сек")
    lines.append(f"   Общая дистанция: {athlete.total_distance} м")
    if athlete.avg_speed > 0:
        lines.append(f"   Средняя скорость: {athlete.avg_speed:.2f} м/с")
    if athlete.shots > 0:
        lines.append(f"   Точность стрельбы: {athlete.accuracy:.1f}%")
    lines += [f"   Стрельба: {athlete.hits}/{athlete.shots} попаданий", ""]
    return lines


def format_results(race: Race) -> str:
    """Compute statistics and render the final report."""
    race.calculate_stats()
    lines = ["", "🏁 Итоговый отчет:"]
    for position, athlete in enumerate(sorted_results(race), start=1):
        lines += _athlete_lines(race, position, athlete)
    return "\n".join(lines) + "\n"


def print_results(race: Race, file: TextIO | None = None) -> None:
    """Write the final report to ``file`` (standard output by default)."""
    print(format_results(race), end="", file=file or sys.stdout)