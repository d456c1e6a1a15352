"""Command line entry point: process an event file and print the race report."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from biathlon.config import ConfigError, load_config
from biathlon.events import EventParseError, parse_event
from biathlon.race import Race, RaceError
from biathlon.results import print_results


def _log_error(errors: TextIO, message: str) -> None:
    errors.write(f"{datetime.now():%Y/%m/%d %H:%M:%S} {message}\n")
    errors.flush()


def run(
    config_path: str | Path = "input_files/config.json",
    events_path: str | Path = "input_files/events.txt",
    logs_dir: str | Path = "logs",
    out: TextIO | None = None,
) -> Race:
    """Process the event file, print the report and return the race.

    Fatal problems are written to the error log and then raised.
    """
    out = out or sys.stdout
    logs = Path(logs_dir)
    logs.mkdir(parents=True, exist_ok=True)
    events_log_path, errors_log_path = logs / "events.log", logs / "errors.log"

    with events_log_path.open("w", encoding="utf-8") as events_log, \
            errors_log_path.open("w", encoding="utf-8") as errors:
        stage = "Ошибка загрузки конфигурации"
        try:
            config = load_config(config_path)
            stage = "Ошибка создания гонки"
            race = Race(config, echo=out)
            stage = "Ошибка открытия файла событий"
            source = open(events_path, encoding="utf-8")
        except (ConfigError, RaceError, OSError) as exc:
            _log_error(errors, f"{stage}: {exc}")
            raise

        with source:
            for number, raw_line in enumerate(source, start=1):
                line = raw_line.rstrip("\n")
                if not line.strip():
                    continue
                try:
                    race.handle_event(parse_event(line))
                except EventParseError as exc:
                    quoted = json.dumps(line, ensure_ascii=False)
                    _log_error(errors, f"Строка {number}: {exc} (содержимое: {quoted})")

        events_log.writelines(message + "\n" for message in race.event_log)

        print("\n=== РЕЗУЛЬТАТЫ ГОНКИ ===", file=out)
        print_results(race, out)
        print(f"\nЛоги сохранены в папке {logs}:", file=out)
        print(f"- События: {events_log_path}", file=out)
        if errors.tell() > 0:
            print(f"- Ошибки: {errors_log_path}", file=out)
    return race


def main(argv: list[str] | None = None) -> int:
    """Run the race processor from the command line; return the exit status."""
    parser = argparse.ArgumentParser(prog="biathlon", description="Process biathlon race events.")
    parser.add_argument("--config", default="input_files/config.json")
    parser.add_argument("--events", default="input_files/events.txt")
    parser.add_argument("--logs", default="logs")
    args = parser.parse_args(argv)
    try:
        run(args.config, args.events, args.logs)
    except (ConfigError, RaceError, OSError) as exc:
        print(f"biathlon: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())