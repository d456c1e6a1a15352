# biathlon

Replays a biathlon race from a timestamped event log and prints a results
report for every athlete. The report covers total time, lap times and speeds,
penalty loops, distance covered and shooting accuracy. Messages and the report
are written in Russian.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Input

A JSON configuration file (keys are matched case-insensitively):

```json
{
  "laps": 2,
  "lapLen": 4000,
  "penaltyLen": 150,
  "firingLines": 2,
  "start": "10:00:00",
  "startDelta": "00:01:00"
}
```

`startDelta` may be given as `HH:MM:SS` or as a duration such as `1m30s`.

An events file with one event per line, in the form
`[HH:MM:SS.mmm] <event id> <athlete id> [params...]`:

```
[09:00:00.000] 1 1
[09:05:00.000] 2 1 10:00:00.000
[10:00:00.000] 4 1
[10:30:00.000] 5 1 1
[10:30:05.000] 6 1 1
[10:30:06.000] 61 1 2
[10:31:00.000] 7 1
[10:45:00.000] 10 1
[11:30:00.000] 33 1
```

| ID | Meaning                     |
|----|-----------------------------|
| 1  | registered                  |
| 2  | start time set by draw      |
| 3  | at the start line           |
| 4  | started                     |
| 5  | at firing line (line no.)   |
| 6  | target hit (target no.)     |
| 61 | target missed (target no.)  |
| 7  | left firing line            |
| 8  | entered penalty loops       |
| 9  | left penalty loops          |
| 10 | lap finished                |
| 11 | cannot continue (reason)    |
| 32 | disqualified                |
| 33 | finished                    |

These identifiers are available as `biathlon.events.EventType`. Every miss
(61) also records a penalty loop. An athlete still not started once the drawn
start time plus the start interval has passed is disqualified.

## Command line

```
biathlon
```

By default the command reads `input_files/config.json` and
`input_files/events.txt`, prints every processed event and then the final
report, and writes `logs/events.log` and `logs/errors.log`. Other locations
can be given with `--config`, `--events` and `--logs`:

```
biathlon --config race.json --events events.txt --logs out
```

Lines that cannot be parsed are skipped and recorded in the error log. If the
configuration cannot be loaded, the race cannot be set up or the events file
cannot be opened, the problem is written to the error log and to standard
error, and the command exits with status 1.

## Library use

```python
from biathlon.config import load_config
from biathlon.events import parse_event
from biathlon.race import Race
from biathlon.results import format_results

race = Race(load_config("input_files/config.json"))
with open("input_files/events.txt", encoding="utf-8") as fh:
    for line in fh:
        if line.strip():
            race.handle_event(parse_event(line))

print(format_results(race))
```

Pass a text stream as `echo` (for example `Race(config, echo=sys.stdout)`) to
have every logged message printed as it is produced; the messages are always
kept in `race.event_log`.

- `parse_event` raises `EventParseError` for a malformed line.
- `load_config` raises `ConfigError` for a missing or invalid file.
- `Race` raises `RaceError` when the start time or start interval cannot be parsed.
- `biathlon.results.sorted_results(race)` gives the athletes in report order
  (by status name, then finish time, then id); `print_results(race, file)`
  writes the report to a stream.
- `biathlon.cli.run(config_path, events_path, logs_dir, out)` does what the
  command does and returns the `Race`.