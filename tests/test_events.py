from datetime import time

import pytest

from biathlon.events import Event, EventParseError, EventType, parse_event
from biathlon.timeutil import parse_time


@pytest.mark.parametrize(
    "line, clock, event_id, athlete_id, params",
    [
        ("[09:00:00.000] 1 1", time(9, 0, 0), EventType.REGISTER, 1, []),
        ("[09:05:00.000] 2 1 09:30:00.000", time(9, 5, 0), EventType.START_TIME_LOTTERY, 1,
         ["09:30:00.000"]),
        ("[09:45:00.000] 5 1 1", time(9, 45, 0), EventType.AT_FIRING_LINE, 1, ["1"]),
        ("[09:45:05.000] 6 1 1", time(9, 45, 5), EventType.HIT_SUCCESSFUL, 1, ["1"]),
        ("[09:45:06.000] 61 1 2", time(9, 45, 6), EventType.HIT_MISSED, 1, ["2"]),
    ],
)
def test_parse_valid_events(line, clock, event_id, athlete_id, params):
    event = parse_event(line)
    assert event.time.time() == clock
    assert event.event_id == event_id
    assert event.athlete_id == athlete_id
    assert event.params == params
    assert event.raw == line


@pytest.mark.parametrize(
    "line, message",
    [
        ("", "пустая строка"),
        ("[09:45:06.000] invalid", "Некорректная строка события: [09:45:06.000] invalid"),
        ("[09:45:06] 1 1", "Ошибка парсинга времени"),
        ("[09:45:06.000] x 1", "Ошибка парсинга ID события"),
        ("[09:45:06.000] 1 y", "Ошибка парсинга ID участника"),
        ("   \t ", "пустая строка"),
    ],
)
def test_parse_invalid_events(line, message):
    with pytest.raises(EventParseError) as info:
        parse_event(line)
    assert message in str(info.value)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_event("[09:45:06.000] 1.5 1")


def test_extra_whitespace_and_params():
    event = parse_event("  [10:00:00.000]   11   3  lost   in   the   woods ")
    assert event.event_id == EventType.CANT_CONTINUE
    assert event.athlete_id == 3
    assert event.params == ["lost", "in", "the", "woods"]


def test_time_matches_parse_time():
    event = parse_event("[10:30:00.500] 10 2")
    assert event.time == parse_time("10:30:00.500")
    assert event.event_id == EventType.LAP_FINISH


def test_unknown_event_id_kept():
    event = parse_event("[10:30:00.000] 99 2")
    assert event.event_id == 99


def test_event_defaults():
    t = parse_time("10:00:00.000")
    event = Event(time=t, event_id=EventType.START, athlete_id=4)
    assert event.params == []
    assert event.raw == ""