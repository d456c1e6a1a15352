import json

import pytest

from biathlon.config import Config, ConfigError, load_config

TEST_CONFIG = """{
    "laps": 3,
    "lapLen": 4000,
    "penaltyLen": 150,
    "firingLines": 2,
    "start": "10:00:00",
    "startDelta": "00:01:00"
}"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config_test.json"
    path.write_text(TEST_CONFIG, encoding="utf-8")
    return path


def test_valid_config(config_file):
    cfg = load_config(config_file)
    assert cfg.laps == 3
    assert cfg.lap_len == 4000
    assert cfg.penalty_len == 150
    assert cfg.firing_lines == 2
    assert cfg.start == "10:00:00"
    assert cfg.start_delta == "00:01:00"


def test_accepts_string_path(config_file):
    assert load_config(str(config_file)) == Config(3, 4000, 150, 2, "10:00:00", "00:01:00")


def test_file_not_exists(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nonexistent_file.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "config_invalid.json"
    path.write_text("{ invalid json }", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_fields_take_defaults(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"laps": 2}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg == Config(laps=2)
    assert cfg.start == ""


def test_unknown_fields_ignored(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(json.dumps({"laps": 1, "unused": True}), encoding="utf-8")
    assert load_config(path).laps == 1


def test_keys_match_case_insensitively(tmp_path):
    path = tmp_path / "case.json"
    path.write_text(json.dumps({"LAPLEN": 4000}), encoding="utf-8")
    assert load_config(path).lap_len == 4000


@pytest.mark.parametrize(
    "payload", [{"laps": "3"}, {"laps": 3.5}, {"laps": True}, {"start": 10}, [1, 2]]
)
def test_wrong_types_rejected(tmp_path, payload):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)