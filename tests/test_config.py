import json

import pytest

from swissorganizer.config import AppConfig, load_config
from swissorganizer.exceptions import FileLoadException, InvalidConfigurationException


def test_defaults_when_file_missing(tmp_path):
    config = load_config(tmp_path / "config.json", environ={})
    assert config.round_duration_minutes == 65
    assert config.timer_milestones_minutes == [40, 20]
    assert config.export_timezone == "Europe/Zurich"
    assert config.data_file.endswith("state.json")


def test_file_values_and_environment_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"round_duration_minutes": 50, "github_repo": "Results"}),
        encoding="utf-8",
    )
    config = load_config(
        path,
        environ={
            "SWISS_ORGANIZER_DATA": str(tmp_path / "data.json"),
            "SWISS_ORGANIZER_LOG_LEVEL": "debug",
        },
    )
    assert config.round_duration_minutes == 50
    assert config.github_repo == "Results"
    assert config.data_file == str(tmp_path / "data.json")
    assert config.log_level == "debug"


def test_unreadable_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(FileLoadException):
        load_config(path, environ={})


def test_invalid_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"round_duration_minutes": 0}), encoding="utf-8")
    with pytest.raises(InvalidConfigurationException):
        load_config(path, environ={})

    with pytest.raises(InvalidConfigurationException):
        AppConfig.from_dict({"round_duration_minutes": "soon"})

    with pytest.raises(InvalidConfigurationException):
        AppConfig(export_timezone="Nowhere/Special").validate()


def test_to_dict_round_trip():
    config = AppConfig(round_duration_minutes=45, timer_milestones_minutes=[30])
    assert AppConfig.from_dict(config.to_dict()) == config
