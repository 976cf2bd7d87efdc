import os
import json
import pytest
from unittest.mock import MagicMock
from tubebatch.config import load_config, validate_config, validate_schedule_time, RunConfig

@pytest.fixture
def mock_translator():
    """Fixture to mock the Translator class."""
    translator = MagicMock()
    translator.get.side_effect = lambda key, **kwargs: key
    return translator

@pytest.fixture(scope="function")
def temp_config_file(tmp_path):
    config_data = {
        "dataset": {"path": "videos.xlsx", "remote_url": "https://example.com/videos.xlsx"},
        "markers": {"publish": "Uploaded"},
        "schedule": {"time": "07:15", "timezone": "UTC"}
    }
    config_path = tmp_path / "config.json"
    with open(config_path, "w") as f:
        json.dump(config_data, f)

    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_cwd)

def test_load_config_success(temp_config_file, mock_translator):
    """
    Test that load_config returns the correct configuration data when the file is valid.
    """
    config = load_config(mock_translator)
    assert config["dataset"]["path"] == "videos.xlsx"
    assert config["schedule"]["time"] == "07:15"

def test_load_config_not_found(tmp_path, mock_translator):
    """
    Test that load_config exits when the config file is not found.
    """
    with pytest.raises(SystemExit) as e:
        load_config(mock_translator, str(tmp_path / "config.json"))
    assert e.value.code == 1

def test_load_config_invalid_json(tmp_path, mock_translator):
    """
    Test that load_config exits with invalid JSON.
    """
    config_path = tmp_path / "config.json"
    with open(config_path, "w") as f:
        f.write("{'invalid_json':}")

    with pytest.raises(SystemExit) as e:
        load_config(mock_translator, str(config_path))
    assert e.value.code == 1

def test_load_config_no_dataset_key(tmp_path, mock_translator):
    """
    Test that load_config exits if 'dataset' key is missing.
    """
    config_path = tmp_path / "config.json"
    with open(config_path, "w") as f:
        json.dump({"other_key": "value"}, f)

    with pytest.raises(SystemExit) as e:
        load_config(mock_translator, str(config_path))
    assert e.value.code == 1

@pytest.mark.parametrize("config, message_key", [
    ([], 'config.must_be_dict'),
    ({"dataset": {}}, 'config.dataset_path_required'),
    ({"dataset": {"path": "  "}}, 'config.dataset_path_required'),
    ({"dataset": {"path": "v.xlsx"}, "media": []}, 'config.section_must_be_dict'),
    ({"dataset": {"path": "v.xlsx"}, "markers": {"publish": ""}}, 'config.invalid_marker'),
    ({"dataset": {"path": "v.xlsx"}, "update": {"match_by": "row"}}, 'config.invalid_match_by'),
    ({"dataset": {"path": "v.xlsx"}, "auth": {"flow": "browser"}}, 'config.invalid_auth_flow'),
    ({"dataset": {"path": "v.xlsx"}, "schedule": {"time": "8pm"}}, 'config.invalid_schedule_time'),
])
def test_validate_config_rejects(config, message_key, mock_translator):
    with pytest.raises(ValueError, match=message_key):
        validate_config(config, mock_translator)

@pytest.mark.parametrize("at_time, valid", [
    ("20:00", True), ("00:00", True), ("23:59", True),
    ("24:00", False), ("12:60", False), ("9:00", False), ("", False), (None, False),
])
def test_validate_schedule_time(at_time, valid):
    assert validate_schedule_time(at_time) is valid

def test_run_config_defaults():
    config = RunConfig.from_dict({"dataset": {"path": "videos.xlsx"}})
    assert config.dataset_path == "videos.xlsx"
    assert config.remote_url == ""
    assert config.publish_marker == "Uploaded"
    assert config.update_marker == "updated_description"
    assert config.update_match_by == "key"
    assert config.default_category == "22"
    assert config.default_privacy == "private"
    assert config.cleanup_downloads is True
    assert config.schedule_time == "20:00"
    assert config.schedule_timezone == "Asia/Kolkata"

def test_run_config_from_full_dict():
    config = RunConfig.from_dict({
        "dataset": {"path": "d.csv", "remote_url": "https://example.com/d.csv"},
        "media": {"download_dir": "cache", "cleanup_downloads": False},
        "upload": {"shorts": True, "shorts_max_seconds": 30},
        "markers": {"publish": "Done", "update": "Desc done"},
        "update": {"match_by": "position"},
        "auth": {"flow": "console", "simulate_without_credentials": True},
    })
    assert config.remote_url == "https://example.com/d.csv"
    assert config.download_dir == "cache"
    assert config.cleanup_downloads is False
    assert config.shorts is True
    assert config.shorts_max_seconds == 30
    assert config.publish_marker == "Done"
    assert config.update_marker == "Desc done"
    assert config.update_match_by == "position"
    assert config.auth_flow == "console"
    assert config.simulate_without_credentials is True

def test_run_config_overrides_ignore_none():
    config = RunConfig(dataset_path="v.xlsx").with_overrides(shorts=True, update_match_by=None)
    assert config.shorts is True
    assert config.update_match_by == "key"
