"""Tests for the bootstrap config file."""

from pathlib import Path

import pytest

import utils.app_config as app_config


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Point the config module at a temporary home folder."""
    config_dir = tmp_path / ".collectors_dream"
    monkeypatch.setattr(app_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(app_config, "CONFIG_FILE", config_dir / "config.json")
    return config_dir


class TestLoadConfig:
    def test_missing_file(self):
        assert app_config.load_config() == {}

    def test_corrupt_file(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{oops", encoding="utf-8")
        assert app_config.load_config() == {}


class TestDataFolder:
    def test_default_under_config_dir(self, config_dir: Path):
        assert app_config.get_data_folder() == str(config_dir / "data")

    def test_set_and_reset(self, config_dir: Path, tmp_path: Path):
        app_config.set_data_folder(str(tmp_path / "elsewhere"))
        assert app_config.get_data_folder() == str(tmp_path / "elsewhere")
        assert not (config_dir / "config.tmp").exists()

        app_config.set_data_folder(None)
        assert app_config.get_data_folder() == str(config_dir / "data")


class TestProfileAndLogLevel:
    def test_defaults(self):
        assert app_config.get_profile() == "local"
        assert app_config.get_log_level() == "INFO"

    def test_values_from_file(self):
        app_config.save_config({"profile": "alice", "log_level": "debug"})
        assert app_config.get_profile() == "alice"
        assert app_config.get_log_level() == "DEBUG"
