"""Tests for per-owner settings.json."""

import json
from pathlib import Path

import pytest

from services.settings_service import SettingsService
from utils.errors import AccessDenied, ValidationError


class TestSettingsService:
    def test_defaults_without_file(self, settings_service: SettingsService):
        assert settings_service.get_all() == {"dark_mode": False, "theme": "default"}
        assert settings_service.get("missing", "x") == "x"

    def test_ensure_file_writes_defaults(self, tmp_path: Path, settings_service: SettingsService):
        settings_service.ensure_file()
        path = tmp_path / "users" / "alice" / "settings.json"
        assert json.loads(path.read_text()) == {"dark_mode": False, "theme": "default"}

    def test_update_merges(self, settings_service: SettingsService):
        settings_service.update(language="en")
        merged = settings_service.update(dark_mode=True)
        assert merged == {"dark_mode": True, "theme": "default", "language": "en"}
        assert settings_service.appearance_mode() == "dark"

    def test_unknown_theme_rejected(self, settings_service: SettingsService):
        with pytest.raises(ValidationError) as exc:
            settings_service.update(theme="purple")
        assert exc.value.field == "theme"
        assert settings_service.get("theme") == "default"

    def test_color_theme(self, settings_service: SettingsService):
        assert settings_service.color_theme() == "blue"
        settings_service.update(theme="green")
        assert settings_service.color_theme() == "green"

    def test_owners_are_separate(self, tmp_path: Path, settings_service: SettingsService):
        settings_service.update(dark_mode=True)
        assert SettingsService(tmp_path, "bob").get("dark_mode") is False

    def test_invalid_owner(self, tmp_path: Path):
        with pytest.raises(AccessDenied):
            SettingsService(tmp_path, "../etc")
