from pathlib import Path
from typing import Any

from database.json_store import JsonDocument
from database.owner import check_owner_id
from utils.constants import DEFAULT_SETTINGS, SETTINGS_FILE, THEMES
from utils.errors import ValidationError


class SettingsService:
    """Free-form per-owner settings.json, merged over DEFAULT_SETTINGS on read."""

    def __init__(self, data_folder: str | Path, owner_id: str):
        self._owner_id = check_owner_id(owner_id)
        self._doc = JsonDocument(
            Path(data_folder) / "users" / self._owner_id / SETTINGS_FILE,
            default=DEFAULT_SETTINGS,
        )

    def ensure_file(self):
        if not self._doc.exists():
            self._doc.write(dict(DEFAULT_SETTINGS))

    def get_all(self) -> dict[str, Any]:
        return {**DEFAULT_SETTINGS, **self._doc.read()}

    def get(self, key: str, default: Any = None) -> Any:
        return self.get_all().get(key, default)

    def update(self, **changes) -> dict[str, Any]:
        theme = changes.get("theme")
        if theme is not None and theme not in THEMES:
            raise ValidationError(
                f"Unknown theme '{theme}'. Must be one of: {', '.join(THEMES)}.",
                field="theme",
            )
        settings = {**self._doc.read(), **changes}
        self._doc.write(settings)
        return {**DEFAULT_SETTINGS, **settings}

    def replace(self, settings: dict[str, Any]):
        self._doc.write(dict(settings))

    def appearance_mode(self) -> str:
        return "dark" if self.get("dark_mode") else "light"

    def color_theme(self) -> str:
        return THEMES.get(self.get("theme"), THEMES["default"])
