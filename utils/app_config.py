"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores preferences that must be known before opening the collection
(data folder, active profile, log level).
Config lives in ~/.collectors_dream/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".collectors_dream"
CONFIG_FILE = CONFIG_DIR / "config.json"
LOG_FILE = CONFIG_DIR / "app.log"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception:
        return {}


def save_config(config: dict) -> None:
    """Creates ~/.collectors_dream/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except Exception:
        try:
            tmp.unlink(missing_ok=True)
        except Exception:
            pass


def get_data_folder() -> str:
    """Return config["data_folder"], falling back to ~/.collectors_dream/data."""
    return load_config().get("data_folder") or str(CONFIG_DIR / "data")


def set_data_folder(path: str | None) -> None:
    config = load_config()
    if path is None:
        config.pop("data_folder", None)
    else:
        config["data_folder"] = path
    save_config(config)


def get_profile() -> str:
    """Owner id of the local profile every category and record is scoped to."""
    return load_config().get("profile") or "local"


def get_log_level() -> str:
    return str(load_config().get("log_level") or "INFO").upper()
