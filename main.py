import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.record_dao import RecordDAO
from database.category_dao import CategoryDAO

from services.category_service import CategoryService
from services.data_service import DataService
from services.migration_service import MigrationService
from services.record_service import RecordService
from services.settings_service import SettingsService

from ui.app_window import AppWindow
from utils.app_config import CONFIG_DIR, LOG_FILE, get_data_folder, get_log_level, get_profile
from utils.constants import MIGRATION_MAX_WORKERS

logger = logging.getLogger(__name__)


def configure_logging():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, get_log_level().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def main():
    configure_logging()

    # ── Bootstrap: data folder and profile from pre-DB config ─────────────────
    data_folder = get_data_folder()
    profile = get_profile()
    logger.info("Starting with data folder %s, profile '%s'", data_folder, profile)

    # ── Storage ──────────────────────────────────────────────────────────────
    db = DatabaseManager.open_in_folder(data_folder)
    record_dao = RecordDAO(db)
    category_dao = CategoryDAO(data_folder, profile)
    category_dao.ensure_file()

    # ── Services ─────────────────────────────────────────────────────────────
    settings_svc = SettingsService(data_folder, profile)
    settings_svc.ensure_file()
    migration_svc = MigrationService(record_dao, profile, max_workers=MIGRATION_MAX_WORKERS)
    category_svc = CategoryService(category_dao, record_dao, migration_svc)
    record_svc = RecordService(record_dao, category_dao)
    data_svc = DataService(category_dao, record_dao, settings_svc)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(settings_svc.appearance_mode())
    ctk.set_default_color_theme(settings_svc.color_theme())

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        record_service=record_svc,
        category_service=category_svc,
        settings_service=settings_svc,
        data_service=data_svc,
        profile=profile,
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
