"""Export and import a profile's categories, items and settings as JSON,
or export items as one CSV per category inside a ZIP.
"""
import csv
import io
import json
import logging
import zipfile
from datetime import datetime

from database.category_dao import CategoryDAO
from database.record_dao import RecordDAO
from models.category import Category
from services.category_service import CategoryService
from services.settings_service import SettingsService
from utils.constants import RESERVED_FIELD_NAMES
from utils.errors import ValidationError
from utils.labels import derive_key

logger = logging.getLogger(__name__)

IMPORT_MODES = ("merge", "replace")

# Settings keys written by the browser version of the app
_LEGACY_SETTING_KEYS = {"darkMode": "dark_mode"}


class DataService:
    def __init__(
        self,
        category_dao: CategoryDAO,
        record_dao: RecordDAO,
        settings_service: SettingsService,
    ):
        self._category_dao = category_dao
        self._record_dao = record_dao
        self._settings = settings_service
        self._owner_id = category_dao.owner_id

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "export_version": 1,
            "exported_at": datetime.now().isoformat(),
            "categories": {c.key: c.to_dict() for c in self._category_dao.get_all()},
            "items": [r.to_dict() for r in self._record_dao.get_all(self._owner_id)],
            "settings": self._settings.get_all(),
        }

    def export_csv_zip(self, path: str) -> None:
        """Write a ZIP archive containing one CSV per category."""
        categories = self._category_dao.get_map()
        records = self._record_dao.get_all(self._owner_id)
        by_category: dict[str, list] = {}
        for r in records:
            by_category.setdefault(r.category, []).append(r)

        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            for key, rows in by_category.items():
                category = categories.get(key)
                columns = list(category.field_names) if category else []
                for r in rows:
                    for name in r.fields:
                        if name not in columns:
                            columns.append(name)
                buf = io.StringIO()
                writer = csv.DictWriter(buf, fieldnames=["id"] + columns, restval="")
                writer.writeheader()
                for r in rows:
                    writer.writerow({"id": r.id, **{
                        k: ("" if v is None else v) for k, v in r.fields.items()
                    }})
                zf.writestr(f"{key}.csv", buf.getvalue())

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, data: dict, mode: str) -> dict:
        """Import from a previously exported JSON dict.

        mode: 'merge' | 'replace'
        Accepts this app's export and the flat item documents of older
        versions (fields next to category/_id/__v/userId).
        Returns stats dict with counts of created entities.
        """
        if mode not in IMPORT_MODES:
            raise ValidationError(f"Unknown import mode '{mode}'.", field="mode")
        if not isinstance(data, dict):
            raise ValidationError("Import file does not contain a JSON object.")

        stats = {"categories": 0, "items": 0, "skipped": 0, "settings": 0}

        if mode == "replace":
            removed = self._record_dao.delete_all(self._owner_id)
            self._category_dao.replace_all([])
            logger.info("Import replace: cleared %d item(s) and all categories", removed)

        # ── Categories ────────────────────────────────────────────────────────
        raw_categories = data.get("categories") or {}
        if isinstance(raw_categories, dict):
            for key, raw in raw_categories.items():
                if not isinstance(raw, dict):
                    stats["skipped"] += 1
                    continue
                key = key or derive_key(raw.get("name") or "")
                if self._category_dao.exists(key):
                    continue  # Already exists; merge keeps the local schema
                category = Category.from_dict(key, raw)
                try:
                    CategoryService.validate(category)
                except ValidationError as e:
                    logger.warning("Skipping category '%s' on import: %s", key, e)
                    stats["skipped"] += 1
                    continue
                self._category_dao.save(category)
                stats["categories"] += 1

        # ── Items ─────────────────────────────────────────────────────────────
        existing_keys: set[tuple] = set()
        if mode == "merge":
            for r in self._record_dao.get_all(self._owner_id):
                existing_keys.add(self._dedup_key(r.category, r.fields))

        for item in data.get("items") or []:
            if not isinstance(item, dict):
                stats["skipped"] += 1
                continue
            category_key, fields, created_at = self._split_item(item)
            if not category_key:
                stats["skipped"] += 1
                continue
            if mode == "merge":
                key = self._dedup_key(category_key, fields)
                if key in existing_keys:
                    continue
                existing_keys.add(key)
            self._record_dao.create(self._owner_id, category_key, fields, created_at=created_at)
            stats["items"] += 1

        # ── Settings ──────────────────────────────────────────────────────────
        raw_settings = data.get("settings")
        if mode == "replace" and isinstance(raw_settings, dict):
            settings = {_LEGACY_SETTING_KEYS.get(k, k): v for k, v in raw_settings.items()}
            self._settings.replace(settings)
            stats["settings"] = 1

        logger.info("Import (%s) finished: %s", mode, stats)
        return stats

    # ── Private helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _split_item(item: dict) -> tuple[str, dict, str | None]:
        category_key = item.get("category")
        if not isinstance(category_key, str):
            category_key = ""
        if isinstance(item.get("fields"), dict):
            fields = dict(item["fields"])
            created_at = item.get("created_at") or None
        else:
            fields = {k: v for k, v in item.items() if k not in RESERVED_FIELD_NAMES}
            created_at = None
        return category_key, fields, created_at

    @staticmethod
    def _dedup_key(category_key: str, fields: dict) -> tuple:
        return category_key, json.dumps(fields, sort_keys=True, default=str)


def summarize_import(stats: dict) -> str:
    """One-line status text for the counts returned by import_json."""
    parts = [f"{count} {name}" for name, count in stats.items() if count and name != "skipped"]
    text = "Imported " + ", ".join(parts) + "." if parts else "Nothing new to import."
    if stats.get("skipped"):
        text += f" Skipped {stats['skipped']} invalid entr{'y' if stats['skipped'] == 1 else 'ies'}."
    return text
