import logging
from pathlib import Path
from typing import Optional

from database.json_store import JsonDocument
from database.owner import check_owner_id
from models.category import Category
from utils.constants import CATEGORIES_FILE

logger = logging.getLogger(__name__)


class CategoryDAO:
    """One owner's categories.json: {key: {name, fields}}."""

    def __init__(self, data_folder: str | Path, owner_id: str):
        self.owner_id = check_owner_id(owner_id)
        self._doc = JsonDocument(Path(data_folder) / "users" / self.owner_id / CATEGORIES_FILE)
        self._all_cache: dict[str, Category] | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _load(self) -> dict[str, Category]:
        if self._all_cache is None:
            raw = self._doc.read()
            self._all_cache = {
                key: Category.from_dict(key, value)
                for key, value in raw.items()
                if isinstance(value, dict)
            }
        return self._all_cache

    def ensure_file(self):
        if not self._doc.exists():
            self._doc.write({})
            logger.info("Created %s", self._doc.path)

    def get_all(self) -> list[Category]:
        return sorted(self._load().values(), key=lambda c: (c.name.lower(), c.key))

    def get_map(self) -> dict[str, Category]:
        return dict(self._load())

    def get_by_key(self, key: str) -> Optional[Category]:
        return self._load().get(key)

    def exists(self, key: str) -> bool:
        return key in self._load()

    def save(self, category: Category) -> Optional[Category]:
        """Fully replace the entry for category.key; returns the previous value."""
        raw = self._doc.read()
        previous = raw.get(category.key)
        raw[category.key] = category.to_dict()
        self._doc.write(raw)
        self._invalidate_cache()
        if isinstance(previous, dict):
            return Category.from_dict(category.key, previous)
        return None

    def delete(self, key: str) -> bool:
        raw = self._doc.read()
        if key not in raw:
            return False
        del raw[key]
        self._doc.write(raw)
        self._invalidate_cache()
        return True

    def replace_all(self, categories: list[Category]):
        self._doc.write({c.key: c.to_dict() for c in categories})
        self._invalidate_cache()
