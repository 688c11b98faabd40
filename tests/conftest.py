"""Shared fixtures: a temporary data folder wired up the way main.py does it."""

from pathlib import Path

import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.record_dao import RecordDAO
from models.category import FieldDefinition
from services.category_service import CategoryService
from services.migration_service import MigrationService
from services.record_service import RecordService
from services.settings_service import SettingsService

OWNER = "alice"


@pytest.fixture
def db(tmp_path: Path) -> DatabaseManager:
    """An initialized record store in a temporary folder."""
    db = DatabaseManager.open_in_folder(str(tmp_path))
    yield db
    db.close()


@pytest.fixture
def record_dao(db: DatabaseManager) -> RecordDAO:
    return RecordDAO(db)


@pytest.fixture
def category_dao(tmp_path: Path) -> CategoryDAO:
    dao = CategoryDAO(tmp_path, OWNER)
    dao.ensure_file()
    return dao


@pytest.fixture
def migration_service(record_dao: RecordDAO) -> MigrationService:
    return MigrationService(record_dao, OWNER, max_workers=2)


@pytest.fixture
def category_service(category_dao, record_dao, migration_service) -> CategoryService:
    return CategoryService(category_dao, record_dao, migration_service)


@pytest.fixture
def record_service(record_dao, category_dao) -> RecordService:
    return RecordService(record_dao, category_dao)


@pytest.fixture
def settings_service(tmp_path: Path) -> SettingsService:
    return SettingsService(tmp_path, OWNER)


def _comic_fields() -> list[FieldDefinition]:
    return [
        FieldDefinition.from_label("Title", "text"),
        FieldDefinition.from_label("Year", "number"),
        FieldDefinition.from_label("Signed", "boolean"),
    ]


@pytest.fixture
def comic_fields() -> list[FieldDefinition]:
    return _comic_fields()


@pytest.fixture
def comics(category_service: CategoryService):
    """A 'Comics' category with title/year/signed fields."""
    return category_service.create("Comics", _comic_fields())
