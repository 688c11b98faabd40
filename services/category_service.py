import logging
from dataclasses import replace

from database.category_dao import CategoryDAO
from database.record_dao import RecordDAO
from models.category import Category, FieldDefinition
from services.migration_service import MigrationResult, MigrationService
from utils.constants import FIELD_TYPES, RESERVED_FIELD_NAMES
from utils.errors import NotFoundError, ValidationError
from utils.labels import derive_key

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(
        self,
        category_dao: CategoryDAO,
        record_dao: RecordDAO,
        migration_service: MigrationService,
    ):
        self._dao = category_dao
        self._records = record_dao
        self._migrations = migration_service
        self._owner_id = category_dao.owner_id

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_map(self) -> dict[str, Category]:
        return self._dao.get_map()

    def get_keys(self) -> list[str]:
        return [c.key for c in self._dao.get_all()]

    def field_counts(self) -> dict[str, int]:
        return {c.key: len(c.fields) for c in self._dao.get_all()}

    def get(self, key: str) -> Category | None:
        return self._dao.get_by_key(key)

    def require(self, key: str) -> Category:
        category = self._dao.get_by_key(key)
        if category is None:
            raise NotFoundError(f"Category '{key}' not found.")
        return category

    def item_counts(self) -> dict[str, int]:
        return self._records.count_by_category(self._owner_id)

    @staticmethod
    def build_fields(rows: list[tuple[str, str]]) -> list[FieldDefinition]:
        """Field definitions from editor rows of (label, type); blank labels are skipped."""
        return [
            FieldDefinition.from_label(label, type_)
            for label, type_ in rows
            if label and label.strip()
        ]

    def create(self, name: str, fields: list[FieldDefinition]) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.", field="name")
        key = derive_key(name)
        if self._dao.exists(key):
            raise ValidationError(f"A category named '{name}' already exists.", field="name")
        self._check_name_free(name, key)
        category = Category(key=key, name=name, fields=list(fields))
        self.save(key, category)
        return category

    def update(
        self,
        key: str,
        name: str,
        fields: list[FieldDefinition],
        migrate: bool = True,
    ) -> tuple[Category, MigrationResult | None]:
        self.require(key)
        name = (name or "").strip()
        self._check_name_free(name, key)
        category = Category(key=key, name=name, fields=list(fields))
        result = self.save(key, category, migrate=migrate)
        return category, result

    def save(
        self,
        key: str | None,
        category: Category,
        migrate: bool = False,
    ) -> MigrationResult | None:
        """Create or fully replace the category stored under key.

        When migrate is set and a previous version existed, existing records
        are reconciled with the new field list before returning.
        """
        self.validate(category)
        key = key or derive_key(category.name.strip())
        stored = replace(category, key=key, fields=list(category.fields))

        previous = self._dao.save(stored)
        logger.info(
            "%s category '%s' with %d field(s)",
            "Replaced" if previous else "Created", key, len(stored.fields),
        )
        if migrate and previous is not None:
            return self._migrations.migrate(key, previous.fields, stored.fields)
        return None

    def delete(self, key: str, cascade_delete_records: bool = False) -> int:
        """Remove a category; with cascade, its records go first. Returns records deleted."""
        self.require(key)
        deleted = 0
        if cascade_delete_records:
            deleted = self._records.delete_by_category(self._owner_id, key)
        self._dao.delete(key)
        logger.info("Deleted category '%s' (%d record(s) cascaded)", key, deleted)
        return deleted

    # ── Validation ───────────────────────────────────────────────────────────

    def _check_name_free(self, name: str, key: str):
        """Display names are unique per owner, ignoring case."""
        wanted = name.casefold()
        for other in self._dao.get_all():
            if other.key != key and other.name.strip().casefold() == wanted:
                raise ValidationError(
                    f"Another category is already named '{other.name}'.", field="name"
                )

    @staticmethod
    def validate(category: Category):
        if not category.name or not category.name.strip():
            raise ValidationError("Category name cannot be empty.", field="name")
        if not category.fields:
            raise ValidationError(
                f"Category '{category.name}' needs at least one field.", field="fields"
            )
        seen: set[str] = set()
        for f in category.fields:
            if not f.label or not f.label.strip() or not f.name:
                raise ValidationError(
                    f"Every field in '{category.name}' needs a label.", field="fields"
                )
            if f.type not in FIELD_TYPES:
                raise ValidationError(
                    f"Field '{f.label}' has invalid type '{f.type}'. "
                    f"Must be one of: {', '.join(FIELD_TYPES)}.",
                    field=f.name,
                )
            if f.name in RESERVED_FIELD_NAMES:
                raise ValidationError(
                    f"'{f.label}' is a reserved name and cannot be used as a field.",
                    field=f.name,
                )
            if f.name in seen:
                raise ValidationError(
                    f"Two fields in '{category.name}' share the name '{f.name}'.",
                    field=f.name,
                )
            seen.add(f.name)
