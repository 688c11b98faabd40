import logging
from dataclasses import dataclass
from typing import Any

from database.category_dao import CategoryDAO
from database.record_dao import RecordDAO
from models.category import Category, FieldDefinition
from models.record import Record
from utils.coercion import coerce_input, display_value, infer_type
from utils.constants import RESERVED_FIELD_NAMES
from utils.errors import NotFoundError, ValidationError
from utils.labels import format_label

logger = logging.getLogger(__name__)


@dataclass
class FormField:
    name: str
    label: str
    type: str
    value: Any = None
    in_schema: bool = True


class RecordService:
    def __init__(self, record_dao: RecordDAO, category_dao: CategoryDAO):
        self._dao = record_dao
        self._categories = category_dao
        self._owner_id = category_dao.owner_id

    def get_all(self, category_key: str | None = None) -> list[Record]:
        return self._dao.get_all(self._owner_id, category_key)

    def get(self, record_id: str) -> Record:
        record = self._dao.get_by_id(self._owner_id, record_id)
        if record is None:
            raise NotFoundError(f"Item '{record_id}' not found.")
        return record

    def create(self, category_key: str, values: dict[str, Any]) -> Record:
        category = self._categories.get_by_key(category_key)
        if category is None:
            raise NotFoundError(f"Category '{category_key}' not found.")
        unknown = [k for k in values if category.get_field(k) is None]
        if unknown:
            raise ValidationError(
                f"'{unknown[0]}' is not a field of {category.name}.", field=unknown[0]
            )
        fields = {
            f.name: coerce_input(f, values[f.name])
            for f in category.fields
            if f.name in values
        }
        record = self._dao.create(self._owner_id, category_key, fields)
        logger.debug("Created item %s in '%s'", record.id, category_key)
        return record

    def update(self, record_id: str, values: dict[str, Any]) -> Record:
        record = self.get(record_id)
        category = self._categories.get_by_key(record.category)
        fields = dict(record.fields)
        for name, raw in values.items():
            if name in RESERVED_FIELD_NAMES:
                raise ValidationError(f"'{name}' cannot be edited.", field=name)
            definition = category.get_field(name) if category else None
            if definition is None:
                if name not in record.fields:
                    raise ValidationError(f"'{name}' is not a field of this item.", field=name)
                definition = FieldDefinition(
                    name=name, label=format_label(name), type=infer_type(record.fields[name])
                )
            fields[name] = coerce_input(definition, raw)
        updated = self._dao.update_fields(self._owner_id, record_id, fields)
        if updated is None:
            raise NotFoundError(f"Item '{record_id}' not found.")
        return updated

    def delete(self, record_id: str):
        if not self._dao.delete(self._owner_id, record_id):
            raise NotFoundError(f"Item '{record_id}' not found.")
        logger.debug("Deleted item %s", record_id)

    # ── Presentation helpers ─────────────────────────────────────────────────

    def form_fields(self, record: Record) -> list[FormField]:
        """Inputs for the edit form: schema fields in order, then stale keys."""
        category = self._categories.get_by_key(record.category)
        specs: list[FormField] = []
        if category:
            for f in category.fields:
                specs.append(FormField(f.name, f.label, f.type, record.fields.get(f.name)))
        known = {s.name for s in specs}
        for name, value in record.fields.items():
            if name in known or name in RESERVED_FIELD_NAMES:
                continue
            specs.append(FormField(name, format_label(name), infer_type(value), value, in_schema=False))
        return specs

    def table_columns(self, records: list[Record], category_key: str | None = None) -> list[str]:
        columns: list[str] = []
        if category_key:
            category = self._categories.get_by_key(category_key)
            if category:
                columns.extend(category.field_names)
        for record in records:
            for name in record.fields:
                if name not in columns and name not in RESERVED_FIELD_NAMES:
                    columns.append(name)
        return columns

    def display_row(self, record: Record, columns: list[str]) -> list[str]:
        category = self._categories.get_by_key(record.category)
        return [self._display_cell(category, record, name) for name in columns]

    def column_label(self, name: str, category_key: str | None = None) -> str:
        category = self._categories.get_by_key(category_key) if category_key else None
        definition = category.get_field(name) if category else None
        return definition.label if definition else format_label(name)

    @staticmethod
    def _display_cell(category: Category | None, record: Record, name: str) -> str:
        definition = category.get_field(name) if category else None
        value = record.fields.get(name)
        field_type = definition.type if definition else infer_type(value)
        return display_value(field_type, value)
