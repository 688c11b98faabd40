"""Reconcile stored records with a category's newly saved field list.

Migration is best-effort: every record gets at most one update, records
already updated stay updated if a later one fails, and failures are logged
and counted rather than raised.
"""
import logging
from dataclasses import dataclass
from typing import Any

from database.record_dao import RecordDAO
from models.category import FieldDefinition
from models.record import Record
from utils.batching import run_bounded
from utils.coercion import default_for
from utils.constants import MIGRATION_MAX_WORKERS, RESERVED_FIELD_NAMES

logger = logging.getLogger(__name__)


@dataclass
class MigrationResult:
    category_key: str
    matched: int = 0
    updated: int = 0
    failed: int = 0

    @property
    def succeeded(self) -> bool:
        return self.failed == 0


def plan_record_changes(
    record: Record, new_fields: list[FieldDefinition]
) -> tuple[dict[str, Any], list[str]]:
    """Return (additions with defaults, keys to remove) for one record."""
    additions = {
        f.name: default_for(f.type)
        for f in new_fields
        if f.name not in record.fields
    }
    keep = {f.name for f in new_fields}
    removals = [
        name for name in record.fields
        if name not in keep and name not in RESERVED_FIELD_NAMES
    ]
    return additions, removals


class MigrationService:
    def __init__(
        self,
        record_dao: RecordDAO,
        owner_id: str,
        max_workers: int = MIGRATION_MAX_WORKERS,
    ):
        self._records = record_dao
        self._owner_id = owner_id
        self._max_workers = max_workers

    def migrate(
        self,
        category_key: str,
        old_fields: list[FieldDefinition],
        new_fields: list[FieldDefinition],
    ) -> MigrationResult:
        result = MigrationResult(category_key)
        if not old_fields:
            return result

        records = self._records.get_all(self._owner_id, category_key)
        result.matched = len(records)

        pending = []
        for record in records:
            additions, removals = plan_record_changes(record, new_fields)
            if additions or removals:
                pending.append((record, additions, removals))

        if not pending:
            return result

        def apply(job):
            record, additions, removals = job
            updated = self._records.patch_fields(
                self._owner_id, record.id, additions, removals
            )
            if updated is None:
                raise LookupError(f"record {record.id} disappeared during migration")
            return record.id

        outcome = run_bounded(apply, pending, max_workers=self._max_workers)
        result.updated = len(outcome.succeeded)
        result.failed = len(outcome.failed)

        if result.failed:
            logger.error(
                "Migration of '%s' finished with %d of %d record updates failed",
                category_key, result.failed, len(pending),
            )
        else:
            logger.info(
                "Migrated %d record(s) of '%s' (+%s / -%s)",
                result.updated, category_key,
                sorted({f.name for f in new_fields} - {f.name for f in old_fields}),
                sorted({f.name for f in old_fields} - {f.name for f in new_fields}),
            )
        return result
