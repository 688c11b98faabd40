import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Any, Iterable, Optional

from database.db_manager import DatabaseManager
from database.owner import check_owner_id
from models.record import Record
from utils.date_helpers import now_str
from utils.errors import StorageError

logger = logging.getLogger(__name__)


class RecordDAO:
    """Schema-less record documents, every query scoped by owner_id."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    @contextmanager
    def _connection(self):
        with self._db.lock:
            try:
                yield self._db.get_connection()
            except sqlite3.Error as e:
                self._db.get_connection().rollback()
                logger.error("Record store error: %s", e)
                raise StorageError(f"Record store error: {e}") from e

    def _row_to_model(self, row) -> Record:
        try:
            fields = json.loads(row["fields"] or "{}")
        except ValueError:
            logger.warning("Record %s has unreadable fields, treating as empty", row["id"])
            fields = {}
        return Record(
            id=row["id"],
            owner_id=row["owner_id"],
            category=row["category"],
            fields=fields if isinstance(fields, dict) else {},
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all(self, owner_id: str, category: str | None = None) -> list[Record]:
        check_owner_id(owner_id)
        with self._connection() as conn:
            if category is None:
                rows = conn.execute(
                    "SELECT * FROM records WHERE owner_id = ? ORDER BY created_at, id",
                    (owner_id,),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM records WHERE owner_id = ? AND category = ? ORDER BY created_at, id",
                    (owner_id, category),
                ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, owner_id: str, record_id: str) -> Optional[Record]:
        check_owner_id(owner_id)
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM records WHERE id = ? AND owner_id = ?", (record_id, owner_id)
            ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        owner_id: str,
        category: str,
        fields: dict[str, Any],
        created_at: str | None = None,
    ) -> Record:
        check_owner_id(owner_id)
        record_id = uuid.uuid4().hex
        stamp = created_at or now_str()
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO records(id, owner_id, category, fields, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (record_id, owner_id, category, json.dumps(fields), stamp, stamp),
            )
            conn.commit()
        return self.get_by_id(owner_id, record_id)

    def update_fields(self, owner_id: str, record_id: str, fields: dict[str, Any]) -> Optional[Record]:
        """Replace the whole field mapping of one record."""
        check_owner_id(owner_id)
        with self._connection() as conn:
            cursor = conn.execute(
                "UPDATE records SET fields = ?, updated_at = ? WHERE id = ? AND owner_id = ?",
                (json.dumps(fields), now_str(), record_id, owner_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                return None
        return self.get_by_id(owner_id, record_id)

    def patch_fields(
        self,
        owner_id: str,
        record_id: str,
        defaults: dict[str, Any],
        remove: Iterable[str] = (),
    ) -> Optional[Record]:
        """Single read-modify-write: add keys only where absent, drop the listed keys."""
        check_owner_id(owner_id)
        with self._db.lock:
            current = self.get_by_id(owner_id, record_id)
            if current is None:
                return None
            fields = dict(current.fields)
            for name, value in defaults.items():
                fields.setdefault(name, value)
            for name in remove:
                fields.pop(name, None)
            if fields == current.fields:
                return current
            return self.update_fields(owner_id, record_id, fields)

    def delete(self, owner_id: str, record_id: str) -> bool:
        check_owner_id(owner_id)
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM records WHERE id = ? AND owner_id = ?", (record_id, owner_id)
            )
            conn.commit()
        return cursor.rowcount > 0

    def delete_by_category(self, owner_id: str, category: str) -> int:
        check_owner_id(owner_id)
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM records WHERE owner_id = ? AND category = ?", (owner_id, category)
            )
            conn.commit()
        return cursor.rowcount

    def delete_all(self, owner_id: str) -> int:
        check_owner_id(owner_id)
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM records WHERE owner_id = ?", (owner_id,))
            conn.commit()
        return cursor.rowcount

    def count_by_category(self, owner_id: str) -> dict[str, int]:
        check_owner_id(owner_id)
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT category, COUNT(*) AS cnt FROM records WHERE owner_id = ? GROUP BY category",
                (owner_id,),
            ).fetchall()
        return {r["category"]: r["cnt"] for r in rows}
