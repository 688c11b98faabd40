"""Tests for the owner-scoped record store."""

import pytest

from database.db_manager import DatabaseManager
from database.record_dao import RecordDAO
from utils.errors import AccessDenied, StorageError


class TestRecordDAOBasics:
    def test_create_assigns_id_and_timestamps(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"title": "X-Men", "year": 1963})
        assert record.id
        assert record.created_at
        assert record.created_at == record.updated_at
        assert record.fields == {"title": "X-Men", "year": 1963}

    def test_get_all_filters_by_exact_category(self, record_dao: RecordDAO):
        record_dao.create("alice", "comics", {"title": "X-Men"})
        record_dao.create("alice", "comics_2", {"title": "Hulk"})
        assert [r.fields["title"] for r in record_dao.get_all("alice", "comics")] == ["X-Men"]
        assert len(record_dao.get_all("alice")) == 2

    def test_update_fields_replaces_mapping(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"title": "X-Men", "year": 1963})
        updated = record_dao.update_fields("alice", record.id, {"title": "Hulk"})
        assert updated.fields == {"title": "Hulk"}

    def test_update_missing_returns_none(self, record_dao: RecordDAO):
        assert record_dao.update_fields("alice", "nope", {}) is None

    def test_count_by_category(self, record_dao: RecordDAO):
        record_dao.create("alice", "comics", {})
        record_dao.create("alice", "comics", {})
        record_dao.create("alice", "stamps", {})
        assert record_dao.count_by_category("alice") == {"comics": 2, "stamps": 1}

    def test_unreadable_fields_treated_as_empty(self, record_dao: RecordDAO, db: DatabaseManager):
        record = record_dao.create("alice", "comics", {"title": "X"})
        conn = db.get_connection()
        conn.execute("UPDATE records SET fields = ? WHERE id = ?", ("{broken", record.id))
        conn.commit()
        assert record_dao.get_by_id("alice", record.id).fields == {}

    def test_sqlite_errors_become_storage_errors(self, record_dao: RecordDAO, db: DatabaseManager):
        db.get_connection().execute("DROP TABLE records")
        with pytest.raises(StorageError):
            record_dao.get_all("alice")


class TestPatchFields:
    def test_additions_never_overwrite(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"grade": 0, "old": 1})
        patched = record_dao.patch_fields("alice", record.id, {"grade": 5, "boxed": False}, ["old"])
        assert patched.fields == {"grade": 0, "boxed": False}

    def test_no_change_skips_write(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"grade": 0})
        patched = record_dao.patch_fields("alice", record.id, {"grade": 3})
        assert patched.updated_at == record.updated_at

    def test_missing_record(self, record_dao: RecordDAO):
        assert record_dao.patch_fields("alice", "nope", {"grade": 0}) is None


class TestOwnerScoping:
    """Another owner can neither see nor change alice's records."""

    def test_reads_are_scoped(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"title": "X-Men"})
        assert record_dao.get_all("bob") == []
        assert record_dao.get_all("bob", "comics") == []
        assert record_dao.get_by_id("bob", record.id) is None
        assert record_dao.count_by_category("bob") == {}

    def test_writes_are_scoped(self, record_dao: RecordDAO):
        record = record_dao.create("alice", "comics", {"title": "X-Men"})

        assert record_dao.update_fields("bob", record.id, {"title": "Hulk"}) is None
        assert record_dao.patch_fields("bob", record.id, {"grade": 0}) is None
        assert record_dao.delete("bob", record.id) is False
        assert record_dao.delete_by_category("bob", "comics") == 0
        assert record_dao.delete_all("bob") == 0

        assert record_dao.get_by_id("alice", record.id).fields == {"title": "X-Men"}

    @pytest.mark.parametrize("owner", ["", None, "../alice", "a/b", ".."])
    def test_invalid_owner_denied(self, record_dao: RecordDAO, owner):
        with pytest.raises(AccessDenied):
            record_dao.get_all(owner)
