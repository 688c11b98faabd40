"""Tests for reconciling stored records with a changed field list."""

from models.category import FieldDefinition
from models.record import Record
from services.migration_service import MigrationService, plan_record_changes


def _fields(*specs):
    return [FieldDefinition.from_label(label, type_) for label, type_ in specs]


OLD = _fields(("Title", "text"), ("Signed", "boolean"))
NEW = _fields(("Title", "text"), ("Grade", "number"), ("Boxed", "boolean"), ("Notes", "text"))


class TestPlanRecordChanges:
    def test_additions_use_type_defaults(self):
        record = Record(id="r1", owner_id="alice", category="comics", fields={"title": "X"})
        additions, removals = plan_record_changes(record, NEW)
        assert additions == {"grade": 0, "boxed": False, "notes": ""}
        assert removals == []

    def test_existing_falsy_values_are_not_additions(self):
        record = Record(
            id="r1", owner_id="alice", category="comics",
            fields={"title": "", "grade": 0, "boxed": False, "notes": None},
        )
        additions, _ = plan_record_changes(record, NEW)
        assert additions == {}

    def test_removals_skip_reserved_keys(self):
        record = Record(
            id="r1", owner_id="alice", category="comics",
            fields={"title": "X", "signed": True, "_id": "abc", "__v": 0},
        )
        _, removals = plan_record_changes(record, NEW)
        assert removals == ["signed"]


class TestMigrate:
    def test_adds_and_removes(self, migration_service: MigrationService, record_dao):
        a = record_dao.create("alice", "comics", {"title": "X-Men", "signed": True})
        b = record_dao.create("alice", "comics", {"title": "Hulk"})

        result = migration_service.migrate("comics", OLD, NEW)

        assert result.matched == 2
        assert result.updated == 2
        assert result.failed == 0
        expected_keys = {"title", "grade", "boxed", "notes"}
        for record_id in (a.id, b.id):
            assert set(record_dao.get_by_id("alice", record_id).fields) == expected_keys

    def test_second_run_changes_nothing(self, migration_service: MigrationService, record_dao):
        record = record_dao.create("alice", "comics", {"title": "X-Men", "signed": True})
        migration_service.migrate("comics", OLD, NEW)
        first = record_dao.get_by_id("alice", record.id)

        result = migration_service.migrate("comics", OLD, NEW)

        assert result.matched == 1
        assert result.updated == 0
        assert record_dao.get_by_id("alice", record.id) == first

    def test_existing_values_not_overwritten(self, migration_service: MigrationService, record_dao):
        record = record_dao.create("alice", "comics", {"title": "X", "grade": 0, "boxed": False})

        migration_service.migrate("comics", OLD, NEW)

        fields = record_dao.get_by_id("alice", record.id).fields
        assert fields["grade"] == 0
        assert fields["boxed"] is False
        assert fields["notes"] == ""

    def test_other_categories_untouched(self, migration_service: MigrationService, record_dao):
        stamp = record_dao.create("alice", "stamps", {"title": "Penny Black", "signed": True})

        migration_service.migrate("comics", OLD, NEW)

        assert record_dao.get_by_id("alice", stamp.id).fields == {"title": "Penny Black", "signed": True}

    def test_other_owners_untouched(self, migration_service: MigrationService, record_dao):
        theirs = record_dao.create("bob", "comics", {"title": "Hulk", "signed": True})

        result = migration_service.migrate("comics", OLD, NEW)

        assert result.matched == 0
        assert record_dao.get_by_id("bob", theirs.id).fields == {"title": "Hulk", "signed": True}

    def test_empty_old_fields_is_noop(self, migration_service: MigrationService, record_dao):
        record = record_dao.create("alice", "comics", {"title": "X"})
        result = migration_service.migrate("comics", [], NEW)
        assert result.matched == 0
        assert record_dao.get_by_id("alice", record.id).fields == {"title": "X"}

    def test_type_only_change_writes_nothing(self, migration_service: MigrationService, record_dao):
        record = record_dao.create("alice", "comics", {"title": "X", "signed": "yes"})
        retyped = _fields(("Title", "text"), ("Signed", "text"))

        result = migration_service.migrate("comics", OLD, retyped)

        assert result.matched == 1
        assert result.updated == 0
        assert record_dao.get_by_id("alice", record.id).fields == {"title": "X", "signed": "yes"}

    def test_partial_failure_is_counted(self, migration_service: MigrationService, record_dao, monkeypatch):
        good = record_dao.create("alice", "comics", {"title": "X-Men"})
        bad = record_dao.create("alice", "comics", {"title": "Hulk"})
        real_patch = record_dao.patch_fields

        def flaky_patch(owner_id, record_id, defaults, remove=()):
            if record_id == bad.id:
                raise RuntimeError("write failed")
            return real_patch(owner_id, record_id, defaults, remove)

        monkeypatch.setattr(record_dao, "patch_fields", flaky_patch)
        result = migration_service.migrate("comics", OLD, NEW)

        assert result.matched == 2
        assert result.updated == 1
        assert result.failed == 1
        assert not result.succeeded
        assert "grade" in record_dao.get_by_id("alice", good.id).fields
        assert "grade" not in record_dao.get_by_id("alice", bad.id).fields
