"""Tests for JSON/CSV export and JSON import."""

import csv
import io
import zipfile
from pathlib import Path

import pytest

from services.data_service import DataService, summarize_import
from utils.errors import ValidationError


@pytest.fixture
def data_service(category_dao, record_dao, settings_service) -> DataService:
    return DataService(category_dao, record_dao, settings_service)


LEGACY_EXPORT = {
    "categories": {
        "coins": {
            "name": "Coins",
            "fields": [
                {"name": "country", "label": "Country", "type": "text"},
                {"name": "proof", "label": "Proof", "type": "boolean"},
            ],
        },
        "broken": {"name": "Broken", "fields": []},
    },
    "items": [
        {"_id": "64a1", "__v": 0, "userId": "u1", "category": "coins", "country": "UK", "proof": True},
        {"_id": "64a2", "__v": 0, "userId": "u1", "country": "FR"},
    ],
    "settings": {"darkMode": True, "theme": "default", "language": "en"},
    "exportDate": "2024-05-01T00:00:00.000Z",
}


class TestExport:
    def test_export_json_shape(self, data_service, record_service, comics):
        record_service.create("comics", {"title": "X-Men", "year": "1963"})

        data = data_service.export_json()

        assert data["export_version"] == 1
        assert list(data["categories"]) == ["comics"]
        assert data["categories"]["comics"]["name"] == "Comics"
        assert len(data["items"]) == 1
        assert data["items"][0]["fields"] == {"title": "X-Men", "year": 1963}
        assert data["settings"]["theme"] == "default"

    def test_export_csv_zip(self, tmp_path: Path, data_service, record_service, record_dao, comics):
        record_service.create("comics", {"title": "X-Men", "signed": True})
        record_dao.create("alice", "comics", {"title": "Hulk", "pages": 30})
        path = tmp_path / "export.zip"

        data_service.export_csv_zip(str(path))

        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["comics.csv"]
            rows = list(csv.DictReader(io.StringIO(zf.read("comics.csv").decode("utf-8"))))
        assert list(rows[0]) == ["id", "title", "year", "signed", "pages"]
        assert rows[0]["signed"] == "True"
        assert rows[1]["pages"] == "30"


class TestImport:
    def test_round_trip_merge_adds_nothing(self, data_service, record_service, record_dao, comics):
        record_service.create("comics", {"title": "X-Men"})
        exported = data_service.export_json()

        stats = data_service.import_json(exported, "merge")

        assert stats == {"categories": 0, "items": 0, "skipped": 0, "settings": 0}
        assert len(record_dao.get_all("alice")) == 1

    def test_replace_with_legacy_documents(self, data_service, category_dao, record_dao, settings_service, comics):
        record_dao.create("alice", "comics", {"title": "X-Men"})

        stats = data_service.import_json(LEGACY_EXPORT, "replace")

        assert stats == {"categories": 1, "items": 1, "skipped": 2, "settings": 1}
        assert [c.key for c in category_dao.get_all()] == ["coins"]
        records = record_dao.get_all("alice")
        assert len(records) == 1
        assert records[0].category == "coins"
        assert records[0].fields == {"country": "UK", "proof": True}
        assert settings_service.get("dark_mode") is True
        assert settings_service.get("language") == "en"

    def test_merge_keeps_local_schema(self, data_service, category_service, comics):
        incoming = {
            "categories": {
                "comics": {"name": "Comics", "fields": [{"name": "issue", "label": "Issue", "type": "number"}]},
            },
            "items": [],
        }
        stats = data_service.import_json(incoming, "merge")
        assert stats["categories"] == 0
        assert category_service.require("comics").field_names == ["title", "year", "signed"]

    def test_unknown_mode(self, data_service):
        with pytest.raises(ValidationError):
            data_service.import_json({}, "append")

    def test_not_an_object(self, data_service):
        with pytest.raises(ValidationError):
            data_service.import_json([], "merge")


class TestSummarizeImport:
    def test_counts_and_skips(self):
        stats = {"categories": 1, "items": 3, "skipped": 2, "settings": 0}
        assert summarize_import(stats) == "Imported 1 categories, 3 items. Skipped 2 invalid entries."

    def test_nothing_imported(self):
        stats = {"categories": 0, "items": 0, "skipped": 1, "settings": 0}
        assert summarize_import(stats) == "Nothing new to import. Skipped 1 invalid entry."
