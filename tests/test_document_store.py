from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from carrier_api.core.document_store import BSON_INT64_MAX, DocumentCollection, new_object_id
from tests.factories import json_store


def test_document_store_falls_back_to_json_files_without_mongo_uri(
    tmp_path: Path,
) -> None:
    store = json_store(tmp_path)

    collection = store.collection("users")
    collection.insert_one({"email": "a@b.com"})

    assert store.uses_mongo is False
    assert (tmp_path / "runtime" / "store" / "users.json").exists()


def test_document_collection_insert_find_and_replace(tmp_path: Path) -> None:
    collection = json_store(tmp_path).collection("applications")
    created_at = datetime(2026, 1, 1, tzinfo=timezone.utc)

    document_id = collection.insert_one({"archived": False, "createdAt": created_at})
    found = collection.find_by_id(document_id)
    replaced = collection.replace_by_id(document_id, {"archived": True})
    updated = collection.find_one({"_id": document_id})

    assert found is not None
    assert found["_id"] == document_id
    assert found["createdAt"] == created_at.isoformat()
    assert replaced is True
    assert updated == {"_id": document_id, "archived": True}


def test_document_collection_unknown_or_malformed_ids_are_not_found(
    tmp_path: Path,
) -> None:
    collection = json_store(tmp_path).collection("applications")
    collection.insert_one({"archived": False})

    assert collection.find_by_id(new_object_id()) is None
    assert collection.find_by_id("not-an-object-id") is None
    assert collection.replace_by_id("not-an-object-id", {"archived": True}) is False


def test_document_collection_pages_in_insertion_order(tmp_path: Path) -> None:
    collection = json_store(tmp_path).collection("applications")
    for index in range(5):
        collection.insert_one({"index": index})

    page = collection.find_page(skip=2, limit=2)

    assert collection.count() == 5
    assert [row["index"] for row in page] == [2, 3]


def test_document_collection_handles_corrupted_file(tmp_path: Path) -> None:
    broken = tmp_path / "users.json"
    broken.write_text("{ invalid", encoding="utf-8")
    collection = DocumentCollection("users", fallback_file=broken)

    assert collection.find_one({"email": "a@b.com"}) is None
    assert collection.count() == 0


def test_document_collection_drop_reports_missing_collection(tmp_path: Path) -> None:
    collection = json_store(tmp_path).collection("applications")

    assert collection.drop() is False
    collection.insert_one({"archived": False})
    assert collection.drop() is True
    assert collection.count() == 0


class _RecordingCursor:
    def __init__(self) -> None:
        self.calls: dict[str, int] = {}

    def skip(self, value: int) -> "_RecordingCursor":
        self.calls["skip"] = value
        return self

    def limit(self, value: int) -> "_RecordingCursor":
        self.calls["limit"] = value
        return self

    def __iter__(self):
        return iter([])


class _RecordingCollection:
    def __init__(self) -> None:
        self.cursor = _RecordingCursor()

    def find(self, _filters: dict) -> _RecordingCursor:
        return self.cursor


def test_document_collection_clamps_paging_to_bson_int64() -> None:
    mongo = _RecordingCollection()
    collection = DocumentCollection("applications", mongo_collection=mongo)

    assert collection.find_page(skip=10**40, limit=10**30) == []
    assert mongo.cursor.calls == {"skip": BSON_INT64_MAX, "limit": BSON_INT64_MAX}
