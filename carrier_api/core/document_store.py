"""Document store access with MongoDB primary and JSON-file fallback."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Mapping

import pymongo
from bson import ObjectId
from pymongo.errors import PyMongoError

from carrier_api.core.config import DatabaseConfig

LOGGER = logging.getLogger(__name__)

BSON_INT64_MAX = 2**63 - 1


def new_object_id() -> str:
    return str(ObjectId())


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, ObjectId):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _outward(doc: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return a copy of a stored document with a string ``_id``."""
    if doc is None:
        return None
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


class DocumentCollection:
    """One named collection, backed by MongoDB or by a JSON list file."""

    def __init__(
        self,
        name: str,
        *,
        mongo_collection: Any = None,
        fallback_file: Path | None = None,
    ) -> None:
        if mongo_collection is None and fallback_file is None:
            raise ValueError("DocumentCollection needs a mongo collection or a file")
        self.name = name
        self._mongo = mongo_collection
        self._file = fallback_file
        self._lock = Lock()

    @property
    def uses_mongo(self) -> bool:
        return self._mongo is not None

    def _read_rows(self) -> list[dict[str, Any]]:
        """Read list payload from JSON file with empty fallback."""
        assert self._file is not None
        if not self._file.exists():
            return []
        try:
            payload = json.loads(self._file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            LOGGER.warning("document_store_unreadable: %s", self._file)
            return []
        return [row for row in payload if isinstance(row, dict)] if isinstance(payload, list) else []

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        assert self._file is not None
        self._file.parent.mkdir(parents=True, exist_ok=True)
        self._file.write_text(
            json.dumps(rows, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )

    @staticmethod
    def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
        return all(row.get(key) == value for key, value in filters.items())

    def find_one(self, filters: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first document whose top-level fields equal ``filters``."""
        if self._mongo is not None:
            return _outward(self._mongo.find_one(dict(filters)))
        with self._lock:
            for row in self._read_rows():
                if self._matches(row, filters):
                    return _outward(row)
        return None

    def find_by_id(self, document_id: str) -> dict[str, Any] | None:
        if not ObjectId.is_valid(document_id):
            return None
        if self._mongo is not None:
            return _outward(self._mongo.find_one({"_id": ObjectId(document_id)}))
        return self.find_one({"_id": str(ObjectId(document_id))})

    def insert_one(self, doc: Mapping[str, Any]) -> str:
        """Insert ``doc`` (assigning ``_id`` when absent) and return its id."""
        document_id = str(doc.get("_id") or new_object_id())
        if self._mongo is not None:
            self._mongo.insert_one({**doc, "_id": ObjectId(document_id)})
            return document_id
        with self._lock:
            rows = self._read_rows()
            rows.append(json.loads(json.dumps({**doc, "_id": document_id}, default=_json_default)))
            self._write_rows(rows)
        return document_id

    def replace_by_id(self, document_id: str, doc: Mapping[str, Any]) -> bool:
        """Replace the stored document with ``doc``; return whether it existed."""
        if not ObjectId.is_valid(document_id):
            return False
        body = {key: value for key, value in doc.items() if key != "_id"}
        if self._mongo is not None:
            result = self._mongo.replace_one({"_id": ObjectId(document_id)}, body)
            return bool(result.matched_count)
        key = str(ObjectId(document_id))
        with self._lock:
            rows = self._read_rows()
            for index, row in enumerate(rows):
                if row.get("_id") == key:
                    rows[index] = json.loads(
                        json.dumps({"_id": key, **body}, default=_json_default)
                    )
                    self._write_rows(rows)
                    return True
        return False

    def count(self) -> int:
        if self._mongo is not None:
            return int(self._mongo.count_documents({}))
        with self._lock:
            return len(self._read_rows())

    def find_page(self, *, skip: int, limit: int) -> list[dict[str, Any]]:
        """Return up to ``limit`` documents after ``skip``, in insertion order."""
        skip = min(max(skip, 0), BSON_INT64_MAX)
        limit = min(max(limit, 0), BSON_INT64_MAX)
        if self._mongo is not None:
            cursor = self._mongo.find({}).skip(skip).limit(limit)
            return [doc for doc in (_outward(row) for row in cursor) if doc is not None]
        with self._lock:
            rows = self._read_rows()
        return [doc for doc in (_outward(row) for row in rows[skip : skip + limit]) if doc is not None]

    def drop(self) -> bool:
        """Remove every document; return whether the collection existed."""
        if self._mongo is not None:
            database = self._mongo.database
            if self.name not in database.list_collection_names():
                return False
            self._mongo.drop()
            return True
        assert self._file is not None
        with self._lock:
            if not self._file.exists():
                return False
            self._file.unlink()
        return True


class DocumentStore:
    """Connection to the document database, or to the local JSON fallback."""

    def __init__(self, config: DatabaseConfig, app_root: Path) -> None:
        self._fallback_dir = app_root / "runtime" / "store"
        self._db: Any = None
        self._client: Any = None

        if config.mongo_uri:
            client: Any = pymongo.MongoClient(
                config.mongo_uri, serverSelectionTimeoutMS=3000
            )
            try:
                client.admin.command("ping")
            except PyMongoError:
                LOGGER.warning("mongo_unreachable: using JSON fallback store")
                client.close()
            else:
                self._client = client
                self._db = client[config.mongo_db]

        if self._db is None:
            self._fallback_dir.mkdir(parents=True, exist_ok=True)

    @property
    def uses_mongo(self) -> bool:
        return self._db is not None

    @property
    def database(self) -> Any:
        """The pymongo database, or ``None`` in JSON fallback mode."""
        return self._db

    def collection(self, name: str) -> DocumentCollection:
        if self._db is not None:
            return DocumentCollection(name, mongo_collection=self._db[name])
        return DocumentCollection(name, fallback_file=self._fallback_dir / f"{name}.json")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
