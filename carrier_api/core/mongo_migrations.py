"""Versioned MongoDB schema migrations for the users and applications collections."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

import pymongo
from pymongo.errors import PyMongoError

from carrier_api.core.config import DatabaseConfig
from carrier_api.core.logging import CORRELATION_ID_CTX

LOGGER = logging.getLogger(__name__)

MigrationFn = Callable[[Any], None]


def _migration_20260110_01_user_email_unique(db: Any) -> None:
    db["users"].create_index("email", unique=True)


def _migration_20260110_02_application_listing(db: Any) -> None:
    db["applications"].create_index("archived")
    db["applications"].create_index("createdAt")


MIGRATIONS: list[tuple[str, MigrationFn]] = [
    ("20260110_01_user_email_unique", _migration_20260110_01_user_email_unique),
    ("20260110_02_application_listing", _migration_20260110_02_application_listing),
]


def ensure_collection_indexes(db: Any) -> None:
    """Re-create every migration index; ``create_index`` is a no-op when present."""
    for _migration_id, migration_fn in MIGRATIONS:
        migration_fn(db)


def apply_mongo_migrations(config: DatabaseConfig) -> list[str]:
    """Apply pending MongoDB migrations and return the ids applied in this run."""
    if not config.mongo_uri:
        return []

    applied: list[str] = []
    client: Any = pymongo.MongoClient(config.mongo_uri, serverSelectionTimeoutMS=3000)
    try:
        try:
            client.admin.command("ping")
            db = client[config.mongo_db]
            migration_collection = db["schema_migrations"]
            migration_collection.create_index("migration_id", unique=True)

            for migration_id, migration_fn in MIGRATIONS:
                if migration_collection.find_one({"migration_id": migration_id}):
                    continue
                migration_fn(db)
                migration_collection.insert_one(
                    {
                        "migration_id": migration_id,
                        "applied_at": datetime.now(timezone.utc),
                        "correlation_id": CORRELATION_ID_CTX.get(),
                    }
                )
                applied.append(migration_id)
                LOGGER.info("mongo_migration_applied: %s", migration_id)
        except PyMongoError:
            LOGGER.exception("mongo_migrations_failed")
    finally:
        client.close()
    return applied
