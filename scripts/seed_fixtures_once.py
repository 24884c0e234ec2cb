#!/usr/bin/env python3
"""One-shot fixture seeding: reset users/applications and create the admin user."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from carrier_api.applications.models import Application, validate_application_fields
from carrier_api.applications.repository import ApplicationRepository
from carrier_api.auth.models import User, validate_user_fields
from carrier_api.auth.repository import UserRepository
from carrier_api.core.config import AppConfig
from carrier_api.core.document_store import DocumentStore
from carrier_api.core.mongo_migrations import ensure_collection_indexes
from carrier_api.core.validation import format_validation_errors

COLLECTIONS = ("users", "applications")
APP_ROOT = Path(__file__).resolve().parent.parent

ADMIN_USER = {
    "email": "spacex.admin@gmail.com",
    "password": "adminpass",
    "fullName": "Admin User",
    "phone": "555-1234",
}

_STATES = ("TX", "CA", "FL", "IL", "OH")
_TRUCK_TYPES = (["flatbed"], ["reefer"], ["dry van", "flatbed"], ["tanker"])


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Drop users/applications and load fixture records."
    )
    parser.add_argument(
        "--applications",
        type=int,
        default=0,
        help="Number of sample driver applications to create.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the seeding plan without touching the store.",
    )
    return parser.parse_args()


def sample_application(index: int) -> dict[str, Any]:
    """Return valid application fields for the ``index``-th sample driver."""
    number = index + 1
    return {
        "fullName": f"Sample Driver {number}",
        "phoneNumber": f"555-{number:04d}",
        "email": f"driver{number}@example.com",
        "cdlLicense": f"CDL-{100000 + number}",
        "state": _STATES[index % len(_STATES)],
        "drivingExperience": f"{1 + index % 15} years",
        "truckTypes": list(_TRUCK_TYPES[index % len(_TRUCK_TYPES)]),
        "longHaulTrips": "yes" if index % 2 == 0 else "no",
        "comments": None,
    }


def seed_fixtures(store: DocumentStore, *, applications: int = 0) -> dict[str, int]:
    """Reset fixture collections and insert the admin user plus sample applications."""
    dropped = 0
    for name in COLLECTIONS:
        if store.collection(name).drop():
            dropped += 1
        else:
            print(f"Collection {name} was missing, skipping drop....")
    if store.uses_mongo:
        # dropping a collection also drops its indexes, including the unique email one
        ensure_collection_indexes(store.database)

    result = validate_user_fields(ADMIN_USER)
    if not result.ok:
        raise ValueError(f"Invalid admin fixture: {format_validation_errors(result)}")
    admin = User.new(
        email=ADMIN_USER["email"],
        full_name=ADMIN_USER["fullName"],
        phone=ADMIN_USER["phone"],
    )
    admin.set_password(ADMIN_USER["password"])
    UserRepository(store.collection("users")).insert(admin)

    application_repo = ApplicationRepository(store.collection("applications"))
    for index in range(max(0, applications)):
        fields = sample_application(index)
        result = validate_application_fields(fields)
        if not result.ok:
            raise ValueError(
                f"Invalid application fixture: {format_validation_errors(result)}"
            )
        application_repo.insert(Application.from_fields(fields))

    return {"dropped": dropped, "users": 1, "applications": max(0, applications)}


def main() -> int:
    """Execute the seeding flow."""
    args = _parse_args()
    load_dotenv()
    config = AppConfig.from_env()

    if args.dry_run:
        target = config.database.mongo_uri or str(APP_ROOT / "runtime" / "store")
        print(f"Target store: {target}")
        print(f"Collections to drop: {', '.join(COLLECTIONS)}")
        print(f"Users to create: 1 ({ADMIN_USER['email']})")
        print(f"Applications to create: {max(0, args.applications)}")
        print("Mode: dry-run")
        return 0

    store = DocumentStore(config.database, APP_ROOT)
    try:
        summary = seed_fixtures(store, applications=args.applications)
    except Exception as exc:
        print(f"Error during fixture setup: {exc}", file=sys.stderr)
        return 1
    finally:
        store.close()

    print(f"Dropped collections: {summary['dropped']}")
    print(f"Created users: {summary['users']}")
    print(f"Created applications: {summary['applications']}")
    print("Fixture data has been successfully set up.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
