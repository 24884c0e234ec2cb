"""Repository for user records."""

from __future__ import annotations

from pymongo.errors import DuplicateKeyError

from carrier_api.auth.models import User, normalize_email
from carrier_api.core.document_store import DocumentCollection


class DuplicateEmailError(ValueError):
    """A user with the same email already exists."""


class UserRepository:
    """Find and insert users in the ``users`` collection."""

    def __init__(self, collection: DocumentCollection) -> None:
        self._collection = collection

    def find_by_email(self, email: str) -> User | None:
        key = normalize_email(email)
        if not key:
            return None
        doc = self._collection.find_one({"email": key})
        return User.from_document(doc) if doc else None

    def find_by_id(self, user_id: str) -> User | None:
        doc = self._collection.find_by_id(user_id)
        return User.from_document(doc) if doc else None

    def insert(self, user: User) -> User:
        """Persist a new user, enforcing email uniqueness in both store modes."""
        if not self._collection.uses_mongo and self.find_by_email(user.email):
            raise DuplicateEmailError(user.email)
        try:
            self._collection.insert_one(user.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(user.email) from exc
        return user
