"""Repository for driver application records."""

from __future__ import annotations

from carrier_api.applications.models import Application
from carrier_api.core.document_store import DocumentCollection


class ApplicationRepository:
    """Insert, page through and update records in the ``applications`` collection."""

    def __init__(self, collection: DocumentCollection) -> None:
        self._collection = collection

    def insert(self, application: Application) -> Application:
        self._collection.insert_one(application.to_document())
        return application

    def count(self) -> int:
        return self._collection.count()

    def list_page(self, *, skip: int, limit: int) -> list[Application]:
        rows = self._collection.find_page(skip=skip, limit=limit)
        return [Application.from_document(row) for row in rows]

    def find_by_id(self, application_id: str) -> Application | None:
        doc = self._collection.find_by_id(application_id)
        return Application.from_document(doc) if doc else None

    def save(self, application: Application) -> bool:
        return self._collection.replace_by_id(application.id, application.to_document())
