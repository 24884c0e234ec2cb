"""Service layer for driver application submission, listing and archiving."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

from carrier_api.api.errors import ApiError, ApiErrorCode, validation_failed
from carrier_api.applications.models import Application, validate_application_fields
from carrier_api.applications.repository import ApplicationRepository
from carrier_api.core.validation import format_validation_errors

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_positive_int(value: Any, default: int) -> int:
    """Read a leading integer from ``value``; non-numeric or non-positive gives ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    else:
        match = _LEADING_INT.match(str(value or ""))
        if match is None:
            return default
        try:
            parsed = int(match.group(1))
        except ValueError:
            # more digits than int() accepts
            return default
    return parsed if parsed >= 1 else default


@dataclass(frozen=True)
class ApplicationsPage:
    """One page of applications plus pagination metadata."""

    items: list[Application]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


class ApplicationsService:
    """Application flows; every call needs an already verified user id."""

    def __init__(self, repo: ApplicationRepository) -> None:
        self._repo = repo

    def create(self, user_id: str, fields: Mapping[str, Any]) -> Application:
        self._require_user(user_id)
        result = validate_application_fields(fields)
        if not result.ok:
            raise validation_failed(format_validation_errors(result))

        application = self._repo.insert(Application.from_fields(fields))
        LOGGER.info(
            "application_created",
            extra={"user_id": user_id, "application_id": application.id},
        )
        return application

    def list(self, user_id: str, page: Any = None, limit: Any = None) -> ApplicationsPage:
        self._require_user(user_id)
        page_number = parse_positive_int(page, DEFAULT_PAGE)
        page_size = parse_positive_int(limit, DEFAULT_LIMIT)
        skip = (page_number - 1) * page_size

        total = self._repo.count()
        items = self._repo.list_page(skip=skip, limit=page_size)
        return ApplicationsPage(
            items=items, total=total, page=page_number, limit=page_size
        )

    def toggle_archive(self, user_id: str, application_id: str) -> Application:
        self._require_user(user_id)
        application = self._repo.find_by_id(application_id)
        if application is None:
            raise ApiError(
                status_code=404,
                error_code=ApiErrorCode.APPLICATION_NOT_FOUND,
                message="Application not found",
            )

        application.toggle_archived()
        if not self._repo.save(application):
            # record vanished between read and write
            raise ApiError(
                status_code=404,
                error_code=ApiErrorCode.APPLICATION_NOT_FOUND,
                message="Application not found",
            )
        LOGGER.info(
            "application_archive_toggled",
            extra={"user_id": user_id, "application_id": application.id},
        )
        return application

    @staticmethod
    def _require_user(user_id: str) -> None:
        if not user_id:
            raise ApiError(
                status_code=401,
                error_code=ApiErrorCode.AUTH_MISSING_TOKEN,
                message="Access token is missing",
            )
