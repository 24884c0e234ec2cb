"""FastAPI router for driver application endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from carrier_api.api.contracts import (
    ApiErrorResponse,
    ApplicationResponse,
    ApplicationsPageResponse,
    PaginationResponse,
)
from carrier_api.applications.models import Application, ApplicationCreateRequest
from carrier_api.applications.service import ApplicationsService
from carrier_api.auth.middleware import current_user_id

_AUTH_ERRORS = {401: {"model": ApiErrorResponse}}


def _to_response(application: Application) -> ApplicationResponse:
    return ApplicationResponse.model_validate(application.model_dump())


class ApplicationsRouter:
    """Factory wrapper that builds the applications router from a service."""

    def __init__(self, service: ApplicationsService) -> None:
        self._service = service

    def build(self) -> APIRouter:
        """Create and return configured applications router."""
        router = APIRouter(prefix="/applications", tags=["Applications"])

        @router.post(
            "",
            status_code=201,
            response_model=ApplicationResponse,
            responses={**_AUTH_ERRORS, 422: {"model": ApiErrorResponse}},
            openapi_extra={"security": [{"BearerAuth": []}]},
        )
        def create_application(
            req: ApplicationCreateRequest, request: Request
        ) -> ApplicationResponse:
            """Create a new application."""
            application = self._service.create(current_user_id(request), req.fields())
            return _to_response(application)

        @router.get(
            "",
            response_model=ApplicationsPageResponse,
            responses=_AUTH_ERRORS,
            openapi_extra={"security": [{"BearerAuth": []}]},
        )
        def list_applications(
            request: Request,
            page: str | None = Query(default=None, description="Page number (1-indexed)"),
            limit: str | None = Query(default=None, description="Applications per page"),
        ) -> ApplicationsPageResponse:
            """Get all applications, one page at a time."""
            result = self._service.list(current_user_id(request), page=page, limit=limit)
            return ApplicationsPageResponse(
                data=[_to_response(item) for item in result.items],
                pagination=PaginationResponse(
                    total=result.total,
                    page=result.page,
                    limit=result.limit,
                    pages=result.pages,
                ),
            )

        @router.patch(
            "/{application_id}/toggle-archive",
            response_model=ApplicationResponse,
            responses={**_AUTH_ERRORS, 404: {"model": ApiErrorResponse}},
            openapi_extra={"security": [{"BearerAuth": []}]},
        )
        def toggle_archive(application_id: str, request: Request) -> ApplicationResponse:
            """Toggle archived status of an application."""
            application = self._service.toggle_archive(
                current_user_id(request), application_id
            )
            return _to_response(application)

        return router


def create_applications_router(service: ApplicationsService) -> APIRouter:
    """Build the applications router for the given service."""
    return ApplicationsRouter(service).build()
