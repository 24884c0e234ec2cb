"""Pydantic API response models used in OpenAPI contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiErrorResponse(BaseModel):
    """Stable error envelope for API responses."""

    error_code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    errors: dict[str, str] | None = Field(
        default=None, description="Field name to validation message (422 only)"
    )


class WelcomeResponse(BaseModel):
    """API root payload."""

    message: str


class MessageResponse(BaseModel):
    """Plain acknowledgement payload."""

    message: str


class UserResponse(_CamelModel):
    """User as exposed over the API; the password is never part of it."""

    id: str = Field(alias="_id", examples=["6967945bd6e92f8fd828ac24"])
    email: str
    full_name: str
    phone: str
    created_at: datetime
    updated_at: datetime


class AuthSessionResponse(_CamelModel):
    """Register/login response; the refresh token travels in a cookie."""

    access_token: str
    user: UserResponse


class AccessTokenResponse(_CamelModel):
    """Refresh response carrying only the new access token."""

    access_token: str


class ApplicationResponse(_CamelModel):
    """Driver application record."""

    id: str = Field(alias="_id")
    full_name: str
    phone_number: str
    email: str
    cdl_license: str
    state: str
    driving_experience: str
    truck_types: list[str]
    long_haul_trips: Literal["yes", "no"]
    comments: str | None = None
    archived: bool
    created_at: datetime
    updated_at: datetime


class PaginationResponse(BaseModel):
    """Pagination metadata for list endpoints."""

    total: int
    page: int
    limit: int
    pages: int


class ApplicationsPageResponse(BaseModel):
    """One page of applications."""

    data: list[ApplicationResponse]
    pagination: PaginationResponse
