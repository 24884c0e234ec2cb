"""Public API response contracts."""

from carrier_api.api.contracts.models import (
    AccessTokenResponse,
    ApiErrorResponse,
    ApplicationResponse,
    ApplicationsPageResponse,
    AuthSessionResponse,
    MessageResponse,
    PaginationResponse,
    UserResponse,
    WelcomeResponse,
)

__all__ = [
    "AccessTokenResponse",
    "ApiErrorResponse",
    "ApplicationResponse",
    "ApplicationsPageResponse",
    "AuthSessionResponse",
    "MessageResponse",
    "PaginationResponse",
    "UserResponse",
    "WelcomeResponse",
]
