"""HTTP middleware that enforces bearer-token auth on protected API routes."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from fastapi import Request
from fastapi.responses import JSONResponse

from carrier_api.api.contracts import ApiErrorResponse
from carrier_api.api.errors import ApiError, ApiErrorCode
from carrier_api.auth.tokens import TokenService
from carrier_api.core.security import TokenExpiredError, TokenInvalidError

LOGGER = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/applications",)

MISSING_ACCESS_TOKEN_MESSAGE = "Access token is missing"
EXPIRED_ACCESS_TOKEN_MESSAGE = "Access token expired"
INVALID_ACCESS_TOKEN_MESSAGE = "Invalid access token"


def _extract_bearer_token(authorization: str) -> str:
    """Extract bearer token from authorization header value."""
    parts = (authorization or "").strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


def _unauthorized(error_code: ApiErrorCode, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=ApiErrorResponse(error_code=error_code, message=message).model_dump(
            exclude_none=True
        ),
    )


def _is_protected(path: str, prefixes: Iterable[str]) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


def create_auth_middleware(
    tokens: TokenService, protected_prefixes: Iterable[str] = PROTECTED_PREFIXES
) -> Callable:
    """Create middleware that verifies access tokens on protected paths."""
    prefixes = tuple(protected_prefixes)

    async def auth_middleware(request: Request, call_next: Callable):
        """Verify the bearer token and attach the user id to request state."""
        if request.method == "OPTIONS" or not _is_protected(request.url.path, prefixes):
            return await call_next(request)

        token = _extract_bearer_token(request.headers.get("authorization", ""))
        if not token:
            return _unauthorized(
                ApiErrorCode.AUTH_MISSING_TOKEN, MISSING_ACCESS_TOKEN_MESSAGE
            )

        try:
            user_id = tokens.verify_access_token(token)
        except TokenExpiredError:
            return _unauthorized(
                ApiErrorCode.AUTH_TOKEN_EXPIRED, EXPIRED_ACCESS_TOKEN_MESSAGE
            )
        except TokenInvalidError:
            LOGGER.warning(
                "access_token_rejected",
                extra={"path": request.url.path, "method": request.method},
            )
            return _unauthorized(
                ApiErrorCode.AUTH_TOKEN_INVALID, INVALID_ACCESS_TOKEN_MESSAGE
            )

        request.state.user_id = user_id
        return await call_next(request)

    return auth_middleware


def current_user_id(request: Request) -> str:
    """Return the verified user id, or fail with 401 if the guard did not run."""
    user_id = getattr(request.state, "user_id", "")
    if not user_id:
        raise ApiError(
            status_code=401,
            error_code=ApiErrorCode.AUTH_MISSING_TOKEN,
            message=MISSING_ACCESS_TOKEN_MESSAGE,
        )
    return str(user_id)
