"""Authentication API router."""

from __future__ import annotations

from fastapi import APIRouter, Cookie, Response

from carrier_api.api.contracts import (
    AccessTokenResponse,
    ApiErrorResponse,
    AuthSessionResponse,
    MessageResponse,
    UserResponse,
)
from carrier_api.auth.models import LoginRequest, RegisterRequest
from carrier_api.auth.service import AuthService, AuthSession
from carrier_api.core.config import AuthConfig


def _set_refresh_cookie(response: Response, token: str, config: AuthConfig) -> None:
    """Store the refresh token in an HTTP-only cookie living as long as the token."""
    response.set_cookie(
        key=config.refresh_cookie_name,
        value=token,
        max_age=config.refresh_token_ttl_seconds,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )


def _session_response(session: AuthSession) -> AuthSessionResponse:
    return AuthSessionResponse(
        access_token=session.access_token,
        user=UserResponse(**session.user.public()),
    )


def create_auth_router(service: AuthService, config: AuthConfig) -> APIRouter:
    """Build authentication router with register/login/refresh/logout endpoints."""
    router = APIRouter(prefix="/auth", tags=["Auth"])

    @router.post(
        "/register",
        status_code=201,
        response_model=AuthSessionResponse,
        responses={400: {"model": ApiErrorResponse}, 422: {"model": ApiErrorResponse}},
    )
    def register(req: RegisterRequest, response: Response) -> AuthSessionResponse:
        """Register a new user and start a session."""
        session = service.register(req.fields())
        _set_refresh_cookie(response, session.refresh_token, config)
        return _session_response(session)

    @router.post(
        "/login",
        response_model=AuthSessionResponse,
        responses={401: {"model": ApiErrorResponse}},
    )
    def login(req: LoginRequest, response: Response) -> AuthSessionResponse:
        """Login with email and password."""
        session = service.login(req.email, req.password)
        _set_refresh_cookie(response, session.refresh_token, config)
        return _session_response(session)

    @router.post(
        "/refresh-token",
        response_model=AccessTokenResponse,
        responses={401: {"model": ApiErrorResponse}},
    )
    def refresh_token(
        response: Response,
        refresh_cookie: str | None = Cookie(
            default=None, alias=config.refresh_cookie_name
        ),
    ) -> AccessTokenResponse:
        """Exchange the refresh cookie for a new access token and a rotated cookie."""
        session = service.refresh(refresh_cookie)
        _set_refresh_cookie(response, session.refresh_token, config)
        return AccessTokenResponse(access_token=session.access_token)

    @router.post("/logout", response_model=MessageResponse)
    def logout(response: Response) -> MessageResponse:
        """Logout user (clears refresh cookie)."""
        service.logout()
        response.delete_cookie(
            key=config.refresh_cookie_name,
            httponly=True,
            secure=config.cookie_secure,
            samesite="lax",
        )
        return MessageResponse(message="Logged out successfully")

    return router
