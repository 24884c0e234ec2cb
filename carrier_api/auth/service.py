"""Authentication service for register, login, refresh and logout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from carrier_api.api.errors import ApiError, ApiErrorCode, validation_failed
from carrier_api.auth.models import User, normalize_email, validate_user_fields
from carrier_api.auth.repository import DuplicateEmailError, UserRepository
from carrier_api.auth.tokens import TokenService
from carrier_api.core.security import TokenError
from carrier_api.core.validation import format_validation_errors

LOGGER = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "This email is already taken."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
MISSING_REFRESH_TOKEN_MESSAGE = "Refresh token is missing."
INVALID_REFRESH_TOKEN_MESSAGE = "Invalid refresh token."


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the refresh token to store in the cookie."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthSession(TokenPair):
    """Tokens issued by register or login, with the signed-in user."""

    user: User


class AuthService:
    """Stateless auth flows over a user repository and a token service."""

    def __init__(self, repo: UserRepository, tokens: TokenService) -> None:
        self._repo = repo
        self._tokens = tokens

    def register(self, fields: Mapping[str, Any]) -> AuthSession:
        """Create a user and issue a token pair.

        Duplicate emails are rejected before field validation so an existing
        account is reported as taken even when other fields are malformed.
        """
        email = normalize_email(fields.get("email"))
        if email and self._repo.find_by_email(email) is not None:
            raise self._duplicate_email()

        result = validate_user_fields(fields)
        if not result.ok:
            raise validation_failed(format_validation_errors(result))

        user = User.new(
            email=email,
            full_name=str(fields["fullName"]),
            phone=str(fields["phone"]),
        )
        user.set_password(str(fields["password"]))
        try:
            self._repo.insert(user)
        except DuplicateEmailError as exc:
            raise self._duplicate_email() from exc

        LOGGER.info("user_registered", extra={"user_id": user.id})
        return self._issue_session(user)

    def login(self, email: str | None, password: str | None) -> AuthSession:
        """Authenticate credentials; unknown email and wrong password look identical."""
        user = self._repo.find_by_email(email or "")
        if user is None or not user.check_password(password or ""):
            LOGGER.warning("login_failed")
            raise ApiError(
                status_code=401,
                error_code=ApiErrorCode.AUTH_INVALID_CREDENTIALS,
                message=INVALID_CREDENTIALS_MESSAGE,
            )
        LOGGER.info("user_logged_in", extra={"user_id": user.id})
        return self._issue_session(user)

    def refresh(self, refresh_token: str | None) -> TokenPair:
        """Verify the refresh token and rotate both tokens."""
        if not refresh_token:
            raise ApiError(
                status_code=401,
                error_code=ApiErrorCode.AUTH_MISSING_TOKEN,
                message=MISSING_REFRESH_TOKEN_MESSAGE,
            )
        try:
            user_id = self._tokens.verify_refresh_token(refresh_token)
        except TokenError as exc:
            LOGGER.warning("refresh_rejected: %s", exc)
            raise ApiError(
                status_code=401,
                error_code=ApiErrorCode.AUTH_TOKEN_INVALID,
                message=INVALID_REFRESH_TOKEN_MESSAGE,
            ) from exc

        access_token, rotated = self._tokens.issue_pair(user_id)
        return TokenPair(access_token=access_token, refresh_token=rotated)

    def logout(self) -> None:
        """Nothing to revoke server-side; the caller clears the refresh cookie."""
        LOGGER.info("user_logged_out")

    def _issue_session(self, user: User) -> AuthSession:
        access_token, refresh_token = self._tokens.issue_pair(user.id)
        return AuthSession(
            access_token=access_token, refresh_token=refresh_token, user=user
        )

    @staticmethod
    def _duplicate_email() -> ApiError:
        return ApiError(
            status_code=400,
            error_code=ApiErrorCode.AUTH_DUPLICATE_EMAIL,
            message=DUPLICATE_EMAIL_MESSAGE,
        )
