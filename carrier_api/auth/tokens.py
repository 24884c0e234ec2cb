"""Issue and verify access/refresh tokens signed with independent secrets."""

from __future__ import annotations

from datetime import timedelta

from carrier_api.core.config import AuthConfig
from carrier_api.core.security import (
    TokenInvalidError,
    build_signed_token,
    decode_signed_token,
)


class TokenService:
    """Stateless token issuance. Nothing is persisted, so nothing can be revoked."""

    def __init__(self, config: AuthConfig) -> None:
        self._config = config

    def issue_access_token(self, user_id: str) -> str:
        return build_signed_token(
            {"userId": user_id},
            self._config.access_secret,
            expires_in=timedelta(minutes=self._config.access_token_ttl_minutes),
        )

    def issue_refresh_token(self, user_id: str) -> str:
        return build_signed_token(
            {"userId": user_id},
            self._config.refresh_secret,
            expires_in=timedelta(hours=self._config.refresh_token_ttl_hours),
        )

    def issue_pair(self, user_id: str) -> tuple[str, str]:
        return self.issue_access_token(user_id), self.issue_refresh_token(user_id)

    def verify_access_token(self, token: str) -> str:
        """Return the user id carried by an access token.

        Raises ``TokenExpiredError`` or ``TokenInvalidError``.
        """
        return self._user_id(decode_signed_token(token, self._config.access_secret))

    def verify_refresh_token(self, token: str) -> str:
        return self._user_id(decode_signed_token(token, self._config.refresh_secret))

    @staticmethod
    def _user_id(payload: dict) -> str:
        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalidError("Token carries no user id")
        return user_id
