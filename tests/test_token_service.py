from __future__ import annotations

import pytest

from carrier_api.auth.tokens import TokenService
from carrier_api.core.security import TokenExpiredError, TokenInvalidError
from tests.factories import auth_config


def test_access_token_round_trips_user_id() -> None:
    tokens = TokenService(auth_config())

    token = tokens.issue_access_token("user-1")

    assert tokens.verify_access_token(token) == "user-1"


def test_token_families_use_independent_secrets() -> None:
    tokens = TokenService(auth_config())
    access = tokens.issue_access_token("user-1")
    refresh = tokens.issue_refresh_token("user-1")

    with pytest.raises(TokenInvalidError):
        tokens.verify_refresh_token(access)
    with pytest.raises(TokenInvalidError):
        tokens.verify_access_token(refresh)
    assert tokens.verify_refresh_token(refresh) == "user-1"


def test_expired_tokens_raise_token_expired() -> None:
    tokens = TokenService(
        auth_config(access_token_ttl_minutes=-1, refresh_token_ttl_hours=-1)
    )

    with pytest.raises(TokenExpiredError):
        tokens.verify_access_token(tokens.issue_access_token("user-1"))
    with pytest.raises(TokenExpiredError):
        tokens.verify_refresh_token(tokens.issue_refresh_token("user-1"))


def test_tampered_token_is_invalid() -> None:
    tokens = TokenService(auth_config())
    token = tokens.issue_access_token("user-1")
    other = tokens.issue_access_token("user-2")
    header, _, signature = token.split(".")
    tampered = ".".join([header, other.split(".")[1], signature])

    with pytest.raises(TokenInvalidError):
        tokens.verify_access_token(tampered)


def test_lifetimes_default_to_fifteen_minutes_and_thirty_days() -> None:
    config = auth_config()

    assert config.access_token_ttl_seconds == 15 * 60
    assert config.refresh_token_ttl_seconds == 720 * 60 * 60
