"""Security primitives for password hashing and token signing."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

PASSWORD_HASH_ROUNDS = 10
PASSWORD_MAX_BYTES = 72
TOKEN_ALGORITHM = "HS256"


class TokenError(ValueError):
    """Base error for tokens that cannot be trusted."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry has passed."""


class TokenInvalidError(TokenError):
    """Token is malformed, tampered with or signed with another secret."""


def hash_password(password: str) -> str:
    """Hash password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify password against a stored bcrypt hash."""
    if not password or not stored_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        return False


def build_signed_token(
    claims: dict[str, Any], secret_key: str, *, expires_in: timedelta
) -> str:
    """Sign claims into an HS256 JWT with issued-at, expiry and unique id."""
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + expires_in,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret_key, algorithm=TOKEN_ALGORITHM)


def decode_signed_token(token: str, secret_key: str) -> dict[str, Any]:
    """Decode and verify a signed token, raising ``TokenError`` on failure."""
    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenInvalidError("Invalid token") from exc
