"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

ACCESS_TOKEN_TTL_MINUTES = 15
REFRESH_TOKEN_TTL_HOURS = 720
REFRESH_COOKIE_NAME = "refreshToken"

DEV_ACCESS_SECRET = "dev-insecure-access-secret-change-me"
DEV_REFRESH_SECRET = "dev-insecure-refresh-secret-change-me"


@dataclass(frozen=True)
class AuthConfig:
    """Token signing and refresh-cookie configuration."""

    access_secret: str
    refresh_secret: str
    access_token_ttl_minutes: int = ACCESS_TOKEN_TTL_MINUTES
    refresh_token_ttl_hours: int = REFRESH_TOKEN_TTL_HOURS
    refresh_cookie_name: str = REFRESH_COOKIE_NAME
    cookie_secure: bool = False

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.access_token_ttl_minutes * 60

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.refresh_token_ttl_hours * 60 * 60

    @property
    def uses_dev_secrets(self) -> bool:
        """Return whether either signing secret is a development placeholder."""
        return (
            self.access_secret == DEV_ACCESS_SECRET
            or self.refresh_secret == DEV_REFRESH_SECRET
        )


@dataclass(frozen=True)
class DatabaseConfig:
    """Document store connection settings."""

    mongo_uri: str
    mongo_db: str = "spacex"


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str


@dataclass(frozen=True)
class SecurityConfig:
    """API perimeter security settings."""

    cors_allowed_origins: list[str] = field(default_factory=list)
    request_max_bytes: int = 1024 * 1024


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener settings."""

    port: int = 8000


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    auth: AuthConfig
    database: DatabaseConfig
    logging: LoggingConfig
    security: SecurityConfig
    server: ServerConfig

    @staticmethod
    def from_env() -> "AppConfig":
        """Build app config from process environment."""
        access_secret = os.getenv("JWT_ACCESS", "").strip() or DEV_ACCESS_SECRET
        refresh_secret = os.getenv("JWT_REFRESH", "").strip() or DEV_REFRESH_SECRET
        cookie_secure = os.getenv("AUTH_COOKIE_SECURE", "0").strip().lower() in {
            "1",
            "true",
            "yes",
            "on",
        }
        mongo_uri = os.getenv("MONGO_DB_URL", "").strip()
        mongo_db = os.getenv("MONGO_DB_NAME", "spacex").strip() or "spacex"
        log_level = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"

        cors_allowed_origins = ["http://localhost:3000", "http://localhost:5173"]
        extra_origin = os.getenv("ALLOWED_ORIGIN", "").strip()
        if extra_origin and extra_origin not in cors_allowed_origins:
            cors_allowed_origins.append(extra_origin)
        request_max_bytes = int(os.getenv("REQUEST_MAX_BYTES", str(1024 * 1024)))

        try:
            port = int(os.getenv("PORT", "8000"))
        except ValueError:
            port = 8000

        return AppConfig(
            auth=AuthConfig(
                access_secret=access_secret,
                refresh_secret=refresh_secret,
                cookie_secure=cookie_secure,
            ),
            database=DatabaseConfig(mongo_uri=mongo_uri, mongo_db=mongo_db),
            logging=LoggingConfig(level=log_level),
            security=SecurityConfig(
                cors_allowed_origins=cors_allowed_origins,
                request_max_bytes=request_max_bytes,
            ),
            server=ServerConfig(port=port),
        )
