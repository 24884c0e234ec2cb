from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from carrier_api.api.contracts import WelcomeResponse
from carrier_api.api.http_setup import register_exception_handlers, register_http_middleware
from carrier_api.applications.repository import ApplicationRepository
from carrier_api.applications.router import create_applications_router
from carrier_api.applications.service import ApplicationsService
from carrier_api.auth.middleware import create_auth_middleware
from carrier_api.auth.repository import UserRepository
from carrier_api.auth.router import create_auth_router
from carrier_api.auth.service import AuthService
from carrier_api.auth.tokens import TokenService
from carrier_api.core.config import AppConfig
from carrier_api.core.document_store import DocumentStore
from carrier_api.core.logging import setup_logging
from carrier_api.core.mongo_migrations import apply_mongo_migrations

load_dotenv()
LOGGER = logging.getLogger(__name__)

APP_ROOT = Path(__file__).resolve().parent


def _install_openapi_security(app: FastAPI) -> None:
    """Publish the bearer scheme referenced by the application routes."""

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})[
            "BearerAuth"
        ] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


def create_app(config: AppConfig | None = None, app_root: Path = APP_ROOT) -> FastAPI:
    config = config or AppConfig.from_env()
    setup_logging(config.logging.level)
    if config.auth.uses_dev_secrets:
        LOGGER.warning("JWT_ACCESS/JWT_REFRESH not set; using development secrets")

    app = FastAPI(title="SpaceX Backend API", version="1.0.0")
    apply_mongo_migrations(config.database)
    tokens = TokenService(config.auth)
    # innermost, so 401 responses still pass through CORS and request logging
    app.middleware("http")(create_auth_middleware(tokens))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    register_http_middleware(app, config=config, logger=LOGGER)
    register_exception_handlers(app, logger=LOGGER)

    store = DocumentStore(config.database, app_root)
    auth_service = AuthService(UserRepository(store.collection("users")), tokens)
    applications_service = ApplicationsService(
        ApplicationRepository(store.collection("applications"))
    )

    app.include_router(create_auth_router(auth_service, config.auth))
    app.include_router(create_applications_router(applications_service))

    @app.get("/api", response_model=WelcomeResponse, tags=["Meta"])
    def welcome() -> WelcomeResponse:
        return WelcomeResponse(message="Welcome to the SpaceX backend API")

    @app.on_event("shutdown")
    def close_store() -> None:
        store.close()

    _install_openapi_security(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=AppConfig.from_env().server.port)
