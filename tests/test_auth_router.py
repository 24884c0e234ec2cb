from __future__ import annotations

import re
from pathlib import Path

import pytest
from fastapi import FastAPI, Response
from fastapi.routing import APIRoute

from carrier_api.api.errors import ApiError
from carrier_api.auth.models import LoginRequest, RegisterRequest
from carrier_api.auth.repository import UserRepository
from carrier_api.auth.router import create_auth_router
from carrier_api.auth.service import AuthService
from carrier_api.auth.tokens import TokenService
from tests.factories import auth_config, json_store, registration_fields


def _build_app(tmp_path: Path) -> tuple[FastAPI, TokenService]:
    config = auth_config()
    tokens = TokenService(config)
    service = AuthService(UserRepository(json_store(tmp_path).collection("users")), tokens)
    app = FastAPI()
    app.include_router(create_auth_router(service, config))
    return app, tokens


def _route(app: FastAPI, path: str, method: str):
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path == path and method in route.methods:
            return route
    raise AssertionError(f"Route {method} {path} not found")


def _cookie_value(response: Response, name: str = "refreshToken") -> str:
    match = re.search(rf"{name}=([^;]*)", response.headers.get("set-cookie", ""))
    return match.group(1) if match else ""


def test_register_returns_201_session_and_http_only_cookie(tmp_path: Path) -> None:
    app, tokens = _build_app(tmp_path)
    route = _route(app, "/auth/register", "POST")
    response = Response()

    body = route.endpoint(
        req=RegisterRequest.model_validate(registration_fields()), response=response
    )
    payload = body.model_dump(by_alias=True)
    cookie = response.headers["set-cookie"].lower()

    assert route.status_code == 201
    assert payload["user"]["email"] == "a@b.com"
    assert "password" not in payload["user"]
    assert set(payload["user"]) == {
        "_id",
        "email",
        "fullName",
        "phone",
        "createdAt",
        "updatedAt",
    }
    assert "httponly" in cookie
    assert f"max-age={720 * 60 * 60}" in cookie
    assert tokens.verify_refresh_token(_cookie_value(response)) == payload["user"]["_id"]
    assert tokens.verify_access_token(payload["accessToken"]) == payload["user"]["_id"]


def test_login_sets_cookie_and_rejects_bad_password(tmp_path: Path) -> None:
    app, _ = _build_app(tmp_path)
    _route(app, "/auth/register", "POST").endpoint(
        req=RegisterRequest.model_validate(registration_fields()), response=Response()
    )
    login = _route(app, "/auth/login", "POST").endpoint
    response = Response()

    body = login(req=LoginRequest(email="a@b.com", password="abcde"), response=response)

    assert body.access_token
    assert _cookie_value(response)
    with pytest.raises(ApiError) as exc:
        login(req=LoginRequest(email="a@b.com", password="nope!"), response=Response())
    assert exc.value.status_code == 401


def test_refresh_token_rotates_cookie(tmp_path: Path) -> None:
    app, tokens = _build_app(tmp_path)
    register_response = Response()
    registered = _route(app, "/auth/register", "POST").endpoint(
        req=RegisterRequest.model_validate(registration_fields()),
        response=register_response,
    )
    original_cookie = _cookie_value(register_response)
    refresh = _route(app, "/auth/refresh-token", "POST").endpoint
    response = Response()

    body = refresh(response=response, refresh_cookie=original_cookie)
    rotated_cookie = _cookie_value(response)

    assert set(body.model_dump(by_alias=True)) == {"accessToken"}
    assert rotated_cookie and rotated_cookie != original_cookie
    assert tokens.verify_access_token(body.access_token) == registered.user.id


def test_refresh_token_missing_cookie_is_unauthorized(tmp_path: Path) -> None:
    app, _ = _build_app(tmp_path)
    refresh = _route(app, "/auth/refresh-token", "POST").endpoint

    with pytest.raises(ApiError) as exc:
        refresh(response=Response(), refresh_cookie=None)

    assert exc.value.status_code == 401
    assert exc.value.detail["message"] == "Refresh token is missing."


def test_logout_clears_cookie(tmp_path: Path) -> None:
    app, _ = _build_app(tmp_path)
    response = Response()

    body = _route(app, "/auth/logout", "POST").endpoint(response=response)
    cookie = response.headers["set-cookie"].lower()

    assert body.message == "Logged out successfully"
    assert cookie.startswith('refreshtoken=""') or cookie.startswith("refreshtoken=;")
    assert "max-age=0" in cookie
