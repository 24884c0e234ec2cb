from __future__ import annotations

from pathlib import Path

import pytest

from carrier_api.auth.models import User
from carrier_api.auth.repository import DuplicateEmailError, UserRepository
from tests.factories import json_store


def _user(email: str = "User@Test.Local") -> User:
    user = User.new(email=email, full_name="Test User", phone="555-0100")
    user.set_password("secret1")
    return user


def test_user_repository_insert_and_find_case_insensitive(tmp_path: Path) -> None:
    repo = UserRepository(json_store(tmp_path).collection("users"))
    user = repo.insert(_user())

    found = repo.find_by_email("USER@test.local")

    assert found is not None
    assert found.id == user.id
    assert found.email == "user@test.local"
    assert found.check_password("secret1")
    assert repo.find_by_id(user.id) is not None


def test_user_repository_rejects_duplicate_email(tmp_path: Path) -> None:
    repo = UserRepository(json_store(tmp_path).collection("users"))
    repo.insert(_user("dupe@test.local"))

    with pytest.raises(DuplicateEmailError):
        repo.insert(_user("DUPE@test.local"))


def test_user_repository_stores_hash_under_password_field(tmp_path: Path) -> None:
    store = json_store(tmp_path)
    user = UserRepository(store.collection("users")).insert(_user())

    doc = store.collection("users").find_by_id(user.id)

    assert doc is not None
    assert doc["password"].startswith("$2")
    assert doc["password"] != "secret1"
    assert "password" not in user.public()


def test_user_repository_handles_corrupted_users_file(tmp_path: Path) -> None:
    repo = UserRepository(json_store(tmp_path).collection("users"))
    users_file = tmp_path / "runtime" / "store" / "users.json"
    users_file.write_text("{ invalid", encoding="utf-8")

    assert repo.find_by_email("broken@test.local") is None


def test_user_repository_unknown_or_malformed_id(tmp_path: Path) -> None:
    repo = UserRepository(json_store(tmp_path).collection("users"))

    assert repo.find_by_id("6967945bd6e92f8fd828ac24") is None
    assert repo.find_by_id("not-an-object-id") is None
    assert repo.find_by_email("") is None
