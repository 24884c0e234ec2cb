"""User entity, its validation rules and auth request payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from carrier_api.core.document_store import new_object_id
from carrier_api.core.security import PASSWORD_MAX_BYTES, hash_password, verify_password
from carrier_api.core.validation import (
    ValidationResult,
    check_email,
    require_string,
)

PASSWORD_MIN_LENGTH = 5


def normalize_email(value: Any) -> str:
    """Normalize login identity so lookups are case-insensitive."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def validate_user_fields(payload: Mapping[str, Any]) -> ValidationResult:
    """Validate registration fields before a User is built."""
    result = ValidationResult()
    email = require_string(result, payload, "email", "Email is required")
    check_email(result, "email", email)

    password = require_string(result, payload, "password", "Password is required")
    if password and len(password) < PASSWORD_MIN_LENGTH:
        result.add(
            "password",
            "minlength",
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
        )
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        result.add(
            "password",
            "maxlength",
            f"Password must be at most {PASSWORD_MAX_BYTES} bytes long",
        )

    require_string(result, payload, "fullName", "Full name is required")
    require_string(result, payload, "phone", "Phone is required")
    return result


class User(BaseModel):
    """Persisted user. ``password_hash`` maps to the stored ``password`` field."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    email: str
    password_hash: str = Field(alias="password")
    full_name: str = Field(alias="fullName")
    phone: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def new(cls, *, email: str, full_name: str, phone: str) -> "User":
        """Build an unsaved user; call ``set_password`` before persisting."""
        now = datetime.now(timezone.utc)
        return cls(
            id=new_object_id(),
            email=normalize_email(email),
            password_hash="",
            full_name=full_name.strip(),
            phone=phone.strip(),
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "User":
        return cls.model_validate(doc)

    def set_password(self, plaintext: str) -> None:
        """Hash and store a new password. The only place hashing happens."""
        self.password_hash = hash_password(plaintext)
        self.updated_at = datetime.now(timezone.utc)

    def check_password(self, plaintext: str) -> bool:
        return verify_password(plaintext, self.password_hash)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def public(self) -> dict[str, Any]:
        """Outward representation; never includes the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class RegisterRequest(BaseModel):
    """Registration request payload. Field rules live in ``validate_user_fields``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str | None = Field(default=None, examples=["user@example.com"])
    password: str | None = Field(default=None, examples=["secret1"])
    full_name: str | None = Field(default=None, examples=["John Doe"])
    phone: str | None = Field(default=None, examples=["+1234567890"])

    def fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LoginRequest(BaseModel):
    """Login request payload."""

    email: str | None = None
    password: str | None = None
