"""Field-level validation results and their flattening for API responses."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

EMAIL_PATTERN = re.compile(r".+@.+\..+")

_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


@dataclass
class ValidationResult:
    """Outcome of validating one entity: empty ``errors`` means ok."""

    errors: dict[str, list[dict[str, str]]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, field_name: str, kind: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(
            {"kind": kind, "message": message}
        )

    def has(self, field_name: str) -> bool:
        return field_name in self.errors


class FieldValidationError(ValueError):
    """Raised when an entity fails validation before persistence."""

    def __init__(self, errors: Mapping[str, Any]) -> None:
        super().__init__("Validation failed")
        self.errors = dict(errors)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_string(
    result: ValidationResult, payload: Mapping[str, Any], field_name: str, message: str
) -> str:
    """Record a ``required`` issue unless ``payload[field_name]`` is a non-blank string."""
    value = payload.get(field_name)
    if is_blank(value):
        result.add(field_name, "required", message)
        return ""
    if not isinstance(value, str):
        result.add(field_name, "type", f"{field_name} must be a string")
        return ""
    return value


def check_email(result: ValidationResult, field_name: str, value: str) -> None:
    if value and not EMAIL_PATTERN.fullmatch(value.strip()):
        result.add(field_name, "format", "Please enter a valid email address")


def _descriptor_message(descriptor: Any) -> str:
    """Pick the most specific human-readable message a descriptor carries."""
    if isinstance(descriptor, str):
        return descriptor
    if isinstance(descriptor, Mapping):
        message = descriptor.get("message") or descriptor.get("msg")
        if not message and isinstance(descriptor.get("properties"), Mapping):
            message = descriptor["properties"].get("message")
        return str(message) if message else str(descriptor)

    message = getattr(descriptor, "message", None)
    if not message:
        properties = getattr(descriptor, "properties", None)
        if isinstance(properties, Mapping):
            message = properties.get("message")
    return str(message) if message else str(descriptor)


def _field_from_loc(loc: Any) -> str:
    parts = [part for part in (loc or ()) if isinstance(part, str)]
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        return parts[1]
    if parts:
        return parts[0]
    return "body"


def _from_error_list(items: list[Any]) -> dict[str, str]:
    structured: dict[str, str] = {}
    for item in items:
        if not isinstance(item, Mapping):
            continue
        key = _field_from_loc(item.get("loc"))
        structured.setdefault(key, _descriptor_message(item))
    return structured


def format_validation_errors(error: Any) -> dict[str, str]:
    """Flatten a validation failure into ``{field: message}``.

    Accepts a ``FieldValidationError``/``ValidationResult`` (anything exposing a
    mapping ``errors`` attribute), a pydantic ``ValidationError``, a list of
    pydantic-style error dicts, or a plain ``{field: descriptor(s)}`` mapping.
    Anything else yields an empty mapping.
    """
    if error is None:
        return {}
    if isinstance(error, PydanticValidationError):
        return _from_error_list(error.errors())
    if isinstance(error, list):
        return _from_error_list(error)

    errors = error if isinstance(error, Mapping) else getattr(error, "errors", None)
    if callable(errors):
        # RequestValidationError and friends expose errors() as a method.
        items = errors()
        return _from_error_list(items) if isinstance(items, list) else {}
    if not isinstance(errors, Mapping):
        return {}

    structured: dict[str, str] = {}
    for key, descriptor in errors.items():
        if isinstance(descriptor, (list, tuple)):
            descriptor = descriptor[0] if descriptor else ""
        structured[str(key)] = _descriptor_message(descriptor)
    return structured
