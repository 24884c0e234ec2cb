"""Driver application entity, its validation rules and request payload."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from carrier_api.core.document_store import new_object_id
from carrier_api.core.validation import (
    ValidationResult,
    check_email,
    is_blank,
    require_string,
)

LONG_HAUL_CHOICES = ("yes", "no")

# field -> message for required string fields, in the order they are reported
REQUIRED_TEXT_FIELDS: dict[str, str] = {
    "fullName": "Full name is required",
    "phoneNumber": "Phone number is required",
    "email": "Email is required",
    "cdlLicense": "CDL license is required",
    "state": "State is required",
    "drivingExperience": "Driving experience is required",
}


def validate_application_fields(payload: Mapping[str, Any]) -> ValidationResult:
    """Validate caller-supplied application fields before anything is stored."""
    result = ValidationResult()
    for field_name, message in REQUIRED_TEXT_FIELDS.items():
        value = require_string(result, payload, field_name, message)
        if field_name == "email":
            check_email(result, field_name, value)

    truck_types = payload.get("truckTypes")
    if (
        not isinstance(truck_types, list)
        or not truck_types
        or any(not isinstance(item, str) or is_blank(item) for item in truck_types)
    ):
        result.add("truckTypes", "required", "Truck types are required")

    long_haul = payload.get("longHaulTrips")
    if is_blank(long_haul):
        result.add(
            "longHaulTrips", "required", "Long haul trips preference is required"
        )
    elif long_haul not in LONG_HAUL_CHOICES:
        result.add("longHaulTrips", "enum", 'Long haul trips must be "yes" or "no"')

    comments = payload.get("comments")
    if comments is not None and not isinstance(comments, str):
        result.add("comments", "type", "comments must be a string")
    return result


class Application(BaseModel):
    """Persisted driver application. Only ``archived`` ever changes after creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id")
    full_name: str
    phone_number: str
    email: str
    cdl_license: str
    state: str
    driving_experience: str
    truck_types: list[str]
    long_haul_trips: Literal["yes", "no"]
    comments: str | None = None
    archived: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "Application":
        """Build a new record from already validated camelCase fields."""
        now = datetime.now(timezone.utc)
        return cls(
            id=new_object_id(),
            full_name=fields["fullName"].strip(),
            phone_number=fields["phoneNumber"].strip(),
            email=fields["email"].strip(),
            cdl_license=fields["cdlLicense"].strip(),
            state=fields["state"].strip(),
            driving_experience=fields["drivingExperience"].strip(),
            truck_types=[item.strip() for item in fields["truckTypes"]],
            long_haul_trips=fields["longHaulTrips"],
            comments=fields.get("comments"),
            archived=False,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Application":
        return cls.model_validate(doc)

    def toggle_archived(self) -> None:
        self.archived = not self.archived
        self.updated_at = datetime.now(timezone.utc)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ApplicationCreateRequest(BaseModel):
    """Application submission. Every field is optional here so that missing
    fields are reported by ``validate_application_fields`` with its messages."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    full_name: str | None = Field(default=None, examples=["John Doe"])
    phone_number: str | None = Field(default=None, examples=["+1234567890"])
    email: str | None = Field(default=None, examples=["driver@example.com"])
    cdl_license: str | None = Field(default=None, examples=["CDL-A 123456"])
    state: str | None = Field(default=None, examples=["TX"])
    driving_experience: str | None = Field(default=None, examples=["5 years"])
    truck_types: list[str] | None = Field(default=None, examples=[["flatbed", "reefer"]])
    long_haul_trips: str | None = Field(default=None, examples=["yes"])
    comments: str | None = None

    @field_validator("truck_types", mode="before")
    @classmethod
    def _single_truck_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
