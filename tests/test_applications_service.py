from __future__ import annotations

from pathlib import Path

import pytest

from carrier_api.api.errors import ApiError
from carrier_api.applications.repository import ApplicationRepository
from carrier_api.applications.service import ApplicationsService, parse_positive_int
from carrier_api.core.document_store import new_object_id
from tests.factories import application_fields, json_store

USER_ID = "6967945bd6e92f8fd828ac24"


def _build_service(tmp_path: Path) -> ApplicationsService:
    repo = ApplicationRepository(json_store(tmp_path).collection("applications"))
    return ApplicationsService(repo)


def _seed(service: ApplicationsService, count: int) -> list[str]:
    return [
        service.create(USER_ID, application_fields(fullName=f"Driver {index}")).id
        for index in range(count)
    ]


def test_create_assigns_id_timestamps_and_unarchived_state(tmp_path: Path) -> None:
    service = _build_service(tmp_path)

    created = service.create(USER_ID, application_fields())

    assert created.id
    assert created.archived is False
    assert created.created_at == created.updated_at
    assert created.truck_types == ["flatbed", "reefer"]


def test_create_without_user_is_unauthorized(tmp_path: Path) -> None:
    service = _build_service(tmp_path)

    with pytest.raises(ApiError) as exc:
        service.create("", application_fields())

    assert exc.value.status_code == 401


def test_create_missing_cdl_license_reports_exactly_that_field(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    payload = application_fields()
    del payload["cdlLicense"]

    with pytest.raises(ApiError) as exc:
        service.create(USER_ID, payload)

    assert exc.value.status_code == 422
    assert set(exc.value.detail["errors"]) == {"cdlLicense"}
    assert service.list(USER_ID).total == 0


def test_list_paginates_25_records(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    ids = _seed(service, 25)

    first = service.list(USER_ID, page=1, limit=10)
    last = service.list(USER_ID, page=3, limit=10)

    assert first.pages == 3
    assert first.total == 25
    assert len(first.items) == 10
    assert [item.id for item in first.items] == ids[:10]
    assert len(last.items) == 5
    assert [item.id for item in last.items] == ids[20:]


def test_list_defaults_bad_paging_input(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    _seed(service, 3)

    result = service.list(USER_ID, page="abc", limit="0")

    assert (result.page, result.limit, result.pages) == (1, 10, 1)
    assert len(result.items) == 3


def test_list_on_empty_store_reports_zero_pages(tmp_path: Path) -> None:
    result = _build_service(tmp_path).list(USER_ID)

    assert result.total == 0
    assert result.pages == 0
    assert result.items == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 7),
        ("", 7),
        ("abc", 7),
        ("0", 7),
        ("-3", 7),
        ("4", 4),
        ("12abc", 12),
        (5, 5),
        ("9" * 5000, 7),
    ],
)
def test_parse_positive_int(raw: object, expected: int) -> None:
    assert parse_positive_int(raw, 7) == expected


def test_toggle_archive_twice_restores_original_value(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    [application_id] = _seed(service, 1)

    archived = service.toggle_archive(USER_ID, application_id)
    restored = service.toggle_archive(USER_ID, application_id)

    assert archived.archived is True
    assert restored.archived is False
    assert service.list(USER_ID).items[0].archived is False


def test_toggle_archive_unknown_id_is_not_found(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    _seed(service, 1)

    for application_id in (new_object_id(), "not-an-object-id"):
        with pytest.raises(ApiError) as exc:
            service.toggle_archive(USER_ID, application_id)
        assert exc.value.status_code == 404
        assert exc.value.detail["message"] == "Application not found"


def test_list_with_oversized_paging_input_still_returns_a_page(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    _seed(service, 2)

    unparseable = service.list(USER_ID, page="9" * 5000, limit="9" * 5000)
    far_away = service.list(USER_ID, page="9" * 30, limit="10")

    assert (unparseable.page, unparseable.limit, len(unparseable.items)) == (1, 10, 2)
    assert far_away.page == int("9" * 30)
    assert far_away.items == []
    assert far_away.total == 2
