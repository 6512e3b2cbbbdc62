from __future__ import annotations

from fastapi import HTTPException
from fastapi.testclient import TestClient

from bookmark_manager.exceptions import (
    ReferentialIntegrityError,
    StorageError,
    StorageUnavailable,
    ValidationError,
)
from bookmark_manager.main import create_app
from bookmark_manager.storage import MemoryStorage


def _create_test_client() -> TestClient:
    app = create_app(storage=MemoryStorage())

    @app.get("/trigger-http")
    def trigger_http_error():
        raise HTTPException(status_code=404, detail="Missing resource")

    @app.get("/trigger-validation")
    def trigger_validation_error(item_id: int):  # pragma: no cover - signature triggers validation
        return {"item_id": item_id}

    @app.get("/trigger-storage-validation")
    def trigger_storage_validation():
        raise ValidationError("Folder name is required")

    @app.get("/trigger-integrity")
    def trigger_integrity():
        raise ReferentialIntegrityError(7)

    @app.get("/trigger-unavailable")
    def trigger_unavailable():
        raise StorageUnavailable("connection refused to db.internal:5432")

    @app.get("/trigger-storage-error")
    def trigger_storage_error():
        raise StorageError("disk full")

    @app.get("/trigger-unhandled")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    return TestClient(app, raise_server_exceptions=False)


def _assert_problem_response(response, *, expected_status: int, expected_code: str) -> None:
    assert response.status_code == expected_status
    content_type = response.headers.get("content-type")
    assert content_type is not None
    assert content_type.startswith("application/problem+json")

    trace_id = response.headers.get("X-Trace-Id")
    assert trace_id, "Trace identifier header is missing"

    payload = response.json()
    assert payload["status"] == expected_status
    assert payload["code"] == expected_code
    assert payload["trace_id"] == trace_id
    assert payload["title"] == payload["message"]
    assert payload["type"].endswith(f"#{expected_code}")


def test_http_exception_uses_problem_json() -> None:
    client = _create_test_client()
    response = client.get("/trigger-http")

    _assert_problem_response(response, expected_status=404, expected_code="http_error")
    assert response.json()["message"] == "Missing resource"


def test_validation_exception_is_400_with_errors() -> None:
    client = _create_test_client()
    response = client.get("/trigger-validation", params={"item_id": "not-an-int"})

    _assert_problem_response(response, expected_status=400, expected_code="validation_error")
    errors = response.json()["errors"]
    assert isinstance(errors, list)
    assert errors[0]["loc"] == ["query", "item_id"]


def test_malformed_json_body_is_400() -> None:
    client = _create_test_client()
    response = client.post(
        "/api/folders",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    _assert_problem_response(response, expected_status=400, expected_code="validation_error")


def test_storage_validation_error_is_400() -> None:
    client = _create_test_client()
    response = client.get("/trigger-storage-validation")

    _assert_problem_response(response, expected_status=400, expected_code="validation_error")
    assert response.json()["message"] == "Folder name is required"


def test_referential_integrity_error_points_at_folder_id() -> None:
    client = _create_test_client()
    response = client.get("/trigger-integrity")

    _assert_problem_response(response, expected_status=400, expected_code="validation_error")
    [error] = response.json()["errors"]
    assert error["loc"] == ["body", "folderId"]
    assert error["type"] == "referential_integrity"


def test_storage_unavailable_is_500_without_internal_detail() -> None:
    client = _create_test_client()
    response = client.get("/trigger-unavailable")

    _assert_problem_response(response, expected_status=500, expected_code="storage_unavailable")
    assert "db.internal" not in response.text


def test_unhandled_exception_uses_problem_json() -> None:
    client = _create_test_client()
    response = client.get("/trigger-unhandled")

    _assert_problem_response(response, expected_status=500, expected_code="internal_error")
    payload = response.json()
    assert payload["message"] == "An unexpected error occurred"
    assert "boom" not in response.text


def test_generic_storage_error_is_500() -> None:
    client = _create_test_client()
    response = client.get("/trigger-storage-error")

    _assert_problem_response(response, expected_status=500, expected_code="storage_error")
    assert "disk full" not in response.text
