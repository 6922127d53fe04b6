from __future__ import annotations

import pytest

from groundcover_provider.classifier import classify_error, extract_status_code
from groundcover_provider.errors import (
    ApiError,
    ConflictError,
    ErrorKind,
    NameCollisionError,
    NotFoundError,
    ReadOnlyError,
    RequestDetails,
)


def _api_error(status: int, message: str = "", operation: str = "policies.get") -> ApiError:
    text = f"status code {status}: {message}" if message else f"status code {status}"
    return ApiError(text, details=RequestDetails(operation=operation, method="GET", path="/", status_code=status))


@pytest.mark.parametrize("operation", ["policies.get", "dashboards.delete", "policies.create", "raw.request"])
def test_none_input_is_passed_through(operation: str) -> None:
    assert classify_error(None, operation, "some-id") is None


@pytest.mark.parametrize(
    "error",
    [
        _api_error(404),
        Exception("status code 404"),
        Exception("dashboard Not Found"),
        Exception("unexpected response 404 from server"),
        Exception("[404] missing"),
    ],
)
@pytest.mark.parametrize("operation", ["policies.get", "silences.delete", "policies.update", "dashboards.update"])
def test_not_found_signals_classify_as_not_found(error: Exception, operation: str) -> None:
    classified = classify_error(error, operation, "missing-id")

    assert isinstance(classified, NotFoundError)
    assert classified.kind is ErrorKind.NOT_FOUND
    assert classified.operation == operation
    assert classified.resource_id == "missing-id"


def test_create_conflict_becomes_name_collision() -> None:
    classified = classify_error(_api_error(409, "conflict"), "policies.create", "dup-policy")

    assert isinstance(classified, NameCollisionError)
    assert classified.kind is ErrorKind.NAME_COLLISION
    assert classified.name == "dup-policy"
    assert "dup-policy" in str(classified)
    assert str(classified).startswith("policy name 'dup-policy' was previously used")


def test_create_conflict_text_without_status_is_name_collision() -> None:
    classified = classify_error(Exception("Conflict: name taken"), "service_accounts.create", "bot")

    assert isinstance(classified, NameCollisionError)
    assert str(classified).startswith("service account name 'bot'")


def test_create_rule_wins_over_not_found_text() -> None:
    error = Exception("status code 409: referenced policy not found")
    classified = classify_error(error, "api_keys.create", "ci-key")

    assert isinstance(classified, NameCollisionError)
    assert "API Key name 'ci-key'" in str(classified)


@pytest.mark.parametrize(
    ("operation", "error"),
    [
        ("dashboards.create", _api_error(409, "dashboard preset conflict with panel", operation="dashboards.create")),
        ("metrics_aggregation.create", _api_error(409, operation="metrics_aggregation.create")),
        ("silences.create", Exception("status code 400: conflict between matchers")),
    ],
)
def test_conflict_on_other_creates_is_generic(operation: str, error: Exception) -> None:
    classified = classify_error(error, operation, None)

    assert type(classified) is ApiError
    assert classified.kind is ErrorKind.GENERIC
    assert str(classified).startswith(f"{operation} failed: status code ")


def test_service_account_delete_bad_request_is_not_found() -> None:
    assert isinstance(classify_error(_api_error(400), "service_accounts.delete", "sa-1"), NotFoundError)
    assert isinstance(classify_error(Exception("[400] gone"), "service_accounts.delete", "sa-1"), NotFoundError)


def test_bad_request_on_other_delete_is_generic() -> None:
    classified = classify_error(_api_error(400, "bad input"), "policies.delete", "p-1")

    assert type(classified) is ApiError
    assert classified.kind is ErrorKind.GENERIC


def test_ingestion_key_delete_not_found_is_not_found() -> None:
    classified = classify_error(Exception("ingestion key not found"), "ingestion_keys.delete", "key-a")

    assert isinstance(classified, NotFoundError)


@pytest.mark.parametrize("text", ["policy is read-only", "Resource is READ ONLY"])
def test_read_only_text_is_read_only(text: str) -> None:
    classified = classify_error(Exception(text), "policies.update", "p-1")

    assert isinstance(classified, ReadOnlyError)
    assert classified.kind is ErrorKind.READ_ONLY


def test_policy_update_conflict_is_concurrency_conflict() -> None:
    classified = classify_error(_api_error(409, "revision mismatch"), "policies.update", "p-1")

    assert isinstance(classified, ConflictError)
    assert classified.kind is ErrorKind.CONCURRENCY
    assert "policies.update" in str(classified)


def test_conflict_on_other_update_is_generic() -> None:
    classified = classify_error(_api_error(409, "conflict"), "dashboards.update", "d-1")

    assert type(classified) is ApiError
    assert str(classified) == "dashboards.update failed: status code 409: conflict"


def test_generic_error_wraps_operation_and_message() -> None:
    classified = classify_error(Exception("status code 500: boom"), "silences.get", "s-1")

    assert type(classified) is ApiError
    assert classified.kind is ErrorKind.GENERIC
    assert str(classified) == "silences.get failed: status code 500: boom"


def test_classified_error_keeps_request_details() -> None:
    raw = _api_error(404, operation="dashboards.get")
    classified = classify_error(raw, "dashboards.get", "d-1")

    assert isinstance(classified, NotFoundError)
    assert classified.details is raw.details
    assert classified.status_code == 404


def test_extract_status_code_prefers_details() -> None:
    assert extract_status_code(_api_error(503)) == 503
    assert extract_status_code(Exception("upstream said status code 418: teapot")) == 418
    assert extract_status_code(Exception("connection reset")) is None
