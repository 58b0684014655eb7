"""Tests for the HTTP API."""

import inspect
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from meal_ledger.api.app import create_app
from meal_ledger.api.dependencies import require_user
from meal_ledger.api.normalize import MISSING_FILE_MESSAGE, MULTIPART_REQUIRED_MESSAGE
from meal_ledger.services.meals import MISSING_DETAILS_MESSAGE, OUT_OF_RANGE_MESSAGE
from tests.conftest import AUTH_HEADERS, TEST_API_KEY, TEST_USER_ID, make_meal_record


def _client(container) -> TestClient:  # type: ignore[no-untyped-def]
    return TestClient(create_app(container))


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_transcribe_and_analyze_returns_items(container) -> None:
    client = _client(container)

    response = client.post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    assert response.status_code == 200
    assert response.json() == {
        "items": [
            {
                "qty": "2 slices",
                "n": "whole grain toast",
                "cal": 160,
                "p": 8,
                "c": 30,
                "f": 2,
                "fib": 6,
                "k_mg": 200,
            }
        ]
    }
    transcription = container.normalization_service.transcription_client
    assert transcription.calls[0].content == b"fake-audio"
    assert transcription.calls[0].filename == "meal.webm"


def test_transcribe_and_analyze_requires_multipart(container) -> None:
    response = _client(container).post(
        "/transcribe-and-analyze", headers=AUTH_HEADERS, json={"file": "x"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": MULTIPART_REQUIRED_MESSAGE}


def test_transcribe_and_analyze_requires_file_field(container) -> None:
    response = _client(container).post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"other": (None, "not audio")},
    )

    assert response.status_code == 400
    assert response.json() == {"error": MISSING_FILE_MESSAGE}


def test_transcribe_and_analyze_reports_upstream_failure(container) -> None:
    transcription = container.normalization_service.transcription_client
    transcription.error = RuntimeError("Upstream transcription failed")

    response = _client(container).post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Upstream transcription failed"}


def test_transcribe_and_analyze_blank_error_message(container) -> None:
    container.normalization_service.structuring_client.error = RuntimeError()

    response = _client(container).post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Unknown error"}


def test_transcribe_and_analyze_without_openai_key(container) -> None:
    container.normalization_service.transcription_client = None

    response = _client(container).post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY is not set"}


def test_transcribe_and_analyze_malformed_model_output(container) -> None:
    container.normalization_service.structuring_client.output = "not json at all"

    response = _client(container).post(
        "/transcribe-and-analyze",
        headers=AUTH_HEADERS,
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    assert response.status_code == 200
    assert response.json() == {"items": []}


def test_endpoints_require_credentials(container) -> None:
    client = _client(container)

    missing_key = client.post(
        "/analyze-text",
        headers={"Authorization": AUTH_HEADERS["Authorization"]},
        json={"text": "an apple"},
    )
    bad_token = client.get(
        "/meals", headers={"Authorization": "Bearer nope", "apikey": TEST_API_KEY}
    )
    no_token = client.post(
        "/transcribe-and-analyze",
        headers={"apikey": TEST_API_KEY},
        files={"file": ("meal.webm", b"fake-audio", "audio/webm")},
    )

    for response in (missing_key, bad_token, no_token):
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


def test_analyze_text_returns_items(container) -> None:
    structuring = container.normalization_service.structuring_client
    structuring.output = '{"items": [{"qty": "1", "n": "apple", "cal": 95}]}'

    response = _client(container).post(
        "/analyze-text", headers=AUTH_HEADERS, json={"text": "an apple"}
    )

    assert response.status_code == 200
    assert response.json() == {"items": [{"qty": "1", "n": "apple", "cal": 95}]}
    assert structuring.prompts[-1].endswith("an apple")


def test_create_list_and_delete_meal(container) -> None:
    client = _client(container)

    created = client.post(
        "/meals",
        headers=AUTH_HEADERS,
        json={
            "items": [
                {"qty": "1", "n": "banana", "cal": 105, "p": 1, "k_mg": 422},
                {"qty": "1 cup", "n": "yogurt", "cal": 150, "p": 12, "ca_mg": 300},
            ]
        },
    )

    assert created.status_code == 201
    meal = created.json()
    assert meal["meal_name"] == "1 banana, 1 cup yogurt"
    assert meal["total_calories"] == 255
    assert meal["protein"] == 13
    assert meal["micronutrients"] == {"k_mg": 422, "ca_mg": 300}
    assert meal["user_id"] == str(TEST_USER_ID)

    listed = client.get(
        "/meals", headers=AUTH_HEADERS, params={"date": meal["logged_date"]}
    )
    assert listed.status_code == 200
    assert [row["id"] for row in listed.json()["meals"]] == [meal["id"]]

    deleted = client.delete(f"/meals/{meal['id']}", headers=AUTH_HEADERS)
    assert deleted.status_code == 204

    missing = client.delete(f"/meals/{meal['id']}", headers=AUTH_HEADERS)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Meal not found"}


def test_create_meal_rejects_incomplete_items(container) -> None:
    response = _client(container).post(
        "/meals",
        headers=AUTH_HEADERS,
        json={"items": [{"qty": "", "n": "toast", "cal": 80}]},
    )

    assert response.status_code == 400
    assert response.json() == {"error": MISSING_DETAILS_MESSAGE}


def test_summary_and_history(container, meal_repository) -> None:
    now = datetime.now(tz=UTC)
    yesterday = now - timedelta(days=1)
    for record in (
        make_meal_record(TEST_USER_ID, now, calories=400),
        make_meal_record(TEST_USER_ID, now, calories=250),
        make_meal_record(TEST_USER_ID, yesterday, calories=900),
    ):
        meal_repository.meals[record.id] = record
    client = _client(container)

    summary = client.get(
        "/summary", headers=AUTH_HEADERS, params={"date": now.date().isoformat()}
    )
    history = client.get("/history", headers=AUTH_HEADERS, params={"days": 7})

    assert summary.status_code == 200
    assert summary.json()["calories"] == 650
    assert summary.json()["meal_count"] == 2
    assert summary.json()["date"] == now.date().isoformat()
    assert history.status_code == 200
    assert [day["date"] for day in history.json()["days"]] == [
        now.date().isoformat(),
        yesterday.date().isoformat(),
    ]


def test_me_returns_profile(container, profile_repository) -> None:
    client = _client(container)

    fallback = client.get("/me", headers=AUTH_HEADERS)
    profile_repository.names[TEST_USER_ID] = "Reginald"
    stored = client.get("/me", headers=AUTH_HEADERS)

    assert fallback.json() == {"user_id": str(TEST_USER_ID), "display_name": "jeeves"}
    assert stored.json()["display_name"] == "Reginald"


def test_invalid_meal_body_uses_error_shape(container) -> None:
    response = _client(container).post(
        "/meals", headers=AUTH_HEADERS, json={"items": "x"}
    )

    assert response.status_code == 400
    assert list(response.json()) == ["error"]
    assert response.json()["error"].startswith("Invalid items:")


def test_invalid_query_uses_error_shape(container) -> None:
    client = _client(container)

    history = client.get("/history", headers=AUTH_HEADERS, params={"days": 0})
    summary = client.get("/summary", headers=AUTH_HEADERS, params={"date": "soon"})

    assert history.status_code == 400
    assert history.json()["error"].startswith("Invalid days:")
    assert summary.status_code == 400
    assert summary.json()["error"].startswith("Invalid date:")


def test_analyze_text_too_long_uses_error_shape(container) -> None:
    response = _client(container).post(
        "/analyze-text", headers=AUTH_HEADERS, json={"text": "a" * 4001}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid text:")
    assert container.normalization_service.structuring_client.prompts == []


def test_create_meal_rejects_oversized_numbers(container, meal_repository) -> None:
    client = _client(container)

    huge_int = client.post(
        "/meals",
        headers=AUTH_HEADERS,
        json={"items": [{"qty": "1", "n": "cake", "cal": 10**400}]},
    )
    overflow = client.post(
        "/meals",
        headers=AUTH_HEADERS,
        json={
            "items": [
                {"qty": "1", "n": "cake", "cal": 1e308},
                {"qty": "1", "n": "pie", "cal": 1e308},
            ]
        },
    )

    assert huge_int.status_code == 400
    assert huge_int.json() == {"error": OUT_OF_RANGE_MESSAGE}
    assert overflow.status_code == 400
    assert overflow.json() == {"error": OUT_OF_RANGE_MESSAGE}
    assert meal_repository.meals == {}


def test_blocking_ledger_handlers_are_sync(container) -> None:
    app = create_app(container)
    ledger_paths = {"/meals", "/meals/{meal_id}", "/summary", "/history", "/me"}

    endpoints = [
        route.endpoint
        for route in app.routes
        if getattr(route, "path", None) in ledger_paths
    ]

    assert len(endpoints) == 6
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
    assert not inspect.iscoroutinefunction(require_user)
