"""Tests for logging and error handling."""

from unittest.mock import AsyncMock

import structlog
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from auxtrack.core.db import get_db
from auxtrack.core.errors import (
    AlreadyEndedError,
    AppError,
    ConflictError,
    DatabaseError,
    ErrorDetail,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from auxtrack.core.logging import get_request_id, set_request_id
from auxtrack.core.sentry import filter_sensitive_data, init_sentry
from tests.conftest import build_app


class TestErrorClasses:
    """Test custom exception classes."""

    def test_app_error_to_response(self):
        error = AppError(code="TEST", message="boom", status_code=418, details={"a": 1})

        assert error.to_response() == ErrorDetail(code="TEST", message="boom", details={"a": 1})

    def test_empty_details_serialize_as_none(self):
        assert ConflictError("taken").to_response().details is None

    def test_status_codes(self):
        cases = [
            (ValidationError("bad"), "VALIDATION_ERROR", 422),
            (NotFoundError("AuxSession", "abc"), "NOT_FOUND", 404),
            (ConflictError("open"), "CONFLICT", 409),
            (AlreadyEndedError("abc"), "ALREADY_ENDED", 409),
            (UnauthorizedError(), "UNAUTHORIZED", 401),
            (ForbiddenError(), "FORBIDDEN", 403),
            (DatabaseError("down"), "DATABASE_ERROR", 500),
        ]
        for error, code, status_code in cases:
            assert isinstance(error, AppError)
            assert (error.code, error.status_code) == (code, status_code)

    def test_not_found_message(self):
        error = NotFoundError("AuxSession", "abc")

        assert error.message == "AuxSession with ID abc not found"
        assert error.details == {"resource": "AuxSession", "resource_id": "abc"}

    def test_already_ended_carries_end_time(self):
        error = AlreadyEndedError("abc", "2026-01-05T10:00:00")

        assert error.details == {"session_id": "abc", "end_time": "2026-01-05T10:00:00"}
        assert "already ended" in error.message


class TestRequestId:
    """Request ID propagation."""

    def test_set_and_get(self):
        set_request_id("req-123")

        assert get_request_id() == "req-123"
        assert structlog.contextvars.get_contextvars()["request_id"] == "req-123"

    async def test_incoming_header_is_echoed(self, client: AsyncClient):
        response = await client.get("/api/aux/current", headers={"X-Request-ID": "trace-abc"})

        assert response.headers["x-request-id"] == "trace-abc"

    async def test_generated_when_missing(self, client: AsyncClient):
        first = await client.get("/api/aux/current")
        second = await client.get("/api/aux/current")

        assert first.headers["x-request-id"]
        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    async def test_error_responses_carry_request_id(self, client: AsyncClient):
        response = await client.post("/api/aux/start", json={"status": "lunch"})

        assert response.status_code == 422
        assert "x-request-id" in response.headers


class TestErrorResponses:
    """Error body shape over HTTP."""

    async def test_app_error_body(self, client: AsyncClient):
        response = await client.post("/api/aux/end/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json() == {
            "code": "NOT_FOUND",
            "message": "AuxSession with ID 00000000-0000-0000-0000-000000000000 not found",
            "details": {
                "resource": "AuxSession",
                "resource_id": "00000000-0000-0000-0000-000000000000",
            },
        }

    async def test_unknown_route_is_json_404(self, client: AsyncClient):
        response = await client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    async def test_database_failure_is_database_error(self, db_session, clock, test_user):
        broken = AsyncMock()
        broken.execute.side_effect = OperationalError(
            "SELECT aux_sessions.id FROM aux_sessions", {}, Exception("connection reset")
        )

        async def override_get_db():
            yield broken

        app = build_app(db_session, clock, test_user)
        app.dependency_overrides[get_db] = override_get_db

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/api/aux/current")

        assert response.status_code == 500
        assert response.json() == {
            "code": "DATABASE_ERROR",
            "message": "Database operation failed",
        }

    async def test_request_validation_uses_error_shape(self, client: AsyncClient):
        response = await client.get("/api/analytics/productivity", params={"end": "yesterday-ish"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"] == "Request validation failed"
        assert body["details"]["errors"][0]["loc"] == ["query", "end"]


class TestSentry:
    """Sentry setup and event scrubbing."""

    def test_disabled_without_dsn(self, monkeypatch):
        monkeypatch.delenv("SENTRY_DSN", raising=False)

        assert init_sentry() is False

    def test_disabled_with_placeholder_dsn(self, monkeypatch):
        monkeypatch.setenv("SENTRY_DSN", "xxx")

        assert init_sentry() is False

    def test_filter_drops_sql_and_notes(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        event = {
            "extra": {"sql_query": "SELECT 1", "notes": "private", "session_id": "abc"},
            "breadcrumbs": {
                "values": [
                    {"category": "query", "message": "UPDATE aux_sessions"},
                    {"category": "http", "message": "POST /api/aux/start"},
                ]
            },
        }

        filtered = filter_sensitive_data(event, {})

        assert filtered["extra"] == {"session_id": "abc"}
        assert filtered["breadcrumbs"]["values"] == [
            {"category": "http", "message": "POST /api/aux/start"}
        ]

    def test_filter_handles_list_breadcrumbs(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        event = {"breadcrumbs": [{"message": "sql: select"}, {"message": "ok"}]}

        assert filter_sensitive_data(event, {})["breadcrumbs"] == [{"message": "ok"}]

    def test_filter_is_noop_in_tests(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "testing")
        event = {"extra": {"notes": "kept"}}

        assert filter_sensitive_data(event, {}) == {"extra": {"notes": "kept"}}
