"""
Tests for request and audit logging
"""

import json
import logging

from app.middleware.logging import JsonLogFormatter, RequestContextFilter, request_id_var, user_id_var
from helpers import auth_headers


def make_record(message: str = "Consent recorded", **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.services.consent_writer", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContextFilter:
    def test_stamps_request_and_user(self):
        request_token = request_id_var.set("req-1")
        user_token = user_id_var.set("u-1")
        try:
            record = make_record()
            assert RequestContextFilter().filter(record) is True
        finally:
            request_id_var.reset(request_token)
            user_id_var.reset(user_token)

        assert record.request_id == "req-1"
        assert record.user_id == "u-1"

    def test_explicit_user_wins(self):
        token = user_id_var.set("u-1")
        try:
            record = make_record(user_id="u-2")
            RequestContextFilter().filter(record)
        finally:
            user_id_var.reset(token)

        assert record.user_id == "u-2"

    def test_outside_a_request(self):
        record = make_record()
        RequestContextFilter().filter(record)

        assert record.request_id == ""
        assert record.user_id is None


class TestJsonLogFormatter:
    def test_ledger_fields_are_top_level(self):
        record = make_record(
            request_id="req-9",
            user_id="u-9",
            document_types=["terms_of_service", "privacy_policy"],
            consent_source="signup",
        )

        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["message"] == "Consent recorded"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "req-9"
        assert entry["user_id"] == "u-9"
        assert entry["document_types"] == ["terms_of_service", "privacy_policy"]
        assert entry["consent_source"] == "signup"

    def test_unset_fields_are_omitted(self):
        entry = json.loads(JsonLogFormatter().format(make_record(user_id=None)))

        assert "user_id" not in entry
        assert "document_types" not in entry


class TestAccessLogMiddleware:
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/v1/legal-documents/current", headers={"X-Request-ID": "trace-abc"})

        assert response.headers["X-Request-ID"] == "trace-abc"

    async def test_request_id_is_generated(self, client):
        response = await client.get("/api/v1/legal-documents/current")

        assert response.headers["X-Request-ID"]

    async def test_error_envelope_carries_request_id(self, client):
        response = await client.get(
            "/api/v1/consents/status", headers={"X-Request-ID": "trace-401"}
        )

        assert response.json()["error"]["request_id"] == "trace-401"

    async def test_access_line_names_the_caller(self, client, caplog, make_document):
        await make_document("terms_of_service")
        caplog.set_level(logging.INFO)
        caplog.set_level(logging.INFO, logger="consent_ledger.access")

        await client.post(
            "/api/v1/consents", json={"document_types": ["terms_of_service"]}, headers=auth_headers(user_id="u-77")
        )

        (access,) = [r for r in caplog.records if r.name == "consent_ledger.access"]
        assert access.status_code == 201
        assert access.user_id == "u-77"
        assert access.path == "/api/v1/consents"

        (written,) = [r for r in caplog.records if r.name == "app.services.consent_writer"]
        assert written.document_types == ["terms_of_service"]
        assert written.consent_source == "signup"


class TestRoutingErrors:
    async def test_unknown_route(self, client):
        response = await client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_NOT_FOUND"

    async def test_wrong_method(self, client):
        response = await client.delete("/api/v1/consents/history", headers=auth_headers())

        assert response.status_code == 405
        assert response.json()["error"]["error_code"] == "METHOD_NOT_ALLOWED"
