"""Tests for transport outcome classification."""

import json

import pytest

from carespace_mcp.sdk.errors import (
    AUTH_FAILED,
    INVALID_RESPONSE,
    NETWORK_FAILED,
    classify,
    extract_message,
)
from carespace_mcp.sdk.types import ErrorType


class TestClassify:
    def test_transport_failure(self):
        error = classify(False, None)
        assert error.error_type == ErrorType.NETWORK
        assert error.message == NETWORK_FAILED == "Network request failed"
        assert error.status_code == 0

    def test_transport_failure_ignores_status_and_body(self):
        error = classify(False, 500, json.dumps({"message": "boom"}))
        assert error.error_type == ErrorType.NETWORK
        assert error.status_code == 0

    def test_no_usable_response(self):
        error = classify(True, None)
        assert error.error_type == ErrorType.UNKNOWN
        assert error.message == INVALID_RESPONSE == "Invalid response"
        assert error.status_code == 0

    def test_401_default_message(self):
        error = classify(True, 401, "")
        assert error.error_type == ErrorType.AUTHENTICATION
        assert error.message == AUTH_FAILED == "Authentication failed. Please check your API key."
        assert error.status_code == 401

    def test_401_server_message(self):
        error = classify(True, 401, json.dumps({"message": "Token expired"}))
        assert error.error_type == ErrorType.AUTHENTICATION
        assert error.message == "Token expired"

    @pytest.mark.parametrize("status", [400, 403, 404, 422, 499])
    def test_client_errors(self, status):
        error = classify(True, status, "")
        assert error.error_type == ErrorType.VALIDATION
        assert error.message == f"Client error: {status}"
        assert error.status_code == status

    @pytest.mark.parametrize("status", [500, 502, 503, 599, 600])
    def test_server_errors(self, status):
        error = classify(True, status, "not json")
        assert error.error_type == ErrorType.SERVER
        assert error.message == f"Server error: {status}"
        assert error.status_code == status

    @pytest.mark.parametrize("status", [100, 302, 399])
    def test_other_statuses(self, status):
        error = classify(True, status)
        assert error.error_type == ErrorType.UNKNOWN
        assert error.message == f"Unknown error: {status}"

    def test_validation_uses_error_field(self):
        error = classify(True, 422, json.dumps({"error": "Email already exists"}))
        assert error.error_type == ErrorType.VALIDATION
        assert error.message == "Email already exists"


class TestExtractMessage:
    def test_message_wins_over_error(self):
        body = json.dumps({"message": "first", "error": "second"})
        assert extract_message(body) == "first"

    def test_error_field(self):
        assert extract_message(json.dumps({"error": "bad"})) == "bad"

    def test_non_string_message_ignored(self):
        body = json.dumps({"message": {"code": 1}, "error": "fallback"})
        assert extract_message(body) == "fallback"

    @pytest.mark.parametrize("body", ["", "not json", "[1, 2]", "42", json.dumps({"detail": "x"})])
    def test_nothing_to_extract(self, body):
        assert extract_message(body) == ""
