"""Tests for the in-memory MockTransport."""

import json
import threading
import pytest

from carespace_mcp.sdk import types
from carespace_mcp.sdk.testing import (
    DEFAULT_BODY,
    MockResponse,
    MockTransport,
)
from carespace_mcp.sdk.types import CarespaceError, ErrorType, HttpMethod


@pytest.fixture
def transport():
    t = MockTransport()
    yield t
    t.close()


def collect(transport, method, endpoint, body="", **kwargs):
    results = []
    transport.send(method, endpoint, body, on_complete=results.append, **kwargs)
    return results


class TestDefaults:
    def test_default_success(self, transport):
        results = collect(transport, "GET", "/users")
        assert len(results) == 1
        assert results[0].success is True
        assert results[0].body == DEFAULT_BODY
        assert json.loads(results[0].body) == {"success": True, "data": {}}

    def test_completes_synchronously(self, transport):
        results = collect(transport, HttpMethod.GET, "/users")
        assert results, "completion should fire before send() returns"

    def test_none_callback_allowed(self, transport):
        transport.send(HttpMethod.GET, "/users")
        assert transport.total_request_count() == 1


class TestResolution:
    def test_rule_matches_method_and_endpoint(self, transport):
        transport.set_response("GET", "/users", MockResponse.ok('{"rule": true}'))

        assert collect(transport, "GET", "/users")[0].body == '{"rule": true}'
        assert collect(transport, "POST", "/users")[0].body == DEFAULT_BODY
        assert collect(transport, "GET", "/clients")[0].body == DEFAULT_BODY

    def test_rule_replaced(self, transport):
        transport.set_response("GET", "/users", MockResponse.ok("first"))
        transport.set_response("GET", "/users", MockResponse.ok("second"))
        assert collect(transport, "GET", "/users")[0].body == "second"

    def test_queue_beats_rule_and_is_consumed_once(self, transport):
        transport.set_response("GET", "/users", MockResponse.ok("rule"))
        transport.enqueue_response(MockResponse.ok("queued"))

        assert collect(transport, "GET", "/users")[0].body == "queued"
        assert collect(transport, "GET", "/users")[0].body == "rule"

    def test_queue_ignores_endpoint(self, transport):
        transport.enqueue_response(MockResponse.ok("queued"))
        assert collect(transport, "DELETE", "/anything")[0].body == "queued"

    def test_queue_is_fifo(self, transport):
        transport.enqueue_response(MockResponse.ok("one"))
        transport.enqueue_response(MockResponse.ok("two"))
        bodies = [collect(transport, "GET", "/x")[0].body for _ in range(3)]
        assert bodies == ["one", "two", DEFAULT_BODY]

    def test_failure_response(self, transport):
        error = CarespaceError(ErrorType.VALIDATION, "Email already exists", 422)
        transport.set_response("POST", "/users", MockResponse.failure(error, '{"message": "x"}'))

        result = collect(transport, "POST", "/users")[0]
        assert result.success is False
        assert result.error == error
        assert result.body == '{"message": "x"}'

    def test_clear_rules_drops_rules_and_queue(self, transport):
        transport.set_response("GET", "/users", MockResponse.ok("rule"))
        transport.enqueue_response(MockResponse.ok("queued"))
        transport.clear_rules()
        assert collect(transport, "GET", "/users")[0].body == DEFAULT_BODY


class TestInspection:
    def test_counts(self, transport):
        for _ in range(3):
            transport.send("GET", "/users")
        transport.send("POST", "/users", "{}")

        assert transport.request_count("GET", "/users") == 3
        assert transport.request_count("POST", "/users") == 1
        assert transport.request_count("GET", "/clients") == 0
        assert transport.total_request_count() == 4

    def test_last_request_body(self, transport):
        transport.send("POST", "/users", '{"n": 1}')
        transport.send("POST", "/users", '{"n": 2}')
        transport.send("POST", "/clients", '{"n": 3}')

        assert transport.last_request_body("POST", "/users") == '{"n": 2}'
        assert transport.last_request_body("PUT", "/users") == ""

    def test_history_records_query_params(self, transport):
        transport.send("GET", "/users", query_params={"page": "2"})
        record = transport.history[0]
        assert record.method == "GET"
        assert record.endpoint == "/users"
        assert record.query_params == {"page": "2"}

    def test_reset_keeps_rules(self, transport):
        transport.set_response("GET", "/users", MockResponse.ok("rule"))
        transport.send("GET", "/users")
        transport.reset()

        assert transport.total_request_count() == 0
        assert transport.request_count("GET", "/users") == 0
        assert collect(transport, "GET", "/users")[0].body == "rule"

    def test_config_setters(self, transport):
        transport.set_base_url("https://api.test")
        transport.set_auth_token("tok")
        transport.set_timeout(7)
        assert transport.config.base_url == "https://api.test"
        assert transport.config.auth_token == "tok"
        assert transport.config.timeout_seconds == 7.0


class TestDelay:
    def test_delay_ignored_when_disabled(self, transport):
        transport.enqueue_response(MockResponse.ok("slow", delay_seconds=5.0))
        assert collect(transport, "GET", "/users")[0].body == "slow"

    def test_delay_applied_when_enabled(self, transport):
        transport.set_delay_enabled(True)
        transport.enqueue_response(MockResponse.ok("slow", delay_seconds=0.05))

        done = threading.Event()
        results = []

        def on_complete(result):
            results.append(result)
            done.set()

        transport.send("GET", "/users", on_complete=on_complete)
        assert results == []
        assert done.wait(2)
        assert results[0].body == "slow"

    def test_fired_timers_are_released(self, transport):
        transport.set_delay_enabled(True)
        total = 5
        all_done = threading.Event()
        results = []
        lock = threading.Lock()

        def on_complete(result):
            with lock:
                results.append(result)
                if len(results) == total:
                    all_done.set()

        for _ in range(total):
            transport.enqueue_response(MockResponse.ok(delay_seconds=0.02))
            transport.send("GET", "/users", on_complete=on_complete)
        assert all_done.wait(2)
        assert transport.pending_delays == 0

        transport.enqueue_response(MockResponse.ok(delay_seconds=1.0))
        transport.send("GET", "/users")
        assert transport.pending_delays == 1

    def test_close_cancels_pending(self, transport):
        transport.set_delay_enabled(True)
        transport.enqueue_response(MockResponse.ok(delay_seconds=1.0))
        results = []
        transport.send("GET", "/users", on_complete=results.append)
        transport.close()
        assert results == []
        assert transport.pending_delays == 0


class TestPresets:
    def test_auth_success(self, transport):
        transport.mock_auth_success()
        body = json.loads(collect(transport, "POST", types.LOGIN)[0].body)
        assert body["data"]["accessToken"] == "mock_access_token_12345"

        refresh = json.loads(collect(transport, "POST", types.REFRESH)[0].body)
        assert refresh["data"]["accessToken"]

    def test_auth_failure(self, transport):
        transport.mock_auth_failure()
        result = collect(transport, "POST", types.LOGIN)[0]
        assert result.success is False
        assert result.error.error_type == ErrorType.AUTHENTICATION
        assert result.error.message == "Invalid credentials"
        assert result.error.status_code == 401

    def test_network_timeout(self, transport):
        transport.mock_network_timeout()
        result = collect(transport, "GET", "/users")[0]
        assert result.error.error_type == ErrorType.NETWORK
        assert result.error.message == "Request timed out"
        # One-shot
        assert collect(transport, "GET", "/users")[0].success is True

    def test_server_error(self, transport):
        transport.mock_server_error()
        result = collect(transport, "GET", "/programs")[0]
        assert result.error.error_type == ErrorType.SERVER
        assert result.error.message == "Internal server error"
        assert result.error.status_code == 500


def test_login_then_unconfigured_endpoint(transport):
    transport.mock_auth_success()

    login = collect(transport, "POST", "/auth/login", '{"email":"a@b.com","password":"x"}')[0]
    assert login.success is True
    assert "accessToken" in login.body

    users = collect(transport, "GET", "/users")[0]
    assert users.success is True
    assert json.loads(users.body) == {"success": True, "data": {}}
