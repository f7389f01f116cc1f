"""
In-memory transport for tests.

MockTransport implements the same send() contract as CarespaceClient
without touching the network. Responses come from, in priority order:
a one-shot FIFO queue, a (method, endpoint) rule table, or a default
success body. Every request is recorded for later inspection.
"""

import json
import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from carespace_mcp.sdk import types
from carespace_mcp.sdk.client import ClientConfig
from carespace_mcp.sdk.transport import CompletionGuard
from carespace_mcp.sdk.types import (
    CarespaceError,
    ErrorType,
    HTTPResult,
    HttpMethod,
    NO_ERROR,
    OnComplete,
)

logger = logging.getLogger(__name__)

DEFAULT_BODY = json.dumps({"success": True, "data": {}})

MOCK_LOGIN_BODY = json.dumps({
    "success": True,
    "data": {
        "accessToken": "mock_access_token_12345",
        "refreshToken": "mock_refresh_token_67890",
        "user": {
            "id": "user_123",
            "email": "test@example.com",
            "firstName": "Test",
            "lastName": "User",
            "role": "clinician",
        },
    },
})

MOCK_REFRESH_BODY = json.dumps({
    "success": True,
    "data": {
        "accessToken": "mock_new_access_token_12345",
        "refreshToken": "mock_new_refresh_token_67890",
    },
})


@dataclass(frozen=True)
class MockResponse:
    """A canned outcome for one request."""
    success: bool = True
    body: str = DEFAULT_BODY
    error: CarespaceError = NO_ERROR
    delay_seconds: float = 0.0

    @classmethod
    def ok(cls, body: str = DEFAULT_BODY, delay_seconds: float = 0.0) -> "MockResponse":
        return cls(True, body, NO_ERROR, delay_seconds)

    @classmethod
    def failure(cls, error: CarespaceError, body: str = "", delay_seconds: float = 0.0) -> "MockResponse":
        return cls(False, body, error, delay_seconds)


@dataclass(frozen=True)
class RequestRecord:
    method: str
    endpoint: str
    body: str
    query_params: Dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class MockTransport:
    """
    Drop-in replacement for CarespaceClient in tests.

    Completions fire immediately on the calling thread unless delay
    simulation is enabled and the resolved response carries a delay, in
    which case they fire from a timer thread.

    Usage:
        mock = MockTransport()
        mock.mock_auth_success()
        mock.post("/auth/login", '{"email": "a@b.com"}', on_complete=handle)
        assert mock.request_count("POST", "/auth/login") == 1
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self._config = config or ClientConfig()
        self._lock = threading.Lock()
        self._rules: Dict[Tuple[str, str], MockResponse] = {}
        self._queue: deque = deque()
        self._history: List[RequestRecord] = []
        self._counts: Dict[Tuple[str, str], int] = {}
        self._delay_enabled = False
        self._timers: List[threading.Timer] = []

    # ── Configuration (mirrors CarespaceClient) ──────────────────────────

    @property
    def config(self) -> ClientConfig:
        with self._lock:
            return self._config

    def set_base_url(self, base_url: str) -> None:
        with self._lock:
            self._config = replace(self._config, base_url=base_url)

    def set_auth_token(self, token: str) -> None:
        with self._lock:
            self._config = replace(self._config, auth_token=token or "")

    def set_timeout(self, timeout_seconds: float) -> None:
        with self._lock:
            self._config = replace(self._config, timeout_seconds=float(timeout_seconds))

    @property
    def pending_delays(self) -> int:
        """Delayed completions that have not fired yet."""
        with self._lock:
            return len(self._timers)

    def close(self) -> None:
        """Cancel pending delayed completions."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    # ── Requests ─────────────────────────────────────────────────────────

    def send(
        self,
        method: HttpMethod,
        endpoint: str,
        body: str = "",
        query_params: Optional[Mapping[str, str]] = None,
        on_complete: Optional[OnComplete] = None,
    ) -> None:
        method = HttpMethod(method)
        complete = CompletionGuard(on_complete, f"mock {method.value} {endpoint}")

        with self._lock:
            key = (method.value, endpoint)
            self._history.append(RequestRecord(method.value, endpoint, body or "", dict(query_params or {})))
            self._counts[key] = self._counts.get(key, 0) + 1

            if self._queue:
                response = self._queue.popleft()
            else:
                response = self._rules.get(key, MockResponse())

            delay = response.delay_seconds if self._delay_enabled else 0.0

        result = HTTPResult(response.success, response.body, response.error)
        logger.debug(f"Mock {method.value} {endpoint} -> success={result.success} delay={delay}")

        if delay > 0:
            self._complete_later(delay, complete, result)
        else:
            complete(result)

    def _complete_later(self, delay: float, complete: CompletionGuard, result: HTTPResult) -> None:
        def fire():
            # A fired timer leaves the pending list before delivering
            with self._lock:
                if timer in self._timers:
                    self._timers.remove(timer)
            complete(result)

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()

    def get(self, endpoint: str, query_params: Optional[Mapping[str, str]] = None,
            on_complete: Optional[OnComplete] = None) -> None:
        self.send(HttpMethod.GET, endpoint, "", query_params, on_complete)

    def post(self, endpoint: str, body: str = "",
             on_complete: Optional[OnComplete] = None) -> None:
        self.send(HttpMethod.POST, endpoint, body, None, on_complete)

    def put(self, endpoint: str, body: str = "",
            on_complete: Optional[OnComplete] = None) -> None:
        self.send(HttpMethod.PUT, endpoint, body, None, on_complete)

    def delete(self, endpoint: str, on_complete: Optional[OnComplete] = None) -> None:
        self.send(HttpMethod.DELETE, endpoint, "", None, on_complete)

    # ── Rule setup ───────────────────────────────────────────────────────

    def set_response(self, method: str, endpoint: str, response: MockResponse) -> None:
        """Register the response for (method, endpoint); replaces any previous rule."""
        with self._lock:
            self._rules[(HttpMethod(method).value, endpoint)] = response

    def enqueue_response(self, response: MockResponse) -> None:
        """Queue a response for the next request, whatever its endpoint."""
        with self._lock:
            self._queue.append(response)

    def clear_rules(self) -> None:
        """Drop every rule and every queued response."""
        with self._lock:
            self._rules.clear()
            self._queue.clear()

    def set_delay_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._delay_enabled = enabled

    # ── Inspection ───────────────────────────────────────────────────────

    def request_count(self, method: str, endpoint: str) -> int:
        with self._lock:
            return self._counts.get((HttpMethod(method).value, endpoint), 0)

    def total_request_count(self) -> int:
        with self._lock:
            return len(self._history)

    def last_request_body(self, method: str, endpoint: str) -> str:
        """Body of the most recent matching request, or "" if none."""
        method = HttpMethod(method).value
        with self._lock:
            for record in reversed(self._history):
                if record.method == method and record.endpoint == endpoint:
                    return record.body
        return ""

    @property
    def history(self) -> List[RequestRecord]:
        with self._lock:
            return list(self._history)

    def reset(self) -> None:
        """Clear the request log and counts; rules and queue are kept."""
        with self._lock:
            self._history.clear()
            self._counts.clear()

    # ── Presets ──────────────────────────────────────────────────────────

    def mock_auth_success(self) -> None:
        self.set_response("POST", types.LOGIN, MockResponse.ok(MOCK_LOGIN_BODY))
        self.set_response("POST", types.REFRESH, MockResponse.ok(MOCK_REFRESH_BODY))

    def mock_auth_failure(self) -> None:
        error = CarespaceError(ErrorType.AUTHENTICATION, "Invalid credentials", 401)
        body = json.dumps({"success": False, "message": "Invalid credentials"})
        self.set_response("POST", types.LOGIN, MockResponse.failure(error, body))

    def mock_network_timeout(self) -> None:
        error = CarespaceError(ErrorType.NETWORK, "Request timed out", 0)
        self.enqueue_response(MockResponse.failure(error, delay_seconds=5.0))

    def mock_server_error(self) -> None:
        error = CarespaceError(ErrorType.SERVER, "Internal server error", 500)
        self.enqueue_response(MockResponse.failure(error))
