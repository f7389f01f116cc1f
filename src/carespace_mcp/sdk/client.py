"""
Carespace HTTP Client.

Handles HTTP transport, bearer authentication, and response classification.
All domain-specific logic lives in the sibling modules (auth, users, etc.).

Each request runs on its own thread and reports back through a single
completion callback carrying an HTTPResult.
"""

import logging
import os
import threading
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

import requests

from carespace_mcp.sdk.errors import classify
from carespace_mcp.sdk.transport import CompletionGuard
from carespace_mcp.sdk.types import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    HTTPResult,
    HttpMethod,
    OnComplete,
)
from carespace_mcp.sdk.urls import build_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings captured by each request at send time."""
    base_url: str = DEFAULT_BASE_URL
    auth_token: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from CARESPACE_* environment variables.

        Raises:
            ValueError: If CARESPACE_TIMEOUT is not a number
        """
        timeout = os.environ.get("CARESPACE_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout_seconds = float(timeout)
        except ValueError:
            raise ValueError(f"Invalid CARESPACE_TIMEOUT '{timeout}'. Must be a number of seconds")

        return cls(
            base_url=os.environ.get("CARESPACE_BASE_URL", DEFAULT_BASE_URL),
            auth_token=os.environ.get("CARESPACE_API_KEY", ""),
            timeout_seconds=timeout_seconds,
        )

    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers


class CarespaceClient:
    """
    Carespace HTTP transport.

    Owns the connection settings and the HTTP session. Every send() returns
    immediately and runs on a thread of its own, so outstanding requests
    never wait on each other. The result is delivered once to `on_complete`:
    when the response arrives, or as a NETWORK failure once
    `timeout_seconds` has elapsed since the send, whichever comes first.
    Nothing is raised across send().

    Usage:
        client = CarespaceClient("https://api.carespace.ai", api_key="...")
        client.get("/users", query_params={"page": "1"}, on_complete=handle)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        config: Optional[ClientConfig] = None,
    ):
        self._config = config or ClientConfig(base_url, api_key, timeout)
        self._config_lock = threading.Lock()
        self._closed = False
        self._session = requests.Session()

    # ── Configuration ────────────────────────────────────────────────────

    @property
    def config(self) -> ClientConfig:
        """Snapshot of the current settings."""
        with self._config_lock:
            return self._config

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def timeout(self) -> float:
        return self.config.timeout_seconds

    @property
    def has_auth_token(self) -> bool:
        return bool(self.config.auth_token)

    def set_base_url(self, base_url: str) -> None:
        self._update(base_url=base_url)

    def set_auth_token(self, token: str) -> None:
        self._update(auth_token=token or "")

    def set_timeout(self, timeout_seconds: float) -> None:
        self._update(timeout_seconds=float(timeout_seconds))

    def _update(self, **changes) -> None:
        with self._config_lock:
            self._config = replace(self._config, **changes)

    # ── Requests ─────────────────────────────────────────────────────────

    def send(
        self,
        method: HttpMethod,
        endpoint: str,
        body: str = "",
        query_params: Optional[Mapping[str, str]] = None,
        on_complete: Optional[OnComplete] = None,
    ) -> None:
        """
        Issue one request on a new thread.

        Args:
            method: HTTP verb
            endpoint: API path starting with "/" (e.g. "/users")
            body: Pre-serialized JSON text, or "" for no body
            query_params: Query parameters; empty values are dropped
            on_complete: Called exactly once with an HTTPResult
        """
        method = HttpMethod(method)
        config = self.config
        url = build_url(config.base_url, endpoint, query_params)
        complete = CompletionGuard(on_complete, f"{method.value} {endpoint}")

        if self.closed:
            logger.warning(f"{method.value} {endpoint} not sent: client is closed")
            complete(HTTPResult(False, "", classify(False, None)))
            return

        logger.debug(f"Dispatching {method.value} {url}")
        worker = threading.Thread(
            target=self._perform,
            args=(method, url, body, config, complete),
            name=f"carespace-http {method.value} {endpoint}",
            daemon=True,
        )
        worker.start()

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

    def _perform(
        self,
        method: HttpMethod,
        url: str,
        body: str,
        config: ClientConfig,
        complete: CompletionGuard,
    ) -> None:
        """Run on the request's thread: perform the call and deliver the result.

        `requests` applies its timeout to the connect and to each socket
        read separately, so a deadline timer bounds the request as a whole.
        """
        deadline = threading.Timer(
            config.timeout_seconds,
            self._expire,
            args=(method, url, config, complete),
        )
        deadline.daemon = True
        deadline.start()
        try:
            result = self._request(method, url, body, config)
        finally:
            deadline.cancel()

        if not complete.offer(result):
            logger.debug(f"{method.value} {url} finished after its deadline; result dropped")

    def _request(self, method: HttpMethod, url: str, body: str, config: ClientConfig) -> HTTPResult:
        try:
            response = self._session.request(
                method.value,
                url,
                headers=config.headers(),
                data=body.encode("utf-8") if body else None,
                timeout=config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning(f"{method.value} {url} failed: {e}")
            return HTTPResult(False, "", classify(False, None))
        except Exception:
            logger.exception(f"{method.value} {url} produced no usable response")
            return HTTPResult(False, "", classify(True, None))

        return self._to_result(method, url, response)

    @staticmethod
    def _expire(method: HttpMethod, url: str, config: ClientConfig, complete: CompletionGuard) -> None:
        if complete.offer(HTTPResult(False, "", classify(False, None))):
            logger.warning(f"{method.value} {url} timed out after {config.timeout_seconds}s")

    @staticmethod
    def _to_result(method: HttpMethod, url: str, response: requests.Response) -> HTTPResult:
        body = response.text or ""
        status = response.status_code

        if 200 <= status < 300:
            return HTTPResult(True, body)

        error = classify(True, status, body)
        logger.warning(
            f"{method.value} {url} -> {status} ({error.error_type.value}): {error.message}"
        )
        return HTTPResult(False, body, error)

    # ── Lifecycle ────────────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        with self._config_lock:
            return self._closed

    def close(self) -> None:
        """Stop accepting requests and release the HTTP session.

        Never waits: requests already in flight keep their own thread and
        still complete once, by response or by deadline. Safe to call from
        an event loop.
        """
        with self._config_lock:
            self._closed = True
        self._session.close()

    def __enter__(self) -> "CarespaceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
