"""
Carespace SDK entry point.

CarespaceAPI owns a transport (the real HTTP client unless one is
injected) and exposes the domain operations as methods.

Usage:
    api = CarespaceAPI.create("https://api.carespace.ai", api_key="...")
    api.auth.login(LoginRequest("user@example.com", "secret"), on_complete=handle)
    api.get_users(page=1, limit=20, on_complete=handle)
"""

import logging
from functools import partial
from typing import Optional

from carespace_mcp.sdk import auth, clients, programs, users
from carespace_mcp.sdk.client import CarespaceClient
from carespace_mcp.sdk.models import Client, CreateUserRequest, Program
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, OnApiComplete

logger = logging.getLogger(__name__)


class AuthAPI:
    """Authentication operations bound to one transport."""

    def __init__(self, transport: Transport):
        self.login = partial(auth.login, transport)
        self.logout = partial(auth.logout, transport)
        self.refresh_token = partial(auth.refresh_token, transport)
        self.forgot_password = partial(auth.forgot_password, transport)
        self.reset_password = partial(auth.reset_password, transport)
        self.change_password = partial(auth.change_password, transport)


class CarespaceAPI:
    """High-level access to the Carespace API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[Transport] = None,
    ):
        if transport is None:
            transport = CarespaceClient(base_url, api_key, timeout)
        else:
            transport.set_base_url(base_url)
            transport.set_timeout(timeout)
            if api_key:
                transport.set_auth_token(api_key)

        self._transport = transport
        self._auth = AuthAPI(transport)
        logger.info(f"CarespaceAPI initialized with base URL: {base_url}")

    @classmethod
    def create(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        transport: Optional[Transport] = None,
    ) -> "CarespaceAPI":
        return cls(base_url=base_url, api_key=api_key, transport=transport)

    @property
    def transport(self) -> Transport:
        """The underlying transport, for endpoints not wrapped here."""
        return self._transport

    @property
    def auth(self) -> AuthAPI:
        return self._auth

    # ── Configuration ────────────────────────────────────────────────────

    def set_api_key(self, api_key: str) -> None:
        self._transport.set_auth_token(api_key)
        logger.info("CarespaceAPI: API key updated")

    def set_base_url(self, base_url: str) -> None:
        self._transport.set_base_url(base_url)
        logger.info(f"CarespaceAPI: base URL updated to {base_url}")

    def set_timeout(self, timeout_seconds: float) -> None:
        self._transport.set_timeout(timeout_seconds)

    def close(self) -> None:
        """Release the resources held by the transport without waiting on requests in flight."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    # ── Users ────────────────────────────────────────────────────────────

    def get_users(self, page: int = 1, limit: int = 20, search: str = "",
                  on_complete: Optional[OnApiComplete] = None) -> None:
        users.list_users(self._transport, page, limit, search, on_complete)

    def get_user(self, user_id: str, on_complete: Optional[OnApiComplete] = None) -> None:
        users.get_user(self._transport, user_id, on_complete)

    def create_user(self, request: CreateUserRequest,
                    on_complete: Optional[OnApiComplete] = None) -> None:
        users.create_user(self._transport, request, on_complete)

    # ── Clients ──────────────────────────────────────────────────────────

    def get_clients(self, page: int = 1, limit: int = 20, search: str = "",
                    on_complete: Optional[OnApiComplete] = None) -> None:
        clients.list_clients(self._transport, page, limit, search, on_complete)

    def get_client(self, client_id: str, on_complete: Optional[OnApiComplete] = None) -> None:
        clients.get_client(self._transport, client_id, on_complete)

    def create_client(self, client: Client, on_complete: Optional[OnApiComplete] = None) -> None:
        clients.create_client(self._transport, client, on_complete)

    # ── Programs ─────────────────────────────────────────────────────────

    def get_programs(self, page: int = 1, limit: int = 20, category: str = "",
                     on_complete: Optional[OnApiComplete] = None) -> None:
        programs.list_programs(self._transport, page, limit, category, on_complete)

    def get_program(self, program_id: str, on_complete: Optional[OnApiComplete] = None) -> None:
        programs.get_program(self._transport, program_id, on_complete)

    def create_program(self, program: Program, on_complete: Optional[OnApiComplete] = None) -> None:
        programs.create_program(self._transport, program, on_complete)

    def __enter__(self) -> "CarespaceAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
