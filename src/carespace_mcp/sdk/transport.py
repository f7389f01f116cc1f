"""
Transport contract shared by the real HTTP client and the mock.

Domain code depends on this protocol only, never on a concrete class.
"""

import logging
import threading
from typing import Mapping, Optional, Protocol

from carespace_mcp.sdk.types import HTTPResult, HttpMethod, OnComplete

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can send a Carespace request."""

    def send(
        self,
        method: HttpMethod,
        endpoint: str,
        body: str = "",
        query_params: Optional[Mapping[str, str]] = None,
        on_complete: Optional[OnComplete] = None,
    ) -> None:
        """Issue one request; `on_complete` fires exactly once."""
        ...

    def set_base_url(self, base_url: str) -> None:
        ...

    def set_auth_token(self, token: str) -> None:
        ...

    def set_timeout(self, timeout_seconds: float) -> None:
        ...


class CompletionGuard:
    """Wraps a callback so it can fire at most once.

    A second delivery is logged and dropped. Exceptions raised by the
    callback are logged; they must not turn into a second delivery.
    """

    def __init__(self, on_complete: Optional[OnComplete], label: str):
        self._on_complete = on_complete
        self._label = label
        self._fired = False
        self._lock = threading.Lock()

    def __call__(self, result: HTTPResult) -> None:
        if not self.offer(result):
            logger.error(f"Duplicate completion for {self._label} dropped")

    def offer(self, result: HTTPResult) -> bool:
        """Deliver `result` unless a completion already fired.

        For racing producers (response vs. deadline): the loser is
        dropped silently. Returns True if this call delivered.
        """
        with self._lock:
            if self._fired:
                return False
            self._fired = True

        if self._on_complete is not None:
            try:
                self._on_complete(result)
            except Exception:
                logger.exception(f"Completion callback for {self._label} raised")
        return True

    @property
    def fired(self) -> bool:
        return self._fired
