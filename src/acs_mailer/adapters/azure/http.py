"""httpx-backed HTTP executor.

Owns the connection pool, TLS, and timeouts. Performs no retries; a
request that produced no response surfaces as a domain TransportError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from acs_mailer.application.ports import HttpResponse
from acs_mailer.domain.errors import TransportError

logger = logging.getLogger(__name__)


class HttpxExecutor:
    """Execute requests with a shared :class:`httpx.Client`.

    ``httpx.Client`` is thread-safe, so one executor can back concurrent
    sends. Close it (or use it as a context manager) to release the pool.

    Example:
        >>> with HttpxExecutor(timeout=5.0) as executor:  # doctest: +SKIP
        ...     executor("POST", "https://example.com", headers={}, body=b"{}")
    """

    def __init__(self, *, timeout: float = 30.0, client: httpx.Client | None = None) -> None:
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def __call__(self, method: str, url: str, *, headers: Mapping[str, str], body: bytes) -> HttpResponse:
        try:
            response = self._client.request(method, url, headers=dict(headers), content=body)
        except httpx.TransportError as exc:
            logger.debug("HTTP request failed before a response arrived", exc_info=True)
            raise TransportError(f"Could not reach the remote Azure server: {type(exc).__name__}") from exc
        return HttpResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["HttpxExecutor"]
