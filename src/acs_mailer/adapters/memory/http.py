"""In-memory HTTP executor for testing.

Provides an executor that satisfies the HttpExecutor protocol without any
network I/O. It records every request and answers with queued or default
responses.

Contents:
    * :class:`HttpExecutorSpy` - Captures requests for test assertions.
    * :class:`RecordedRequest` - One captured request.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field

import orjson

from acs_mailer.application.ports import HttpResponse


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    """A request captured by :class:`HttpExecutorSpy`."""

    method: str
    url: str
    headers: dict[str, str]
    body: bytes

    def json(self) -> object:
        return orjson.loads(self.body)


def _empty_requests() -> list[RecordedRequest]:
    return []


def _empty_responses() -> deque[HttpResponse]:
    return deque()


def _accepted() -> HttpResponse:
    return HttpResponse(status_code=202, text='{"id": "00000000-0000-0000-0000-000000000000", "status": "Running"}')


@dataclass
class HttpExecutorSpy:
    """Captures HTTP requests for test assertions.

    Each test should create its own spy. Responses queued with
    :meth:`respond_with` are returned in order; once the queue is empty the
    ``default_response`` (a 202 with a message id) is returned.

    Attributes:
        requests: Captured requests, oldest first.
        default_response: Answer used when no queued response is left.
        raise_exception: When set, every call records the request and raises it.

    Example:
        >>> spy = HttpExecutorSpy()
        >>> spy("POST", "https://h/emails:send", headers={"a": "b"}, body=b"{}").status_code
        202
        >>> len(spy.requests)
        1
    """

    requests: list[RecordedRequest] = field(default_factory=_empty_requests)
    default_response: HttpResponse = field(default_factory=_accepted)
    raise_exception: Exception | None = None
    _queued: deque[HttpResponse] = field(default_factory=_empty_responses, repr=False)

    def respond_with(self, status_code: int, text: str) -> None:
        """Queue one response."""
        self._queued.append(HttpResponse(status_code=status_code, text=text))

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.requests.clear()
        self._queued.clear()
        self.raise_exception = None

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    def __call__(self, method: str, url: str, *, headers: Mapping[str, str], body: bytes) -> HttpResponse:
        self.requests.append(RecordedRequest(method=method, url=url, headers=dict(headers), body=body))
        if self.raise_exception is not None:
            raise self.raise_exception
        if self._queued:
            return self._queued.popleft()
        return self.default_response


__all__ = ["HttpExecutorSpy", "RecordedRequest"]
