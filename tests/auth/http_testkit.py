"""Test utilities for tests that talk to the identity service.

Provides a minimal async HTTP client fake matching the shape used through
`ssofed.auth.http.create_http_client()`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

HTTP_CLIENT_PATH = "ssofed.auth.http.create_http_client"


@dataclass(frozen=True)
class FakeResponse:
    status_code: int
    payload: Any = None
    raw_text: str | None = None

    @property
    def text(self) -> str:
        if self.raw_text is not None:
            return self.raw_text
        return json.dumps(self.payload)

    def json(self) -> Any:
        if self.raw_text is not None:
            return json.loads(self.raw_text)
        return self.payload


@dataclass
class RecordedRequest:
    method: str
    url: str
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeAsyncHttpClient:
    """Minimal async context manager standing in for `httpx.AsyncClient`.

    - `request()` routes responses by substring match on URL (first match wins)
    - raises `error` instead when one is given
    - records every request for assertions
    """

    def __init__(
        self,
        *,
        responses: dict[str, FakeResponse] | None = None,
        default_response: FakeResponse | None = None,
        error: Exception | None = None,
    ) -> None:
        self._responses = dict(responses or {})
        self._default_response = default_response or FakeResponse(200, {})
        self._error = error
        self.requests: list[RecordedRequest] = []

    async def __aenter__(self) -> "FakeAsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> bool:
        return False

    async def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append(RecordedRequest(method=method, url=url, kwargs=kwargs))
        if self._error is not None:
            raise self._error
        for route_substring, resp in self._responses.items():
            if route_substring in url:
                return resp
        return self._default_response


def patch_http_client(monkeypatch: Any, fake_client: Any) -> None:
    """Make every `create_http_client(config)` call return `fake_client`."""

    monkeypatch.setattr(HTTP_CLIENT_PATH, lambda config: fake_client)
