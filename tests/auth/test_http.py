from typing import Any

import httpx
import pytest
from pytest import MonkeyPatch

from ssofed.auth import http
from ssofed.auth.config import resolve_provider_config


@pytest.mark.asyncio
async def test_client_applies_timeout(make_source, base_settings) -> None:
    config = resolve_provider_config(make_source(**base_settings, http_verify=False, timeout=2.5))

    async with http.create_http_client(config) as client:
        assert client.timeout == httpx.Timeout(2.5)


@pytest.mark.parametrize("verify", [True, False])
def test_client_receives_verify_flag(
    monkeypatch: MonkeyPatch, make_source, base_settings, verify: bool
) -> None:
    captured: dict[str, Any] = {}

    def spy(**kwargs: Any) -> str:
        captured.update(kwargs)
        return "client"

    monkeypatch.setattr(http.httpx, "AsyncClient", spy)
    config = resolve_provider_config(make_source(**base_settings, http_verify=verify, timeout=2.5))

    assert http.create_http_client(config) == "client"
    assert captured["verify"] is verify
    assert captured["timeout"] == httpx.Timeout(2.5)


@pytest.mark.asyncio
async def test_default_timeout(sso_config) -> None:
    async with http.create_http_client(sso_config) as client:
        assert client.timeout == httpx.Timeout(10.0)
