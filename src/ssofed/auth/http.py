"""Outbound HTTP to the identity service.

Every request goes through :func:`create_http_client` so TLS verification and
timeouts are applied uniformly, and so tests can swap the client out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import SsoProviderConfigModel
from .contracts import SsoProtocolError, SsoTransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonResponse:
    status_code: int
    payload: dict[str, Any]
    body: str


def create_http_client(config: SsoProviderConfigModel) -> httpx.AsyncClient:
    return httpx.AsyncClient(verify=config.http_verify, timeout=httpx.Timeout(config.timeout))


async def request_json(
    config: SsoProviderConfigModel,
    method: str,
    url: str,
    *,
    endpoint_name: str,
    **kwargs: Any,
) -> JsonResponse:
    """Send a request and return the decoded JSON object with its raw body text.

    Raises:
        SsoTransportError: the service could not be reached (including timeouts).
        SsoProtocolError: non-2xx status, or a body that is not a JSON object.
    """
    async with create_http_client(config) as client:
        try:
            resp = await client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            logger.warning(
                "SSO %s endpoint request failed",
                endpoint_name,
                extra={
                    "provider": "sso",
                    "endpoint": endpoint_name,
                    "url": url,
                    "error_type": exc.__class__.__name__,
                },
            )
            raise SsoTransportError(url, exc) from exc

    body = resp.text
    if not 200 <= resp.status_code < 300:
        logger.warning(
            "SSO %s endpoint returned HTTP %s",
            endpoint_name,
            resp.status_code,
            extra={
                "provider": "sso",
                "endpoint": endpoint_name,
                "url": url,
                "status_code": resp.status_code,
            },
        )
        raise SsoProtocolError(url, resp.status_code, body)

    try:
        payload = resp.json()
    except ValueError as exc:
        logger.warning(
            "SSO %s endpoint returned invalid JSON",
            endpoint_name,
            extra={"provider": "sso", "endpoint": endpoint_name, "status_code": resp.status_code},
        )
        raise SsoProtocolError(
            url, resp.status_code, body, reason="Identity service returned invalid JSON"
        ) from exc

    if not isinstance(payload, dict):
        logger.warning(
            "SSO %s endpoint returned non-object JSON",
            endpoint_name,
            extra={"provider": "sso", "endpoint": endpoint_name, "status_code": resp.status_code},
        )
        raise SsoProtocolError(
            url, resp.status_code, body, reason="Identity service returned non-object JSON"
        )

    return JsonResponse(status_code=resp.status_code, payload=payload, body=body)
