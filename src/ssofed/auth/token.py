"""Authorization-code token exchange."""

from __future__ import annotations

import logging

from pydantic import ConfigDict, ValidationError

from ssofed.models import SsoBaseModel

from .config import SsoProviderConfigModel
from .contracts import SsoProtocolError, TokenGrant
from .http import request_json

logger = logging.getLogger(__name__)


class _TokenResponse(SsoBaseModel):
    """Minimal token endpoint response."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str | None = None
    token_type: str | None = None
    expires_in: float | None = None
    scope: str | None = None
    refresh_token: str | None = None


def build_token_fields(
    config: SsoProviderConfigModel, code: str, code_verifier: str | None = None
) -> dict[str, str]:
    fields = {
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "code": code,
        "redirect_uri": config.redirect_uri,
        "grant_type": "authorization_code",
    }
    if code_verifier:
        fields["code_verifier"] = code_verifier
    return fields


async def exchange_token(
    config: SsoProviderConfigModel, code: str, code_verifier: str | None = None
) -> TokenGrant:
    """POST the authorization code to the token endpoint.

    Single-shot: a failed exchange is never retried since the code cannot be reused.
    """
    resp = await request_json(
        config,
        "POST",
        config.token_url,
        endpoint_name="token",
        data=build_token_fields(config, code, code_verifier),
        headers={"Accept": "application/json"},
    )

    try:
        token = _TokenResponse.model_validate(resp.payload)
    except ValidationError as exc:
        raise SsoProtocolError(
            config.token_url,
            resp.status_code,
            resp.body,
            reason="Invalid token response payload",
        ) from exc

    if not token.access_token:
        logger.warning(
            "SSO token endpoint response has no access_token",
            extra={"provider": "sso", "endpoint": "token"},
        )
        raise SsoProtocolError(
            config.token_url,
            resp.status_code,
            resp.body,
            reason="No access_token in token response",
        )

    return TokenGrant(
        access_token=token.access_token,
        token_type=token.token_type or "Bearer",
        expires_in=token.expires_in,
        scope=token.scope,
        refresh_token=token.refresh_token,
        raw=resp.payload,
    )
