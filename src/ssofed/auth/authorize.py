"""Authorization request construction: state, nonce and PKCE."""

from __future__ import annotations

import base64
import hashlib
import logging
import secrets
from urllib.parse import urlencode

from .config import SsoProviderConfigModel
from .contracts import PkcePair, SsoFlowError, SsoNonceMissingError
from .session import NONCE_KEY, SessionAccessor

logger = logging.getLogger(__name__)


def generate_state() -> str:
    """Unpredictable value for the OAuth ``state`` parameter."""
    return secrets.token_urlsafe(32)


def generate_nonce() -> str:
    """Unpredictable replay-protection nonce for the host to store in its session."""
    return secrets.token_urlsafe(32)


def generate_pkce_pair() -> PkcePair:
    """Generate a PKCE verifier (base64url, 43 chars) and its S256 challenge."""
    verifier = base64.urlsafe_b64encode(secrets.token_bytes(32)).decode("utf-8").rstrip("=")
    challenge_bytes = hashlib.sha256(verifier.encode("utf-8")).digest()
    challenge = base64.urlsafe_b64encode(challenge_bytes).decode("utf-8").rstrip("=")
    return PkcePair(verifier=verifier, challenge=challenge, method="S256")


def read_nonce(session: SessionAccessor, config: SsoProviderConfigModel) -> str:
    """Read the session nonce, applying the deployment's nonce policy.

    An empty nonce is sent as-is unless ``require_nonce`` is configured, in which
    case :class:`SsoNonceMissingError` is raised before any redirect happens.
    """
    nonce = session.get(NONCE_KEY) if session.has(NONCE_KEY) else None
    if nonce:
        return str(nonce)

    if config.require_nonce:
        raise SsoNonceMissingError(
            "No nonce in session; a nonce must be stored before starting SSO login",
            endpoint=config.authorize_url,
        )
    logger.warning(
        "Building SSO authorization request without a nonce",
        extra={"provider": "sso", "endpoint": "authorize"},
    )
    return ""


def build_authorization_params(
    config: SsoProviderConfigModel,
    *,
    nonce: str,
    state: str | None = None,
    pkce: PkcePair | None = None,
) -> dict[str, str]:
    """Query parameters for the authorization redirect.

    Configured static parameters are merged last and override anything above.
    With PKCE enabled a pair is mandatory; without one the login would not be
    bound to a verifier, so :class:`SsoFlowError` is raised instead.
    """
    if config.pkce and pkce is None:
        raise SsoFlowError(
            "PKCE is enabled but no code challenge was supplied",
            endpoint=config.authorize_url,
        )

    params: dict[str, str] = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "scope": config.scope_separator.join(config.scopes),
        "response_type": "code",
    }
    if config.use_state:
        params["state"] = state or ""
    params["nonce"] = nonce
    if config.pkce and pkce is not None:
        params["code_challenge"] = pkce.challenge
        params["code_challenge_method"] = pkce.method
    params.update(config.parameters)
    return params


def build_authorization_url(
    config: SsoProviderConfigModel,
    *,
    nonce: str,
    state: str | None = None,
    pkce: PkcePair | None = None,
) -> str:
    params = build_authorization_params(config, nonce=nonce, state=state, pkce=pkce)
    separator = "&" if "?" in config.authorize_url else "?"
    return f"{config.authorize_url}{separator}{urlencode(params)}"
