"""SSO provider adapter that uses real HTTP calls."""

from __future__ import annotations

from typing import Any

from .authorize import build_authorization_url
from .config import SsoProviderConfigModel
from .contracts import CanonicalUser, PkcePair, SsoProviderAdapter, TokenGrant
from .profile import fetch_profile, map_profile
from .token import exchange_token


class SsoProvider(SsoProviderAdapter):
    """Configuration-driven adapter for the external SSO identity service."""

    provider_name = "sso"

    def __init__(self, config: SsoProviderConfigModel):
        self.config = config

    def build_authorization_url(
        self,
        *,
        nonce: str,
        state: str | None = None,
        pkce: PkcePair | None = None,
    ) -> str:
        return build_authorization_url(self.config, nonce=nonce, state=state, pkce=pkce)

    async def exchange_token(self, *, code: str, code_verifier: str | None = None) -> TokenGrant:
        return await exchange_token(self.config, code, code_verifier)

    async def fetch_profile(self, *, access_token: str) -> dict[str, Any]:
        return await fetch_profile(self.config, access_token)

    def map_profile(self, raw_profile: dict[str, Any]) -> CanonicalUser:
        return map_profile(self.config, raw_profile)
