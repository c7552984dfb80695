"""Contracts and shared types for the SSO federation adapter."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from pydantic import Field

from ssofed.models import SsoBaseModel

GENERIC_USER_MESSAGE = "The sign-in service is currently unavailable. Please try again later."


class SsoError(Exception):
    """Base class for failures of a single login attempt.

    Carries enough structured detail for logging. ``str(exc)`` is meant for
    operators; end users should only ever see :attr:`user_message`.
    """

    kind = "sso_error"

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body

    @property
    def user_message(self) -> str:
        return GENERIC_USER_MESSAGE

    def to_log_extra(self) -> dict[str, Any]:
        """Structured logging context. Never includes the raw body."""
        extra: dict[str, Any] = {"provider": "sso", "error_kind": self.kind}
        if self.endpoint is not None:
            extra["endpoint"] = self.endpoint
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class SsoTransportError(SsoError):
    """The identity service could not be reached (connection, timeout, TLS)."""

    kind = "transport"

    def __init__(self, endpoint: str, cause: BaseException):
        super().__init__(
            f"Request to {endpoint} failed: {cause.__class__.__name__}: {cause}",
            endpoint=endpoint,
        )
        self.cause = cause


class SsoProtocolError(SsoError):
    """The identity service answered with an error or an unusable payload.

    ``body`` holds the raw response text verbatim for operator diagnosis.
    """

    kind = "protocol"

    def __init__(self, endpoint: str, status_code: int, body: str, reason: str | None = None):
        message = reason or f"Identity service returned HTTP {status_code}"
        super().__init__(
            f"{message} from {endpoint}",
            endpoint=endpoint,
            status_code=status_code,
            body=body,
        )


class SsoProfileShapeError(SsoError):
    """The profile does not match the configured shape.

    Either the configured wrap key is absent (``wrap_key`` set, ``missing_fields``
    empty) or one or more required fields are missing.
    """

    kind = "profile_shape"

    def __init__(
        self,
        *,
        missing_fields: Sequence[str] = (),
        wrap_key: str | None = None,
        wrap_key_missing: bool = False,
    ):
        self.missing_fields = list(missing_fields)
        self.wrap_key = wrap_key
        self.wrap_key_missing = wrap_key_missing
        if wrap_key_missing:
            message = (
                f"The SSO user endpoint response has no `{wrap_key}` object; "
                "check provider_user_endpoint_data_wrap_key."
            )
        elif wrap_key:
            message = (
                f"The SSO user endpoint response is missing {', '.join(self.missing_fields)} "
                f"in the `{wrap_key}` field; check provider_user_endpoint_keys."
            )
        else:
            message = (
                f"The SSO user endpoint response is missing {', '.join(self.missing_fields)}; "
                "check provider_user_endpoint_keys."
            )
        super().__init__(message)

    def to_log_extra(self) -> dict[str, Any]:
        extra = super().to_log_extra()
        extra["missing_fields"] = self.missing_fields
        if self.wrap_key_missing:
            extra["wrap_key"] = self.wrap_key
        return extra


class SsoNonceMissingError(SsoError):
    """The session carries no nonce while the deployment requires one."""

    kind = "nonce_missing"


class SsoStateMismatchError(SsoError):
    """The callback ``state`` does not match the one issued with the redirect."""

    kind = "invalid_state"


class SsoFlowError(SsoError):
    """A login attempt was driven out of order or without what the next step needs."""

    kind = "flow"


class PkcePair(SsoBaseModel):
    """PKCE code verifier and its derived challenge."""

    verifier: str = Field(repr=False)
    challenge: str
    method: str = "S256"


class AuthorizationRequest(SsoBaseModel):
    """Everything the host needs to redirect the browser to the identity service."""

    url: str
    state: str | None = None
    nonce: str
    scopes: list[str]
    pkce: PkcePair | None = None


class TokenGrant(SsoBaseModel):
    """Access token payload returned by the token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: float | None = None
    scope: str | None = None
    refresh_token: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)


class CanonicalUser(SsoBaseModel):
    """The host application's normalized view of an authenticated identity."""

    id: str
    email: str
    name: str
    nickname: str
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)


@runtime_checkable
class SsoProviderAdapter(Protocol):
    """Capabilities the login flow needs from an identity service integration."""

    def build_authorization_url(
        self,
        *,
        nonce: str,
        state: str | None = None,
        pkce: PkcePair | None = None,
    ) -> str:
        """Construct the fully-qualified authorization URL."""

    async def exchange_token(self, *, code: str, code_verifier: str | None = None) -> TokenGrant:
        """Trade an authorization code for an access token."""

    async def fetch_profile(self, *, access_token: str) -> dict[str, Any]:
        """Retrieve the raw user profile for an access token."""

    def map_profile(self, raw_profile: dict[str, Any]) -> CanonicalUser:
        """Validate a raw profile and project it into a canonical user."""


__all__ = [
    "AuthorizationRequest",
    "CanonicalUser",
    "GENERIC_USER_MESSAGE",
    "PkcePair",
    "SsoError",
    "SsoFlowError",
    "SsoNonceMissingError",
    "SsoProfileShapeError",
    "SsoProtocolError",
    "SsoProviderAdapter",
    "SsoStateMismatchError",
    "SsoTransportError",
    "TokenGrant",
]
