"""SSO authentication - authorization-code flow and profile mapping.

## Key Components

- `resolve_provider_config()`: builds an immutable `SsoProviderConfigModel` from a config source
- `SsoProvider`: implements `SsoProviderAdapter` (authorize URL, token exchange,
  profile fetch, profile mapping)
- `SsoLoginFlow`: drives a `LoginAttempt` from redirect to `CanonicalUser`
- `is_enabled()`, `is_forced()`: availability gate for the host

## Errors

All failures derive from `SsoError`:
- `SsoTransportError`: identity service unreachable (connection, timeout, TLS)
- `SsoProtocolError`: identity service returned an error; raw body kept in `.body`
- `SsoProfileShapeError`: profile does not match the configured shape
"""

from .authorize import (
    build_authorization_params,
    build_authorization_url,
    generate_nonce,
    generate_pkce_pair,
    generate_state,
    read_nonce,
)
from .availability import is_enabled, is_forced, missing_settings
from .config import SsoProviderConfigModel, resolve_provider_config
from .contracts import (
    AuthorizationRequest,
    CanonicalUser,
    PkcePair,
    SsoError,
    SsoFlowError,
    SsoNonceMissingError,
    SsoProfileShapeError,
    SsoProtocolError,
    SsoProviderAdapter,
    SsoStateMismatchError,
    SsoTransportError,
    TokenGrant,
)
from .flow import AttemptStage, LoginAttempt, SsoLoginFlow
from .profile import fetch_profile, map_profile
from .provider import SsoProvider
from .session import InMemorySession, SessionAccessor
from .token import exchange_token

__all__ = [
    # Configuration
    "SsoProviderConfigModel",
    "resolve_provider_config",
    # Availability
    "is_enabled",
    "is_forced",
    "missing_settings",
    # Authorization request
    "build_authorization_params",
    "build_authorization_url",
    "generate_nonce",
    "generate_pkce_pair",
    "generate_state",
    "read_nonce",
    # Callback
    "exchange_token",
    "fetch_profile",
    "map_profile",
    # Adapter and flow
    "SsoProvider",
    "SsoProviderAdapter",
    "SsoLoginFlow",
    "LoginAttempt",
    "AttemptStage",
    # Session
    "SessionAccessor",
    "InMemorySession",
    # Types
    "AuthorizationRequest",
    "CanonicalUser",
    "PkcePair",
    "TokenGrant",
    # Errors
    "SsoError",
    "SsoFlowError",
    "SsoNonceMissingError",
    "SsoProfileShapeError",
    "SsoProtocolError",
    "SsoStateMismatchError",
    "SsoTransportError",
]
