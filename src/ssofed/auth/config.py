"""Provider configuration resolution.

Turns a :class:`~ssofed.config.ConfigSource` into an immutable
:class:`SsoProviderConfigModel`. Absent values resolve to documented defaults;
resolution never fails and never touches the network.

## Security-relevant configuration fields

- ``http_verify``: disabling it turns off TLS certificate verification.
- ``redirect``: the callback URI registered with the identity service.
- ``scopes``: what is requested from the identity service.
- ``forced``: when true the host disables every other sign-in method.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field

from ssofed.config.source import ConfigSource
from ssofed.models import SsoBaseModel

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "services.sso"
AUTHORIZE_PATH = "/oauth/authorize"
TOKEN_PATH = "/oauth/token"
USER_PATH = "/api/oauth/user"
DEFAULT_SCOPES = ["email"]
DEFAULT_WRAP_KEY = "data"
DEFAULT_REQUIRED_FIELDS = ["id", "email", "name"]
DEFAULT_ID_FIELD = "id"
DEFAULT_TIMEOUT = 10.0

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


class SsoProviderConfigModel(SsoBaseModel):
    """Immutable snapshot of everything one login attempt needs."""

    base_url: str | None = None
    authorize_url: str
    token_url: str
    user_url: str
    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    redirect_uri: str = ""
    scopes: list[str] = Field(default_factory=lambda: list(DEFAULT_SCOPES))
    scope_separator: str = " "
    http_verify: bool = True
    data_wrap_key: str | None = DEFAULT_WRAP_KEY
    required_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED_FIELDS))
    id_field: str = DEFAULT_ID_FIELD
    forced: bool = False
    pkce: bool = False
    use_state: bool = True
    require_nonce: bool = False
    parameters: dict[str, str] = Field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    user_endpoint_method: Literal["GET", "POST"] = "POST"


def resolve_provider_config(
    source: ConfigSource, prefix: str = DEFAULT_PREFIX
) -> SsoProviderConfigModel:
    """Resolve the provider configuration stored under ``prefix``."""

    def lookup(key: str) -> Any:
        return source.get(f"{prefix}.{key}")

    base_url = _as_str(lookup("url"))

    return SsoProviderConfigModel(
        base_url=base_url,
        authorize_url=_endpoint(lookup("endpoints.authorize"), base_url, AUTHORIZE_PATH),
        token_url=_endpoint(lookup("endpoints.token"), base_url, TOKEN_PATH),
        user_url=_endpoint(lookup("endpoints.user"), base_url, USER_PATH),
        client_id=_as_str(lookup("client_id")) or "",
        client_secret=_as_str(lookup("client_secret")) or "",
        redirect_uri=_as_str(lookup("redirect")) or "",
        scopes=parse_list(lookup("scopes"), DEFAULT_SCOPES),
        scope_separator=_as_str(lookup("scope_separator")) or " ",
        http_verify=_as_bool(lookup("http_verify"), True),
        data_wrap_key=_wrap_key(lookup("provider_user_endpoint_data_wrap_key")),
        required_fields=parse_list(lookup("provider_user_endpoint_keys"), DEFAULT_REQUIRED_FIELDS),
        id_field=_as_str(lookup("provider_id")) or DEFAULT_ID_FIELD,
        # Only a literal boolean true forces SSO; "true" strings or 1 do not.
        forced=lookup("forced") is True,
        pkce=_as_bool(lookup("pkce"), False),
        use_state=_as_bool(lookup("use_state"), True),
        require_nonce=_as_bool(lookup("require_nonce"), False),
        parameters=_parameters(lookup("parameters")),
        timeout=_timeout(lookup("timeout")),
        user_endpoint_method=_method(lookup("user_endpoint_method")),
    )


def parse_list(value: Any, default: list[str]) -> list[str]:
    """Parse a comma-separated string (or a YAML list) into a list of names."""
    if value is None:
        return list(default)
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        items = [item.strip() for item in str(value).split(",")]
    return [item for item in items if item]


def _endpoint(override: Any, base_url: str | None, path: str) -> str:
    explicit = _as_str(override)
    if explicit:
        return explicit
    return f"{base_url or ''}{path}"


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning("Unrecognized boolean config value, using default", extra={"default": default})
    return default


def _wrap_key(value: Any) -> str | None:
    # Unset means the default wrap key; an explicit empty string disables unwrapping.
    if value is None:
        return DEFAULT_WRAP_KEY
    text = str(value)
    return text or None


def _parameters(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        if value is not None:
            logger.warning("Ignoring non-mapping authorization parameters")
        return {}
    return {str(key): str(item) for key, item in value.items() if item is not None}


def _timeout(value: Any) -> float:
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid timeout %r, using %.1fs", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning("Non-positive timeout %r, using %.1fs", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout


def _method(value: Any) -> Literal["GET", "POST"]:
    if value is None:
        return "POST"
    method = str(value).upper()
    if method == "GET":
        return "GET"
    if method != "POST":
        logger.warning("Unsupported user endpoint method %r, using POST", value)
    return "POST"
