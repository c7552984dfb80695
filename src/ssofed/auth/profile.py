"""User profile retrieval and mapping into the canonical user record."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import SsoProviderConfigModel
from .contracts import CanonicalUser, SsoProfileShapeError
from .http import request_json

logger = logging.getLogger(__name__)

_MISSING = object()


async def fetch_profile(config: SsoProviderConfigModel, access_token: str) -> dict[str, Any]:
    """Fetch the raw profile document from the user endpoint."""
    resp = await request_json(
        config,
        config.user_endpoint_method,
        config.user_url,
        endpoint_name="user",
        headers={
            "Accept": "application/json",
            "Authorization": f"Bearer {access_token}",
        },
    )
    return resp.payload


def map_profile(config: SsoProviderConfigModel, raw_profile: Mapping[str, Any]) -> CanonicalUser:
    """Validate a raw profile against the configured shape and build a CanonicalUser.

    Mapping is all-or-nothing: any shape mismatch raises
    :class:`SsoProfileShapeError` and no record is produced.
    """
    profile: Any = raw_profile
    if config.data_wrap_key:
        profile = _lookup(raw_profile, config.data_wrap_key)
        if not isinstance(profile, Mapping):
            raise SsoProfileShapeError(wrap_key=config.data_wrap_key, wrap_key_missing=True)

    missing = [field for field in config.required_fields if _lookup(profile, field) is _MISSING]
    if missing:
        raise SsoProfileShapeError(missing_fields=missing, wrap_key=config.data_wrap_key)

    user_id = _text(_lookup(profile, config.id_field))
    email = _text(_lookup(profile, "email"))
    name = _text(_lookup(profile, "name"))

    empty = [
        field
        for field, value in ((config.id_field, user_id), ("email", email), ("name", name))
        if not value
    ]
    if empty:
        raise SsoProfileShapeError(missing_fields=empty, wrap_key=config.data_wrap_key)

    return CanonicalUser(
        id=user_id,
        email=email,
        name=name,
        nickname=name,
        raw=dict(profile),
    )


def _lookup(data: Any, path: str) -> Any:
    """Resolve a dotted path; returns ``_MISSING`` when any segment is absent."""
    if isinstance(data, Mapping) and path in data:
        return data[path]
    current = data
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _text(value: Any) -> str:
    if value is _MISSING or value is None or isinstance(value, (dict, list, bool)):
        return ""
    return str(value).strip()
